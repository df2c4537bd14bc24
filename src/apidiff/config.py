"""Comparison options for the differencing engine.

Options are passed explicitly to :class:`~apidiff.diff.differ.ApiDiffer`
so that several comparisons with different settings can run side by
side.  They can be built in code, from a mapping, or from a YAML file::

    show_all_changes: true
    include_documentation_diffs: false
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from apidiff.errors import ConfigurationError

# camelCase spellings accepted alongside the snake_case field names
_ALIASES: dict[str, str] = {
    "showAllChanges": "show_all_changes",
    "includeDocumentationDiffs": "include_documentation_diffs",
    "incompatibleChangesOnly": "incompatible_changes_only",
    "validateInput": "validate_input",
}


@dataclass(frozen=True)
class DiffOptions:
    """Settings that change what the differ reports.

    Parameters
    ----------
    show_all_changes:
        Include ``native``/``synchronized`` flag differences and
        parameter renames.
    include_documentation_diffs:
        Count a change in the presence of documentation text as a change.
    incompatible_changes_only:
        Ignore deprecation-only differences.
    validate_input:
        Run the surface validator on both inputs before comparing.
    """

    show_all_changes: bool = False
    include_documentation_diffs: bool = False
    incompatible_changes_only: bool = False
    validate_input: bool = True

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> "DiffOptions":
        """Build options from a mapping of option names to booleans.

        Raises
        ------
        ConfigurationError
            If a key is not a recognised option or a value is not a bool.
        """
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values: dict[str, bool] = {}
        for raw_key, value in data.items():
            key = _ALIASES.get(raw_key, raw_key)
            if key not in known:
                raise ConfigurationError(
                    f"Unknown option {raw_key!r}; expected one of {', '.join(sorted(known))}"
                )
            if not isinstance(value, bool):
                raise ConfigurationError(
                    f"Option {raw_key!r} must be true or false, got {value!r}"
                )
            values[key] = value
        return cls(**values)

    @classmethod
    def from_yaml(cls, text: str) -> "DiffOptions":
        """Build options from YAML text holding a single mapping."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid options YAML: {exc}") from exc
        if data is not None and not isinstance(data, dict):
            raise ConfigurationError("Options YAML must contain a mapping")
        return cls.from_mapping(data)

    @classmethod
    def load(cls, path: str | Path) -> "DiffOptions":
        """Read options from a YAML file."""
        return cls.from_yaml(Path(path).read_text(encoding="utf-8"))

    def merged(self, **overrides: bool | None) -> "DiffOptions":
        """Return a copy with every non-``None`` override applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for key, value in overrides.items():
            if key not in values:
                raise ConfigurationError(f"Unknown option {key!r}")
            if value is not None:
                values[key] = value
        return DiffOptions(**values)

"""Exception types raised by the differencing engine.

All errors derive from :class:`ApiDiffError` so callers can catch the
whole family at once.  Errors that concern a particular element carry
enough location information to find it in the source model.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from apidiff.validator.diagnostics import Diagnostic


class ApiDiffError(Exception):
    """Base class for all engine errors."""


@dataclass
class MalformedSurfaceError(ApiDiffError):
    """A surface model violates the model-builder contract.

    Parameters
    ----------
    surface_name:
        Name of the offending ``SurfaceModel``.
    diagnostics:
        Every error-level finding for that model.
    """

    surface_name: str
    diagnostics: list["Diagnostic"] = field(default_factory=list)

    def __post_init__(self) -> None:
        Exception.__init__(self, str(self))

    @property
    def locations(self) -> list[str]:
        """Locations of all offending elements, in report order."""
        return [d.location for d in self.diagnostics]

    def __str__(self) -> str:
        if not self.diagnostics:
            return f"Malformed surface {self.surface_name!r}"
        lines = [
            f"Malformed surface {self.surface_name!r} "
            f"({len(self.diagnostics)} error(s)):"
        ]
        for diagnostic in self.diagnostics:
            lines.append(f"  {diagnostic}")
        return "\n".join(lines)


class CyclicInheritanceError(ApiDiffError):
    """A type reaches itself through its extends/implements chain."""

    def __init__(self, chain: tuple[str, ...]) -> None:
        self.chain = chain
        super().__init__(
            "Cyclic inheritance detected: " + " -> ".join(chain)
        )

    @property
    def type_name(self) -> str:
        """Qualified name of the type whose ancestry loops."""
        return self.chain[0]


class MissingSurfaceError(ApiDiffError, ValueError):
    """A comparison was requested without both surfaces being set."""

    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(
            f"No {role} surface model was supplied; both an old and a new "
            "surface are required for a comparison."
        )


class ConfigurationError(ApiDiffError, ValueError):
    """An option mapping could not be turned into ``DiffOptions``."""


class SurfaceFormatError(ApiDiffError, ValueError):
    """A serialized surface lacks a field the model cannot be built without."""

    def __init__(self, location: str, key: str) -> None:
        self.location = location
        self.key = key
        super().__init__(f"{location}: missing required field {key!r}")

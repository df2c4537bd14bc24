"""Surface-model validator.

The ``Validator`` runs a configurable set of rules against a
``SurfaceModel`` and returns a list of ``Diagnostic`` objects.  The
differencing engine calls :func:`ensure_valid` on both inputs so that a
broken model halts the run instead of producing a misleading diff.

Usage
-----
::

    from apidiff.validator import Validator

    diagnostics = Validator().validate(surface)
    errors = [d for d in diagnostics if d.is_error]
"""
from __future__ import annotations

import logging

from apidiff.errors import MalformedSurfaceError
from apidiff.model.nodes import SurfaceModel
from apidiff.validator.diagnostics import Diagnostic, DiagnosticSeverity
from apidiff.validator.rules import DEFAULT_RULES, Rule

logger = logging.getLogger(__name__)


class Validator:
    """Structural validator for surface models.

    Parameters
    ----------
    rules:
        The list of validation rules to run.  Defaults to all built-in
        rules (``DEFAULT_RULES``).
    strict:
        When ``True``, WARNING-level diagnostics are promoted to ERROR.
    """

    def __init__(
        self,
        rules: list[Rule] | None = None,
        strict: bool = False,
    ) -> None:
        self._rules: list[Rule] = rules if rules is not None else list(DEFAULT_RULES)
        self._strict: bool = strict

    def validate(self, surface: SurfaceModel) -> list[Diagnostic]:
        """Run all rules against ``surface`` and return the diagnostics.

        Diagnostics are sorted by location then code so the output is
        deterministic.
        """
        all_diagnostics: list[Diagnostic] = []
        for rule in self._rules:
            all_diagnostics.extend(rule(surface))

        if self._strict:
            all_diagnostics = [
                Diagnostic(
                    severity=DiagnosticSeverity.ERROR,
                    code=d.code,
                    message=d.message,
                    location=d.location,
                    suggestion=d.suggestion,
                    rule=d.rule,
                )
                if d.severity == DiagnosticSeverity.WARNING
                else d
                for d in all_diagnostics
            ]

        all_diagnostics.sort(key=lambda d: (d.location, d.code))
        logger.debug(
            "Validated surface %r: %d finding(s)", surface.name, len(all_diagnostics)
        )
        return all_diagnostics

    def ensure_valid(self, surface: SurfaceModel) -> list[Diagnostic]:
        """Validate ``surface`` and raise when any error-level finding exists.

        Returns
        -------
        list[Diagnostic]
            The remaining non-error findings.

        Raises
        ------
        MalformedSurfaceError
            If the model contains at least one error.
        """
        diagnostics = self.validate(surface)
        errors = [d for d in diagnostics if d.is_error]
        if errors:
            raise MalformedSurfaceError(surface_name=surface.name, diagnostics=errors)
        for warning in diagnostics:
            logger.warning("%s: %s", surface.name, warning)
        return diagnostics

    def add_rule(self, rule: Rule) -> None:
        """Add a custom rule to this validator instance."""
        self._rules.append(rule)

    @property
    def rule_count(self) -> int:
        """Return the number of rules currently registered."""
        return len(self._rules)


def validate(surface: SurfaceModel, strict: bool = False) -> list[Diagnostic]:
    """Convenience function: validate a surface with the default rules."""
    return Validator(strict=strict).validate(surface)


def ensure_valid(surface: SurfaceModel, strict: bool = False) -> list[Diagnostic]:
    """Convenience function: raise ``MalformedSurfaceError`` on invalid input."""
    return Validator(strict=strict).ensure_valid(surface)

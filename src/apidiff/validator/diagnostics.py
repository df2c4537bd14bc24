"""Diagnostic types for the surface-model validator.

A ``Diagnostic`` is a finding attached to a location path inside a
``SurfaceModel``, e.g. ``"com.acme"``, ``"com.acme.Widget"`` or
``"com.acme.Widget#resize(int, int)"``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics."""

    ERROR = auto()
    WARNING = auto()
    INFORMATION = auto()


@dataclass(frozen=True)
class Diagnostic:
    """A single validation finding.

    Parameters
    ----------
    severity:
        How serious this finding is.
    code:
        A short machine-readable identifier, e.g. ``"APD001"``.
    message:
        Human-readable description of the problem.
    location:
        Path of the offending package, type or member.
    suggestion:
        Optional human-readable fix suggestion.
    rule:
        The rule name that produced this diagnostic.
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    location: str
    suggestion: str | None = field(default=None)
    rule: str = field(default="")

    def __str__(self) -> str:
        prefix = f"[{self.code}] {self.severity.name}"
        suggestion_part = f" (hint: {self.suggestion})" if self.suggestion else ""
        return f"{prefix} at {self.location}: {self.message}{suggestion_part}"

    @property
    def is_error(self) -> bool:
        """Return True if this diagnostic should block a comparison run."""
        return self.severity == DiagnosticSeverity.ERROR

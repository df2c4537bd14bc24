"""Surface-model validation: rules, diagnostics and the ``Validator``."""
from __future__ import annotations

from apidiff.validator.diagnostics import Diagnostic, DiagnosticSeverity
from apidiff.validator.rules import DEFAULT_RULES, Rule
from apidiff.validator.validator import Validator, ensure_valid, validate

__all__ = [
    "DEFAULT_RULES",
    "Diagnostic",
    "DiagnosticSeverity",
    "Rule",
    "Validator",
    "ensure_valid",
    "validate",
]

"""apidiff: structural differencing and change scoring for API surfaces.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import apidiff

    # Load two snapshots in the serializer boundary form
    old = apidiff.load_surface(old_json)
    new = apidiff.load_surface(new_json)

    # Add inherited members to every type
    apidiff.resolve(old)
    apidiff.resolve(new)

    # Check both models for malformed input
    diagnostics = apidiff.validate(new)

    # Compare and rank
    result = apidiff.compare(old, new)
    print(result.summary())

    apidiff.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from apidiff.config import DiffOptions
    from apidiff.diff.tree import ApiDiff
    from apidiff.model.nodes import SurfaceModel
    from apidiff.validator.diagnostics import Diagnostic


def load_surface(text: str) -> "SurfaceModel":
    """Deserialize a ``SurfaceModel`` from JSON text.

    Parameters
    ----------
    text:
        A JSON document in the serializer boundary form.

    Returns
    -------
    SurfaceModel
        The reconstructed model.
    """
    from apidiff.model.serializer import SurfaceSerializer

    return SurfaceSerializer().from_json(text)


def resolve(surface: "SurfaceModel") -> int:
    """Add inherited methods and fields to every type of ``surface`` in place.

    Parameters
    ----------
    surface:
        The model to resolve.

    Returns
    -------
    int
        The number of inherited members added.

    Raises
    ------
    apidiff.errors.CyclicInheritanceError
        If a type's ancestry loops back on itself.
    """
    from apidiff.resolver.inheritance import resolve as _resolve

    return _resolve(surface)


def validate(surface: "SurfaceModel", strict: bool = False) -> list["Diagnostic"]:
    """Validate a ``SurfaceModel`` against all built-in rules.

    Parameters
    ----------
    surface:
        The model to validate.
    strict:
        When ``True``, warnings are promoted to errors.

    Returns
    -------
    list[Diagnostic]
        All validation findings, sorted by location.
    """
    from apidiff.validator.validator import validate as _validate

    return _validate(surface, strict=strict)


def compare(
    old: "SurfaceModel",
    new: "SurfaceModel",
    options: "DiffOptions | None" = None,
) -> "ApiDiff":
    """Compare two resolved surface models.

    Parameters
    ----------
    old:
        The baseline surface.
    new:
        The updated surface.
    options:
        Comparison settings; defaults to ``DiffOptions()``.

    Returns
    -------
    ApiDiff
        The scored Diff Tree.
    """
    from apidiff.diff.differ import diff as _diff

    return _diff(old, new, options)


__all__ = [
    "__version__",
    "load_surface",
    "resolve",
    "validate",
    "compare",
]

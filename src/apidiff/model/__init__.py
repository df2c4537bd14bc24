"""Surface Model module.

Exports the node types that describe an interface surface and the
serializer that converts models to plain data.
"""
from __future__ import annotations

from apidiff.model.nodes import (
    DOC_PLACEHOLDER,
    NO_EXCEPTIONS,
    Constructor,
    Field,
    Member,
    Method,
    Modifiers,
    Package,
    Parameter,
    SurfaceModel,
    TypeDecl,
    Visibility,
    has_documentation,
    join_signature,
    qualified_name,
    same_key,
)
from apidiff.model.serializer import SurfaceSerializer

__all__ = [
    # Sentinels and helpers
    "DOC_PLACEHOLDER",
    "NO_EXCEPTIONS",
    "has_documentation",
    "join_signature",
    "qualified_name",
    "same_key",
    # Node types
    "Visibility",
    "Modifiers",
    "Parameter",
    "Constructor",
    "Method",
    "Field",
    "Member",
    "TypeDecl",
    "Package",
    "SurfaceModel",
    # Serializer
    "SurfaceSerializer",
]

"""Inheritance resolution for surface models."""
from __future__ import annotations

from apidiff.resolver.inheritance import InheritanceResolver, resolve

__all__ = ["InheritanceResolver", "resolve"]

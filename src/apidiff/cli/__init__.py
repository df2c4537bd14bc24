"""CLI package.

The ``cli`` sub-package contains the Click application.  It reads and
writes models in the serializer boundary form and prints summaries with
Rich; it adds no comparison logic of its own.
"""
from __future__ import annotations

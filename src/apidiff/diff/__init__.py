"""API Diff module.

Exports the Diff Tree node types, the ``ApiDiffer`` and the ``diff``
convenience function, together with the magnitude and ordering helpers
used to rank results.
"""
from __future__ import annotations

from apidiff.diff.differ import (
    ApiDiffer,
    compare_constructors,
    compare_fields,
    compare_methods,
    describe_inheritance_change,
    describe_modifier_change,
    diff,
)
from apidiff.diff.magnitude import (
    MagnitudeCalculator,
    score_api,
    score_class,
    score_package,
)
from apidiff.diff.ordering import (
    by_magnitude,
    by_name,
    magnitude_key,
    name_key,
    ranked_types,
    sort_members,
)
from apidiff.diff.serializer import DiffSerializer
from apidiff.diff.tree import (
    ApiDiff,
    ClassDiff,
    DiffStatistics,
    MemberChange,
    MemberDiff,
    MemberKind,
    PackageDiff,
)

__all__ = [
    "ApiDiffer",
    "diff",
    "compare_constructors",
    "compare_methods",
    "compare_fields",
    "describe_modifier_change",
    "describe_inheritance_change",
    # Tree
    "ApiDiff",
    "PackageDiff",
    "ClassDiff",
    "MemberDiff",
    "MemberKind",
    "MemberChange",
    "DiffStatistics",
    # Magnitude
    "MagnitudeCalculator",
    "score_class",
    "score_package",
    "score_api",
    # Ordering
    "by_name",
    "by_magnitude",
    "name_key",
    "magnitude_key",
    "ranked_types",
    "sort_members",
    # Serialization
    "DiffSerializer",
]

"""Change-magnitude scores for the Diff Tree.

Every score is a percentage in ``[0, 100]``:

* 0 means nothing changed.
* 100 means everything was replaced.

Type score
    ``(added + removed + changed + h) / (old members + new members + h)``
    where ``h`` is 1 when the type declaration itself changed.  A changed
    member counts once against the two slots it occupies, so a type whose
    members all changed scores 50 while a full replacement scores 100.

Package and API scores
    Differences and elements are summed over the constituents, each type
    weighing ``max(member_count, 1)``, so large types dominate small ones.
"""
from __future__ import annotations

from typing import Union

from apidiff.diff.tree import ApiDiff, ClassDiff, PackageDiff
from apidiff.model.nodes import Package, TypeDecl

Scorable = Union[ClassDiff, PackageDiff, ApiDiff]


def type_weight(type_decl: TypeDecl) -> int:
    """Element weight of a whole type."""
    return max(type_decl.member_count, 1)


def package_weight(package: Package) -> int:
    """Element weight of a whole package."""
    return max(sum(type_weight(t) for t in package.types), 1)


def _percentage(differences: int, elements: int) -> float:
    if elements <= 0:
        return 0.0
    return min(100.0, 100.0 * differences / elements)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


def _header(class_diff: ClassDiff) -> int:
    return 1 if class_diff.header_changed else 0


def class_differences(class_diff: ClassDiff) -> int:
    return (
        class_diff.added_count
        + class_diff.removed_count
        + class_diff.changed_count
        + _header(class_diff)
    )


def class_elements(class_diff: ClassDiff) -> int:
    return class_diff.old_member_count + class_diff.new_member_count + _header(class_diff)


def score_class(class_diff: ClassDiff) -> float:
    """Score a changed type."""
    return _percentage(class_differences(class_diff), class_elements(class_diff))


# ---------------------------------------------------------------------------
# Packages
# ---------------------------------------------------------------------------


def _package_header(package_diff: PackageDiff) -> int:
    return 1 if package_diff.documentation_change else 0


def package_differences(package_diff: PackageDiff) -> int:
    total = sum(class_differences(cd) for cd in package_diff.types_changed)
    total += sum(type_weight(t) for t in package_diff.types_added)
    total += sum(type_weight(t) for t in package_diff.types_removed)
    return total + _package_header(package_diff)


def package_elements(package_diff: PackageDiff) -> int:
    return (
        package_diff.old_element_count
        + package_diff.new_element_count
        + sum(_header(cd) for cd in package_diff.types_changed)
        + _package_header(package_diff)
    )


def score_package(package_diff: PackageDiff) -> float:
    """Score a changed package by weighting its types by size."""
    return _percentage(package_differences(package_diff), package_elements(package_diff))


# ---------------------------------------------------------------------------
# Whole API
# ---------------------------------------------------------------------------


def score_api(api_diff: ApiDiff) -> float:
    """Score a whole comparison by weighting its packages by size."""
    differences = sum(package_differences(pd) for pd in api_diff.packages_changed)
    differences += sum(package_weight(p) for p in api_diff.packages_added)
    differences += sum(package_weight(p) for p in api_diff.packages_removed)
    elements = api_diff.old_element_count + api_diff.new_element_count
    elements += sum(
        package_elements(pd) - pd.old_element_count - pd.new_element_count
        for pd in api_diff.packages_changed
    )
    return _percentage(differences, elements)


class MagnitudeCalculator:
    """Scores every level of a Diff Tree."""

    def score(self, diff: Scorable) -> float:
        """Return the score of a type, package or whole-API diff."""
        if isinstance(diff, ClassDiff):
            return score_class(diff)
        if isinstance(diff, PackageDiff):
            return score_package(diff)
        if isinstance(diff, ApiDiff):
            return score_api(diff)
        raise TypeError(f"Cannot score {type(diff).__name__}")

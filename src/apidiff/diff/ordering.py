"""Deterministic orderings for Diff Tree elements.

Two total orderings are offered for changed packages and types:

* by name, and
* by magnitude: highest score first, ties broken by name.

Members are ordered by name, then signature, with documentation
presence as the final tiebreak so that overloads sort stably.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TypeVar, Union

from apidiff.diff.tree import ApiDiff, ClassDiff, MemberDiff, PackageDiff
from apidiff.model.nodes import Constructor, Field, Method, has_documentation

Ranked = Union[ClassDiff, PackageDiff]
R = TypeVar("R", ClassDiff, PackageDiff)
M = TypeVar("M", Constructor, Method, Field)


def name_key(diff: Ranked) -> str:
    return diff.name


def magnitude_key(diff: Ranked) -> tuple[float, str]:
    return (-diff.score, diff.name)


def by_name(diffs: Iterable[R]) -> list[R]:
    """Return ``diffs`` sorted by name."""
    return sorted(diffs, key=name_key)


def by_magnitude(diffs: Iterable[R]) -> list[R]:
    """Return ``diffs`` sorted by descending score, then by name."""
    return sorted(diffs, key=magnitude_key)


def member_key(member: Constructor | Method | Field) -> tuple[str, str, bool]:
    if isinstance(member, Constructor):
        return ("", member.type, has_documentation(member.doc))
    if isinstance(member, Method):
        return (member.name, member.signature, has_documentation(member.doc))
    return (member.name, "", has_documentation(member.doc))


def sort_members(members: Iterable[M]) -> list[M]:
    """Return ``members`` sorted by name, signature, then documentation presence."""
    return sorted(members, key=member_key)


def member_diff_key(diff: MemberDiff) -> tuple[str, str]:
    if diff.new_signature is not None:
        return (diff.name, diff.new_signature)
    return (diff.name, diff.new_type or "")


def sort_member_diffs(diffs: Iterable[MemberDiff]) -> list[MemberDiff]:
    """Return changed members sorted by name, then signature."""
    return sorted(diffs, key=member_diff_key)


def ranked_types(api_diff: ApiDiff) -> Iterator[tuple[str, ClassDiff]]:
    """Yield ``(package name, type diff)`` for every changed type, highest score first."""
    pairs = [
        (package_diff.name, class_diff)
        for package_diff in api_diff.packages_changed
        for class_diff in package_diff.types_changed
    ]
    pairs.sort(key=lambda pair: (-pair[1].score, pair[0], pair[1].name))
    yield from pairs

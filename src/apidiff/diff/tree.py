"""Diff Tree: the result of comparing two resolved surface models.

The tree has four levels::

    ApiDiff
      PackageDiff      (one per package present in both models that changed)
        ClassDiff      (one per type present in both packages that changed)
          MemberDiff   (one per constructor, method or field that changed)

Elements present on only one side are listed as added or removed using
the model nodes themselves.  Every node is a frozen dataclass with tuple
collections; the tree is built once by the differ and never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from apidiff.model.nodes import Constructor, Field, Method, Package, TypeDecl


class MemberKind(Enum):
    """Which kind of member a :class:`MemberDiff` describes."""

    CONSTRUCTOR = auto()
    METHOD = auto()
    FIELD = auto()


class MemberChange(Enum):
    """Field-level differences between two matched members.

    Declaration order is priority order: the first entry in a
    :attr:`MemberDiff.changes` tuple is the most significant one.
    """

    INHERITANCE = auto()
    RETURN_TYPE = auto()
    FIELD_TYPE = auto()
    ABSTRACT = auto()
    STATIC = auto()
    FINAL = auto()
    TRANSIENT = auto()
    VOLATILE = auto()
    NATIVE = auto()
    SYNCHRONIZED = auto()
    EXCEPTIONS = auto()
    VALUE = auto()
    VISIBILITY = auto()
    DEPRECATED = auto()
    PARAMETER_NAMES = auto()
    DOCUMENTATION = auto()


# ---------------------------------------------------------------------------
# MemberDiff
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MemberDiff:
    """A constructor, method or field present in both models that changed.

    Parameters
    ----------
    name:
        Member name; the owning type's name for constructors.
    kind:
        Constructor, method or field.
    changes:
        Every difference found, most significant first.
    old_type, new_type:
        Return type (methods), field type (fields) or parameter-type
        signature (constructors).
    old_signature, new_signature:
        Parameter list with names, methods only.
    old_exceptions, new_exceptions:
        Exception lists, constructors and methods only.
    modifiers_change:
        Description of modifier and flag changes, if any.
    inheritance_change:
        Description of a change in the defining type, if any.
    documentation_change:
        Description of a change in documentation presence, if reported.
    inherited_from:
        Defining ancestor of the member in the new model.
    """

    name: str
    kind: MemberKind
    changes: tuple[MemberChange, ...]
    old_type: str | None = None
    new_type: str | None = None
    old_signature: str | None = None
    new_signature: str | None = None
    old_exceptions: str | None = None
    new_exceptions: str | None = None
    modifiers_change: str | None = None
    inheritance_change: str | None = None
    documentation_change: str | None = None
    inherited_from: str | None = None

    @property
    def primary_change(self) -> MemberChange | None:
        """The most significant difference, or ``None`` if there is none."""
        return self.changes[0] if self.changes else None

    def __str__(self) -> str:
        label = self.name
        if self.kind is not MemberKind.FIELD:
            label = f"{self.name}({self.new_signature or ''})"
        kinds = ", ".join(c.name.lower() for c in self.changes)
        return f"[~] {label}: {kinds}"


# ---------------------------------------------------------------------------
# ClassDiff
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClassDiff:
    """A type present in both versions of a package that changed."""

    name: str
    is_interface: bool = False
    constructors_added: tuple[Constructor, ...] = ()
    constructors_removed: tuple[Constructor, ...] = ()
    constructors_changed: tuple[MemberDiff, ...] = ()
    methods_added: tuple[Method, ...] = ()
    methods_removed: tuple[Method, ...] = ()
    methods_changed: tuple[MemberDiff, ...] = ()
    fields_added: tuple[Field, ...] = ()
    fields_removed: tuple[Field, ...] = ()
    fields_changed: tuple[MemberDiff, ...] = ()
    inheritance_change: str | None = None
    modifiers_change: str | None = None
    documentation_change: str | None = None
    old_member_count: int = 0
    new_member_count: int = 0
    score: float = 0.0

    @property
    def header_changed(self) -> bool:
        """Whether the type declaration itself changed."""
        return bool(
            self.inheritance_change or self.modifiers_change or self.documentation_change
        )

    @property
    def added_count(self) -> int:
        return len(self.constructors_added) + len(self.methods_added) + len(self.fields_added)

    @property
    def removed_count(self) -> int:
        return (
            len(self.constructors_removed)
            + len(self.methods_removed)
            + len(self.fields_removed)
        )

    @property
    def changed_count(self) -> int:
        return (
            len(self.constructors_changed)
            + len(self.methods_changed)
            + len(self.fields_changed)
        )

    @property
    def has_changes(self) -> bool:
        return bool(
            self.added_count or self.removed_count or self.changed_count
        ) or self.header_changed

    def __str__(self) -> str:
        return (
            f"[~] {self.name}: +{self.added_count} -{self.removed_count} "
            f"~{self.changed_count} ({self.score:.1f}%)"
        )


# ---------------------------------------------------------------------------
# PackageDiff
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackageDiff:
    """A package present in both models that changed.

    ``old_element_count`` and ``new_element_count`` hold the package's
    total type weight on each side and are used to aggregate scores.
    """

    name: str
    types_added: tuple[TypeDecl, ...] = ()
    types_removed: tuple[TypeDecl, ...] = ()
    types_changed: tuple[ClassDiff, ...] = ()
    documentation_change: str | None = None
    old_element_count: int = 0
    new_element_count: int = 0
    score: float = 0.0

    @property
    def has_changes(self) -> bool:
        return bool(
            self.types_added
            or self.types_removed
            or self.types_changed
            or self.documentation_change
        )

    def get_type(self, name: str) -> ClassDiff | None:
        """Return the changed type named ``name``, or ``None``."""
        for class_diff in self.types_changed:
            if class_diff.name == name:
                return class_diff
        return None

    def __str__(self) -> str:
        return (
            f"[~] {self.name}: +{len(self.types_added)} -{len(self.types_removed)} "
            f"~{len(self.types_changed)} ({self.score:.1f}%)"
        )


# ---------------------------------------------------------------------------
# ApiDiff
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiffStatistics:
    """Counts of added, removed and changed elements at every level."""

    packages_added: int = 0
    packages_removed: int = 0
    packages_changed: int = 0
    types_added: int = 0
    types_removed: int = 0
    types_changed: int = 0
    members_added: int = 0
    members_removed: int = 0
    members_changed: int = 0
    score: float = 0.0

    @property
    def total(self) -> int:
        return (
            self.packages_added + self.packages_removed
            + self.types_added + self.types_removed
            + self.members_added + self.members_removed + self.members_changed
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "packages": {
                "added": self.packages_added,
                "removed": self.packages_removed,
                "changed": self.packages_changed,
            },
            "types": {
                "added": self.types_added,
                "removed": self.types_removed,
                "changed": self.types_changed,
            },
            "members": {
                "added": self.members_added,
                "removed": self.members_removed,
                "changed": self.members_changed,
            },
            "score": self.score,
        }


@dataclass(frozen=True)
class ApiDiff:
    """Root of the Diff Tree.

    Parameters
    ----------
    old_name, new_name:
        Names of the compared surface models.
    packages_added, packages_removed:
        Packages present on one side only.
    packages_changed:
        Packages present on both sides that changed.
    old_element_count, new_element_count:
        Total element weight of each model, used to aggregate scores.
    score:
        Overall magnitude of change, 0 to 100.
    """

    old_name: str
    new_name: str
    packages_added: tuple[Package, ...] = ()
    packages_removed: tuple[Package, ...] = ()
    packages_changed: tuple[PackageDiff, ...] = ()
    old_element_count: int = 0
    new_element_count: int = 0
    score: float = 0.0

    @property
    def has_changes(self) -> bool:
        return bool(self.packages_added or self.packages_removed or self.packages_changed)

    def get_package(self, name: str) -> PackageDiff | None:
        """Return the changed package named ``name``, or ``None``."""
        for package_diff in self.packages_changed:
            if package_diff.name == name:
                return package_diff
        return None

    def statistics(self) -> DiffStatistics:
        """Count added, removed and changed elements at every level."""
        types_added = sum(len(p.types) for p in self.packages_added)
        types_removed = sum(len(p.types) for p in self.packages_removed)
        members_added = sum(t.member_count for p in self.packages_added for t in p.types)
        members_removed = sum(
            t.member_count for p in self.packages_removed for t in p.types
        )
        types_changed = 0
        members_changed = 0
        for package_diff in self.packages_changed:
            types_added += len(package_diff.types_added)
            types_removed += len(package_diff.types_removed)
            types_changed += len(package_diff.types_changed)
            members_added += sum(t.member_count for t in package_diff.types_added)
            members_removed += sum(t.member_count for t in package_diff.types_removed)
            for class_diff in package_diff.types_changed:
                members_added += class_diff.added_count
                members_removed += class_diff.removed_count
                members_changed += class_diff.changed_count
        return DiffStatistics(
            packages_added=len(self.packages_added),
            packages_removed=len(self.packages_removed),
            packages_changed=len(self.packages_changed),
            types_added=types_added,
            types_removed=types_removed,
            types_changed=types_changed,
            members_added=members_added,
            members_removed=members_removed,
            members_changed=members_changed,
            score=self.score,
        )

    def summary(self) -> str:
        """Return a multi-line plain-text summary of the diff."""
        if not self.has_changes:
            return f"No changes between '{self.old_name}' and '{self.new_name}'."
        stats = self.statistics()
        lines = [
            f"API diff: '{self.old_name}' → '{self.new_name}' ({self.score:.1f}% changed)",
            f"  packages: +{stats.packages_added} -{stats.packages_removed} "
            f"~{stats.packages_changed}",
            f"  types:    +{stats.types_added} -{stats.types_removed} ~{stats.types_changed}",
            f"  members:  +{stats.members_added} -{stats.members_removed} "
            f"~{stats.members_changed}",
        ]
        return "\n".join(lines)

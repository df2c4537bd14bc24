"""Structural diff between two resolved ``SurfaceModel`` trees.

The ``ApiDiffer`` matches packages, types and members between an old and
a new model by identity key and produces an :class:`ApiDiff`:

* keys present only in the old model are *removed*,
* keys present only in the new model are *added*,
* keys present in both are compared field by field and reported as
  *changed* when any difference remains.

Keys are the package name, the type's simple name, the parameter-type
signature for constructors, ``(name, signature)`` for methods and the
name for fields.  Two overloads with different signatures are therefore
never paired with each other, and a renamed type is always one removal
plus one addition.

Usage
-----
::

    from apidiff.diff import diff

    result = diff(old_surface, new_surface)
    for package_diff in result.packages_changed:
        print(package_diff)
"""
from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from apidiff.config import DiffOptions
from apidiff.diff.magnitude import (
    package_weight,
    score_api,
    score_class,
    score_package,
    type_weight,
)
from apidiff.diff.ordering import by_name, sort_member_diffs, sort_members
from apidiff.diff.tree import (
    ApiDiff,
    ClassDiff,
    MemberChange,
    MemberDiff,
    MemberKind,
    PackageDiff,
)
from apidiff.errors import MissingSurfaceError
from apidiff.model.nodes import (
    Constructor,
    Field,
    Method,
    Modifiers,
    Package,
    SurfaceModel,
    TypeDecl,
    has_documentation,
)
from apidiff.validator.validator import Validator

logger = logging.getLogger(__name__)

K = TypeVar("K", Constructor, Method, Field)
E = TypeVar("E", Package, TypeDecl, Constructor, Method, Field)


# ---------------------------------------------------------------------------
# Field-by-field comparison
# ---------------------------------------------------------------------------


def _access_changes(
    old: Modifiers, new: Modifiers, options: DiffOptions
) -> list[MemberChange]:
    changes: list[MemberChange] = []
    if old.visibility != new.visibility:
        changes.append(MemberChange.VISIBILITY)
    if old.is_deprecated != new.is_deprecated and not options.incompatible_changes_only:
        changes.append(MemberChange.DEPRECATED)
    return changes


def _documentation_changed(old: str | None, new: str | None, options: DiffOptions) -> bool:
    return (
        options.include_documentation_diffs
        and has_documentation(old) != has_documentation(new)
    )


def compare_constructors(
    old: Constructor, new: Constructor, options: DiffOptions
) -> tuple[MemberChange, ...]:
    """Return every difference between two constructors with the same signature."""
    changes: list[MemberChange] = []
    if old.modifiers.is_static != new.modifiers.is_static:
        changes.append(MemberChange.STATIC)
    if old.modifiers.is_final != new.modifiers.is_final:
        changes.append(MemberChange.FINAL)
    if old.exceptions != new.exceptions:
        changes.append(MemberChange.EXCEPTIONS)
    changes.extend(_access_changes(old.modifiers, new.modifiers, options))
    if _documentation_changed(old.doc, new.doc, options):
        changes.append(MemberChange.DOCUMENTATION)
    return tuple(changes)


def compare_methods(
    old: Method, new: Method, options: DiffOptions
) -> tuple[MemberChange, ...]:
    """Return every difference between two methods with the same name and signature."""
    changes: list[MemberChange] = []
    if old.inherited_from != new.inherited_from:
        changes.append(MemberChange.INHERITANCE)
    if old.return_type != new.return_type:
        changes.append(MemberChange.RETURN_TYPE)
    if old.is_abstract != new.is_abstract:
        changes.append(MemberChange.ABSTRACT)
    if old.modifiers.is_static != new.modifiers.is_static:
        changes.append(MemberChange.STATIC)
    if old.modifiers.is_final != new.modifiers.is_final:
        changes.append(MemberChange.FINAL)
    if options.show_all_changes:
        if old.is_native != new.is_native:
            changes.append(MemberChange.NATIVE)
        if old.is_synchronized != new.is_synchronized:
            changes.append(MemberChange.SYNCHRONIZED)
    if old.exceptions != new.exceptions:
        changes.append(MemberChange.EXCEPTIONS)
    changes.extend(_access_changes(old.modifiers, new.modifiers, options))
    if options.show_all_changes and any(
        not a.matches(b) for a, b in zip(old.parameters, new.parameters)
    ):
        changes.append(MemberChange.PARAMETER_NAMES)
    if _documentation_changed(old.doc, new.doc, options):
        changes.append(MemberChange.DOCUMENTATION)
    return tuple(changes)


def compare_fields(
    old: Field, new: Field, options: DiffOptions
) -> tuple[MemberChange, ...]:
    """Return every difference between two fields with the same name."""
    changes: list[MemberChange] = []
    if old.inherited_from != new.inherited_from:
        changes.append(MemberChange.INHERITANCE)
    if old.type != new.type:
        changes.append(MemberChange.FIELD_TYPE)
    if old.modifiers.is_static != new.modifiers.is_static:
        changes.append(MemberChange.STATIC)
    if old.modifiers.is_final != new.modifiers.is_final:
        changes.append(MemberChange.FINAL)
    if old.is_transient != new.is_transient:
        changes.append(MemberChange.TRANSIENT)
    if old.is_volatile != new.is_volatile:
        changes.append(MemberChange.VOLATILE)
    # Literal values are only comparable when both sides record one.
    if old.value is not None and new.value is not None and old.value != new.value:
        changes.append(MemberChange.VALUE)
    changes.extend(_access_changes(old.modifiers, new.modifiers, options))
    if _documentation_changed(old.doc, new.doc, options):
        changes.append(MemberChange.DOCUMENTATION)
    return tuple(changes)


# ---------------------------------------------------------------------------
# Change descriptions
# ---------------------------------------------------------------------------


def _flag_change(flag: str, old: bool, new: bool) -> str | None:
    if old == new:
        return None
    if old:
        return f"Change from {flag} to non-{flag}."
    return f"Change from non-{flag} to {flag}."


def _join(parts: Sequence[str | None]) -> str | None:
    text = " ".join(p for p in parts if p)
    return text or None


def describe_modifier_change(
    old: Modifiers, new: Modifiers, incompatible_only: bool = False
) -> str | None:
    """Describe how ``old`` modifiers became ``new``, or ``None`` if unchanged."""
    parts: list[str | None] = [
        _flag_change("static", old.is_static, new.is_static),
        _flag_change("final", old.is_final, new.is_final),
    ]
    if not incompatible_only and old.is_deprecated != new.is_deprecated:
        parts.append(
            "Change from deprecated to undeprecated."
            if old.is_deprecated
            else "Now deprecated."
        )
    if old.visibility != new.visibility:
        parts.append(
            f"Change of visibility from {old.visibility.value} to {new.visibility.value}."
        )
    return _join(parts)


def describe_member_flags(
    old: Method | Field, new: Method | Field, options: DiffOptions
) -> str | None:
    """Describe changes of member-specific flags that are being reported."""
    parts: list[str | None] = []
    if isinstance(old, Method) and isinstance(new, Method):
        parts.append(_flag_change("abstract", old.is_abstract, new.is_abstract))
        if options.show_all_changes:
            parts.append(_flag_change("native", old.is_native, new.is_native))
            parts.append(
                _flag_change("synchronized", old.is_synchronized, new.is_synchronized)
            )
    elif isinstance(old, Field) and isinstance(new, Field):
        parts.append(_flag_change("transient", old.is_transient, new.is_transient))
        parts.append(_flag_change("volatile", old.is_volatile, new.is_volatile))
    return _join(parts)


def describe_member_inheritance(old: str | None, new: str | None) -> str | None:
    """Describe a change in the type that defines a member."""
    if old == new:
        return None
    if old is None:
        return f"Now inherited from {new}; previously defined locally."
    if new is None:
        return f"Now defined locally; previously inherited from {old}."
    return f"Now inherited from {new} instead of {old}."


def describe_inheritance_change(old: TypeDecl, new: TypeDecl) -> str | None:
    """Describe superclass and interface changes between two versions of a type.

    Interface lists are compared as sets after sorting both lexically.
    """
    parts: list[str | None] = []
    if old.extends != new.extends:
        if old.extends and new.extends:
            parts.append(f"The superclass changed from {old.extends} to {new.extends}.")
        elif new.extends:
            parts.append(f"Now extends {new.extends}.")
        else:
            parts.append(f"No longer extends {old.extends}.")

    old_interfaces = sorted(old.implements)
    new_interfaces = sorted(new.implements)
    removed = [i for i in old_interfaces if i not in set(new_interfaces)]
    added = [i for i in new_interfaces if i not in set(old_interfaces)]
    if removed:
        noun = "interface" if len(removed) == 1 else "interfaces"
        parts.append(f"Removed {noun} {', '.join(removed)}.")
    if added:
        noun = "interface" if len(added) == 1 else "interfaces"
        parts.append(f"Added {noun} {', '.join(added)}.")
    return _join(parts)


def describe_type_modifier_change(
    old: TypeDecl, new: TypeDecl, incompatible_only: bool = False
) -> str | None:
    """Describe changes to a type's kind, abstract flag and modifiers."""
    parts: list[str | None] = []
    if old.is_interface != new.is_interface:
        parts.append(
            "Change from interface to class."
            if old.is_interface
            else "Change from class to interface."
        )
    parts.append(_flag_change("abstract", old.is_abstract, new.is_abstract))
    parts.append(describe_modifier_change(old.modifiers, new.modifiers, incompatible_only))
    return _join(parts)


def describe_documentation_change(
    old: str | None, new: str | None, options: DiffOptions
) -> str | None:
    """Describe a change in documentation presence when such changes are reported."""
    if not _documentation_changed(old, new, options):
        return None
    return "Documentation added." if has_documentation(new) else "Documentation removed."


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def _match(
    old: Sequence[E], new: Sequence[E]
) -> tuple[list[E], list[E], list[tuple[E, E]]]:
    """Split two member lists into added, removed and paired elements by key."""
    old_map = {m.key: m for m in old}
    new_map = {m.key: m for m in new}
    added = [m for key, m in new_map.items() if key not in old_map]
    removed = [m for key, m in old_map.items() if key not in new_map]
    paired = [(m, new_map[key]) for key, m in old_map.items() if key in new_map]
    return added, removed, paired


# ---------------------------------------------------------------------------
# ApiDiffer
# ---------------------------------------------------------------------------


class ApiDiffer:
    """Computes the Diff Tree between two resolved surface models.

    Parameters
    ----------
    options:
        Comparison settings; defaults to ``DiffOptions()``.
    validator:
        Validator run on each input when ``options.validate_input`` is
        set; defaults to a validator with all built-in rules.

    Example
    -------
    ::

        differ = ApiDiffer(DiffOptions(show_all_changes=True))
        result = differ.compare(old_surface, new_surface)
        print(result.summary())
    """

    def __init__(
        self,
        options: DiffOptions | None = None,
        validator: Validator | None = None,
    ) -> None:
        self._options = options if options is not None else DiffOptions()
        self._validator = validator if validator is not None else Validator()

    @property
    def options(self) -> DiffOptions:
        return self._options

    def compare(self, old: SurfaceModel | None, new: SurfaceModel | None) -> ApiDiff:
        """Compare ``old`` with ``new`` and return the scored Diff Tree.

        Raises
        ------
        MissingSurfaceError
            If either surface is ``None``.
        MalformedSurfaceError
            If input validation is enabled and a surface is malformed.
        """
        if old is None:
            raise MissingSurfaceError("old")
        if new is None:
            raise MissingSurfaceError("new")
        if self._options.validate_input:
            self._validator.ensure_valid(old)
            self._validator.ensure_valid(new)

        logger.debug("Comparing surface %r with %r", old.name, new.name)
        added, removed, paired = _match(old.packages, new.packages)
        changed: list[PackageDiff] = []
        for old_package, new_package in paired:
            package_diff = self._diff_package(old_package, new_package)
            if package_diff is not None:
                changed.append(package_diff)

        result = ApiDiff(
            old_name=old.name,
            new_name=new.name,
            packages_added=tuple(sorted(added, key=lambda p: p.name)),
            packages_removed=tuple(sorted(removed, key=lambda p: p.name)),
            packages_changed=tuple(by_name(changed)),
            old_element_count=sum(package_weight(p) for p in old.packages),
            new_element_count=sum(package_weight(p) for p in new.packages),
        )
        result = dataclasses.replace(result, score=score_api(result))
        logger.debug(
            "Compared %r with %r: %d package(s) changed, score %.2f",
            old.name,
            new.name,
            len(result.packages_changed),
            result.score,
        )
        return result

    # ------------------------------------------------------------------
    # Packages
    # ------------------------------------------------------------------

    def _diff_package(self, old: Package, new: Package) -> PackageDiff | None:
        added, removed, paired = _match(old.types, new.types)
        changed: list[ClassDiff] = []
        for old_type, new_type in paired:
            class_diff = self._diff_type(old_type, new_type)
            if class_diff is not None:
                changed.append(class_diff)

        package_diff = PackageDiff(
            name=new.name,
            types_added=tuple(sorted(added, key=lambda t: t.name)),
            types_removed=tuple(sorted(removed, key=lambda t: t.name)),
            types_changed=tuple(by_name(changed)),
            documentation_change=describe_documentation_change(
                old.doc, new.doc, self._options
            ),
            old_element_count=sum(type_weight(t) for t in old.types),
            new_element_count=sum(type_weight(t) for t in new.types),
        )
        if not package_diff.has_changes:
            return None
        logger.debug(
            "Package %r: +%d -%d ~%d type(s)",
            new.name,
            len(added),
            len(removed),
            len(changed),
        )
        return dataclasses.replace(package_diff, score=score_package(package_diff))

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def _diff_type(self, old: TypeDecl, new: TypeDecl) -> ClassDiff | None:
        options = self._options
        ctors = self._diff_members(
            old.constructors, new.constructors, compare_constructors,
            lambda o, n, c: self._constructor_diff(new.name, o, n, c),
        )
        methods = self._diff_members(
            old.methods, new.methods, compare_methods, self._method_diff
        )
        fields = self._diff_members(
            old.fields, new.fields, compare_fields, self._field_diff
        )

        class_diff = ClassDiff(
            name=new.name,
            is_interface=new.is_interface,
            constructors_added=ctors[0],
            constructors_removed=ctors[1],
            constructors_changed=ctors[2],
            methods_added=methods[0],
            methods_removed=methods[1],
            methods_changed=methods[2],
            fields_added=fields[0],
            fields_removed=fields[1],
            fields_changed=fields[2],
            inheritance_change=describe_inheritance_change(old, new),
            modifiers_change=describe_type_modifier_change(
                old, new, options.incompatible_changes_only
            ),
            documentation_change=describe_documentation_change(old.doc, new.doc, options),
            old_member_count=old.member_count,
            new_member_count=new.member_count,
        )
        if not class_diff.has_changes:
            return None
        return dataclasses.replace(class_diff, score=score_class(class_diff))

    def _diff_members(
        self,
        old: Sequence[K],
        new: Sequence[K],
        compare: Callable[[K, K, DiffOptions], tuple[MemberChange, ...]],
        build: Callable[[K, K, tuple[MemberChange, ...]], MemberDiff],
    ) -> tuple[tuple[K, ...], tuple[K, ...], tuple[MemberDiff, ...]]:
        added, removed, paired = _match(old, new)
        changed: list[MemberDiff] = []
        for old_member, new_member in paired:
            changes = compare(old_member, new_member, self._options)
            if changes:
                changed.append(build(old_member, new_member, changes))
        return (
            tuple(sort_members(added)),
            tuple(sort_members(removed)),
            tuple(sort_member_diffs(changed)),
        )

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def _constructor_diff(
        self,
        type_name: str,
        old: Constructor,
        new: Constructor,
        changes: tuple[MemberChange, ...],
    ) -> MemberDiff:
        return MemberDiff(
            name=type_name,
            kind=MemberKind.CONSTRUCTOR,
            changes=changes,
            old_type=old.type,
            new_type=new.type,
            old_exceptions=old.exceptions,
            new_exceptions=new.exceptions,
            modifiers_change=describe_modifier_change(
                old.modifiers, new.modifiers, self._options.incompatible_changes_only
            ),
            documentation_change=describe_documentation_change(
                old.doc, new.doc, self._options
            ),
        )

    def _method_diff(
        self, old: Method, new: Method, changes: tuple[MemberChange, ...]
    ) -> MemberDiff:
        return MemberDiff(
            name=new.name,
            kind=MemberKind.METHOD,
            changes=changes,
            old_type=old.return_type,
            new_type=new.return_type,
            old_signature=_parameter_list(old),
            new_signature=_parameter_list(new),
            old_exceptions=old.exceptions,
            new_exceptions=new.exceptions,
            modifiers_change=self._member_modifiers_change(old, new),
            inheritance_change=describe_member_inheritance(
                old.inherited_from, new.inherited_from
            ),
            documentation_change=describe_documentation_change(
                old.doc, new.doc, self._options
            ),
            inherited_from=new.inherited_from,
        )

    def _field_diff(
        self, old: Field, new: Field, changes: tuple[MemberChange, ...]
    ) -> MemberDiff:
        return MemberDiff(
            name=new.name,
            kind=MemberKind.FIELD,
            changes=changes,
            old_type=old.type,
            new_type=new.type,
            modifiers_change=self._member_modifiers_change(old, new),
            inheritance_change=describe_member_inheritance(
                old.inherited_from, new.inherited_from
            ),
            documentation_change=describe_documentation_change(
                old.doc, new.doc, self._options
            ),
            inherited_from=new.inherited_from,
        )

    def _member_modifiers_change(
        self, old: Method | Field, new: Method | Field
    ) -> str | None:
        return _join([
            describe_member_flags(old, new, self._options),
            describe_modifier_change(
                old.modifiers, new.modifiers, self._options.incompatible_changes_only
            ),
        ])


def _parameter_list(method: Method) -> str:
    return ", ".join(f"{p.type} {p.name}" for p in method.parameters)


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def diff(
    old: SurfaceModel | None,
    new: SurfaceModel | None,
    options: DiffOptions | None = None,
) -> ApiDiff:
    """Compare two resolved surface models and return the Diff Tree.

    Parameters
    ----------
    old:
        The baseline surface.
    new:
        The updated surface.
    options:
        Comparison settings; defaults to ``DiffOptions()``.
    """
    return ApiDiffer(options).compare(old, new)

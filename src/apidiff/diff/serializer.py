"""Diff Tree serialization and deserialization.

Converts an :class:`~apidiff.diff.tree.ApiDiff` to a plain dict/list
structure and back, and to JSON or YAML text.  Added and removed
elements are written with :class:`~apidiff.model.serializer.SurfaceSerializer`
so no field of the underlying model is lost.
"""
from __future__ import annotations

import json
from typing import Any

import yaml

from apidiff.diff.tree import (
    ApiDiff,
    ClassDiff,
    MemberChange,
    MemberDiff,
    MemberKind,
    PackageDiff,
)
from apidiff.model.serializer import SurfaceSerializer


class DiffSerializer:
    """Converts between ``ApiDiff`` trees and plain Python dicts."""

    def __init__(self, surface_serializer: SurfaceSerializer | None = None) -> None:
        self._surface = surface_serializer or SurfaceSerializer()

    # ------------------------------------------------------------------
    # Serialization (diff → dict)
    # ------------------------------------------------------------------

    def to_dict(self, api_diff: ApiDiff) -> dict[str, object]:
        """Serialize an ``ApiDiff`` to a JSON-compatible dict."""
        s = self._surface
        return {
            "kind": "ApiDiff",
            "old_name": api_diff.old_name,
            "new_name": api_diff.new_name,
            "score": api_diff.score,
            "old_element_count": api_diff.old_element_count,
            "new_element_count": api_diff.new_element_count,
            "packages_added": [s.package_to_dict(p) for p in api_diff.packages_added],
            "packages_removed": [s.package_to_dict(p) for p in api_diff.packages_removed],
            "packages_changed": [
                self.package_diff_to_dict(pd) for pd in api_diff.packages_changed
            ],
        }

    def package_diff_to_dict(self, pd: PackageDiff) -> dict[str, object]:
        s = self._surface
        return {
            "name": pd.name,
            "score": pd.score,
            "old_element_count": pd.old_element_count,
            "new_element_count": pd.new_element_count,
            "documentation_change": pd.documentation_change,
            "types_added": [s.type_to_dict(t) for t in pd.types_added],
            "types_removed": [s.type_to_dict(t) for t in pd.types_removed],
            "types_changed": [self.class_diff_to_dict(cd) for cd in pd.types_changed],
        }

    def class_diff_to_dict(self, cd: ClassDiff) -> dict[str, object]:
        s = self._surface
        return {
            "name": cd.name,
            "interface": cd.is_interface,
            "score": cd.score,
            "old_member_count": cd.old_member_count,
            "new_member_count": cd.new_member_count,
            "inheritance_change": cd.inheritance_change,
            "modifiers_change": cd.modifiers_change,
            "documentation_change": cd.documentation_change,
            "constructors": {
                "added": [s.constructor_to_dict(c) for c in cd.constructors_added],
                "removed": [s.constructor_to_dict(c) for c in cd.constructors_removed],
                "changed": [self.member_diff_to_dict(m) for m in cd.constructors_changed],
            },
            "methods": {
                "added": [s.method_to_dict(m) for m in cd.methods_added],
                "removed": [s.method_to_dict(m) for m in cd.methods_removed],
                "changed": [self.member_diff_to_dict(m) for m in cd.methods_changed],
            },
            "fields": {
                "added": [s.field_to_dict(f) for f in cd.fields_added],
                "removed": [s.field_to_dict(f) for f in cd.fields_removed],
                "changed": [self.member_diff_to_dict(m) for m in cd.fields_changed],
            },
        }

    def member_diff_to_dict(self, md: MemberDiff) -> dict[str, object]:
        return {
            "name": md.name,
            "kind": md.kind.name.lower(),
            "changes": [c.name.lower() for c in md.changes],
            "old_type": md.old_type,
            "new_type": md.new_type,
            "old_signature": md.old_signature,
            "new_signature": md.new_signature,
            "old_exceptions": md.old_exceptions,
            "new_exceptions": md.new_exceptions,
            "modifiers_change": md.modifiers_change,
            "inheritance_change": md.inheritance_change,
            "documentation_change": md.documentation_change,
            "inherited_from": md.inherited_from,
        }

    # ------------------------------------------------------------------
    # Deserialization (dict → diff)
    # ------------------------------------------------------------------

    def from_dict(self, data: dict[str, Any]) -> ApiDiff:
        """Deserialize an ``ApiDiff`` from a plain dict."""
        s = self._surface
        return ApiDiff(
            old_name=data["old_name"],
            new_name=data["new_name"],
            packages_added=tuple(
                s.package_from_dict(p) for p in data.get("packages_added", [])
            ),
            packages_removed=tuple(
                s.package_from_dict(p) for p in data.get("packages_removed", [])
            ),
            packages_changed=tuple(
                self.package_diff_from_dict(p) for p in data.get("packages_changed", [])
            ),
            old_element_count=int(data.get("old_element_count", 0)),
            new_element_count=int(data.get("new_element_count", 0)),
            score=float(data.get("score", 0.0)),
        )

    def package_diff_from_dict(self, d: dict[str, Any]) -> PackageDiff:
        s = self._surface
        return PackageDiff(
            name=d["name"],
            types_added=tuple(s.type_from_dict(t) for t in d.get("types_added", [])),
            types_removed=tuple(s.type_from_dict(t) for t in d.get("types_removed", [])),
            types_changed=tuple(
                self.class_diff_from_dict(c) for c in d.get("types_changed", [])
            ),
            documentation_change=d.get("documentation_change"),
            old_element_count=int(d.get("old_element_count", 0)),
            new_element_count=int(d.get("new_element_count", 0)),
            score=float(d.get("score", 0.0)),
        )

    def class_diff_from_dict(self, d: dict[str, Any]) -> ClassDiff:
        s = self._surface
        ctors = d.get("constructors", {})
        methods = d.get("methods", {})
        fields = d.get("fields", {})
        return ClassDiff(
            name=d["name"],
            is_interface=bool(d.get("interface", False)),
            constructors_added=tuple(
                s.constructor_from_dict(c) for c in ctors.get("added", [])
            ),
            constructors_removed=tuple(
                s.constructor_from_dict(c) for c in ctors.get("removed", [])
            ),
            constructors_changed=tuple(
                self.member_diff_from_dict(m) for m in ctors.get("changed", [])
            ),
            methods_added=tuple(s.method_from_dict(m) for m in methods.get("added", [])),
            methods_removed=tuple(
                s.method_from_dict(m) for m in methods.get("removed", [])
            ),
            methods_changed=tuple(
                self.member_diff_from_dict(m) for m in methods.get("changed", [])
            ),
            fields_added=tuple(s.field_from_dict(f) for f in fields.get("added", [])),
            fields_removed=tuple(s.field_from_dict(f) for f in fields.get("removed", [])),
            fields_changed=tuple(
                self.member_diff_from_dict(m) for m in fields.get("changed", [])
            ),
            inheritance_change=d.get("inheritance_change"),
            modifiers_change=d.get("modifiers_change"),
            documentation_change=d.get("documentation_change"),
            old_member_count=int(d.get("old_member_count", 0)),
            new_member_count=int(d.get("new_member_count", 0)),
            score=float(d.get("score", 0.0)),
        )

    def member_diff_from_dict(self, d: dict[str, Any]) -> MemberDiff:
        try:
            kind = MemberKind[d["kind"].upper()]
            changes = tuple(MemberChange[c.upper()] for c in d.get("changes", []))
        except KeyError as exc:
            raise ValueError(f"Unknown member diff value: {exc.args[0]!r}") from None
        return MemberDiff(
            name=d["name"],
            kind=kind,
            changes=changes,
            old_type=d.get("old_type"),
            new_type=d.get("new_type"),
            old_signature=d.get("old_signature"),
            new_signature=d.get("new_signature"),
            old_exceptions=d.get("old_exceptions"),
            new_exceptions=d.get("new_exceptions"),
            modifiers_change=d.get("modifiers_change"),
            inheritance_change=d.get("inheritance_change"),
            documentation_change=d.get("documentation_change"),
            inherited_from=d.get("inherited_from"),
        )

    # ------------------------------------------------------------------
    # JSON / YAML helpers
    # ------------------------------------------------------------------

    def to_json(self, api_diff: ApiDiff, indent: int = 2) -> str:
        return json.dumps(self.to_dict(api_diff), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> ApiDiff:
        return self.from_dict(json.loads(text))

    def to_yaml(self, api_diff: ApiDiff) -> str:
        return yaml.dump(
            self.to_dict(api_diff),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    def from_yaml(self, text: str) -> ApiDiff:
        return self.from_dict(yaml.safe_load(text))

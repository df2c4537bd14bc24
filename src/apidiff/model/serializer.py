"""Surface-model serialization and deserialization.

Provides lossless conversion of ``SurfaceModel`` trees to and from JSON
and YAML.  The serialized form is a plain dict/list structure that maps
naturally to both formats, and it keeps every field needed to re-derive
a diff, including ``inherited_from`` on resolved models.

Usage
-----
::

    from apidiff.model.serializer import SurfaceSerializer

    serializer = SurfaceSerializer()
    text = serializer.to_json(surface)
    surface2 = serializer.from_json(text)
"""
from __future__ import annotations

import json
from typing import Any

import yaml

from apidiff.errors import SurfaceFormatError
from apidiff.model.nodes import (
    NO_EXCEPTIONS,
    Constructor,
    Field,
    Method,
    Modifiers,
    Package,
    Parameter,
    SurfaceModel,
    TypeDecl,
    Visibility,
)


def _qualify(package: str, name: str) -> str:
    return f"{package}.{name}" if package else name


def _require(d: dict[str, Any], key: str, location: str) -> Any:
    value = d.get(key)
    if value is None:
        raise SurfaceFormatError(location, key)
    return value


class SurfaceSerializer:
    """Converts between ``SurfaceModel`` objects and plain Python dicts."""

    # ------------------------------------------------------------------
    # Serialization (model → dict)
    # ------------------------------------------------------------------

    def to_dict(self, surface: SurfaceModel) -> dict[str, object]:
        """Serialize a ``SurfaceModel`` to a JSON-compatible dict."""
        return {
            "kind": "SurfaceModel",
            "name": surface.name,
            "packages": [self.package_to_dict(p) for p in surface.packages],
        }

    def package_to_dict(self, package: Package) -> dict[str, object]:
        return {
            "kind": "Package",
            "name": package.name,
            "doc": package.doc,
            "types": [self.type_to_dict(t) for t in package.types],
        }

    def modifiers_to_dict(self, m: Modifiers) -> dict[str, object]:
        return {
            "static": m.is_static,
            "final": m.is_final,
            "deprecated": m.is_deprecated,
            "visibility": m.visibility.value,
        }

    def type_to_dict(self, t: TypeDecl) -> dict[str, object]:
        return {
            "kind": "Interface" if t.is_interface else "Class",
            "name": t.name,
            "abstract": t.is_abstract,
            "modifiers": self.modifiers_to_dict(t.modifiers),
            "extends": t.extends,
            "implements": list(t.implements),
            "constructors": [self.constructor_to_dict(c) for c in t.constructors],
            "methods": [self.method_to_dict(m) for m in t.methods],
            "fields": [self.field_to_dict(f) for f in t.fields],
            "doc": t.doc,
        }

    def constructor_to_dict(self, c: Constructor) -> dict[str, object]:
        return {
            "type": c.type,
            "exceptions": c.exceptions,
            "modifiers": self.modifiers_to_dict(c.modifiers),
            "doc": c.doc,
        }

    def method_to_dict(self, m: Method) -> dict[str, object]:
        return {
            "name": m.name,
            "return_type": m.return_type,
            "parameters": [{"name": p.name, "type": p.type} for p in m.parameters],
            "abstract": m.is_abstract,
            "native": m.is_native,
            "synchronized": m.is_synchronized,
            "exceptions": m.exceptions,
            "modifiers": self.modifiers_to_dict(m.modifiers),
            "doc": m.doc,
            "inherited_from": m.inherited_from,
        }

    def field_to_dict(self, f: Field) -> dict[str, object]:
        return {
            "name": f.name,
            "type": f.type,
            "transient": f.is_transient,
            "volatile": f.is_volatile,
            "value": f.value,
            "modifiers": self.modifiers_to_dict(f.modifiers),
            "doc": f.doc,
            "inherited_from": f.inherited_from,
        }

    # ------------------------------------------------------------------
    # Deserialization (dict → model)
    # ------------------------------------------------------------------

    def from_dict(self, data: dict[str, Any]) -> SurfaceModel:
        """Deserialize a ``SurfaceModel`` from a plain dict.

        Raises
        ------
        SurfaceFormatError
            If an element has no ``name``.  The error carries the location
            of the element, e.g. ``p.A#<method #0>``.
        """
        return SurfaceModel(
            name=_require(data, "name", "<surface>"),
            packages=[
                self.package_from_dict(p, index)
                for index, p in enumerate(data.get("packages", []))
            ],
        )

    def package_from_dict(self, d: dict[str, Any], index: int = 0) -> Package:
        name = _require(d, "name", f"<package #{index}>")
        return Package(
            name=name,
            types=[
                self.type_from_dict(t, name, i) for i, t in enumerate(d.get("types", []))
            ],
            doc=d.get("doc"),
        )

    def modifiers_from_dict(self, d: dict[str, Any] | None) -> Modifiers:
        if not d:
            return Modifiers()
        return Modifiers(
            is_static=bool(d.get("static", False)),
            is_final=bool(d.get("final", False)),
            is_deprecated=bool(d.get("deprecated", False)),
            visibility=Visibility.parse(d.get("visibility", "public")),
        )

    def type_from_dict(self, d: dict[str, Any], package: str = "", index: int = 0) -> TypeDecl:
        name = _require(d, "name", _qualify(package, f"<type #{index}>"))
        location = _qualify(package, name)
        kind = d.get("kind", "Class")
        if kind not in ("Class", "Interface"):
            raise ValueError(f"Unknown type kind: {kind!r}")
        return TypeDecl(
            name=name,
            is_interface=kind == "Interface",
            is_abstract=bool(d.get("abstract", False)),
            modifiers=self.modifiers_from_dict(d.get("modifiers")),
            extends=d.get("extends"),
            implements=list(d.get("implements", [])),
            constructors=[self.constructor_from_dict(c) for c in d.get("constructors", [])],
            methods=[
                self.method_from_dict(m, location, i) for i, m in enumerate(d.get("methods", []))
            ],
            fields=[
                self.field_from_dict(f, location, i) for i, f in enumerate(d.get("fields", []))
            ],
            doc=d.get("doc"),
        )

    def constructor_from_dict(self, d: dict[str, Any]) -> Constructor:
        return Constructor(
            type=d.get("type") or "",
            exceptions=d.get("exceptions", NO_EXCEPTIONS),
            modifiers=self.modifiers_from_dict(d.get("modifiers")),
            doc=d.get("doc"),
        )

    def method_from_dict(self, d: dict[str, Any], owner: str = "", index: int = 0) -> Method:
        # A missing return type means void; missing parameter types stay
        # empty so the validator reports them.
        name = _require(d, "name", f"{owner}#<method #{index}>")
        return Method(
            name=name,
            return_type=d.get("return_type") or "void",
            parameters=tuple(
                Parameter(
                    name=_require(p, "name", f"{owner}#{name}/<parameter #{i}>"),
                    type=p.get("type") or "",
                )
                for i, p in enumerate(d.get("parameters", []))
            ),
            is_abstract=bool(d.get("abstract", False)),
            is_native=bool(d.get("native", False)),
            is_synchronized=bool(d.get("synchronized", False)),
            exceptions=d.get("exceptions", NO_EXCEPTIONS),
            modifiers=self.modifiers_from_dict(d.get("modifiers")),
            doc=d.get("doc"),
            inherited_from=d.get("inherited_from"),
        )

    def field_from_dict(self, d: dict[str, Any], owner: str = "", index: int = 0) -> Field:
        return Field(
            name=_require(d, "name", f"{owner}#<field #{index}>"),
            type=d.get("type") or "",
            is_transient=bool(d.get("transient", False)),
            is_volatile=bool(d.get("volatile", False)),
            value=d.get("value"),
            modifiers=self.modifiers_from_dict(d.get("modifiers")),
            doc=d.get("doc"),
            inherited_from=d.get("inherited_from"),
        )

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, surface: SurfaceModel, indent: int = 2) -> str:
        """Serialize a ``SurfaceModel`` to a JSON string."""
        return json.dumps(self.to_dict(surface), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> SurfaceModel:
        """Deserialize a ``SurfaceModel`` from a JSON string."""
        data: dict[str, Any] = json.loads(text)
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, surface: SurfaceModel) -> str:
        """Serialize a ``SurfaceModel`` to a YAML string."""
        return yaml.dump(
            self.to_dict(surface),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    def from_yaml(self, text: str) -> SurfaceModel:
        """Deserialize a ``SurfaceModel`` from a YAML string."""
        data: dict[str, Any] = yaml.safe_load(text)
        return self.from_dict(data)

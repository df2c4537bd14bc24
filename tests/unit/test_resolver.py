"""Unit tests for apidiff.resolver.inheritance."""
from __future__ import annotations

import logging

import pytest

from apidiff.errors import CyclicInheritanceError
from apidiff.model.nodes import (
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
from apidiff.resolver.inheritance import InheritanceResolver, resolve

_PRIVATE = Modifiers(visibility=Visibility.PRIVATE)


def _surface(*types: TypeDecl) -> SurfaceModel:
    return SurfaceModel(name="s", packages=[Package(name="p", types=list(types))])


def _get(surface: SurfaceModel, name: str) -> TypeDecl:
    type_decl = surface.lookup(f"p.{name}")
    assert type_decl is not None
    return type_decl


def _method_names(type_decl: TypeDecl) -> list[str]:
    return [str(m) for m in type_decl.methods]


# ===========================================================================
# Basic propagation
# ===========================================================================


class TestPropagation:
    def test_single_level(self) -> None:
        surface = _surface(
            TypeDecl(name="Base", methods=[Method(name="m")]),
            TypeDecl(name="Derived", extends="p.Base"),
        )
        assert resolve(surface) == 1
        inherited = _get(surface, "Derived").get_method("m")
        assert inherited is not None
        assert inherited.inherited_from == "p.Base"

    def test_multi_level(self) -> None:
        surface = _surface(
            TypeDecl(name="A", methods=[Method(name="a")], fields=[Field(name="fa", type="int")]),
            TypeDecl(name="B", extends="p.A", methods=[Method(name="b")]),
            TypeDecl(name="C", extends="p.B"),
        )
        resolve(surface)
        c = _get(surface, "C")
        origins = {m.name: m.inherited_from for m in c.methods}
        assert origins == {"b": "p.B", "a": "p.A"}
        assert c.get_field("fa").inherited_from == "p.A"  # type: ignore[union-attr]

    def test_origin_is_defining_type_regardless_of_order(self) -> None:
        # C is resolved before its parent B has received A's members.
        surface = _surface(
            TypeDecl(name="C", extends="p.B"),
            TypeDecl(name="B", extends="p.A"),
            TypeDecl(name="A", methods=[Method(name="a")]),
        )
        resolve(surface)
        assert _get(surface, "C").get_method("a").inherited_from == "p.A"  # type: ignore[union-attr]

    def test_interfaces(self) -> None:
        surface = _surface(
            TypeDecl(name="I", is_interface=True, methods=[Method(name="size", return_type="int")]),
            TypeDecl(name="Impl", implements=["p.I"]),
        )
        resolve(surface)
        assert _get(surface, "Impl").get_method("size").inherited_from == "p.I"  # type: ignore[union-attr]

    def test_constructors_never_inherited(self) -> None:
        surface = _surface(
            TypeDecl(name="Base", constructors=[Constructor(type="int")]),
            TypeDecl(name="Derived", extends="p.Base"),
        )
        assert resolve(surface) == 0
        assert _get(surface, "Derived").constructors == []


# ===========================================================================
# Exclusions
# ===========================================================================


class TestExclusions:
    def test_private_members_excluded(self) -> None:
        surface = _surface(
            TypeDecl(
                name="Base",
                methods=[Method(name="p", modifiers=_PRIVATE)],
                fields=[Field(name="secret", type="int", modifiers=_PRIVATE)],
            ),
            TypeDecl(name="Derived", extends="p.Base"),
        )
        resolve(surface)
        derived = _get(surface, "Derived")
        assert derived.methods == []
        assert derived.fields == []

    def test_override_not_duplicated(self) -> None:
        surface = _surface(
            TypeDecl(name="Base", methods=[Method(name="m", return_type="Object")]),
            TypeDecl(name="Derived", extends="p.Base", methods=[Method(name="m", return_type="String")]),
        )
        resolve(surface)
        methods = _get(surface, "Derived").methods
        assert len(methods) == 1
        assert methods[0].inherited_from is None

    def test_overload_is_inherited(self) -> None:
        surface = _surface(
            TypeDecl(name="Base", methods=[Method(name="m", parameters=(Parameter("x", "int"),))]),
            TypeDecl(name="Derived", extends="p.Base", methods=[Method(name="m")]),
        )
        resolve(surface)
        assert _method_names(_get(surface, "Derived")) == ["m()", "m(int)"]

    def test_hidden_field_not_duplicated(self) -> None:
        surface = _surface(
            TypeDecl(name="Base", fields=[Field(name="x", type="int")]),
            TypeDecl(name="Derived", extends="p.Base", fields=[Field(name="x", type="long")]),
        )
        resolve(surface)
        fields = _get(surface, "Derived").fields
        assert [(f.type, f.inherited_from) for f in fields] == [("long", None)]

    def test_nearest_ancestor_wins(self) -> None:
        surface = _surface(
            TypeDecl(name="A", methods=[Method(name="m", return_type="Object")]),
            TypeDecl(name="B", extends="p.A", methods=[Method(name="m", return_type="String")]),
            TypeDecl(name="C", extends="p.B"),
        )
        resolve(surface)
        methods = _get(surface, "C").methods
        assert [(m.return_type, m.inherited_from) for m in methods] == [("String", "p.B")]


# ===========================================================================
# External, diamond and cyclic ancestry
# ===========================================================================


class TestAncestry:
    def test_external_supertype_stops_walk(self, caplog: pytest.LogCaptureFixture) -> None:
        surface = _surface(TypeDecl(name="Widget", extends="java.lang.Object"))
        with caplog.at_level(logging.DEBUG, logger="apidiff.resolver.inheritance"):
            assert resolve(surface) == 0
        assert "external" in caplog.text

    def test_diamond_inherits_once(self) -> None:
        surface = _surface(
            TypeDecl(name="Root", is_interface=True, methods=[Method(name="r")]),
            TypeDecl(name="Left", is_interface=True, implements=["p.Root"]),
            TypeDecl(name="Right", is_interface=True, implements=["p.Root"]),
            TypeDecl(name="Impl", implements=["p.Left", "p.Right"]),
        )
        resolve(surface)
        assert _method_names(_get(surface, "Impl")) == ["r()"]

    def test_cycle_raises(self) -> None:
        surface = _surface(
            TypeDecl(name="A", extends="p.B"),
            TypeDecl(name="B", extends="p.A"),
        )
        with pytest.raises(CyclicInheritanceError) as exc_info:
            resolve(surface)
        assert exc_info.value.chain == ("p.A", "p.B", "p.A")
        assert exc_info.value.type_name == "p.A"

    def test_self_cycle_raises(self) -> None:
        with pytest.raises(CyclicInheritanceError):
            resolve(_surface(TypeDecl(name="A", extends="p.A")))


# ===========================================================================
# Idempotence
# ===========================================================================


class TestIdempotence:
    def test_second_run_adds_nothing(self) -> None:
        surface = _surface(
            TypeDecl(name="A", methods=[Method(name="a")], fields=[Field(name="f", type="int")]),
            TypeDecl(name="B", extends="p.A", methods=[Method(name="b")]),
            TypeDecl(name="C", extends="p.B", implements=["p.I"]),
            TypeDecl(name="I", is_interface=True, methods=[Method(name="i")]),
        )
        resolver = InheritanceResolver()
        first = resolver.resolve(surface)
        snapshot = {t.name: (list(t.methods), list(t.fields)) for _, t in surface.iter_types()}
        assert first > 0
        assert resolver.resolve(surface) == 0
        assert {t.name: (t.methods, t.fields) for _, t in surface.iter_types()} == snapshot

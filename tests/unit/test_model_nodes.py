"""Unit tests for apidiff.model.nodes."""
from __future__ import annotations

import pytest

from apidiff.model.nodes import (
    DOC_PLACEHOLDER,
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
    has_documentation,
    join_signature,
    qualified_name,
    same_key,
)


def _params(*pairs: tuple[str, str]) -> tuple[Parameter, ...]:
    return tuple(Parameter(name=n, type=t) for n, t in pairs)


# ===========================================================================
# Helpers
# ===========================================================================


class TestHelpers:
    @pytest.mark.parametrize("doc", [None, "", "   ", DOC_PLACEHOLDER, f"  {DOC_PLACEHOLDER} "])
    def test_has_documentation_false(self, doc: str | None) -> None:
        assert not has_documentation(doc)

    def test_has_documentation_true(self) -> None:
        assert has_documentation("Returns the size.")

    def test_qualified_name(self) -> None:
        assert qualified_name("com.acme", "Widget") == "com.acme.Widget"

    def test_qualified_name_default_package(self) -> None:
        assert qualified_name("", "Widget") == "Widget"


# ===========================================================================
# Visibility / Modifiers
# ===========================================================================


class TestVisibility:
    def test_levels_ordered(self) -> None:
        levels = [v.level for v in Visibility]
        assert levels == sorted(levels, reverse=True)

    def test_parse_case_insensitive(self) -> None:
        assert Visibility.parse(" Protected ") is Visibility.PROTECTED

    def test_parse_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown visibility"):
            Visibility.parse("internal")


class TestModifiers:
    def test_defaults(self) -> None:
        m = Modifiers()
        assert not m.is_static
        assert not m.is_final
        assert not m.is_deprecated
        assert m.visibility is Visibility.PUBLIC
        assert not m.is_private

    def test_private(self) -> None:
        assert Modifiers(visibility=Visibility.PRIVATE).is_private

    def test_frozen(self) -> None:
        m = Modifiers()
        with pytest.raises((AttributeError, TypeError)):
            m.is_static = True  # type: ignore[misc]


# ===========================================================================
# Parameter
# ===========================================================================


class TestParameter:
    def test_equality_by_name_only(self) -> None:
        assert Parameter("x", "int") == Parameter("x", "long")

    def test_hash_consistent_with_equality(self) -> None:
        assert len({Parameter("x", "int"), Parameter("x", "long")}) == 1

    def test_ordering_by_name(self) -> None:
        params = sorted([Parameter("b", "int"), Parameter("a", "String")])
        assert [p.name for p in params] == ["a", "b"]

    def test_matches_requires_type(self) -> None:
        assert Parameter("x", "int").matches(Parameter("x", "int"))
        assert not Parameter("x", "int").matches(Parameter("x", "long"))

    def test_void_contributes_empty_text(self) -> None:
        assert Parameter("v", "void").signature_text == ""


# ===========================================================================
# Members
# ===========================================================================


class TestMembers:
    def test_join_signature(self) -> None:
        assert join_signature(_params(("a", "int"), ("b", "String"))) == "int, String"

    def test_method_signature_and_key(self) -> None:
        m = Method(name="resize", parameters=_params(("w", "int"), ("h", "int")))
        assert m.signature == "int, int"
        assert m.key == ("resize", "int, int")
        assert str(m) == "resize(int, int)"

    def test_method_defaults(self) -> None:
        m = Method(name="run")
        assert m.return_type == "void"
        assert m.exceptions == NO_EXCEPTIONS
        assert not m.is_inherited

    def test_method_equality_compares_parameter_types(self) -> None:
        a = Method(name="f", parameters=_params(("x", "int")))
        b = Method(name="f", parameters=_params(("x", "String")))
        assert a.parameters == b.parameters
        assert a != b
        assert a == Method(name="f", parameters=_params(("x", "int")))

    def test_method_hash_consistent_with_equality(self) -> None:
        a = Method(name="f", parameters=_params(("x", "int")))
        assert hash(a) == hash(Method(name="f", parameters=_params(("x", "int"))))
        assert len({a, Method(name="f", parameters=_params(("x", "int")))}) == 1

    def test_constructor_equality_compares_parameter_types(self) -> None:
        a = Constructor.for_parameters(_params(("x", "int")))
        b = Constructor.for_parameters(_params(("x", "String")))
        assert a != b

    def test_constructor_for_parameters(self) -> None:
        c = Constructor.for_parameters(_params(("n", "int"), ("s", "String")))
        assert c.type == "int, String"
        assert c.key == "int, String"
        assert c.name == "(int, String)"

    def test_field_key(self) -> None:
        f = Field(name="SIZE", type="int", value="3")
        assert f.key == "SIZE"
        assert str(f) == "SIZE"

    def test_same_key_ignores_other_fields(self) -> None:
        a = Method(name="f", return_type="int")
        b = Method(name="f", return_type="long", is_abstract=True)
        assert same_key(a, b)
        assert a != b

    def test_same_key_distinguishes_overloads(self) -> None:
        a = Method(name="f", parameters=_params(("x", "int")))
        b = Method(name="f", parameters=_params(("x", "long")))
        assert not same_key(a, b)

    def test_same_key_requires_same_kind(self) -> None:
        assert not same_key(Field(name="x", type="int"), Method(name="x"))


# ===========================================================================
# TypeDecl / Package / SurfaceModel
# ===========================================================================


class TestTypeDecl:
    def _type(self) -> TypeDecl:
        return TypeDecl(
            name="Widget",
            extends="p.Base",
            implements=["p.Sized"],
            constructors=[Constructor(type="")],
            methods=[
                Method(name="draw"),
                Method(name="size", inherited_from="p.Sized"),
            ],
            fields=[Field(name="id", type="int")],
        )

    def test_member_count(self) -> None:
        assert self._type().member_count == 4

    def test_local_members(self) -> None:
        t = self._type()
        assert [m.name for m in t.local_methods] == ["draw"]
        assert [f.name for f in t.local_fields] == ["id"]

    def test_supertypes_extends_first(self) -> None:
        assert self._type().supertypes == ["p.Base", "p.Sized"]

    def test_supertypes_empty(self) -> None:
        assert TypeDecl(name="X").supertypes == []

    def test_get_method_and_field(self) -> None:
        t = self._type()
        assert t.get_method("draw") is t.methods[0]
        assert t.get_method("draw", "int") is None
        assert t.get_field("id") is t.fields[0]
        assert t.get_field("missing") is None


class TestSurfaceModel:
    def test_lookup_by_qualified_name(self) -> None:
        widget = TypeDecl(name="Widget")
        surface = SurfaceModel(name="s", packages=[Package(name="a.b", types=[widget])])
        assert surface.lookup("a.b.Widget") is widget
        assert surface.lookup("Widget") is None

    def test_add_package_indexes_types(self) -> None:
        surface = SurfaceModel(name="s")
        t = TypeDecl(name="T")
        surface.add_package(Package(name="p", types=[t]))
        assert surface.lookup("p.T") is t
        assert surface.type_count == 1

    def test_first_duplicate_wins(self) -> None:
        first = TypeDecl(name="T")
        second = TypeDecl(name="T", is_interface=True)
        surface = SurfaceModel(name="s", packages=[Package(name="p", types=[first, second])])
        assert surface.lookup("p.T") is first

    def test_reindex_after_mutation(self) -> None:
        surface = SurfaceModel(name="s", packages=[Package(name="p")])
        t = TypeDecl(name="Late")
        surface.packages[0].types.append(t)
        assert surface.lookup("p.Late") is None
        surface.reindex()
        assert surface.lookup("p.Late") is t

    def test_iter_types_in_model_order(self) -> None:
        surface = SurfaceModel(
            name="s",
            packages=[
                Package(name="b", types=[TypeDecl(name="Z"), TypeDecl(name="A")]),
                Package(name="a", types=[TypeDecl(name="M")]),
            ],
        )
        pairs = [(p.name, t.name) for p, t in surface.iter_types()]
        assert pairs == [("b", "Z"), ("b", "A"), ("a", "M")]
        assert surface.package_names == ["a", "b"]
        assert surface.packages[0].type_names == ["A", "Z"]

    def test_get_package(self) -> None:
        surface = SurfaceModel(name="s", packages=[Package(name="p")])
        assert surface.get_package("p") is surface.packages[0]
        assert surface.get_package("q") is None

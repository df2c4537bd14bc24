"""Surface Model node definitions.

A ``SurfaceModel`` is the in-memory picture of an API at one point in
time: an ordered list of ``Package`` objects, each holding ``TypeDecl``
objects, each holding constructors, methods and fields.

Leaf values (modifiers, parameters, members) are frozen dataclasses so
they can be shared between a type and the inherited copies the resolver
creates.  Containers (``TypeDecl``, ``Package``, ``SurfaceModel``) are
plain dataclasses because the inheritance resolver appends inherited
members to them after the model is built.

Every element exposes a ``key`` property: the identity used to match it
against its counterpart in another model.  Matching on keys is kept
separate from full comparison, which lives in :mod:`apidiff.diff.differ`.
"""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

NO_EXCEPTIONS: str = "no exceptions"
"""Sentinel exception list for members that declare no exceptions."""

DOC_PLACEHOLDER: str = "InsertDocumentationHere"
"""Placeholder the model builder stores when an element has no prose."""


def has_documentation(doc: str | None) -> bool:
    """Return ``True`` when ``doc`` carries meaningful documentation text."""
    if doc is None:
        return False
    text = doc.strip()
    return bool(text) and text != DOC_PLACEHOLDER


def qualified_name(package_name: str, type_name: str) -> str:
    """Return the fully-qualified name of a type within a package."""
    if not package_name:
        return type_name
    return f"{package_name}.{type_name}"


# ---------------------------------------------------------------------------
# Modifiers
# ---------------------------------------------------------------------------


class Visibility(Enum):
    """Access level of a type or member."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PACKAGE = "package"
    PRIVATE = "private"

    @property
    def level(self) -> int:
        """Display rank: more visible levels rank higher."""
        return _VISIBILITY_LEVELS[self]

    @classmethod
    def parse(cls, text: str) -> "Visibility":
        """Return the visibility named by ``text`` (case-insensitive)."""
        try:
            return cls(text.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown visibility {text!r}; expected one of "
                f"{', '.join(v.value for v in cls)}"
            ) from None


_VISIBILITY_LEVELS: dict[Visibility, int] = {
    Visibility.PUBLIC: 3,
    Visibility.PROTECTED: 2,
    Visibility.PACKAGE: 1,
    Visibility.PRIVATE: 0,
}


@dataclass(frozen=True, slots=True)
class Modifiers:
    """Modifiers shared by types and members.

    Parameters
    ----------
    is_static:
        Whether the element is static.
    is_final:
        Whether the element is final.
    is_deprecated:
        Whether the element is marked deprecated.
    visibility:
        Access level of the element.
    """

    is_static: bool = False
    is_final: bool = False
    is_deprecated: bool = False
    visibility: Visibility = Visibility.PUBLIC

    @property
    def is_private(self) -> bool:
        return self.visibility is Visibility.PRIVATE


# ---------------------------------------------------------------------------
# Parameters and members
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, eq=False)
class Parameter:
    """A method parameter.

    Equality and ordering look at the name only; use :meth:`matches`
    when the type has to agree as well.
    """

    name: str
    type: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Parameter):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __lt__(self, other: "Parameter") -> bool:
        return self.name < other.name

    def matches(self, other: "Parameter") -> bool:
        """Return ``True`` when both name and type agree."""
        return self.name == other.name and self.type == other.type

    @property
    def signature_text(self) -> str:
        """Text this parameter contributes to a signature."""
        return "" if self.type == "void" else self.type


def join_signature(parameters: tuple[Parameter, ...]) -> str:
    """Join parameter types into the comma-separated signature string."""
    return ", ".join(p.signature_text for p in parameters)


@dataclass(frozen=True)
class Constructor:
    """A constructor, identified by its parameter-type signature.

    Parameters
    ----------
    type:
        Parameter types joined with ``", "``; this is the matching key.
    exceptions:
        Comma-joined exception list or :data:`NO_EXCEPTIONS`.
    modifiers:
        Access modifiers.
    doc:
        Documentation text or the placeholder.
    """

    type: str
    exceptions: str = NO_EXCEPTIONS
    modifiers: Modifiers = field(default_factory=Modifiers)
    doc: str | None = None

    @classmethod
    def for_parameters(
        cls,
        parameters: tuple[Parameter, ...] = (),
        *,
        exceptions: str = NO_EXCEPTIONS,
        modifiers: Modifiers | None = None,
        doc: str | None = None,
    ) -> "Constructor":
        """Build a constructor whose type string is derived from ``parameters``."""
        return cls(
            type=join_signature(parameters),
            exceptions=exceptions,
            modifiers=modifiers if modifiers is not None else Modifiers(),
            doc=doc,
        )

    @property
    def key(self) -> str:
        return self.type

    @property
    def name(self) -> str:
        return f"({self.type})"


@dataclass(frozen=True)
class Method:
    """A method declared on, or inherited into, a type.

    Parameters
    ----------
    name:
        The method name.  Overloads share a name and differ by signature.
    return_type:
        Return type name; ``"void"`` when nothing is returned.
    parameters:
        Ordered parameters.
    is_abstract, is_native, is_synchronized:
        Method-specific flags.
    exceptions:
        Comma-joined exception list or :data:`NO_EXCEPTIONS`.
    modifiers:
        Access modifiers.
    doc:
        Documentation text or the placeholder.
    inherited_from:
        Qualified name of the defining ancestor, ``None`` when local.
    """

    name: str
    return_type: str = "void"
    parameters: tuple[Parameter, ...] = ()
    is_abstract: bool = False
    is_native: bool = False
    is_synchronized: bool = False
    exceptions: str = NO_EXCEPTIONS
    modifiers: Modifiers = field(default_factory=Modifiers)
    doc: str | None = None
    inherited_from: str | None = None

    @property
    def signature(self) -> str:
        return join_signature(self.parameters)

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.signature)

    @property
    def is_inherited(self) -> bool:
        return self.inherited_from is not None

    def _values(self) -> tuple[object, ...]:
        return (
            self.name,
            self.return_type,
            tuple((p.name, p.type) for p in self.parameters),
            self.is_abstract,
            self.is_native,
            self.is_synchronized,
            self.exceptions,
            self.modifiers,
            self.doc,
            self.inherited_from,
        )

    def __eq__(self, other: object) -> bool:
        # Parameter equality ignores types; methods compare them as well.
        if not isinstance(other, Method):
            return NotImplemented
        return self._values() == other._values()

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return f"{self.name}({self.signature})"


@dataclass(frozen=True)
class Field:
    """A field declared on, or inherited into, a type."""

    name: str
    type: str
    is_transient: bool = False
    is_volatile: bool = False
    value: str | None = None
    modifiers: Modifiers = field(default_factory=Modifiers)
    doc: str | None = None
    inherited_from: str | None = None

    @property
    def key(self) -> str:
        return self.name

    @property
    def is_inherited(self) -> bool:
        return self.inherited_from is not None

    def __str__(self) -> str:
        return self.name


Member = Union[Constructor, Method, Field]


def same_key(a: object, b: object) -> bool:
    """Return ``True`` when ``a`` and ``b`` share an identity key.

    This is the matching predicate; it says nothing about whether the
    two elements are otherwise identical.
    """
    if type(a) is not type(b):
        return False
    return getattr(a, "key") == getattr(b, "key")


# ---------------------------------------------------------------------------
# Types and packages
# ---------------------------------------------------------------------------


@dataclass
class TypeDecl:
    """A class or interface.

    Parameters
    ----------
    name:
        Simple name, unique within the owning package.
    is_interface:
        ``True`` for interfaces.
    is_abstract:
        ``True`` for abstract classes.
    modifiers:
        Access modifiers of the type itself.
    extends:
        Qualified name of the extended type, if any.
    implements:
        Qualified names of implemented interfaces.
    constructors, methods, fields:
        Ordered members.  After resolution ``methods`` and ``fields``
        also hold inherited copies.
    doc:
        Documentation text or the placeholder.
    """

    name: str
    is_interface: bool = False
    is_abstract: bool = False
    modifiers: Modifiers = field(default_factory=Modifiers)
    extends: str | None = None
    implements: list[str] = field(default_factory=list)
    constructors: list[Constructor] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    fields: list[Field] = field(default_factory=list)
    doc: str | None = None

    @property
    def key(self) -> str:
        return self.name

    @property
    def member_count(self) -> int:
        return len(self.constructors) + len(self.methods) + len(self.fields)

    @property
    def local_methods(self) -> list[Method]:
        return [m for m in self.methods if m.inherited_from is None]

    @property
    def local_fields(self) -> list[Field]:
        return [f for f in self.fields if f.inherited_from is None]

    @property
    def supertypes(self) -> list[str]:
        """Extended type first, then implemented interfaces."""
        names = [self.extends] if self.extends else []
        names.extend(self.implements)
        return names

    def qualified_name(self, package_name: str) -> str:
        return qualified_name(package_name, self.name)

    def get_method(self, name: str, signature: str = "") -> Method | None:
        """Return the method matching ``name`` and ``signature``, or ``None``."""
        for method in self.methods:
            if method.name == name and method.signature == signature:
                return method
        return None

    def get_field(self, name: str) -> Field | None:
        """Return the field named ``name``, or ``None``."""
        for fld in self.fields:
            if fld.name == name:
                return fld
        return None


@dataclass
class Package:
    """A named package holding an ordered list of types."""

    name: str
    types: list[TypeDecl] = field(default_factory=list)
    doc: str | None = None

    @property
    def key(self) -> str:
        return self.name

    def get_type(self, name: str) -> TypeDecl | None:
        """Return the type with simple name ``name``, or ``None``."""
        for type_decl in self.types:
            if type_decl.name == name:
                return type_decl
        return None

    @property
    def type_names(self) -> list[str]:
        """Sorted list of the simple names of all types in this package."""
        return sorted(t.name for t in self.types)


@dataclass
class SurfaceModel:
    """The root of an interface-surface snapshot.

    Parameters
    ----------
    name:
        Identifier of the snapshot, e.g. ``"mylib-1.2"``.
    packages:
        Packages in insertion order.
    """

    name: str
    packages: list[Package] = field(default_factory=list)
    _types: dict[str, TypeDecl] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self.reindex()

    def reindex(self) -> None:
        """Rebuild the qualified-name index from the package list.

        When the same qualified name occurs twice the first instance is
        indexed; the validator reports the duplicate.
        """
        self._types = {}
        for package in self.packages:
            for type_decl in package.types:
                self._types.setdefault(type_decl.qualified_name(package.name), type_decl)

    def add_package(self, package: Package) -> Package:
        """Append ``package`` and index its types."""
        self.packages.append(package)
        for type_decl in package.types:
            self._types.setdefault(type_decl.qualified_name(package.name), type_decl)
        return package

    def lookup(self, name: str) -> TypeDecl | None:
        """Return the type with qualified name ``name``, or ``None`` if external."""
        return self._types.get(name)

    def get_package(self, name: str) -> Package | None:
        for package in self.packages:
            if package.name == name:
                return package
        return None

    def iter_types(self) -> Iterator[tuple[Package, TypeDecl]]:
        """Yield ``(package, type)`` pairs in model order."""
        for package in self.packages:
            for type_decl in package.types:
                yield package, type_decl

    @property
    def type_count(self) -> int:
        return sum(len(p.types) for p in self.packages)

    @property
    def package_names(self) -> list[str]:
        return sorted(p.name for p in self.packages)

"""Individual validation rules for surface models.

Each rule is a callable that accepts a ``SurfaceModel`` and returns a
list of ``Diagnostic`` objects.  Rules are composed into the
``Validator`` class which runs them all and aggregates results.

Rule codes use the ``APD`` prefix followed by a three-digit number:

    APD001  Duplicate package name
    APD002  Duplicate type within a package
    APD003  Missing required name
    APD004  Missing type name
    APD005  Duplicate method signature within a type
    APD006  Duplicate field name within a type
    APD007  Duplicate constructor signature within a type
    APD008  Interface declares constructors
    APD009  Type extends or implements itself
"""
from __future__ import annotations

from collections.abc import Callable

from apidiff.model.nodes import Method, SurfaceModel, TypeDecl
from apidiff.validator.diagnostics import Diagnostic, DiagnosticSeverity

Rule = Callable[[SurfaceModel], list[Diagnostic]]


def _make(
    code: str,
    severity: DiagnosticSeverity,
    message: str,
    location: str,
    suggestion: str | None = None,
    rule: str = "",
) -> Diagnostic:
    return Diagnostic(
        severity=severity,
        code=code,
        message=message,
        location=location,
        suggestion=suggestion,
        rule=rule,
    )


def _method_location(type_location: str, method: Method) -> str:
    return f"{type_location}#{method.name}({method.signature})"


# ---------------------------------------------------------------------------
# APD001: duplicate package names
# ---------------------------------------------------------------------------


def rule_duplicate_packages(surface: SurfaceModel) -> list[Diagnostic]:
    """APD001: Package names must be unique within a surface."""
    diagnostics: list[Diagnostic] = []
    seen: set[str] = set()
    for package in surface.packages:
        if package.name in seen:
            diagnostics.append(_make(
                "APD001",
                DiagnosticSeverity.ERROR,
                f"Duplicate package {package.name!r}",
                package.name,
                suggestion="Merge the duplicate package entries in the model builder",
                rule="duplicate_packages",
            ))
        seen.add(package.name)
    return diagnostics


# ---------------------------------------------------------------------------
# APD002: duplicate types
# ---------------------------------------------------------------------------


def rule_duplicate_types(surface: SurfaceModel) -> list[Diagnostic]:
    """APD002: Type names must be unique within a package."""
    diagnostics: list[Diagnostic] = []
    seen: set[str] = set()
    for package, type_decl in surface.iter_types():
        qualified = type_decl.qualified_name(package.name)
        if qualified in seen:
            diagnostics.append(_make(
                "APD002",
                DiagnosticSeverity.ERROR,
                f"Duplicate type {qualified!r}",
                qualified,
                rule="duplicate_types",
            ))
        seen.add(qualified)
    return diagnostics


# ---------------------------------------------------------------------------
# APD003 / APD004: missing required fields
# ---------------------------------------------------------------------------


def rule_missing_names(surface: SurfaceModel) -> list[Diagnostic]:
    """APD003: Packages, types, methods, fields and parameters need a name."""
    diagnostics: list[Diagnostic] = []

    def missing(location: str, what: str) -> None:
        diagnostics.append(_make(
            "APD003",
            DiagnosticSeverity.ERROR,
            f"{what} has no name",
            location,
            rule="missing_names",
        ))

    for index, package in enumerate(surface.packages):
        if not package.name:
            missing(f"<package #{index}>", "Package")
        for type_index, type_decl in enumerate(package.types):
            if not type_decl.name:
                missing(f"{package.name}.<type #{type_index}>", "Type")
                continue
            type_location = type_decl.qualified_name(package.name)
            for method_index, method in enumerate(type_decl.methods):
                if not method.name:
                    missing(f"{type_location}#<method #{method_index}>", "Method")
                    continue
                for param_index, param in enumerate(method.parameters):
                    if not param.name:
                        missing(
                            f"{_method_location(type_location, method)}"
                            f"/<parameter #{param_index}>",
                            "Parameter",
                        )
            for field_index, fld in enumerate(type_decl.fields):
                if not fld.name:
                    missing(f"{type_location}#<field #{field_index}>", "Field")
    return diagnostics


def rule_missing_type_names(surface: SurfaceModel) -> list[Diagnostic]:
    """APD004: Fields, parameters and method return values need a type."""
    diagnostics: list[Diagnostic] = []
    for package, type_decl in surface.iter_types():
        type_location = type_decl.qualified_name(package.name)
        for method in type_decl.methods:
            location = _method_location(type_location, method)
            if not method.return_type:
                diagnostics.append(_make(
                    "APD004",
                    DiagnosticSeverity.ERROR,
                    f"Method {method.name!r} has no return type",
                    location,
                    suggestion="Use 'void' for methods that return nothing",
                    rule="missing_type_names",
                ))
            for param in method.parameters:
                if not param.type:
                    diagnostics.append(_make(
                        "APD004",
                        DiagnosticSeverity.ERROR,
                        f"Parameter {param.name!r} has no type",
                        location,
                        rule="missing_type_names",
                    ))
        for fld in type_decl.fields:
            if not fld.type:
                diagnostics.append(_make(
                    "APD004",
                    DiagnosticSeverity.ERROR,
                    f"Field {fld.name!r} has no type",
                    f"{type_location}#{fld.name}",
                    rule="missing_type_names",
                ))
    return diagnostics


# ---------------------------------------------------------------------------
# APD005 / APD006 / APD007: duplicate members
# ---------------------------------------------------------------------------


def rule_duplicate_methods(surface: SurfaceModel) -> list[Diagnostic]:
    """APD005: A name and signature may appear once per type."""
    diagnostics: list[Diagnostic] = []
    for package, type_decl in surface.iter_types():
        type_location = type_decl.qualified_name(package.name)
        seen: set[tuple[str, str]] = set()
        for method in type_decl.methods:
            if method.key in seen:
                diagnostics.append(_make(
                    "APD005",
                    DiagnosticSeverity.ERROR,
                    f"Method {method} is declared more than once",
                    _method_location(type_location, method),
                    rule="duplicate_methods",
                ))
            seen.add(method.key)
    return diagnostics


def rule_duplicate_fields(surface: SurfaceModel) -> list[Diagnostic]:
    """APD006: Field names must be unique within a type."""
    diagnostics: list[Diagnostic] = []
    for package, type_decl in surface.iter_types():
        type_location = type_decl.qualified_name(package.name)
        seen: set[str] = set()
        for fld in type_decl.fields:
            if fld.name in seen:
                diagnostics.append(_make(
                    "APD006",
                    DiagnosticSeverity.ERROR,
                    f"Field {fld.name!r} is declared more than once",
                    f"{type_location}#{fld.name}",
                    rule="duplicate_fields",
                ))
            seen.add(fld.name)
    return diagnostics


def rule_duplicate_constructors(surface: SurfaceModel) -> list[Diagnostic]:
    """APD007: A constructor signature may appear once per type."""
    diagnostics: list[Diagnostic] = []
    for package, type_decl in surface.iter_types():
        type_location = type_decl.qualified_name(package.name)
        seen: set[str] = set()
        for ctor in type_decl.constructors:
            if ctor.type in seen:
                diagnostics.append(_make(
                    "APD007",
                    DiagnosticSeverity.ERROR,
                    f"Constructor ({ctor.type}) is declared more than once",
                    f"{type_location}#<init>({ctor.type})",
                    rule="duplicate_constructors",
                ))
            seen.add(ctor.type)
    return diagnostics


# ---------------------------------------------------------------------------
# APD008: interfaces with constructors
# ---------------------------------------------------------------------------


def rule_interface_constructors(surface: SurfaceModel) -> list[Diagnostic]:
    """APD008: Interfaces cannot declare constructors."""
    diagnostics: list[Diagnostic] = []
    for package, type_decl in surface.iter_types():
        if type_decl.is_interface and type_decl.constructors:
            diagnostics.append(_make(
                "APD008",
                DiagnosticSeverity.WARNING,
                f"Interface {type_decl.name!r} declares "
                f"{len(type_decl.constructors)} constructor(s)",
                type_decl.qualified_name(package.name),
                suggestion="Check whether the type was extracted as an interface by mistake",
                rule="interface_constructors",
            ))
    return diagnostics


# ---------------------------------------------------------------------------
# APD009: self inheritance
# ---------------------------------------------------------------------------


def _names_itself(type_decl: TypeDecl, qualified: str) -> bool:
    return qualified in type_decl.supertypes


def rule_self_inheritance(surface: SurfaceModel) -> list[Diagnostic]:
    """APD009: A type must not extend or implement itself."""
    diagnostics: list[Diagnostic] = []
    for package, type_decl in surface.iter_types():
        qualified = type_decl.qualified_name(package.name)
        if _names_itself(type_decl, qualified):
            diagnostics.append(_make(
                "APD009",
                DiagnosticSeverity.ERROR,
                f"Type {qualified!r} lists itself as a supertype",
                qualified,
                rule="self_inheritance",
            ))
    return diagnostics


DEFAULT_RULES: tuple[Rule, ...] = (
    rule_duplicate_packages,
    rule_duplicate_types,
    rule_missing_names,
    rule_missing_type_names,
    rule_duplicate_methods,
    rule_duplicate_fields,
    rule_duplicate_constructors,
    rule_interface_constructors,
    rule_self_inheritance,
)

"""CLI entry point for apidiff.

Invoked as::

    apidiff [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m apidiff.cli.main

Commands
--------
validate    Check a surface model for malformed input
resolve     Add inherited members and dump the resolved model
diff        Compare two surface models and rank the changes
version     Show version information

Surface models are read in the serializer boundary form; files ending
in ``.yaml`` or ``.yml`` are read as YAML, everything else as JSON.
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from apidiff.diff.tree import ApiDiff
    from apidiff.model.nodes import SurfaceModel

console = Console()
err_console = Console(stderr=True)


def _read_source(path: str) -> str:
    """Read a model file, exiting on error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)


def _is_yaml(path: str) -> bool:
    return Path(path).suffix.lower() in (".yaml", ".yml")


def _load_or_exit(path: str) -> "SurfaceModel":
    """Deserialize a surface model, printing errors and exiting on failure."""
    from apidiff.model.serializer import SurfaceSerializer

    source = _read_source(path)
    serializer = SurfaceSerializer()
    try:
        if _is_yaml(path):
            return serializer.from_yaml(source)
        return serializer.from_json(source)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        err_console.print(f"[red]Syntax error[/red] in {path}: {exc}")
        sys.exit(1)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        err_console.print(f"[red]Invalid model[/red] in {path}: {exc}")
        sys.exit(1)


def _resolve_or_exit(surface: "SurfaceModel", path: str) -> int:
    """Resolve inherited members, printing cyclic-inheritance errors and exiting."""
    from apidiff.errors import CyclicInheritanceError
    from apidiff.resolver import resolve

    try:
        return resolve(surface)
    except CyclicInheritanceError as exc:
        err_console.print(f"[red]Error[/red] in {path}: {exc}")
        sys.exit(1)


def _emit(text: str, lang: str, output: str | None, label: str) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]{label} written to[/green] {output}")
    else:
        console.print(Syntax(text, lang, line_numbers=True))


def _severity_color(severity_name: str) -> str:
    """Map a DiagnosticSeverity name to a Rich color string."""
    colors = {
        "ERROR": "red",
        "WARNING": "yellow",
        "INFORMATION": "blue",
    }
    return colors.get(severity_name, "white")


def _score_color(score: float) -> str:
    if score >= 50.0:
        return "red"
    if score >= 10.0:
        return "yellow"
    return "green"


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="apidiff")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug logging")
def cli(verbose: bool) -> None:
    """Structural differencing and change scoring for API surfaces."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from apidiff import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]apidiff[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# validate command
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("file", type=click.Path(exists=False))
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors")
def validate_command(file: str, strict: bool) -> None:
    """Check a surface model for malformed input.

    FILE is the path to a JSON or YAML surface model.
    """
    from apidiff.validator import Validator

    surface = _load_or_exit(file)
    diagnostics = Validator(strict=strict).validate(surface)

    if not diagnostics:
        console.print(f"[green]OK[/green] {file}: no issues found")
        sys.exit(0)

    errors = [d for d in diagnostics if d.is_error]
    warnings = [d for d in diagnostics if not d.is_error]

    table = Table(title=f"Validation: {file}", show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=8)
    table.add_column("Location", min_width=10)
    table.add_column("Message")

    for d in diagnostics:
        color = _severity_color(d.severity.name)
        table.add_row(
            f"[{color}]{d.severity.name}[/{color}]",
            d.code,
            d.location,
            d.message + (f"\n[dim]hint: {d.suggestion}[/dim]" if d.suggestion else ""),
        )

    console.print(table)
    console.print(
        f"\n[bold]Summary:[/bold] {len(errors)} error(s), {len(warnings)} warning(s)"
    )

    if errors:
        sys.exit(1)


# ---------------------------------------------------------------------------
# resolve command
# ---------------------------------------------------------------------------


@cli.command(name="resolve")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Output format of the resolved model",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def resolve_command(file: str, output_format: str, output: str | None) -> None:
    """Add inherited members to a surface model and dump it.

    FILE is the path to a JSON or YAML surface model.
    """
    from apidiff.model.serializer import SurfaceSerializer

    surface = _load_or_exit(file)
    added = _resolve_or_exit(surface, file)
    err_console.print(f"[dim]{added} inherited member(s) added[/dim]")

    serializer = SurfaceSerializer()
    if output_format.lower() == "yaml":
        _emit(serializer.to_yaml(surface), "yaml", output, "Resolved model")
    else:
        _emit(serializer.to_json(surface, indent=2), "json", output, "Resolved model")


# ---------------------------------------------------------------------------
# diff command
# ---------------------------------------------------------------------------


def _print_diff_table(result: "ApiDiff", sort: str) -> None:
    from apidiff.diff.ordering import by_magnitude, by_name

    order = by_magnitude if sort == "magnitude" else by_name
    stats = result.statistics()

    console.print(
        f"[bold]API Diff:[/bold] {result.old_name} → {result.new_name} "
        f"([{_score_color(result.score)}]{result.score:.1f}%[/]) changed\n"
    )

    for package in result.packages_added:
        console.print(f"[green][+] package {package.name}[/green]")
    for package in result.packages_removed:
        console.print(f"[red][-] package {package.name}[/red]")

    for package_diff in order(result.packages_changed):
        table = Table(title=f"{package_diff.name} ({package_diff.score:.1f}%)")
        table.add_column("Type", style="bold")
        table.add_column("Status", min_width=8)
        table.add_column("+", justify="right")
        table.add_column("-", justify="right")
        table.add_column("~", justify="right")
        table.add_column("Score", justify="right")
        for type_decl in package_diff.types_added:
            table.add_row(type_decl.name, "[green]added[/green]", "", "", "", "")
        for type_decl in package_diff.types_removed:
            table.add_row(type_decl.name, "[red]removed[/red]", "", "", "", "")
        for class_diff in order(package_diff.types_changed):
            color = _score_color(class_diff.score)
            table.add_row(
                class_diff.name,
                "[yellow]changed[/yellow]",
                str(class_diff.added_count),
                str(class_diff.removed_count),
                str(class_diff.changed_count),
                f"[{color}]{class_diff.score:.1f}%[/{color}]",
            )
        console.print(table)

    console.print(
        f"\n[bold]{stats.total}[/bold] change(s) total: "
        f"{stats.types_changed} type(s) changed, {stats.members_changed} member(s) changed"
    )


@cli.command(name="diff")
@click.argument("old", type=click.Path(exists=False))
@click.argument("new", type=click.Path(exists=False))
@click.option(
    "--show-all-changes",
    is_flag=True,
    default=False,
    help="Report native/synchronized flags and parameter renames",
)
@click.option(
    "--doc-changes",
    is_flag=True,
    default=False,
    help="Count documentation added or removed as a change",
)
@click.option(
    "--incompatible",
    is_flag=True,
    default=False,
    help="Ignore deprecation-only differences",
)
@click.option("--config", "config_path", default=None, help="YAML file of comparison options")
@click.option(
    "--sort",
    type=click.Choice(["name", "magnitude"], case_sensitive=False),
    default="magnitude",
    help="Order of changed packages and types in the table",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "yaml"], case_sensitive=False),
    default="table",
    help="Output format",
)
@click.option("--output", "-o", default=None, help="Output file path for json/yaml")
def diff_command(
    old: str,
    new: str,
    show_all_changes: bool,
    doc_changes: bool,
    incompatible: bool,
    config_path: str | None,
    sort: str,
    output_format: str,
    output: str | None,
) -> None:
    """Compare two surface models and rank the changes.

    OLD and NEW are paths to JSON or YAML surface models.  Both are
    resolved before comparison.
    """
    from apidiff.config import DiffOptions
    from apidiff.diff import ApiDiffer, DiffSerializer
    from apidiff.errors import ConfigurationError, MalformedSurfaceError

    try:
        options = DiffOptions.load(config_path) if config_path else DiffOptions()
    except (ConfigurationError, OSError) as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)
    # Flags only switch options on; an absent flag keeps the configured value.
    options = options.merged(
        show_all_changes=show_all_changes or None,
        include_documentation_diffs=doc_changes or None,
        incompatible_changes_only=incompatible or None,
    )

    old_surface = _load_or_exit(old)
    new_surface = _load_or_exit(new)
    _resolve_or_exit(old_surface, old)
    _resolve_or_exit(new_surface, new)

    try:
        result = ApiDiffer(options).compare(old_surface, new_surface)
    except MalformedSurfaceError as exc:
        err_console.print(f"[red]Malformed surface[/red] {exc.surface_name!r}:")
        for diagnostic in exc.diagnostics:
            err_console.print(f"  {diagnostic}")
        sys.exit(1)

    fmt = output_format.lower()
    if fmt == "json":
        _emit(DiffSerializer().to_json(result, indent=2), "json", output, "Diff")
        return
    if fmt == "yaml":
        _emit(DiffSerializer().to_yaml(result), "yaml", output, "Diff")
        return

    if not result.has_changes:
        console.print("[green]No structural changes between the two models.[/green]")
        sys.exit(0)
    _print_diff_table(result, sort.lower())


if __name__ == "__main__":
    cli()

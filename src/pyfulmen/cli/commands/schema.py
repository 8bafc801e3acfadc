"""Schema catalog CLI commands.

Registered as a subcommand group: `pyfulmen schema list`, `pyfulmen schema validate`,
`pyfulmen schema export` and friends.
"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from pyfulmen.cli.app import app
from pyfulmen.foundry.exit_codes import ExitCode
from pyfulmen.schema.catalog import default_catalog
from pyfulmen.schema.composer import diff_schemas
from pyfulmen.schema.diagnostics import Diagnostic, format_diagnostic
from pyfulmen.schema.documents import canonical_json
from pyfulmen.schema.errors import SchemaError, SchemaNotFoundError
from pyfulmen.schema.export import (
    ExportError,
    ExportFormat,
    ExportOptions,
    ExportSchemaNotFoundError,
    ExportSchemaValidationError,
    FileExistsExportError,
    FileWriteExportError,
    InvalidExportOptionsError,
    PathValidationError,
    ProvenanceStyle,
    export_schema_sync,
)
from pyfulmen.schema.validator import validate_schema_bytes

console = Console()

schema_app = typer.Typer(help="Schema catalog commands")
app.add_typer(schema_app, name="schema")


def _print_diagnostics(diagnostics: list[Diagnostic], output_format: str) -> None:
    if output_format == "json":
        typer.echo(json.dumps([d.to_dict() for d in diagnostics], indent=2))
        return
    for diagnostic in diagnostics:
        console.print(format_diagnostic(diagnostic), markup=False)


# --- List / Show ---


@schema_app.command("list")
def list_command(
    prefix: Annotated[str, typer.Argument(help="Only list ids starting with this prefix")] = "",
):
    """List the schemas in the catalog."""
    try:
        descriptors = default_catalog().list_schemas(prefix)
    except SchemaError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_CONFIG_INVALID)

    if not descriptors:
        console.print("[yellow]No schemas found.[/yellow]")
        return

    table = Table(title="Schemas")
    table.add_column("ID", style="cyan")
    table.add_column("Draft")
    table.add_column("Title")
    for descriptor in descriptors:
        table.add_row(descriptor.id, descriptor.draft or "", descriptor.title or "")
    console.print(table)


@schema_app.command()
def show(schema_id: Annotated[str, typer.Argument(help="Schema id")]):
    """Print a schema as canonical JSON."""
    try:
        document = default_catalog().load_schema_document(schema_id)
    except SchemaNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_INVALID_ARGUMENT)
    typer.echo(canonical_json(document).decode("utf-8"))


# --- Validate ---


@schema_app.command()
def validate(
    file: Annotated[Path, typer.Argument(help="JSON or YAML document to validate")],
    schema_id: Annotated[str, typer.Option("--schema-id", help="Catalog schema id")],
    output_format: Annotated[
        str, typer.Option("--format", help="Diagnostic output: text or json")
    ] = "text",
):
    """Validate a document against a catalog schema."""
    if output_format not in ("text", "json"):
        console.print(f"[red]Error: unknown format {output_format!r}[/red]")
        raise typer.Exit(ExitCode.EXIT_INVALID_ARGUMENT)

    try:
        diagnostics = default_catalog().validate_file_by_id(schema_id, file)
    except SchemaNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_INVALID_ARGUMENT)
    except SchemaError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_DATA_INVALID)

    if diagnostics:
        _print_diagnostics(diagnostics, output_format)
        raise typer.Exit(ExitCode.EXIT_DATA_INVALID)

    if output_format == "json":
        typer.echo("[]")
    else:
        console.print(f"[green]{file} is valid against {schema_id}[/green]")


@schema_app.command("validate-schema")
def validate_schema(file: Annotated[Path, typer.Argument(help="Schema file to check")]):
    """Check a schema file against its metaschema."""
    try:
        diagnostics = validate_schema_bytes(file.read_bytes())
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_FILE_READ_ERROR)

    if diagnostics:
        _print_diagnostics(diagnostics, "text")
        raise typer.Exit(ExitCode.EXIT_DATA_INVALID)
    console.print(f"[green]{file} is a valid schema[/green]")


# --- Export ---


@schema_app.command()
def export(
    schema_id: Annotated[str, typer.Option("--schema-id", help="Catalog schema id")],
    out: Annotated[Path, typer.Option("--out", help="Destination file")],
    export_format: Annotated[
        ExportFormat, typer.Option("--format", help="Output format")
    ] = ExportFormat.AUTO,
    provenance_style: Annotated[
        ProvenanceStyle, typer.Option("--provenance-style", help="How provenance is embedded")
    ] = ProvenanceStyle.OBJECT,
    no_provenance: bool = typer.Option(False, "--no-provenance", help="Omit provenance"),
    no_validate: bool = typer.Option(False, "--no-validate", help="Skip metaschema validation"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
):
    """Export a catalog schema with provenance metadata."""
    options = ExportOptions.create(
        schema_id,
        out,
        format=export_format,
        include_provenance=not no_provenance,
        provenance_style=provenance_style,
        validate_schema=not no_validate,
        overwrite=force,
    )

    try:
        written = export_schema_sync(options, working_root=Path.cwd())
    except (InvalidExportOptionsError, ExportSchemaNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_INVALID_ARGUMENT)
    except ExportSchemaValidationError as e:
        console.print(f"[red]Error: {e}[/red]")
        _print_diagnostics(e.diagnostics, "text")
        raise typer.Exit(ExitCode.EXIT_DATA_INVALID)
    except (FileExistsExportError, PathValidationError, FileWriteExportError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_FILE_WRITE_ERROR)
    except ExportError as e:
        logger.exception("Schema export failed")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_FAILURE)

    console.print(f"[green]Exported {schema_id} to {written}[/green]")


# --- Diff ---


@schema_app.command()
def diff(
    left: Annotated[Path, typer.Argument(help="First schema file")],
    right: Annotated[Path, typer.Argument(help="Second schema file")],
):
    """Show the differences between two schema files."""
    try:
        differences = diff_schemas(left.read_bytes(), right.read_bytes())
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_FILE_READ_ERROR)
    except SchemaError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_DATA_INVALID)

    if not differences:
        console.print("[green]Schemas are identical[/green]")
        return
    for difference in differences:
        console.print(str(difference), markup=False)
    raise typer.Exit(ExitCode.EXIT_FAILURE)

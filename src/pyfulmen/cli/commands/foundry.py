"""Foundry CLI commands: exit code and signal lookups."""

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from pyfulmen.cli.app import app
from pyfulmen.foundry.exit_codes import (
    ExitCode,
    get_exit_code_info,
    get_exit_code_info_by_name,
    map_to_bsd,
)
from pyfulmen.foundry.errors import SignalNotFoundError
from pyfulmen.foundry.signals import default_signal_catalog

console = Console()

foundry_app = typer.Typer(help="Reference catalog lookups")
app.add_typer(foundry_app, name="foundry")


@foundry_app.command("exit-code")
def exit_code(
    code_or_name: Annotated[str, typer.Argument(help="Numeric code or name, e.g. 20 or CONFIG_INVALID")],
):
    """Describe an exit code."""
    value = code_or_name.strip()
    info = get_exit_code_info(int(value)) if value.isdigit() else get_exit_code_info_by_name(value)
    if info is None:
        console.print(f"[red]Unknown exit code: {code_or_name}[/red]")
        raise typer.Exit(ExitCode.EXIT_INVALID_ARGUMENT)

    table = Table(title=f"{info.name} ({info.code})", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Category", info.category)
    table.add_row("Description", info.description)
    if info.context:
        table.add_row("Context", info.context)
    if info.retry_hint:
        table.add_row("Retry hint", info.retry_hint)
    bsd = map_to_bsd(info.code)
    if bsd is not None:
        table.add_row("BSD", f"{info.bsd_equivalent} ({bsd})")
    if info.simplified_basic is not None:
        table.add_row("Basic", str(info.simplified_basic))
    if info.simplified_severity is not None:
        table.add_row("Severity", str(info.simplified_severity))
    console.print(table)


@foundry_app.command()
def signal(
    id_or_name: Annotated[str, typer.Argument(help="Signal id or name, e.g. term or SIGTERM")],
):
    """Describe a signal and its handling semantics."""
    catalog = default_signal_catalog()
    try:
        if id_or_name.strip().upper().startswith("SIG"):
            definition = catalog.get_signal_by_name(id_or_name)
        else:
            definition = catalog.get_signal(id_or_name)
    except SignalNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.EXIT_INVALID_ARGUMENT)

    table = Table(title=f"{definition.name} ({definition.id})", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Number", str(definition.number_for()))
    table.add_row("Behavior", definition.default_behavior)
    table.add_row("Exit code", str(definition.exit_code))
    table.add_row("Timeout", f"{definition.timeout_seconds}s")
    if definition.cleanup_actions:
        table.add_row("Cleanup", ", ".join(definition.cleanup_actions))
    if definition.supports_windows_event:
        table.add_row("Windows event", definition.windows_event)
    elif definition.windows_fallback is not None:
        table.add_row("Windows fallback", definition.windows_fallback.fallback_behavior)
    console.print(table)

from typing import Optional

import typer

from pyfulmen import telemetry
from pyfulmen.config import get_config
from pyfulmen.utils import setup_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        import pyfulmen

        typer.echo(f"pyfulmen version: {pyfulmen.__version__}")
        typer.echo(f"Crucible version: {pyfulmen.CRUCIBLE_VERSION}")
        raise typer.Exit()


app = typer.Typer(name="pyfulmen", no_args_is_help=True)


@app.callback()
def app_callback(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Override the log level (default from PYFULMEN_LOG_LEVEL)",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """pyfulmen - reference catalogs, similarity and schema tooling for Fulmen apps."""
    if ctx.invoked_subcommand is None:
        return

    config = get_config()
    setup_logging(level=(log_level or config.log_level).upper())
    telemetry.configure_from_config()

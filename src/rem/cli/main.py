"""rem CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from rem.cli.config import config_app
from rem.cli.get import get_cmd
from rem.cli.history import clear_cmd, delete_cmd, list_cmd
from rem.cli.search import search_cmd
from rem.cli.store import store_cmd
from rem.config import ConfigError, load_config
from rem.logging_config import configure_logging, enable_debug_mode


def _installed_version() -> str:
    try:
        return importlib.metadata.version("rem")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"rem {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="rem",
    help=(
        "rem — clipboard history in a local SQLite file.\n\n"
        "  echo hello | rem store   Store stdin as the newest item.\n"
        "  rem get 0                Print the most recent item."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr."),
    ] = False,
) -> None:
    """rem — clipboard history in a local SQLite file."""
    if verbose:
        enable_debug_mode()
        return
    try:
        level = load_config().logging.level
    except ConfigError:
        # Reported with an actionable message once a command opens the database.
        level = "WARNING"
    configure_logging(level)


app.command("store")(store_cmd)
app.command("get")(get_cmd)
app.command("list")(list_cmd)
app.command("search")(search_cmd)
app.command("delete")(delete_cmd)
app.command("clear")(clear_cmd)
app.add_typer(config_app, name="config")


@app.command("version")
def version_cmd() -> None:
    """Show the installed rem version."""
    typer.echo(f"rem {_installed_version()}")


if __name__ == "__main__":
    app()

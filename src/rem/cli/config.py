"""rem config CLI commands.

Commands:
  rem config list               — show every setting
  rem config get <key>          — print one value
  rem config set <key> <value>  — change a value (known keys are validated)
  rem config delete <key>       — remove a setting (its default applies again)

Keys may be written with dashes or underscores (``history-limit``).
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from rem.cli.common import DbOption, console, open_engine
from rem.db.migrations import SCHEMA_VERSION_KEY
from rem.errors import InvalidInputError
from rem.retention import HISTORY_LIMIT_KEY

config_app = typer.Typer(
    name="config",
    help="Manage rem settings (history_limit, show_binary).",
    add_completion=False,
)

_SHOW_BINARY_KEY = "show_binary"
_READ_ONLY_KEYS = {SCHEMA_VERSION_KEY}


def _normalize_key(key: str) -> str:
    return key.strip().replace("-", "_")


def _validate(key: str, value: str) -> str:
    """Check *value* for a known *key*; return the canonical form.

    Raises:
        InvalidInputError: The key is read-only or the value is malformed.
    """
    if key in _READ_ONLY_KEYS:
        raise InvalidInputError(f"{key} is managed by rem and cannot be changed")
    if key == HISTORY_LIMIT_KEY:
        try:
            limit = int(value)
        except ValueError:
            raise InvalidInputError(f"{key} must be a positive integer, got {value!r}") from None
        if limit <= 0:
            raise InvalidInputError(f"{key} must be a positive integer, got {value!r}")
        return str(limit)
    if key == _SHOW_BINARY_KEY:
        lowered = value.strip().lower()
        if lowered not in ("true", "false"):
            raise InvalidInputError(f"{key} must be 'true' or 'false', got {value!r}")
        return lowered
    return value


@config_app.command("list")
def config_list_cmd(db: DbOption = None) -> None:
    """Show every setting."""
    with open_engine(db) as engine:
        settings = engine.list_settings()

    table = Table(title="rem settings", show_header=True, header_style="bold")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in settings.items():
        table.add_row(key, escape(value))
    console.print(table)


@config_app.command("get")
def config_get_cmd(
    key: Annotated[str, typer.Argument(help="Setting name, e.g. history_limit.")],
    db: DbOption = None,
) -> None:
    """Print the value of KEY."""
    with open_engine(db) as engine:
        value = engine.get_setting(_normalize_key(key))
    typer.echo(value)


@config_app.command("set")
def config_set_cmd(
    key: Annotated[str, typer.Argument(help="Setting name, e.g. history_limit.")],
    value: Annotated[str, typer.Argument(help="New value.")],
    db: DbOption = None,
) -> None:
    """Set KEY to VALUE. Lowering history_limit prunes on the next store."""
    name = _normalize_key(key)
    with open_engine(db) as engine:
        canonical = _validate(name, value)
        engine.set_setting(name, canonical)
    console.print(f"[green]✓[/] {name} = {escape(canonical)}", highlight=False)


@config_app.command("delete")
def config_delete_cmd(
    key: Annotated[str, typer.Argument(help="Setting name to remove.")],
    db: DbOption = None,
) -> None:
    """Remove KEY. Built-in keys fall back to their defaults."""
    name = _normalize_key(key)
    with open_engine(db) as engine:
        if name in _READ_ONLY_KEYS:
            raise InvalidInputError(f"{name} is managed by rem and cannot be deleted")
        engine.delete_setting(name)
    console.print(f"[green]✓[/] Deleted setting {name}")

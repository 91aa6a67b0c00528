"""Shared helpers for rem commands: engine lifecycle and error reporting."""

from __future__ import annotations

import sqlite3
import warnings
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from rem.cli.errors import err_config, err_from_exception, err_storage, warn_retention
from rem.config import ConfigError, resolve_db_path
from rem.engine import ItemEngine
from rem.errors import RemError, RetentionWarning

console = Console()
err_console = Console(stderr=True)


@contextmanager
def open_engine(db: Path | None) -> Iterator[ItemEngine]:
    """Open the engine for *db* (or the configured default) and report failures.

    Any RemError raised inside the block is printed with an actionable message
    and turned into ``typer.Exit`` with the error's exit code. Retention
    warnings are printed after the block finishes. Both go to stderr.
    """
    try:
        db_path = resolve_db_path(db)
    except ConfigError as exc:
        err_console.print(err_config(str(exc)))
        raise typer.Exit(2) from exc

    try:
        engine = ItemEngine.open(db_path)
    except (sqlite3.Error, OSError) as exc:
        err_console.print(err_storage(f"cannot open database: {exc}", str(db_path)))
        raise typer.Exit(5) from exc

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", RetentionWarning)
        try:
            yield engine
        except RemError as exc:
            err_console.print(err_from_exception(exc, str(db_path)))
            raise typer.Exit(exc.exit_code) from exc
        finally:
            engine.close()

    for w in caught:
        if issubclass(w.category, RetentionWarning):
            err_console.print(warn_retention(str(w.message)))
        else:
            warnings.warn_explicit(w.message, w.category, w.filename, w.lineno)


def human_size(size: int) -> str:
    """Format a byte count for display (``512 B``, ``1.5 KiB``)."""
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024 or unit == "GiB":
            return f"{size} B" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


DbOption = Annotated[
    Optional[Path],
    typer.Option(
        "--db",
        help="Path to the rem database (default: $REM_DB or ~/.config/rem/rem.db).",
    ),
]

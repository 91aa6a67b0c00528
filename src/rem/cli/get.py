"""rem get — write one item's content to stdout, a file or the clipboard."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer

from rem.cli.common import DbOption, console, err_console, open_engine
from rem.cli.errors import err_conflicting_options, warn_binary_to_terminal
from rem.clipboard import SystemClipboard
from rem.db.models import CHUNK_SIZE
from rem.errors import IOFailureError

_SHOW_BINARY_KEY = "show_binary"


def get_cmd(
    index: Annotated[int, typer.Argument(help="History index (0 = most recent).")],
    output: Annotated[
        Optional[Path],
        typer.Argument(dir_okay=False, help="Write content to this file instead of stdout."),
    ] = None,
    clipboard: Annotated[
        bool,
        typer.Option("--clipboard", "-c", help="Copy content to the system clipboard."),
    ] = False,
    db: DbOption = None,
) -> None:
    """Retrieve the item at INDEX."""
    if output is not None and clipboard:
        err_console.print(err_conflicting_options("OUTPUT", "--clipboard"))
        raise typer.Exit(2)

    with open_engine(db) as engine:
        item = engine.get_by_index(index)

        if output is None and not clipboard and item.is_binary and sys.stdout.isatty():
            if engine.settings.get_or_default(_SHOW_BINARY_KEY, "false") != "true":
                err_console.print(warn_binary_to_terminal(item.title))
                raise typer.Exit(1)

        with engine.open_content(item.id) as reader:
            if clipboard:
                SystemClipboard().write(reader)
                console.print(f"[green]✓[/] Copied item {index} to clipboard ({item.size} bytes)")
            elif output is not None:
                try:
                    with output.open("wb") as fh:
                        shutil.copyfileobj(reader, fh, CHUNK_SIZE)
                except OSError as exc:
                    raise IOFailureError(f"cannot write {output}: {exc}") from exc
                console.print(f"[green]✓[/] Written item {index} to {output} ({item.size} bytes)")
            else:
                out = typer.get_binary_stream("stdout")
                shutil.copyfileobj(reader, out, CHUNK_SIZE)
                out.flush()

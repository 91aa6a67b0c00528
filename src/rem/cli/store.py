"""rem store — add content to the history.

Content comes from stdin (default), one or more files, or the system
clipboard. Each source becomes one item at index 0.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape

from rem.cli.common import DbOption, console, err_console, open_engine
from rem.cli.errors import err_conflicting_options, err_no_input
from rem.clipboard import SystemClipboard
from rem.content.peek import peek
from rem.db.models import Item
from rem.errors import IOFailureError


def store_cmd(
    files: Annotated[
        Optional[list[Path]],
        typer.Argument(
            exists=True,
            dir_okay=False,
            readable=True,
            help="Files to store, one item each. Reads stdin when omitted.",
        ),
    ] = None,
    title: Annotated[
        str,
        typer.Option("--title", "-t", help="Title for the stored item(s)."),
    ] = "",
    clipboard: Annotated[
        bool,
        typer.Option("--clipboard", "-c", help="Store the current system clipboard."),
    ] = False,
    db: DbOption = None,
) -> None:
    """Store stdin, files or the clipboard as new history items."""
    if files and clipboard:
        err_console.print(err_conflicting_options("FILES", "--clipboard"))
        raise typer.Exit(2)

    with open_engine(db) as engine:
        if files:
            for path in files:
                with path.open("rb") as fh:
                    item = engine.enqueue(fh, title or None)
                _report(item, source=str(path))
            return

        if clipboard:
            data = SystemClipboard().read()
            if not data:
                err_console.print("[yellow]Clipboard is empty, nothing stored.[/]")
                raise typer.Exit(2)
            _report(engine.enqueue(io.BytesIO(data), title or None), source="clipboard")
            return

        stdin = typer.get_binary_stream("stdin")
        try:
            sample, stream = peek(stdin, 1)
        except OSError as exc:
            raise IOFailureError(f"failed to read stdin: {exc}") from exc
        if not sample:
            err_console.print(err_no_input())
            raise typer.Exit(2)
        _report(engine.enqueue(stream, title or None), source="stdin")


def _report(item: Item, source: str) -> None:
    kind = "binary, " if item.is_binary else ""
    console.print(
        f"[green]✓[/] Stored from {source}: {escape(item.title)}  [dim]({kind}{item.size} bytes)[/]",
        highlight=False,
    )

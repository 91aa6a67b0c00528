"""rem list / delete / clear — inspect and prune the history.

Commands:
  rem list            — table of items, newest first, with LIFO indexes
  rem delete <index>  — remove one item
  rem clear           — remove every item (asks first unless --force)
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from rem.cli.common import DbOption, console, human_size, open_engine


def list_cmd(
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=0, help="Show at most N items (0 = all)."),
    ] = 0,
    db: DbOption = None,
) -> None:
    """List stored items, most recent first."""
    with open_engine(db) as engine:
        items = engine.list()
        history_limit = engine.history_limit()

    if not items:
        console.print(
            "[yellow]History is empty.[/]\n"
            "  Store something:  echo hello | rem store"
        )
        raise typer.Exit(0)

    shown = items[:limit] if limit else items

    table = Table(title="rem history", show_header=True, header_style="bold")
    table.add_column("Index", justify="right", style="bold")
    table.add_column("Title")
    table.add_column("Size", justify="right")
    table.add_column("Stored")

    for index, item in enumerate(shown):
        title = escape(item.title)
        if item.is_binary:
            title = f"[magenta]{title}[/]"
        stored = item.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S")
        table.add_row(str(index), title, human_size(item.size), stored)

    console.print(table)
    console.print(f"\n  {len(items)}/{history_limit} items")


def delete_cmd(
    index: Annotated[int, typer.Argument(help="History index to delete (0 = most recent).")],
    db: DbOption = None,
) -> None:
    """Delete the item at INDEX. Later items shift down by one."""
    with open_engine(db) as engine:
        item = engine.delete_by_index(index)
    console.print(f"[green]✓[/] Deleted item {index}: {escape(item.title)}", highlight=False)


def clear_cmd(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Do not ask for confirmation."),
    ] = False,
    db: DbOption = None,
) -> None:
    """Delete every item in the history. Settings are kept."""
    with open_engine(db) as engine:
        count = engine.count()
        if count == 0:
            console.print("[yellow]History is already empty.[/]")
            raise typer.Exit(0)

        if not force:
            typer.confirm(f"Delete all {count} item(s)?", abort=True)

        removed = engine.clear()
    console.print(f"[green]✓[/] Cleared {removed} item(s)")

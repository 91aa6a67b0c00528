"""rem search — find items whose title or content matches a regex.

By default only the most recent match is printed, as raw content. Patterns
are case-insensitive unless --case-sensitive is given.
"""

from __future__ import annotations

import shutil
from typing import Annotated

import typer
from rich.markup import escape

from rem.cli.common import DbOption, err_console, open_engine
from rem.db.models import CHUNK_SIZE, SearchQuery


def search_cmd(
    pattern: Annotated[str, typer.Argument(help="Regular expression to search for.")],
    all_matches: Annotated[
        bool,
        typer.Option("--all", "-a", help="Print every match, not just the most recent."),
    ] = False,
    index_only: Annotated[
        bool,
        typer.Option("--index-only", "-i", help="Print history indexes instead of content."),
    ] = False,
    title: Annotated[
        bool,
        typer.Option("--title", help="Search titles (default: titles and content)."),
    ] = False,
    content: Annotated[
        bool,
        typer.Option("--content", help="Search content (default: titles and content)."),
    ] = False,
    case_sensitive: Annotated[
        bool,
        typer.Option("--case-sensitive", "-s", help="Match case exactly."),
    ] = False,
    db: DbOption = None,
) -> None:
    """Search the history with a regular expression."""
    query = SearchQuery(
        pattern=pattern,
        search_title=title,
        search_content=content,
        limit=0 if all_matches else 1,
        case_sensitive=case_sensitive,
    )

    with open_engine(db) as engine:
        matches = engine.search(query)
        if not matches:
            err_console.print(f"[yellow]No matches for[/] {escape(pattern)}", highlight=False)
            raise typer.Exit(1)

        if index_only:
            for item in matches:
                index = engine.index_of(item.id)
                typer.echo("-" if index is None else str(index))
            return

        out = typer.get_binary_stream("stdout")
        for position, item in enumerate(matches):
            if position:
                out.write(b"\n")
            with engine.open_content(item.id) as reader:
                shutil.copyfileobj(reader, out, CHUNK_SIZE)
        out.flush()

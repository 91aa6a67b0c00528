"""rem rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from rem.cli.errors import err_from_exception
    err_console.print(err_from_exception(exc))
    raise typer.Exit(exc.exit_code)
"""

from __future__ import annotations

from rich.markup import escape

from rem.errors import (
    ClipboardError,
    CorruptedError,
    InvalidInputError,
    IOFailureError,
    NotFoundError,
    OutOfRangeError,
    RemError,
    StorageError,
)


def err_out_of_range(index: int, count: int) -> str:
    """LIFO index past the end of history."""
    if count == 0:
        return (
            f"[red]Error:[/] No item at index {index} — history is empty.\n"
            "  Store something first:  echo hello | rem store"
        )
    return (
        f"[red]Error:[/] No item at index {index} (valid: 0-{count - 1}).\n"
        "  Run:  rem list"
    )


def err_invalid_input(detail: str) -> str:
    """Malformed argument or pattern."""
    return (
        f"[red]Error:[/] {escape(detail)}\n"
        "  Check the argument and retry; see:  rem --help"
    )


def err_not_found(detail: str) -> str:
    """Item id or setting key absent."""
    return (
        f"[red]Error:[/] {escape(detail)}\n"
        "  Run:  rem list  or  rem config list"
    )


def err_storage(detail: str, db_path: str | None = None) -> str:
    """The database refused an operation."""
    where = f" ({escape(db_path)})" if db_path else ""
    return (
        f"[red]Error:[/] Database operation failed{where}: {escape(detail)}\n"
        "  Check the file is writable and not locked, or set REM_DB to another path."
    )


def err_io_failure(detail: str) -> str:
    """The input stream broke mid-ingest."""
    return (
        f"[red]Error:[/] Could not read input: {escape(detail)}\n"
        "  Nothing was stored. Re-run:  rem store"
    )


def err_corrupted(detail: str, item_id: int) -> str:
    """Stored item failed an integrity check."""
    return (
        f"[red]Error:[/] {escape(detail)}\n"
        f"  The item cannot be read back intact. Remove it:  rem delete <index>  (id {item_id})"
    )


def err_clipboard(detail: str) -> str:
    """No clipboard utility, or it failed."""
    return (
        f"[red]Error:[/] Clipboard unavailable: {escape(detail)}\n"
        "  Install:  pbcopy (macOS), wl-clipboard, xclip or xsel (Linux)"
    )


def err_no_input() -> str:
    """`rem store` with nothing piped in."""
    return (
        "[red]Error:[/] No input provided.\n"
        "  Use:  echo hello | rem store   or   rem store FILE"
    )


def err_conflicting_options(first: str, second: str) -> str:
    return (
        f"[red]Error:[/] Cannot combine {first} and {second}.\n"
        "  Use one of them per invocation; see:  rem --help"
    )


def err_config(detail: str) -> str:
    """Invalid ~/.config/rem/config.yaml or REM_* variable."""
    return (
        f"[red]Error:[/] Invalid configuration: {escape(detail)}\n"
        "  Fix ~/.config/rem/config.yaml or unset REM_DB / REM_LOG_LEVEL."
    )


def err_from_exception(exc: RemError, db_path: str | None = None) -> str:
    """Pick the message for any RemError."""
    if isinstance(exc, OutOfRangeError):
        return err_out_of_range(exc.index, exc.count)
    if isinstance(exc, InvalidInputError):
        return err_invalid_input(str(exc))
    if isinstance(exc, NotFoundError):
        return err_not_found(str(exc))
    if isinstance(exc, StorageError):
        return err_storage(str(exc), db_path)
    if isinstance(exc, IOFailureError):
        return err_io_failure(str(exc))
    if isinstance(exc, CorruptedError):
        return err_corrupted(str(exc), exc.item_id)
    if isinstance(exc, ClipboardError):
        return err_clipboard(str(exc))
    return f"[red]Error:[/] {escape(str(exc))}"


def warn_retention(detail: str) -> str:
    """Item stored, but old items could not be evicted."""
    return (
        f"[yellow]Warning:[/] {escape(detail)}\n"
        "  The new item was stored. Check:  rem config get history_limit"
    )


def warn_binary_to_terminal(title: str) -> str:
    return (
        f"[yellow]Binary content:[/] {escape(title)}\n"
        "  Write it to a file:  rem get <index> OUTPUT\n"
        "  or allow it:         rem config set show_binary true"
    )

"""Database initialization: migrations plus default settings."""

from __future__ import annotations

import sqlite3

from rem.db.migrations import MIGRATIONS, run_migrations

CURRENT_VERSION = MIGRATIONS[-1][0]

# Written on first open; existing values are never overwritten.
DEFAULT_SETTINGS: dict[str, str] = {
    "history_limit": "255",
    "show_binary": "false",
    "schema_version": str(CURRENT_VERSION),
}


def initialize(conn: sqlite3.Connection) -> None:
    """Bring the schema up to date and seed absent default settings (idempotent)."""
    run_migrations(conn)
    conn.executemany(
        "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?)",
        list(DEFAULT_SETTINGS.items()),
    )
    conn.commit()

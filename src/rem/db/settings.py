"""SQLite implementation of the settings key-value store."""

from __future__ import annotations

import sqlite3

from rem.errors import NotFoundError, StorageError
from rem.store.base import SettingsStore


class SettingsRepository(SettingsStore):
    """Settings rows in the ``settings`` table. Values are opaque strings."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, key: str) -> str:
        try:
            row = self._conn.execute(
                "SELECT value FROM settings WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"failed to get setting {key!r}: {exc}") from exc
        if row is None:
            raise NotFoundError(f"config key not found: {key}")
        return row["value"]

    def set(self, key: str, value: str) -> None:
        """Upsert *key*; ``created_at`` is kept, ``updated_at`` is bumped."""
        try:
            self._conn.execute(
                """
                INSERT INTO settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = datetime('now')
                """,
                (key, value),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise StorageError(f"failed to set setting {key!r}: {exc}") from exc

    def list(self) -> dict[str, str]:
        try:
            rows = self._conn.execute("SELECT key, value FROM settings ORDER BY key").fetchall()
        except sqlite3.Error as exc:
            raise StorageError(f"failed to list settings: {exc}") from exc
        return {r["key"]: r["value"] for r in rows}

    def delete(self, key: str) -> None:
        try:
            cur = self._conn.execute("DELETE FROM settings WHERE key = ?", (key,))
            self._conn.commit()
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise StorageError(f"failed to delete setting {key!r}: {exc}") from exc
        if cur.rowcount == 0:
            raise NotFoundError(f"config key not found: {key}")

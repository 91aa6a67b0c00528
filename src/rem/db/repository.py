"""SQLite implementation of the chunked item store.

Items and their chunk rows live in one database; deleting an item cascades to
its chunks through the foreign key. Every write commits on success and rolls
back on failure, so a single row operation never leaves partial state.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from rem.db.models import Item
from rem.errors import NotFoundError, StorageError
from rem.store.base import ItemStore

_ITEM_COLUMNS = "id, title, timestamp, is_binary, size, sha256, created_at, updated_at"


class ItemRepository(ItemStore):
    """Data access layer for items and chunks.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with foreign keys enabled and the
                schema initialised (see rem.db.schema.initialize).
        """
        self._conn = conn

    @contextmanager
    def _write(self, action: str) -> Iterator[None]:
        try:
            yield
            self._conn.commit()
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise StorageError(f"failed to {action}: {exc}") from exc
        except Exception:
            self._conn.rollback()
            raise

    @contextmanager
    def _read(self, action: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as exc:
            raise StorageError(f"failed to {action}: {exc}") from exc

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def create_item(self, title: str, timestamp: datetime, is_binary: bool = False) -> int:
        """Insert a pending item row and return its new id.

        Args:
            title: Display title, already sanitised and truncated.
            timestamp: Ingest instant used as the LIFO sort key.
            is_binary: Provisional flag; finalize_item() writes the real one.

        Returns:
            The autoincrement id of the new row.
        """
        with self._write("create item"):
            cur = self._conn.execute(
                """
                INSERT INTO items (title, timestamp, is_binary, size, sha256)
                VALUES (?, ?, ?, 0, '')
                """,
                (title, _format_ts(timestamp), int(is_binary)),
            )
        return int(cur.lastrowid)

    def finalize_item(self, item_id: int, size: int, sha256: str, is_binary: bool) -> None:
        """Write size, hash and binary flag in one statement."""
        with self._write(f"finalize item {item_id}"):
            cur = self._conn.execute(
                """
                UPDATE items
                SET size = ?, sha256 = ?, is_binary = ?, updated_at = datetime('now')
                WHERE id = ?
                """,
                (size, sha256, int(is_binary), item_id),
            )
            if cur.rowcount == 0:
                raise NotFoundError(f"item not found: {item_id}")

    def delete_item(self, item_id: int) -> None:
        """Delete an item; its chunks go with it (ON DELETE CASCADE)."""
        with self._write(f"delete item {item_id}"):
            cur = self._conn.execute("DELETE FROM items WHERE id = ?", (item_id,))
            if cur.rowcount == 0:
                raise NotFoundError(f"item not found: {item_id}")

    def get_item(self, item_id: int) -> Item:
        """Return metadata for *item_id*.

        Raises:
            NotFoundError: If no such item exists.
        """
        with self._read(f"get item {item_id}"):
            row = self._conn.execute(
                f"SELECT {_ITEM_COLUMNS} FROM items WHERE id = ?", (item_id,)
            ).fetchone()
        if row is None:
            raise NotFoundError(f"item not found: {item_id}")
        return _row_to_item(row)

    def list_items(self, limit: int = 0) -> list[Item]:
        """Return items newest first; ``limit <= 0`` returns all of them."""
        sql = f"SELECT {_ITEM_COLUMNS} FROM items ORDER BY timestamp DESC, id DESC"
        params: tuple[int, ...] = ()
        if limit > 0:
            sql += " LIMIT ?"
            params = (limit,)
        with self._read("list items"):
            rows = self._conn.execute(sql, params).fetchall()
        return [_row_to_item(r) for r in rows]

    def count_items(self) -> int:
        with self._read("count items"):
            return self._conn.execute("SELECT COUNT(*) FROM items").fetchone()[0]

    def clear_all(self) -> int:
        """Delete every item and, by cascade, every chunk."""
        with self._write("clear history"):
            cur = self._conn.execute("DELETE FROM items")
        return cur.rowcount

    def delete_oldest(self, count: int) -> int:
        """Delete the *count* oldest items by timestamp."""
        if count <= 0:
            return 0
        with self._write(f"delete {count} oldest items"):
            cur = self._conn.execute(
                """
                DELETE FROM items WHERE id IN (
                    SELECT id FROM items ORDER BY timestamp ASC, id ASC LIMIT ?
                )
                """,
                (count,),
            )
        return cur.rowcount

    # ------------------------------------------------------------------
    # Chunks
    # ------------------------------------------------------------------

    def append_chunk(self, item_id: int, sequence: int, data: bytes) -> None:
        """Insert one chunk row.

        The unique ``(item_id, sequence)`` index rejects duplicates and the
        foreign key rejects chunks for unknown items; both surface as
        StorageError.
        """
        with self._write(f"append chunk {sequence} of item {item_id}"):
            self._conn.execute(
                "INSERT INTO chunks (item_id, sequence, data) VALUES (?, ?, ?)",
                (item_id, sequence, sqlite3.Binary(data)),
            )

    def load_chunk(self, item_id: int, sequence: int) -> bytes | None:
        with self._read(f"load chunk {sequence} of item {item_id}"):
            row = self._conn.execute(
                "SELECT data FROM chunks WHERE item_id = ? AND sequence = ?",
                (item_id, sequence),
            ).fetchone()
        return bytes(row["data"]) if row else None

    def count_chunks(self, item_id: int) -> int:
        with self._read(f"count chunks of item {item_id}"):
            return self._conn.execute(
                "SELECT COUNT(*) FROM chunks WHERE item_id = ?", (item_id,)
            ).fetchone()[0]

    def fetch_all_chunks(self, item_id: int) -> list[bytes]:
        """Return every chunk payload of *item_id* ordered by sequence."""
        with self._read(f"fetch chunks of item {item_id}"):
            rows = self._conn.execute(
                "SELECT data FROM chunks WHERE item_id = ? ORDER BY sequence",
                (item_id,),
            ).fetchall()
        return [bytes(r["data"]) for r in rows]


# ------------------------------------------------------------------
# Row → model helpers
# ------------------------------------------------------------------

def _format_ts(ts: datetime) -> str:
    """Fixed-width UTC ISO-8601 so string order equals time order."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _row_to_item(row: sqlite3.Row) -> Item:
    return Item(
        id=row["id"],
        title=row["title"],
        timestamp=datetime.fromisoformat(row["timestamp"]),
        is_binary=bool(row["is_binary"]),
        size=row["size"],
        sha256=row["sha256"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )

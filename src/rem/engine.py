"""Item engine: the public contract of the rem history.

Orchestrates ingest (peek → title → chunked write → finalize → retention) and
retrieval (metadata listing, LIFO indexing, random-access content readers)
over any ItemStore/SettingsStore pair.

Ingest lifecycle of one item::

    create_item ─▶ PENDING ─▶ append_chunk* ─▶ finalize ─▶ COMMITTED
         any failure after create_item ─▶ delete_item ─▶ DISCARDED

The engine is single-writer: concurrent enqueue calls against one database
are not supported.
"""

from __future__ import annotations

import hashlib
import logging
import sqlite3
import warnings
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import BinaryIO

from rem import retention
from rem.content.binary import is_binary
from rem.content.peek import Readable, peek, read_block
from rem.content.reader import ChunkReader
from rem.content.titles import clean_title, generate_title
from rem.db.connection import Database
from rem.db.models import CHUNK_SIZE, Item, SearchQuery
from rem.db.repository import ItemRepository
from rem.db.schema import initialize
from rem.db.settings import SettingsRepository
from rem.errors import (
    CorruptedError,
    InvalidInputError,
    IOFailureError,
    OutOfRangeError,
    RemError,
    RetentionWarning,
)
from rem.store.base import ItemStore, SettingsStore

logger = logging.getLogger(__name__)

_TIMESTAMP_STEP = timedelta(microseconds=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ItemEngine:
    """Façade over the item and settings stores.

    Args:
        items: Chunked item storage.
        settings: Key-value settings (``history_limit`` is read on every ingest).
        clock: Returns the current instant; injectable for tests.
        default_history_limit: Used when ``history_limit`` is absent or malformed.
    """

    def __init__(
        self,
        items: ItemStore,
        settings: SettingsStore,
        clock: Callable[[], datetime] | None = None,
        default_history_limit: int = retention.DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self.items = items
        self.settings = settings
        self.default_history_limit = default_history_limit
        self._clock = clock or _utcnow
        self._last_timestamp: datetime | None = None
        self._conn: sqlite3.Connection | None = None

    @classmethod
    def open(cls, db_path: Path | str, **kwargs) -> ItemEngine:
        """Open (or create) the SQLite database at *db_path* and return an engine.

        The engine owns the connection; call close() or use it as a context
        manager.
        """
        conn = Database(db_path).connect()
        try:
            initialize(conn)
        except sqlite3.Error:
            conn.close()
            raise
        engine = cls(ItemRepository(conn), SettingsRepository(conn), **kwargs)
        engine._conn = conn
        return engine

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> ItemEngine:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Ingest
    # ------------------------------------------------------------------

    def enqueue(self, stream: Readable | BinaryIO, title: str | None = None) -> Item:
        """Store the full contents of *stream* as the newest item.

        Args:
            stream: Binary stream; read until EOF in CHUNK_SIZE blocks.
            title: Optional title. When absent or blank after sanitising, one is
                generated from the first 4 KiB of content.

        Returns:
            The committed item.

        Raises:
            IOFailureError: Reading *stream* failed. Nothing is stored.
            StorageError: The database refused a write. Nothing is stored.
        """
        resolved = clean_title(title) if title else ""
        if not resolved:
            try:
                sample, stream = peek(stream)
            except OSError as exc:
                raise IOFailureError(f"failed to read content: {exc}") from exc
            resolved = generate_title(sample, is_binary(sample))

        item_id = self.items.create_item(resolved, self._next_timestamp(), is_binary=False)
        try:
            size, digest, binary, chunks = self._write_chunks(item_id, stream)
            self.items.finalize_item(item_id, size, digest, binary)
        except BaseException:
            self._discard(item_id)
            raise

        logger.debug("stored item %d: %d bytes in %d chunk(s)", item_id, size, chunks)
        self._apply_retention()
        return self.items.get_item(item_id)

    def _write_chunks(
        self, item_id: int, stream: Readable | BinaryIO
    ) -> tuple[int, str, bool, int]:
        hasher = hashlib.sha256()
        size = 0
        sequence = 0
        binary = False
        while True:
            try:
                block = read_block(stream, CHUNK_SIZE)
            except OSError as exc:
                raise IOFailureError(
                    f"failed to read content after {size} bytes: {exc}"
                ) from exc
            if not block:
                break
            if sequence == 0:
                binary = is_binary(block)
            self.items.append_chunk(item_id, sequence, block)
            hasher.update(block)
            size += len(block)
            sequence += 1
        return size, hasher.hexdigest(), binary, sequence

    def _discard(self, item_id: int) -> None:
        try:
            self.items.delete_item(item_id)
        except RemError as exc:
            # The ingest error is what the caller needs; record this one.
            logger.error("failed to discard partial item %d: %s", item_id, exc)
        else:
            logger.debug("discarded partial item %d", item_id)

    def _next_timestamp(self) -> datetime:
        """Return a timestamp strictly greater than any previously issued one."""
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if self._last_timestamp is None:
            newest = self.items.list_items(limit=1)
            if newest:
                self._last_timestamp = newest[0].timestamp
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + _TIMESTAMP_STEP
        self._last_timestamp = now
        return now

    def _apply_retention(self) -> int:
        try:
            limit = self.history_limit()
            return retention.enforce(self.items, limit)
        except RemError as exc:
            logger.warning("retention failed: %s", exc)
            warnings.warn(f"retention failed: {exc}", RetentionWarning, stacklevel=3)
            return 0

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    def history_limit(self) -> int:
        return retention.history_limit(self.settings, self.default_history_limit)

    def list(self) -> list[Item]:
        """Return up to ``history_limit`` items, newest first."""
        return self.items.list_items(limit=self.history_limit())

    def get(self, item_id: int) -> Item:
        return self.items.get_item(item_id)

    def get_by_index(self, index: int) -> Item:
        """Return the item at LIFO *index* (0 = newest).

        Raises:
            InvalidInputError: *index* is negative.
            OutOfRangeError: *index* is past the last item.
        """
        if index < 0:
            raise InvalidInputError(f"index must be non-negative, got {index}")
        items = self.list()
        if index >= len(items):
            raise OutOfRangeError(index, len(items))
        return items[index]

    def index_of(self, item_id: int) -> int | None:
        """Return the LIFO index of *item_id*, or None if it is not listed."""
        for index, item in enumerate(self.list()):
            if item.id == item_id:
                return index
        return None

    def open_content(self, item_id: int) -> ChunkReader:
        """Return a seekable reader over the item's content. The caller closes it."""
        item = self.items.get_item(item_id)
        return ChunkReader(self.items, item.id, item.size)

    def read_content(self, item_id: int) -> bytes:
        """Return the whole content of *item_id*.

        Raises:
            CorruptedError: The chunks hold fewer bytes than the recorded size.
        """
        item = self.items.get_item(item_id)
        with ChunkReader(self.items, item.id, item.size) as reader:
            data = reader.readall()
        if len(data) != item.size:
            raise CorruptedError(item_id, f"expected {item.size} bytes, chunks hold {len(data)}")
        return data

    def verify(self, item_id: int) -> Item:
        """Re-hash the stored chunks and compare with the recorded size and digest.

        Raises:
            CorruptedError: Sequence gap, size mismatch or digest mismatch.
        """
        item = self.items.get_item(item_id)
        hasher = hashlib.sha256()
        size = 0
        for sequence, data in enumerate(self.items.iter_chunks(item_id)):
            if len(data) > CHUNK_SIZE:
                raise CorruptedError(item_id, f"chunk {sequence} exceeds {CHUNK_SIZE} bytes")
            hasher.update(data)
            size += len(data)
        if self.items.count_chunks(item_id) != _chunk_count(size):
            raise CorruptedError(item_id, "chunk sequence has gaps")
        if size != item.size:
            raise CorruptedError(item_id, f"expected {item.size} bytes, chunks hold {size}")
        if hasher.hexdigest() != item.sha256:
            raise CorruptedError(item_id, "sha256 mismatch")
        return item

    def search(self, query: SearchQuery) -> list[Item]:
        return self.items.search(query)

    def count(self) -> int:
        return self.items.count_items()

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete(self, item_id: int) -> None:
        self.items.delete_item(item_id)

    def delete_by_index(self, index: int) -> Item:
        """Delete the item at LIFO *index* and return its metadata."""
        item = self.get_by_index(index)
        self.items.delete_item(item.id)
        return item

    def clear(self) -> int:
        """Delete every item; return how many were removed."""
        return self.items.clear_all()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_setting(self, key: str) -> str:
        return self.settings.get(key)

    def set_setting(self, key: str, value: str) -> None:
        self.settings.set(key, value)

    def list_settings(self) -> dict[str, str]:
        return self.settings.list()

    def delete_setting(self, key: str) -> None:
        self.settings.delete(key)


def _chunk_count(size: int) -> int:
    """Number of chunks an item of *size* bytes occupies."""
    return -(-size // CHUNK_SIZE)

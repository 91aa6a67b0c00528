"""In-memory item and settings stores.

Behaviourally equivalent to the SQLite repositories (cascade delete, duplicate
chunk rejection, LIFO ordering) without touching disk. Used by the test suite
and anywhere a throwaway history is enough.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone

from rem.db.models import Item
from rem.errors import NotFoundError, StorageError
from rem.store.base import ItemStore, SettingsStore


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


class MemoryItemStore(ItemStore):
    """Dict-backed ItemStore. Thread-safe for single statements only."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._items: dict[int, Item] = {}
        self._chunks: dict[int, dict[int, bytes]] = {}
        self._next_id = 1

    def create_item(self, title: str, timestamp: datetime, is_binary: bool = False) -> int:
        with self._lock:
            item_id = self._next_id
            self._next_id += 1
            stamp = _now()
            self._items[item_id] = Item(
                id=item_id,
                title=title,
                timestamp=timestamp,
                is_binary=is_binary,
                created_at=stamp,
                updated_at=stamp,
            )
            self._chunks[item_id] = {}
            return item_id

    def finalize_item(self, item_id: int, size: int, sha256: str, is_binary: bool) -> None:
        with self._lock:
            item = self._require(item_id)
            self._items[item_id] = replace(
                item, size=size, sha256=sha256, is_binary=is_binary, updated_at=_now()
            )

    def delete_item(self, item_id: int) -> None:
        with self._lock:
            self._require(item_id)
            del self._items[item_id]
            self._chunks.pop(item_id, None)

    def get_item(self, item_id: int) -> Item:
        with self._lock:
            return replace(self._require(item_id))

    def list_items(self, limit: int = 0) -> list[Item]:
        with self._lock:
            ordered = sorted(
                self._items.values(), key=lambda i: (i.timestamp, i.id), reverse=True
            )
            if limit > 0:
                ordered = ordered[:limit]
            return [replace(i) for i in ordered]

    def count_items(self) -> int:
        with self._lock:
            return len(self._items)

    def clear_all(self) -> int:
        with self._lock:
            removed = len(self._items)
            self._items.clear()
            self._chunks.clear()
            return removed

    def delete_oldest(self, count: int) -> int:
        if count <= 0:
            return 0
        with self._lock:
            oldest = sorted(self._items.values(), key=lambda i: (i.timestamp, i.id))[:count]
            for item in oldest:
                del self._items[item.id]
                self._chunks.pop(item.id, None)
            return len(oldest)

    def append_chunk(self, item_id: int, sequence: int, data: bytes) -> None:
        with self._lock:
            chunks = self._chunks.get(item_id)
            if chunks is None:
                raise StorageError(f"failed to append chunk {sequence}: item {item_id} does not exist")
            if sequence in chunks:
                raise StorageError(
                    f"failed to append chunk {sequence} of item {item_id}: row already exists"
                )
            chunks[sequence] = bytes(data)

    def load_chunk(self, item_id: int, sequence: int) -> bytes | None:
        with self._lock:
            return self._chunks.get(item_id, {}).get(sequence)

    def count_chunks(self, item_id: int) -> int:
        with self._lock:
            return len(self._chunks.get(item_id, {}))

    def fetch_all_chunks(self, item_id: int) -> list[bytes]:
        with self._lock:
            chunks = self._chunks.get(item_id, {})
            return [chunks[seq] for seq in sorted(chunks)]

    def _require(self, item_id: int) -> Item:
        try:
            return self._items[item_id]
        except KeyError:
            raise NotFoundError(f"item not found: {item_id}") from None


class MemorySettingsStore(SettingsStore):
    """Dict-backed SettingsStore."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str:
        try:
            return self._values[key]
        except KeyError:
            raise NotFoundError(f"config key not found: {key}") from None

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def list(self) -> dict[str, str]:
        return dict(self._values)

    def delete(self, key: str) -> None:
        if key not in self._values:
            raise NotFoundError(f"config key not found: {key}")
        del self._values[key]

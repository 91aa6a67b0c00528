"""Storage interfaces for items, chunks and settings.

The engine talks only to these abstractions, so the SQLite repositories and
the in-memory stores used in tests are interchangeable. Search is implemented
once here, on top of the primitive operations.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from datetime import datetime

from rem.db.models import Item, SearchQuery
from rem.errors import InvalidInputError, NotFoundError


class ItemStore(ABC):
    """Item metadata plus ordered chunk rows.

    Implementations must cascade ``delete_item`` to the item's chunks and keep
    ``list_items`` ordered by ``timestamp`` descending.
    """

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    @abstractmethod
    def create_item(self, title: str, timestamp: datetime, is_binary: bool = False) -> int:
        """Insert a metadata row with ``size=0`` and an empty hash; return its id."""

    @abstractmethod
    def finalize_item(self, item_id: int, size: int, sha256: str, is_binary: bool) -> None:
        """Write the final size, hash and binary flag of an ingested item."""

    @abstractmethod
    def delete_item(self, item_id: int) -> None:
        """Delete an item and all of its chunks.

        Raises:
            NotFoundError: If no item has this id.
        """

    @abstractmethod
    def get_item(self, item_id: int) -> Item:
        """Return item metadata (never content).

        Raises:
            NotFoundError: If no item has this id.
        """

    @abstractmethod
    def list_items(self, limit: int = 0) -> list[Item]:
        """Return items newest first. ``limit <= 0`` means no limit."""

    @abstractmethod
    def count_items(self) -> int:
        """Return the number of stored items."""

    @abstractmethod
    def clear_all(self) -> int:
        """Delete every item; return how many were removed."""

    @abstractmethod
    def delete_oldest(self, count: int) -> int:
        """Delete the *count* items with the smallest timestamps; return how many went."""

    # ------------------------------------------------------------------
    # Chunks
    # ------------------------------------------------------------------

    @abstractmethod
    def append_chunk(self, item_id: int, sequence: int, data: bytes) -> None:
        """Store one chunk row.

        Raises:
            StorageError: If the ``(item_id, sequence)`` row already exists or
                the item does not.
        """

    @abstractmethod
    def load_chunk(self, item_id: int, sequence: int) -> bytes | None:
        """Return one chunk's bytes, or None when the row is missing."""

    @abstractmethod
    def count_chunks(self, item_id: int) -> int:
        """Return the number of chunk rows owned by *item_id*."""

    def iter_chunks(self, item_id: int) -> Iterator[bytes]:
        """Yield an item's chunks in sequence order, one at a time."""
        sequence = 0
        while True:
            data = self.load_chunk(item_id, sequence)
            if data is None:
                return
            yield data
            sequence += 1

    def fetch_all_chunks(self, item_id: int) -> list[bytes]:
        """Return all chunk payloads of *item_id* in sequence order."""
        return list(self.iter_chunks(item_id))

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, query: SearchQuery) -> list[Item]:
        """Return items matching *query* in LIFO order.

        Titles are tested first; content is reassembled from chunks only for
        items whose title did not match.

        Raises:
            InvalidInputError: If the pattern is not a valid regex.
        """
        if not query.pattern:
            return []

        flags = 0 if query.case_sensitive else re.IGNORECASE
        try:
            regex = re.compile(query.pattern, flags)
        except re.error as exc:
            raise InvalidInputError(f"invalid regex pattern {query.pattern!r}: {exc}") from exc

        search_title, search_content = query.scopes()

        results: list[Item] = []
        for item in self.list_items():
            matched = search_title and regex.search(item.title) is not None
            if not matched and search_content:
                content = b"".join(self.iter_chunks(item.id))
                matched = regex.search(content.decode("utf-8", errors="replace")) is not None
            if matched:
                results.append(item)
                if query.limit > 0 and len(results) >= query.limit:
                    break
        return results


class SettingsStore(ABC):
    """String key → string value settings."""

    @abstractmethod
    def get(self, key: str) -> str:
        """Return the value for *key*.

        Raises:
            NotFoundError: If the key is not set.
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Insert or update *key*."""

    @abstractmethod
    def list(self) -> dict[str, str]:
        """Return a snapshot copy of every setting."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*.

        Raises:
            NotFoundError: If the key is not set.
        """

    def get_or_default(self, key: str, default: str | None = None) -> str | None:
        """Return the value for *key*, or *default* when absent."""
        try:
            return self.get(key)
        except NotFoundError:
            return default

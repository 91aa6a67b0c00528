"""Exception hierarchy for the rem content engine.

Every error raised across the engine boundary is a ``RemError``. The command
surface maps each kind to its ``exit_code``; nothing is silently dropped.
"""

from __future__ import annotations


class RemError(Exception):
    """Base class for all rem errors."""

    exit_code: int = 1


class InvalidInputError(RemError, ValueError):
    """Malformed input with no defensible default (bad regex, negative index)."""

    exit_code = 2


class NotFoundError(RemError, LookupError):
    """An item id or setting key does not exist."""

    exit_code = 3


class OutOfRangeError(RemError, IndexError):
    """A LIFO index falls outside ``[0, count)``."""

    exit_code = 4

    def __init__(self, index: int, count: int) -> None:
        self.index = index
        self.count = count
        if count == 0:
            msg = f"index {index} out of range (history is empty)"
        else:
            msg = f"index {index} out of range (0-{count - 1})"
        super().__init__(msg)


class StorageError(RemError):
    """The persistence layer refused or failed an operation."""

    exit_code = 5


class IOFailureError(RemError):
    """The caller-provided stream failed mid-ingest."""

    exit_code = 6


class CorruptedError(RemError):
    """A stored item violates an invariant (missing chunk, size mismatch)."""

    exit_code = 7

    def __init__(self, item_id: int, detail: str) -> None:
        self.item_id = item_id
        super().__init__(f"item {item_id} is corrupted: {detail}")


class RetentionWarning(UserWarning):
    """Eviction after a successful ingest failed; the new item is kept."""


class ClipboardError(RemError):
    """The system clipboard utility is missing or failed."""

    exit_code = 8

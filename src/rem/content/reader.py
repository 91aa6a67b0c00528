"""Random-access reader over an item's chunk rows.

``ChunkReader`` is a raw binary stream: it can be passed to ``shutil.copyfileobj``,
wrapped in ``io.BufferedReader`` or used as a context manager. At most one chunk
is held in memory at a time. ``io.BytesIO`` satisfies the same contract for
content that is already in memory.
"""

from __future__ import annotations

import io
import logging
import os

from rem.db.models import CHUNK_SIZE
from rem.errors import CorruptedError, InvalidInputError
from rem.store.base import ItemStore

logger = logging.getLogger(__name__)


class ChunkReader(io.RawIOBase):
    """Seekable, closeable view of ``total_size`` bytes stored as chunks.

    Reads never cross a chunk boundary, so a read may return fewer bytes than
    requested; ``read()`` with no size and ``readall()`` loop until the end.
    The caller must not mutate the item's rows while the reader is open.
    """

    def __init__(self, store: ItemStore, item_id: int, total_size: int) -> None:
        super().__init__()
        if total_size < 0:
            raise InvalidInputError(f"total_size must be >= 0, got {total_size}")
        self._store = store
        self.item_id = item_id
        self.total_size = total_size
        self._pos = 0
        self._chunk: bytes | None = None
        self._chunk_seq = -1

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    @property
    def buffered_bytes(self) -> int:
        """Number of content bytes currently held in memory."""
        return len(self._chunk) if self._chunk is not None else 0

    def tell(self) -> int:
        self._check_open()
        return self._pos

    def readinto(self, buffer) -> int:
        self._check_open()
        view = memoryview(buffer).cast("B")
        if self._pos >= self.total_size or len(view) == 0:
            return 0

        sequence, offset = divmod(self._pos, CHUNK_SIZE)
        chunk = self._load(sequence)
        if chunk is None:
            logger.warning(
                "item %d: chunk %d missing at offset %d of %d; ending stream",
                self.item_id, sequence, self._pos, self.total_size,
            )
            return 0

        n = min(len(view), len(chunk) - offset, self.total_size - self._pos)
        if n <= 0:
            logger.warning(
                "item %d: chunk %d shorter than expected; ending stream",
                self.item_id, sequence,
            )
            return 0
        view[:n] = memoryview(chunk)[offset:offset + n]
        self._pos += n
        return n

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move to a new absolute position and return it.

        Positions past the end clamp to ``total_size``.

        Raises:
            InvalidInputError: Unknown *whence* or a negative resulting position.
            CorruptedError: The chunk holding the new position is missing.
        """
        self._check_open()
        if whence == os.SEEK_SET:
            target = offset
        elif whence == os.SEEK_CUR:
            target = self._pos + offset
        elif whence == os.SEEK_END:
            target = self.total_size + offset
        else:
            raise InvalidInputError(f"invalid whence value: {whence}")

        if target < 0:
            raise InvalidInputError(f"negative seek position: {target}")
        target = min(target, self.total_size)

        # At the end there is nothing to load; an exact multiple of CHUNK_SIZE
        # would otherwise point one past the last chunk.
        if target < self.total_size:
            sequence = target // CHUNK_SIZE
            if self._load(sequence) is None:
                raise CorruptedError(self.item_id, f"missing chunk {sequence}")

        self._pos = target
        return target

    def close(self) -> None:
        self._chunk = None
        self._chunk_seq = -1
        super().close()

    def _load(self, sequence: int) -> bytes | None:
        if self._chunk is not None and self._chunk_seq == sequence:
            return self._chunk
        # Drop the old chunk first so two are never held together.
        self._chunk = None
        data = self._store.load_chunk(self.item_id, sequence)
        if data is None:
            self._chunk_seq = -1
            return None
        self._chunk = data
        self._chunk_seq = sequence
        return data

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed reader")

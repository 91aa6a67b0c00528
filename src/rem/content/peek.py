"""Peek at the head of a byte stream without losing it downstream."""

from __future__ import annotations

from typing import BinaryIO, Protocol

PEEK_SIZE = 4 * 1024


class Readable(Protocol):
    def read(self, size: int = -1, /) -> bytes: ...


def read_block(stream: Readable | BinaryIO, size: int) -> bytes:
    """Read up to *size* bytes, retrying short reads until the stream ends.

    Returns fewer than *size* bytes only at end of stream, and ``b""`` once
    the stream is exhausted.
    """
    parts: list[bytes] = []
    remaining = size
    while remaining > 0:
        data = stream.read(remaining)
        if not data:
            break
        parts.append(data)
        remaining -= len(data)
    return b"".join(parts)


class PeekedStream:
    """Replays a buffered prefix, then continues with the wrapped stream."""

    def __init__(self, prefix: bytes, stream: Readable | BinaryIO) -> None:
        self._prefix = prefix
        self._stream = stream

    def read(self, size: int = -1, /) -> bytes:
        if self._prefix:
            if size is None or size < 0:
                data = self._prefix + self._stream.read()
                self._prefix = b""
                return data
            data, self._prefix = self._prefix[:size], self._prefix[size:]
            return data
        return self._stream.read(size)


def peek(stream: Readable | BinaryIO, size: int = PEEK_SIZE) -> tuple[bytes, PeekedStream]:
    """Buffer up to *size* bytes from *stream*.

    Returns:
        ``(sample, replay)`` where *replay* yields the sample followed by the
        rest of *stream*, so no bytes are lost.
    """
    sample = read_block(stream, size)
    return sample, PeekedStream(sample, stream)

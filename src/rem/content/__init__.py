"""Content handling: binary detection, titles, stream peeking, chunk reader."""

from rem.content.binary import is_binary
from rem.content.peek import PEEK_SIZE, PeekedStream, peek, read_block
from rem.content.reader import ChunkReader
from rem.content.titles import generate_title, sanitize_title, truncate_title

__all__ = [
    "ChunkReader",
    "PEEK_SIZE",
    "PeekedStream",
    "generate_title",
    "is_binary",
    "peek",
    "read_block",
    "sanitize_title",
    "truncate_title",
]

"""Title derivation for history items.

Titles are single-line, printable and at most ``TITLE_MAX_LEN`` characters.
When the caller supplies none, one is generated from the peek sample.
"""

from __future__ import annotations

import unicodedata

from rem.db.models import TITLE_MAX_LEN

BINARY_TITLE = "[binary content]"
EMPTY_TITLE = "[empty]"
ELLIPSIS = "..."


def sanitize_title(text: str) -> str:
    """Replace control characters with spaces and collapse whitespace runs."""
    mapped = "".join(" " if unicodedata.category(ch) == "Cc" else ch for ch in text)
    return " ".join(mapped.split())


def truncate_title(title: str, max_len: int = TITLE_MAX_LEN) -> str:
    """Cap *title* at *max_len* characters, ending in ``...`` when cut."""
    title = title.strip()
    if len(title) <= max_len:
        return title
    if max_len < len(ELLIPSIS):
        return "." * max_len
    return title[: max_len - len(ELLIPSIS)] + ELLIPSIS


def clean_title(title: str, max_len: int = TITLE_MAX_LEN) -> str:
    """Sanitise then truncate a caller-supplied title."""
    return truncate_title(sanitize_title(title), max_len)


def generate_title(sample: bytes, is_binary: bool, max_len: int = TITLE_MAX_LEN) -> str:
    """Derive a title from the first few KiB of content.

    Binary samples get ``[binary content]`` and empty ones ``[empty]``.
    Otherwise the first line with printable content is used; an over-long
    line is truncated rather than skipped. If no line qualifies, the whole
    sample with whitespace collapsed is the fallback.
    """
    if is_binary:
        return BINARY_TITLE
    if not sample:
        return EMPTY_TITLE

    text = sample.decode("utf-8", errors="replace")
    for line in text.split("\n"):
        cleaned = sanitize_title(line)
        if cleaned:
            return truncate_title(cleaned, max_len)

    fallback = sanitize_title(text)
    if not fallback:
        return EMPTY_TITLE
    return truncate_title(fallback, max_len)

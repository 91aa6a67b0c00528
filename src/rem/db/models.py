"""Domain models for the rem storage layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# Storage contract: every chunk row holds at most this many bytes.
CHUNK_SIZE = 32 * 1024

TITLE_MAX_LEN = 80


@dataclass
class Item:
    """Metadata for one history entry. Content lives in chunk rows."""

    id: int
    title: str
    timestamp: datetime
    is_binary: bool = False
    size: int = 0
    sha256: str = ""
    created_at: str | None = None
    updated_at: str | None = None


@dataclass
class SearchQuery:
    """Regex search parameters.

    When neither ``search_title`` nor ``search_content`` is set, both are
    searched. ``limit <= 0`` returns every match.
    """

    pattern: str
    search_title: bool = False
    search_content: bool = False
    limit: int = 0
    case_sensitive: bool = False

    def scopes(self) -> tuple[bool, bool]:
        """Return the effective ``(title, content)`` search flags."""
        if not self.search_title and not self.search_content:
            return True, True
        return self.search_title, self.search_content

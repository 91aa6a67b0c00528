"""rem — clipboard history with chunked SQLite storage."""

from rem.db.models import CHUNK_SIZE, Item, SearchQuery
from rem.engine import ItemEngine

__all__ = ["CHUNK_SIZE", "Item", "ItemEngine", "SearchQuery"]

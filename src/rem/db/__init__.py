"""rem database layer."""

from rem.db.connection import Database
from rem.db.migrations import MIGRATIONS, run_migrations
from rem.db.models import CHUNK_SIZE, Item, SearchQuery
from rem.db.schema import DEFAULT_SETTINGS, initialize

__all__ = [
    "CHUNK_SIZE",
    "Database",
    "DEFAULT_SETTINGS",
    "Item",
    "MIGRATIONS",
    "SearchQuery",
    "initialize",
    "run_migrations",
]

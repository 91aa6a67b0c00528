"""LIFO retention: keep at most ``history_limit`` items, evicting the oldest."""

from __future__ import annotations

import logging

from rem.errors import InvalidInputError
from rem.store.base import ItemStore, SettingsStore

logger = logging.getLogger(__name__)

HISTORY_LIMIT_KEY = "history_limit"
DEFAULT_HISTORY_LIMIT = 255


def parse_history_limit(value: str | None, default: int = DEFAULT_HISTORY_LIMIT) -> int:
    """Interpret a stored ``history_limit`` value.

    Absent, non-numeric and non-positive values fall back to *default*.
    """
    if value is None:
        return default
    try:
        limit = int(value.strip())
    except ValueError:
        logger.debug("history_limit %r is not an integer; using %d", value, default)
        return default
    if limit <= 0:
        logger.debug("history_limit %d is not positive; using %d", limit, default)
        return default
    return limit


def history_limit(settings: SettingsStore, default: int = DEFAULT_HISTORY_LIMIT) -> int:
    """Return the effective history limit from *settings*."""
    return parse_history_limit(settings.get_or_default(HISTORY_LIMIT_KEY), default)


def enforce(store: ItemStore, limit: int) -> int:
    """Evict the oldest items until at most *limit* remain.

    Returns:
        Number of items evicted.
    """
    if limit <= 0:
        raise InvalidInputError(f"history limit must be positive, got {limit}")
    excess = store.count_items() - limit
    if excess <= 0:
        return 0
    evicted = store.delete_oldest(excess)
    logger.debug("retention evicted %d item(s) (limit %d)", evicted, limit)
    return evicted

"""Tests for the LIFO retention policy."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from rem.errors import InvalidInputError
from rem.retention import DEFAULT_HISTORY_LIMIT, enforce, history_limit, parse_history_limit
from rem.store.memory import MemoryItemStore, MemorySettingsStore

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _store_with(n: int) -> MemoryItemStore:
    store = MemoryItemStore()
    for i in range(n):
        store.create_item(f"i{i}", T0 + timedelta(seconds=i))
    return store


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("10", 10),
        (" 7 ", 7),
        ("not-a-number", DEFAULT_HISTORY_LIMIT),
        ("0", DEFAULT_HISTORY_LIMIT),
        ("-5", DEFAULT_HISTORY_LIMIT),
        ("", DEFAULT_HISTORY_LIMIT),
        (None, DEFAULT_HISTORY_LIMIT),
    ],
)
def test_parse_history_limit(raw, expected):
    assert parse_history_limit(raw) == expected


def test_parse_history_limit_custom_default():
    assert parse_history_limit("bogus", default=9) == 9


def test_history_limit_reads_settings():
    assert history_limit(MemorySettingsStore({"history_limit": "4"})) == 4


def test_history_limit_missing_key():
    assert history_limit(MemorySettingsStore()) == DEFAULT_HISTORY_LIMIT


def test_enforce_evicts_oldest():
    store = _store_with(5)
    assert enforce(store, 2) == 3
    assert [i.title for i in store.list_items()] == ["i4", "i3"]


def test_enforce_under_limit_is_noop():
    store = _store_with(2)
    assert enforce(store, 5) == 0
    assert store.count_items() == 2


def test_enforce_exact_limit():
    store = _store_with(3)
    assert enforce(store, 3) == 0


def test_enforce_rejects_non_positive_limit():
    with pytest.raises(InvalidInputError):
        enforce(_store_with(1), 0)

"""Tests for the in-memory stores; they must behave like the SQLite ones."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from rem.db.models import SearchQuery
from rem.errors import NotFoundError, StorageError
from rem.store.memory import MemoryItemStore, MemorySettingsStore

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return MemoryItemStore()


def _add(store, title="item", seconds=0, chunks=(b"hello",)):
    item_id = store.create_item(title, T0 + timedelta(seconds=seconds))
    for seq, data in enumerate(chunks):
        store.append_chunk(item_id, seq, data)
    store.finalize_item(item_id, sum(len(c) for c in chunks), "digest", False)
    return item_id


# ------------------------------------------------------------------
# Items
# ------------------------------------------------------------------

def test_ids_increase(store):
    assert store.create_item("a", T0) < store.create_item("b", T0)


def test_get_returns_copy(store):
    item_id = _add(store, "original")
    item = store.get_item(item_id)
    item.title = "changed"
    assert store.get_item(item_id).title == "original"


def test_list_newest_first(store):
    _add(store, "old", seconds=0)
    _add(store, "new", seconds=5)
    assert [i.title for i in store.list_items()] == ["new", "old"]


def test_list_limit(store):
    for n in range(3):
        _add(store, f"i{n}", seconds=n)
    assert [i.title for i in store.list_items(limit=1)] == ["i2"]


def test_delete_cascades(store):
    item_id = _add(store, chunks=(b"a", b"b"))
    store.delete_item(item_id)
    assert store.load_chunk(item_id, 0) is None
    assert store.count_chunks(item_id) == 0


def test_delete_missing(store):
    with pytest.raises(NotFoundError):
        store.delete_item(1)


def test_finalize_missing(store):
    with pytest.raises(NotFoundError):
        store.finalize_item(1, 0, "", False)


def test_clear_all(store):
    _add(store)
    _add(store, seconds=1)
    assert store.clear_all() == 2
    assert store.count_items() == 0


def test_delete_oldest(store):
    for n in range(4):
        _add(store, f"i{n}", seconds=n)
    assert store.delete_oldest(3) == 3
    assert [i.title for i in store.list_items()] == ["i3"]


# ------------------------------------------------------------------
# Chunks
# ------------------------------------------------------------------

def test_duplicate_chunk_rejected(store):
    item_id = store.create_item("d", T0)
    store.append_chunk(item_id, 0, b"a")
    with pytest.raises(StorageError):
        store.append_chunk(item_id, 0, b"b")


def test_chunk_for_unknown_item_rejected(store):
    with pytest.raises(StorageError):
        store.append_chunk(5, 0, b"a")


def test_fetch_all_chunks_sorted(store):
    item_id = store.create_item("s", T0)
    store.append_chunk(item_id, 1, b"b")
    store.append_chunk(item_id, 0, b"a")
    assert store.fetch_all_chunks(item_id) == [b"a", b"b"]


def test_search_uses_shared_implementation(store):
    _add(store, "needle", seconds=0)
    _add(store, "other", seconds=1, chunks=(b"a needle",))
    assert [i.title for i in store.search(SearchQuery(pattern="NEEDLE"))] == ["other", "needle"]


# ------------------------------------------------------------------
# Settings
# ------------------------------------------------------------------

def test_settings_initial_copied():
    initial = {"a": "1"}
    settings = MemorySettingsStore(initial)
    settings.set("a", "2")
    assert initial["a"] == "1"


def test_settings_crud():
    settings = MemorySettingsStore()
    settings.set("k", "v")
    assert settings.get("k") == "v"
    assert settings.list() == {"k": "v"}
    settings.delete("k")
    with pytest.raises(NotFoundError):
        settings.get("k")
    with pytest.raises(NotFoundError):
        settings.delete("k")

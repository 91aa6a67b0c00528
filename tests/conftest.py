"""Shared pytest fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from rem.db.connection import Database
from rem.db.repository import ItemRepository
from rem.db.schema import DEFAULT_SETTINGS, initialize
from rem.db.settings import SettingsRepository
from rem.engine import ItemEngine
from rem.store.memory import MemoryItemStore, MemorySettingsStore


class FixedClock:
    """Deterministic clock: every call returns the same instant unless advanced."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.config/rem and REM_* variables."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr("rem.config._CONFIG_DIR", config_dir)
    monkeypatch.setattr("rem.config._CONFIG_PATH", config_dir / "config.yaml")
    monkeypatch.delenv("REM_DB", raising=False)
    monkeypatch.delenv("REM_LOG_LEVEL", raising=False)
    return config_dir


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / "rem.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture(params=["sqlite", "memory"])
def engine(request, tmp_db, clock):
    """ItemEngine over each storage backend."""
    if request.param == "sqlite":
        eng = ItemEngine(ItemRepository(tmp_db), SettingsRepository(tmp_db), clock=clock)
    else:
        eng = ItemEngine(MemoryItemStore(), MemorySettingsStore(DEFAULT_SETTINGS), clock=clock)
    yield eng
    eng.close()

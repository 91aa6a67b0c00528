"""Storage interfaces and the in-memory backend."""

from rem.store.base import ItemStore, SettingsStore
from rem.store.memory import MemoryItemStore, MemorySettingsStore

__all__ = ["ItemStore", "MemoryItemStore", "MemorySettingsStore", "SettingsStore"]

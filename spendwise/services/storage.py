"""Key-value persistence adapters.

Business logic (rate cache, user preferences) depends only on the small
`KeyValueStore` protocol so the backing store can be swapped:

    - 'local'  -> SQLite metadata table (default, on-device)
    - 'memory' -> process-local dict (tests, ephemeral runs)
    - 'remote' -> hosted backend; recognized but disabled in this build
"""

from __future__ import annotations

import sqlite3
from typing import Dict, List, Optional, Protocol

from spendwise.core.config import Settings
from spendwise.db.dal import Database


class StorageError(Exception):
    """The backing store could not complete a read or write."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def has(self, key: str) -> bool: ...

    def keys(self, prefix: str = "") -> List[str]: ...


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def has(self, key: str) -> bool:
        return key in self._data

    def keys(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._data if k.startswith(prefix))


class SqliteKeyValueStore:
    """Store backed by the `metadata` table of the application database.

    Driver errors (e.g. "database is locked") surface as `StorageError`.
    """

    def __init__(self, db: Database):
        self._db = db

    def get(self, key: str) -> Optional[str]:
        try:
            return self._db.get_meta(key)
        except sqlite3.Error as e:
            raise StorageError(f"read of '{key}' failed: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self._db.set_meta(key, value)
        except sqlite3.Error as e:
            raise StorageError(f"write of '{key}' failed: {e}") from e

    def has(self, key: str) -> bool:
        try:
            return self._db.has_meta(key)
        except sqlite3.Error as e:
            raise StorageError(f"lookup of '{key}' failed: {e}") from e

    def keys(self, prefix: str = "") -> List[str]:
        try:
            return self._db.list_meta_keys(prefix)
        except sqlite3.Error as e:
            raise StorageError(f"key listing failed: {e}") from e


_STORE_REGISTRY = {
    "local": SqliteKeyValueStore,
    "memory": InMemoryKeyValueStore,
    "remote": None,  # scaffolded; no implementation ships in this build
}

_memory_stores: Dict[str, InMemoryKeyValueStore] = {}


def make_store(settings: Settings, db: Database) -> KeyValueStore:
    kind = settings.storage_backend
    if kind not in _STORE_REGISTRY:
        raise ValueError(f"Unknown storage backend '{kind}'")
    cls = _STORE_REGISTRY[kind]
    if cls is None:
        raise ValueError(f"storage backend '{kind}' is disabled in this build")
    if cls is InMemoryKeyValueStore:
        # one dict per database path so repeated dependency calls share state
        return _memory_stores.setdefault(str(db.db_path), InMemoryKeyValueStore())
    return cls(db)

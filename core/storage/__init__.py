"""
Key-value persistence for the vocabulary store.

The store only needs two operations on opaque text blobs:

    get(key) -> str | None
    set(key, value)

Backends:
- MemoryStorage: process-local dict (tests, throwaway sessions)
- SqlStorage:    SQLAlchemy `kv_store` table (DATABASE_URL, SQLite default)
- MongoStorage:  MongoDB collection (MONGO_URI)
"""

from __future__ import annotations

from typing import Optional, Protocol

from core import config


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """Dict-backed storage; contents vanish with the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


def get_storage(backend: Optional[str] = None) -> KeyValueStorage:
    """
    Build the storage backend named by `backend` or STORAGE_BACKEND.

    Raises:
        ValueError: Unknown backend name
    """
    name = (backend or config.get_storage_backend()).strip().lower()

    if name in ("sql", "sqlite"):
        from core.storage.database import SqlStorage
        return SqlStorage()
    if name == "mongo":
        from core.storage.mongo import MongoStorage
        return MongoStorage()
    if name == "memory":
        return MemoryStorage()

    raise ValueError(f"Unknown storage backend: {name!r} (expected sql, mongo or memory)")


__all__ = [
    "KeyValueStorage",
    "MemoryStorage",
    "get_storage",
]

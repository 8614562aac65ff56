"""
Persistence adapters.

Services depend on the KeyValueStore contract and never touch the JSON file or
the SQL session directly. get_store() picks the backend from settings.
"""

from __future__ import annotations

from cabin.core.config import Settings, get_settings
from cabin.repositories.base import KeyValueStore, RecordNotFoundError, StorageError


def get_store(settings: Settings | None = None) -> KeyValueStore:
    settings = settings or get_settings()
    backend = settings.storage_backend
    if backend == "json":
        from cabin.repositories.json_storage import JsonStore

        return JsonStore(settings.data_file)
    if backend == "sql":
        from cabin.repositories.sql_repository import SQLStore

        return SQLStore()
    raise ValueError(f"Unknown storage backend: {backend!r}")


__all__ = ["KeyValueStore", "RecordNotFoundError", "StorageError", "get_store"]

"""
Storage-agnostic key/value document store.

Concrete backends only implement the raw primitives (``_put``, ``_fetch``,
``_fetch_all``, ``_remove``); the public async operations, the date-field
serialization and the equality filtering live here so both backends behave
the same way.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from cabin.domain.schema import deserialize_record, serialize_record, serialize_value


class StorageError(Exception):
    """Raised when the backing medium fails (I/O, database, quota)."""


class RecordNotFoundError(StorageError):
    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection}/{record_id} not found")
        self.collection = collection
        self.record_id = record_id


def _criteria(field: str | Sequence[str], value: Any) -> list[tuple[str, Any]]:
    if isinstance(field, (list, tuple)):
        if not isinstance(value, (list, tuple)) or len(field) != len(value):
            raise ValueError("Fields and values arrays must be the same length")
        return list(zip(field, value))
    return [(field, value)]


class KeyValueStore(ABC):
    """Async CRUD over named collections of JSON documents keyed by id."""

    # ------------------------------ backend primitives ------------------------------
    @abstractmethod
    async def _put(self, collection: str, record_id: str, document: dict) -> None: ...

    @abstractmethod
    async def _fetch(self, collection: str, record_id: str) -> dict | None: ...

    @abstractmethod
    async def _fetch_all(self, collection: str) -> list[dict]: ...

    @abstractmethod
    async def _remove(self, collection: str, record_id: str) -> None: ...

    async def _query(self, collection: str, criteria: list[tuple[str, Any]]) -> list[dict]:
        """Candidate documents for ``criteria``; backends may narrow the scan."""
        return await self._fetch_all(collection)

    # ------------------------------ public contract ------------------------------
    async def set(self, collection: str, record_id: str, record: Mapping[str, Any]) -> None:
        await self._put(collection, record_id, serialize_record(collection, record))

    async def get(self, collection: str, record_id: str) -> dict | None:
        return deserialize_record(collection, await self._fetch(collection, record_id))

    async def get_all(self, collection: str) -> list[dict]:
        return [deserialize_record(collection, doc) for doc in await self._fetch_all(collection)]

    async def get_where(self, collection: str, field: str | Sequence[str], value: Any) -> list[dict]:
        criteria = [(f, serialize_value(collection, f, v)) for f, v in _criteria(field, value)]
        docs = await self._query(collection, criteria)
        return [
            deserialize_record(collection, doc)
            for doc in docs
            if all(serialize_value(collection, f, doc.get(f)) == v for f, v in criteria)
        ]

    async def update(self, collection: str, record_id: str, partial: Mapping[str, Any]) -> None:
        current = await self._fetch(collection, record_id)
        if current is None:
            raise RecordNotFoundError(collection, record_id)
        merged = dict(current)
        merged.update(serialize_record(collection, partial))
        await self._put(collection, record_id, merged)

    async def delete(self, collection: str, record_id: str) -> None:
        await self._remove(collection, record_id)

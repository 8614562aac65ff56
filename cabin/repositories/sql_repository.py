"""Key/value document store backed by SQLAlchemy (the hosted variant)."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from cabin.db.models import Document
from cabin.db.session import get_session
from cabin.repositories.base import KeyValueStore, StorageError


def _owner(document: dict) -> str | None:
    owner = document.get("userId")
    return str(owner) if owner is not None else None


class SQLStore(KeyValueStore):
    """Documents live in one table keyed by (collection, id)."""

    # ------------------------------ sync helpers ------------------------------
    def _put_sync(self, collection: str, record_id: str, document: dict) -> None:
        now = datetime.now(timezone.utc)
        with get_session() as session:
            entity = session.get(Document, (collection, record_id))
            if not entity:
                entity = Document(
                    collection=collection,
                    id=record_id,
                    user_id=_owner(document),
                    data=document,
                    created_at=now,
                    updated_at=now,
                )
                session.add(entity)
            else:
                entity.data = document
                entity.user_id = _owner(document)
                entity.updated_at = now
            session.commit()

    def _fetch_sync(self, collection: str, record_id: str) -> dict | None:
        with get_session() as session:
            entity = session.get(Document, (collection, record_id))
            return dict(entity.data) if entity else None

    def _select_sync(self, collection: str, user_id: str | None = None) -> list[dict]:
        with get_session() as session:
            stmt = select(Document).where(Document.collection == collection)
            if user_id is not None:
                stmt = stmt.where(Document.user_id == user_id)
            return [dict(doc.data) for doc in session.execute(stmt).scalars().all()]

    def _remove_sync(self, collection: str, record_id: str) -> None:
        with get_session() as session:
            session.execute(
                delete(Document).where(Document.collection == collection, Document.id == record_id)
            )
            session.commit()

    async def _run(self, fn, *args):
        try:
            return await run_in_threadpool(fn, *args)
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    # ------------------------------ primitives ------------------------------
    async def _put(self, collection: str, record_id: str, document: dict) -> None:
        await self._run(self._put_sync, collection, record_id, document)

    async def _fetch(self, collection: str, record_id: str) -> dict | None:
        return await self._run(self._fetch_sync, collection, record_id)

    async def _fetch_all(self, collection: str) -> list[dict]:
        return await self._run(self._select_sync, collection)

    async def _remove(self, collection: str, record_id: str) -> None:
        await self._run(self._remove_sync, collection, record_id)

    async def _query(self, collection: str, criteria: list[tuple[str, Any]]) -> list[dict]:
        owner = next((v for f, v in criteria if f == "userId"), None)
        if owner is None:
            return await self._fetch_all(collection)
        return await self._run(self._select_sync, collection, str(owner))

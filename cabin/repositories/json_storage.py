"""
JSON-file persistence adapter (the local-storage variant).

The whole store is one JSON document ``{collection: {id: record}}``. It is
read and written per operation, so the file on disk is always current.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path

from starlette.concurrency import run_in_threadpool

from cabin.repositories.base import KeyValueStore, StorageError


class JsonStore(KeyValueStore):
    def __init__(self, data_file: Path | str) -> None:
        self.data_file = Path(data_file)
        self._lock = threading.Lock()

    def load(self) -> dict:
        if not self.data_file.exists():
            return {}
        try:
            with self.data_file.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"could not read {self.data_file}: {exc}") from exc

    def save(self, db: dict) -> None:
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            self.data_file.write_text(json.dumps(db, ensure_ascii=False, indent=2), encoding="utf-8")
        except (OSError, TypeError) as exc:
            raise StorageError(f"could not write {self.data_file}: {exc}") from exc

    # ------------------------------ sync helpers ------------------------------
    def _put_sync(self, collection: str, record_id: str, document: dict) -> None:
        with self._lock:
            db = self.load()
            db.setdefault(collection, {})[record_id] = document
            self.save(db)

    def _fetch_sync(self, collection: str, record_id: str) -> dict | None:
        with self._lock:
            doc = self.load().get(collection, {}).get(record_id)
        return dict(doc) if doc is not None else None

    def _fetch_all_sync(self, collection: str) -> list[dict]:
        with self._lock:
            docs = self.load().get(collection, {})
        return [dict(doc) for doc in docs.values()]

    def _remove_sync(self, collection: str, record_id: str) -> None:
        with self._lock:
            db = self.load()
            if record_id in db.get(collection, {}):
                del db[collection][record_id]
                self.save(db)

    # ------------------------------ primitives ------------------------------
    # file I/O runs off the event loop
    async def _put(self, collection: str, record_id: str, document: dict) -> None:
        await run_in_threadpool(self._put_sync, collection, record_id, document)

    async def _fetch(self, collection: str, record_id: str) -> dict | None:
        return await run_in_threadpool(self._fetch_sync, collection, record_id)

    async def _fetch_all(self, collection: str) -> list[dict]:
        return await run_in_threadpool(self._fetch_all_sync, collection)

    async def _remove(self, collection: str, record_id: str) -> None:
        await run_in_threadpool(self._remove_sync, collection, record_id)

    def dump(self) -> dict:
        """Raw view of every collection, used by the JSON -> SQL migration."""
        with self._lock:
            return self.load()

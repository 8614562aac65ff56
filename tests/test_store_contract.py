"""
The same behaviour is expected from the JSON file and the SQL backend.
"""
from __future__ import annotations

import threading
from datetime import date, datetime, timezone

import pytest

from cabin.repositories.base import RecordNotFoundError

pytestmark = pytest.mark.anyio


async def test_set_get_overwrites_whole_record(store):
    await store.set("members", "m1", {"id": "m1", "name": "Asha", "userId": "u1", "extra": True})
    await store.set("members", "m1", {"id": "m1", "name": "Asha K", "userId": "u1"})
    record = await store.get("members", "m1")
    assert record["name"] == "Asha K"
    assert "extra" not in record


async def test_missing_record_returns_none(store):
    assert await store.get("members", "nope") is None


async def test_get_all_ignores_owner(store):
    await store.set("members", "a", {"id": "a", "name": "A", "userId": "u1"})
    await store.set("members", "b", {"id": "b", "name": "B", "userId": "u2"})
    names = sorted(r["name"] for r in await store.get_all("members"))
    assert names == ["A", "B"]


async def test_get_where_is_conjunctive(store):
    await store.set("registry", "1", {"id": "1", "memberId": "m1", "date": date(2024, 1, 1), "userId": "u1"})
    await store.set("registry", "2", {"id": "2", "memberId": "m2", "date": date(2024, 1, 1), "userId": "u1"})
    await store.set("registry", "3", {"id": "3", "memberId": "m1", "date": date(2024, 1, 2), "userId": "u1"})
    await store.set("registry", "4", {"id": "4", "memberId": "m1", "date": date(2024, 1, 1), "userId": "u2"})

    rows = await store.get_where("registry", ["userId", "date", "memberId"], ["u1", "2024-01-01", "m1"])
    assert [r["id"] for r in rows] == ["1"]

    by_date = await store.get_where("registry", "date", date(2024, 1, 1))
    assert sorted(r["id"] for r in by_date) == ["1", "2", "4"]


async def test_get_where_length_mismatch(store):
    with pytest.raises(ValueError):
        await store.get_where("registry", ["userId", "date"], ["u1"])


async def test_update_merges_and_requires_existing(store):
    await store.set("todos", "t1", {"id": "t1", "title": "Write", "completed": False, "userId": "u1"})
    await store.update("todos", "t1", {"completed": True})
    record = await store.get("todos", "t1")
    assert record["completed"] is True
    assert record["title"] == "Write"

    with pytest.raises(RecordNotFoundError):
        await store.update("todos", "missing", {"completed": True})


async def test_delete_is_idempotent(store):
    await store.set("todos", "t1", {"id": "t1", "title": "x", "userId": "u1"})
    await store.delete("todos", "t1")
    await store.delete("todos", "t1")
    assert await store.get("todos", "t1") is None


async def test_dates_survive_round_trip(store):
    created = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)
    await store.set("todos", "t1", {"id": "t1", "title": "x", "userId": "u1", "createdAt": created, "dueDate": date(2024, 6, 1)})
    record = await store.get("todos", "t1")
    assert record["createdAt"].isoformat() == created.isoformat()
    assert record["dueDate"] == date(2024, 6, 1)


async def test_legacy_timestamps_in_date_fields(store):
    # records re-saved by the old web client carry full timestamps in date-only fields
    await store._put(
        "minuteTracker",
        "e1",
        {"id": "e1", "date": "2024-01-15T00:00:00.000Z", "userId": "u1", "createdAt": "2024-01-15T08:00:00.000Z"},
    )
    await store._put(
        "todos",
        "t1",
        {"id": "t1", "title": "x", "userId": "u1", "createdAt": "2024-01-01T00:00:00Z", "dueDate": "2024-07-01T00:00:00.000Z"},
    )

    entry = await store.get("minuteTracker", "e1")
    assert entry["date"] == date(2024, 1, 15)
    assert (await store.get("todos", "t1"))["dueDate"] == date(2024, 7, 1)

    rows = await store.get_where("minuteTracker", ["userId", "date"], ["u1", date(2024, 1, 15)])
    assert [r["id"] for r in rows] == ["e1"]
    assert [r["id"] for r in await store.get_where("todos", "dueDate", "2024-07-01")] == ["t1"]


async def test_json_file_access_runs_in_worker_thread(json_store, monkeypatch):
    loop_thread = threading.get_ident()
    seen = []
    load = json_store.load

    def tracking_load():
        seen.append(threading.get_ident())
        return load()

    monkeypatch.setattr(json_store, "load", tracking_load)
    await json_store.set("members", "m1", {"id": "m1", "name": "Asha", "userId": "u1"})
    await json_store.get("members", "m1")
    await json_store.get_where("members", "userId", "u1")
    await json_store.delete("members", "m1")

    assert len(seen) == 4
    assert loop_thread not in seen

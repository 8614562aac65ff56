from __future__ import annotations

from datetime import date

import pytest

from cabin.services.todo_service import TodoNotFoundError, TodoService

pytestmark = pytest.mark.anyio

TODAY = date(2024, 6, 10)


async def test_add_toggle_update_delete(store):
    svc = TodoService(store)
    todo = await svc.add("u1", "  Ship release ", description=" notes ", priority="high", due_date="2024-06-12")
    assert todo.title == "Ship release"
    assert todo.description == "notes"
    assert todo.completed is False

    toggled = await svc.toggle(todo.id, "u1")
    assert toggled.completed is True
    assert (await svc.get(todo.id, "u1")).completed is True

    toggled.title = "Ship it"
    await svc.update(toggled)
    stored = await svc.get(todo.id, "u1")
    assert stored.title == "Ship it"
    assert stored.due_date == date(2024, 6, 12)
    assert stored.priority == "high"

    await svc.delete(todo.id, "u1")
    with pytest.raises(TodoNotFoundError):
        await svc.get(todo.id, "u1")


async def test_other_team_cannot_touch_todo(store):
    svc = TodoService(store)
    todo = await svc.add("u1", "Mine")
    with pytest.raises(TodoNotFoundError):
        await svc.toggle(todo.id, "u2")
    with pytest.raises(TodoNotFoundError):
        await svc.delete(todo.id, "u2")
    assert await svc.list("u2") == []


async def test_filters(store):
    svc = TodoService(store)
    await svc.add("u1", "today", due_date=TODAY, priority="low")
    overdue = await svc.add("u1", "overdue", due_date=date(2024, 6, 1))
    await svc.add("u1", "upcoming", due_date=date(2024, 7, 1), priority="high")
    await svc.add("u1", "someday")
    done_late = await svc.add("u1", "done late", due_date=date(2024, 5, 1))
    await svc.toggle(done_late.id, "u1")

    def titles(items):
        return [t.title for t in items]

    assert titles(await svc.list("u1", period="today", today=TODAY)) == ["today"]
    assert titles(await svc.list("u1", period="overdue", today=TODAY)) == [overdue.title]
    assert titles(await svc.list("u1", period="upcoming", today=TODAY)) == ["upcoming"]
    assert titles(await svc.list("u1", period="no-date", today=TODAY)) == ["someday"]
    assert titles(await svc.list("u1", status="completed")) == ["done late"]
    assert len(await svc.list("u1", status="pending")) == 4
    assert titles(await svc.list("u1", priority="high")) == ["upcoming"]


async def test_list_reads_due_dates_stored_as_timestamps(store):
    await store._put(
        "todos",
        "old",
        {
            "id": "old",
            "title": "Book cabin",
            "completed": False,
            "priority": "low",
            "userId": "u1",
            "createdAt": "2024-01-01T09:00:00.000Z",
            "dueDate": "2024-07-01T00:00:00.000Z",
        },
    )
    todos = await TodoService(store).list("u1")
    assert [t.due_date for t in todos] == [date(2024, 7, 1)]

"""Personal to-do list."""

from __future__ import annotations

from datetime import date
from typing import Optional

from cabin.core.utils import new_id, to_date, utcnow
from cabin.domain.models import TODOS, Priority, TodoItem
from cabin.repositories.base import KeyValueStore


class TodoNotFoundError(Exception):
    pass


def _matches_period(todo: TodoItem, period: str, today: date) -> bool:
    if todo.due_date is None:
        return period == "no-date"
    if period == "today":
        return todo.due_date == today
    if period == "overdue":
        return todo.due_date < today and not todo.completed
    if period == "upcoming":
        return todo.due_date > today
    if period == "no-date":
        return False
    return True


class TodoService:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    async def list(
        self,
        user_id: str,
        *,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        period: Optional[str] = None,
        today: Optional[date] = None,
    ) -> list[TodoItem]:
        records = await self.store.get_where(TODOS, "userId", user_id)
        todos = sorted((TodoItem.from_record(r) for r in records), key=lambda t: t.created_at)
        if status == "completed":
            todos = [t for t in todos if t.completed]
        elif status == "pending":
            todos = [t for t in todos if not t.completed]
        if priority and priority != "all":
            todos = [t for t in todos if t.priority == priority]
        if period and period != "all":
            day = today or date.today()
            todos = [t for t in todos if _matches_period(t, period, day)]
        return todos

    async def get(self, todo_id: str, user_id: str) -> TodoItem:
        record = await self.store.get(TODOS, todo_id)
        if not record or record.get("userId") != user_id:
            raise TodoNotFoundError(todo_id)
        return TodoItem.from_record(record)

    async def add(
        self,
        user_id: str,
        title: str,
        *,
        description: Optional[str] = None,
        priority: str = Priority.MEDIUM.value,
        due_date: date | str | None = None,
    ) -> TodoItem:
        todo = TodoItem(
            id=new_id(),
            title=(title or "").strip(),
            description=(description or "").strip() or None,
            priority=priority,
            due_date=to_date(due_date) if due_date else None,
            completed=False,
            user_id=user_id,
            created_at=utcnow(),
        )
        await self.store.set(TODOS, todo.id, todo.to_record())
        return todo

    async def update(self, todo: TodoItem) -> TodoItem:
        """Re-save the whole record."""
        await self.get(todo.id, todo.user_id)
        await self.store.set(TODOS, todo.id, todo.to_record())
        return todo

    async def toggle(self, todo_id: str, user_id: str) -> TodoItem:
        todo = await self.get(todo_id, user_id)
        todo.completed = not todo.completed
        await self.store.set(TODOS, todo.id, todo.to_record())
        return todo

    async def delete(self, todo_id: str, user_id: str) -> None:
        await self.get(todo_id, user_id)
        await self.store.delete(TODOS, todo_id)

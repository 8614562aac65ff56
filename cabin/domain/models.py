"""Entity records mirroring the persisted document shapes."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from cabin.core.utils import to_date

USERS = "users"
MEMBERS = "members"
REGISTRY = "registry"
TODOS = "todos"
MINUTE_TRACKER = "minuteTracker"
SESSIONS = "sessions"

DEFAULT_ESTIMATED_MINUTES = 480


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def values(cls) -> set[str]:
        return {p.value for p in cls}


def _priority(value) -> str:
    if isinstance(value, Priority):
        return value.value
    return str(value or Priority.MEDIUM.value)


@dataclass
class User:
    id: str
    team_name: str
    password: str
    created_at: datetime

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "teamName": self.team_name,
            "password": self.password,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, record: dict) -> "User":
        return cls(
            id=record["id"],
            team_name=record["teamName"],
            password=record.get("password") or "",
            created_at=record["createdAt"],
        )

    def public(self) -> dict:
        """Session payload: everything except the password."""
        return {
            "id": self.id,
            "teamName": self.team_name,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class Member:
    id: str
    name: str
    user_id: str
    created_at: datetime

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "userId": self.user_id,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, record: dict) -> "Member":
        return cls(
            id=record["id"],
            name=record["name"],
            user_id=record["userId"],
            created_at=record["createdAt"],
        )


@dataclass
class RegistryEntry:
    id: str
    member_id: str
    date: date
    user_id: str
    member_name: Optional[str] = None
    mark_in: Optional[str] = None
    mark_out: Optional[str] = None

    def to_record(self) -> dict:
        record = {
            "id": self.id,
            "memberId": self.member_id,
            "date": self.date,
            "userId": self.user_id,
        }
        if self.member_name is not None:
            record["memberName"] = self.member_name
        if self.mark_in:
            record["markIn"] = self.mark_in
        if self.mark_out:
            record["markOut"] = self.mark_out
        return record

    @classmethod
    def from_record(cls, record: dict) -> "RegistryEntry":
        # older documents store "" instead of omitting a mark
        return cls(
            id=record["id"],
            member_id=record["memberId"],
            date=to_date(record["date"]),
            user_id=record["userId"],
            member_name=record.get("memberName"),
            mark_in=record.get("markIn") or None,
            mark_out=record.get("markOut") or None,
        )


@dataclass
class TodoItem:
    id: str
    title: str
    user_id: str
    created_at: datetime
    completed: bool = False
    priority: str = Priority.MEDIUM.value
    description: Optional[str] = None
    due_date: Optional[date] = None

    def to_record(self) -> dict:
        record = {
            "id": self.id,
            "title": self.title,
            "completed": bool(self.completed),
            "priority": _priority(self.priority),
            "createdAt": self.created_at,
            "userId": self.user_id,
        }
        if self.description:
            record["description"] = self.description
        if self.due_date is not None:
            record["dueDate"] = self.due_date
        return record

    @classmethod
    def from_record(cls, record: dict) -> "TodoItem":
        due = record.get("dueDate")
        return cls(
            id=record["id"],
            title=record["title"],
            user_id=record["userId"],
            created_at=record["createdAt"],
            completed=bool(record.get("completed", False)),
            priority=_priority(record.get("priority")),
            description=record.get("description") or None,
            due_date=to_date(due) if due else None,
        )


@dataclass
class MinuteTrackerEntry:
    id: str
    date: date
    user_id: str
    created_at: datetime
    members: list[str] = field(default_factory=list)
    tasks: dict[str, list[str]] = field(default_factory=dict)
    priority: str = Priority.MEDIUM.value
    estimated_minutes: int = DEFAULT_ESTIMATED_MINUTES

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "members": list(self.members),
            "tasks": {member_id: list(tasks) for member_id, tasks in self.tasks.items()},
            "priority": _priority(self.priority),
            "estimatedMinutes": int(self.estimated_minutes),
            "userId": self.user_id,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, record: dict) -> "MinuteTrackerEntry":
        minutes = record.get("estimatedMinutes")
        return cls(
            id=record["id"],
            date=to_date(record["date"]),
            user_id=record["userId"],
            created_at=record["createdAt"],
            members=list(record.get("members") or []),
            tasks={k: list(v or []) for k, v in (record.get("tasks") or {}).items()},
            priority=_priority(record.get("priority")),
            estimated_minutes=int(minutes) if minutes is not None else DEFAULT_ESTIMATED_MINUTES,
        )

    def filled_tasks(self, member_id: str) -> list[str]:
        return [task for task in self.tasks.get(member_id, []) if task.strip()]

    def task_count(self) -> int:
        return sum(len(self.filled_tasks(member_id)) for member_id in self.tasks)

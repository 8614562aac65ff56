"""Minute tracker: per-day logs of free-text tasks for the selected members."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Mapping, Optional, Sequence

from cabin.core.utils import new_id, to_date, utcnow
from cabin.domain.models import (
    DEFAULT_ESTIMATED_MINUTES,
    MINUTE_TRACKER,
    MinuteTrackerEntry,
    Priority,
)
from cabin.repositories.base import KeyValueStore

logger = logging.getLogger(__name__)


class EntryNotFoundError(Exception):
    pass


class MemberNotInEntryError(Exception):
    pass


@dataclass(frozen=True)
class TrackerStats:
    total_entries: int
    total_members: int
    total_tasks: int
    completion_rate: int


def period_bounds(
    period: str, today: date, start: Optional[date] = None, end: Optional[date] = None
) -> Optional[tuple[date, date]]:
    """Inclusive date range for a filter period; None means no date filtering."""
    if period == "today":
        return today, today
    if period == "week":
        # weeks start on Sunday
        first = today - timedelta(days=(today.weekday() + 1) % 7)
        return first, first + timedelta(days=6)
    if period == "month":
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)
    if period == "custom" and start and end:
        return start, end
    return None


def _has_filled_task(entry: MinuteTrackerEntry) -> bool:
    return any(task.strip() for tasks in entry.tasks.values() for task in tasks)


def filter_entries(
    entries: Iterable[MinuteTrackerEntry],
    *,
    search: str = "",
    period: str = "all",
    start: Optional[date] = None,
    end: Optional[date] = None,
    member_id: Optional[str] = None,
    completed_only: bool = False,
    member_names: Mapping[str, str] | None = None,
    today: Optional[date] = None,
) -> list[MinuteTrackerEntry]:
    names = member_names or {}
    result = list(entries)

    needle = (search or "").strip().lower()
    if needle:
        def _matches(entry: MinuteTrackerEntry) -> bool:
            who = " ".join(names.get(m, "Unknown Member") for m in entry.members).lower()
            what = " ".join(t for tasks in entry.tasks.values() for t in tasks).lower()
            when = f"{entry.date.strftime('%B')} {entry.date.day}, {entry.date.year}".lower()
            return needle in who or needle in what or needle in when

        result = [e for e in result if _matches(e)]

    bounds = period_bounds(period, today or date.today(), start, end)
    if bounds:
        first, last = bounds
        result = [e for e in result if first <= e.date <= last]

    if member_id and member_id != "all":
        result = [e for e in result if member_id in e.members]

    if completed_only:
        result = [e for e in result if _has_filled_task(e)]

    return sorted(result, key=lambda e: e.date, reverse=True)


def compute_stats(entries: Sequence[MinuteTrackerEntry]) -> TrackerStats:
    total = len(entries)
    members = {m for e in entries for m in e.members}
    tasks = sum(e.task_count() for e in entries)
    done = sum(1 for e in entries if _has_filled_task(e))
    rate = round(done / total * 100) if total else 0
    return TrackerStats(total_entries=total, total_members=len(members), total_tasks=tasks, completion_rate=rate)


class MinuteTrackerService:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    async def list(self, user_id: str) -> list[MinuteTrackerEntry]:
        records = await self.store.get_where(MINUTE_TRACKER, "userId", user_id)
        entries = [MinuteTrackerEntry.from_record(r) for r in records]
        return sorted(entries, key=lambda e: e.date, reverse=True)

    async def get(self, entry_id: str, user_id: str) -> MinuteTrackerEntry:
        record = await self.store.get(MINUTE_TRACKER, entry_id)
        if not record or record.get("userId") != user_id:
            raise EntryNotFoundError(entry_id)
        return MinuteTrackerEntry.from_record(record)

    async def create(
        self,
        user_id: str,
        *,
        date: date | str,
        member_ids: Sequence[str],
        template: str = "",
        priority: str = Priority.MEDIUM.value,
        estimated_minutes: int = DEFAULT_ESTIMATED_MINUTES,
    ) -> MinuteTrackerEntry:
        members = list(dict.fromkeys(m for m in member_ids if m))
        first_task = (template or "").strip()
        entry = MinuteTrackerEntry(
            id=new_id(),
            date=to_date(date),
            members=members,
            tasks={m: [first_task] for m in members},
            priority=priority,
            estimated_minutes=estimated_minutes,
            user_id=user_id,
            created_at=utcnow(),
        )
        await self.store.set(MINUTE_TRACKER, entry.id, entry.to_record())
        logger.info("Created tracker entry %s for %d members", entry.id, len(members))
        return entry

    async def update(self, entry: MinuteTrackerEntry) -> MinuteTrackerEntry:
        await self.get(entry.id, entry.user_id)
        await self.store.set(MINUTE_TRACKER, entry.id, entry.to_record())
        return entry

    async def delete(self, entry_id: str, user_id: str) -> None:
        await self.get(entry_id, user_id)
        await self.store.delete(MINUTE_TRACKER, entry_id)

    async def add_task(self, entry_id: str, user_id: str, member_id: str) -> MinuteTrackerEntry:
        entry = await self.get(entry_id, user_id)
        self._check_member(entry, member_id)
        entry.tasks.setdefault(member_id, []).append("")
        return await self._save_tasks(entry)

    async def update_task(
        self, entry_id: str, user_id: str, member_id: str, index: int, value: str
    ) -> MinuteTrackerEntry:
        entry = await self.get(entry_id, user_id)
        self._check_member(entry, member_id)
        tasks = entry.tasks.setdefault(member_id, [])
        if index < 0 or index > len(tasks):
            raise IndexError(f"task index {index} out of range for member {member_id}")
        if index == len(tasks):
            tasks.append(value)
        else:
            tasks[index] = value
        return await self._save_tasks(entry)

    async def remove_task(self, entry_id: str, user_id: str, member_id: str, index: int) -> MinuteTrackerEntry:
        """Drop the task at ``index``; a member always keeps at least one slot."""
        entry = await self.get(entry_id, user_id)
        tasks = entry.tasks.get(member_id) or []
        if len(tasks) <= 1 or not 0 <= index < len(tasks):
            return entry
        del tasks[index]
        return await self._save_tasks(entry)

    @staticmethod
    def _check_member(entry: MinuteTrackerEntry, member_id: str) -> None:
        if member_id not in entry.members:
            raise MemberNotInEntryError(member_id)

    async def _save_tasks(self, entry: MinuteTrackerEntry) -> MinuteTrackerEntry:
        await self.store.update(MINUTE_TRACKER, entry.id, {"tasks": entry.to_record()["tasks"]})
        return entry

    async def duplicate(self, entry_id: str, user_id: str, *, date: date | str | None = None) -> MinuteTrackerEntry:
        source = await self.get(entry_id, user_id)
        copy = MinuteTrackerEntry(
            id=new_id(),
            date=to_date(date) if date else _today(),
            members=list(source.members),
            tasks={member_id: [""] for member_id in source.tasks},
            priority=source.priority,
            estimated_minutes=source.estimated_minutes,
            user_id=user_id,
            created_at=utcnow(),
        )
        await self.store.set(MINUTE_TRACKER, copy.id, copy.to_record())
        logger.info("Duplicated tracker entry %s as %s", source.id, copy.id)
        return copy

    async def entries_by_member(self, member_id: str, user_id: str) -> list[MinuteTrackerEntry]:
        return [e for e in await self.list(user_id) if member_id in e.members]

    async def recent(self, user_id: str, limit: int = 5) -> list[MinuteTrackerEntry]:
        return (await self.list(user_id))[:limit]


def _today() -> date:
    return date.today()

"""Attendance registry: one entry per member per calendar date."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from cabin.core.utils import current_time_hhmm, to_date
from cabin.domain.models import REGISTRY, RegistryEntry
from cabin.repositories.base import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceSummary:
    present: int
    checked_out: int
    total: int


def entry_id(entry_date: date | str, member_id: str) -> str:
    return f"{to_date(entry_date).isoformat()}-{member_id}"


class RegistryService:
    """Mark in / mark out bookkeeping. Every call reads the store; nothing is cached."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    async def list(self, user_id: str) -> list[RegistryEntry]:
        records = await self.store.get_where(REGISTRY, "userId", user_id)
        return [RegistryEntry.from_record(r) for r in records]

    async def entries_for_date(self, entry_date: date | str, user_id: str) -> list[RegistryEntry]:
        records = await self.store.get_where(REGISTRY, ["userId", "date"], [user_id, to_date(entry_date)])
        return [RegistryEntry.from_record(r) for r in records]

    async def get_by_date_and_member(
        self, entry_date: date | str, member_id: str, user_id: str
    ) -> Optional[RegistryEntry]:
        day = to_date(entry_date)
        record = await self.store.get(REGISTRY, entry_id(day, member_id))
        if record and record.get("userId") == user_id:
            return RegistryEntry.from_record(record)
        # entries written before ids were derived carry a random id
        records = await self.store.get_where(
            REGISTRY, ["userId", "date", "memberId"], [user_id, day, member_id]
        )
        return RegistryEntry.from_record(records[0]) if records else None

    async def _mark(
        self,
        field: str,
        entry_date: date | str,
        member_id: str,
        user_id: str,
        member_name: Optional[str],
        time: Optional[str],
    ) -> RegistryEntry:
        day = to_date(entry_date)
        stamp = time or current_time_hhmm()
        entry = await self.get_by_date_and_member(day, member_id, user_id)
        if entry is None:
            entry = RegistryEntry(
                id=entry_id(day, member_id),
                member_id=member_id,
                date=day,
                user_id=user_id,
            )
        if member_name:
            entry.member_name = member_name
        setattr(entry, field, stamp)
        await self.store.set(REGISTRY, entry.id, entry.to_record())
        return entry

    async def mark_in(
        self,
        entry_date: date | str,
        member_id: str,
        user_id: str,
        member_name: Optional[str] = None,
        time: Optional[str] = None,
    ) -> RegistryEntry:
        """Record the start time; an existing mark out is kept."""
        return await self._mark("mark_in", entry_date, member_id, user_id, member_name, time)

    async def mark_out(
        self,
        entry_date: date | str,
        member_id: str,
        user_id: str,
        member_name: Optional[str] = None,
        time: Optional[str] = None,
    ) -> RegistryEntry:
        """Record the end time; an existing mark in is kept."""
        return await self._mark("mark_out", entry_date, member_id, user_id, member_name, time)

    async def delete_all_for_member(self, member_id: str, user_id: str) -> int:
        records = await self.store.get_where(REGISTRY, ["userId", "memberId"], [user_id, member_id])
        for record in records:
            await self.store.delete(REGISTRY, record["id"])
        return len(records)

    async def attendance_summary(self, entry_date: date | str, user_id: str, member_count: int) -> AttendanceSummary:
        entries = await self.entries_for_date(entry_date, user_id)
        return AttendanceSummary(
            present=sum(1 for e in entries if e.mark_in),
            checked_out=sum(1 for e in entries if e.mark_out),
            total=member_count,
        )

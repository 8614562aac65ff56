"""
Utility helpers shared across routers/services.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def current_time_hhmm(now: datetime | None = None) -> str:
    """Clock time as HH:MM, 24-hour."""
    return (now or datetime.now()).strftime("%H:%M")


def to_date(value: date | datetime | str) -> date:
    """Accept a date, a datetime or an ISO string and return a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])

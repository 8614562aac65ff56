"""
Form validation rules.

Each function returns the list of messages to show next to the form; an empty
list means the input is acceptable. Nothing here raises.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Iterable, Optional

from cabin.domain.models import Priority

TEAM_NAME_MIN = 2
TEAM_NAME_MAX = 50
MEMBER_NAME_MAX = 50
TODO_TITLE_MAX = 200
MAX_MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def is_valid_time(value: Optional[str]) -> bool:
    return bool(value) and bool(_TIME_RE.match(value))


def is_valid_date(value) -> bool:
    if isinstance(value, date):
        return True
    try:
        date.fromisoformat(str(value or "").strip())
    except ValueError:
        return False
    return True


def validate_registration(
    team_name: str,
    password: str,
    confirm_password: str,
    *,
    min_password_length: int = 6,
) -> list[str]:
    name = (team_name or "").strip()
    if not name or not password or not confirm_password:
        return ["All fields are required"]
    errors: list[str] = []
    if not TEAM_NAME_MIN <= len(name) <= TEAM_NAME_MAX:
        errors.append(f"Team name must be between {TEAM_NAME_MIN} and {TEAM_NAME_MAX} characters")
    if password != confirm_password:
        errors.append("Passwords do not match")
    if len(password) < min_password_length:
        errors.append(f"Password must be at least {min_password_length} characters long")
    return errors


def validate_login(team_name: str, password: str) -> list[str]:
    if not (team_name or "").strip() or not password:
        return ["Please fill in all fields"]
    return []


def validate_member_name(name: str) -> list[str]:
    value = (name or "").strip()
    if not value:
        return ["Member name is required"]
    if len(value) > MEMBER_NAME_MAX:
        return [f"Member name must be at most {MEMBER_NAME_MAX} characters"]
    return []


def validate_todo(title: str, priority: str, due_date=None) -> list[str]:
    errors: list[str] = []
    value = (title or "").strip()
    if not value:
        errors.append("Title is required")
    elif len(value) > TODO_TITLE_MAX:
        errors.append(f"Title must be at most {TODO_TITLE_MAX} characters")
    if priority not in Priority.values():
        errors.append("Priority must be low, medium or high")
    if due_date not in (None, "") and not is_valid_date(due_date):
        errors.append("Due date must be a valid date (YYYY-MM-DD)")
    return errors


def validate_tracker_entry(
    entry_date,
    member_ids: Iterable[str],
    priority: str,
    estimated_minutes: int,
) -> list[str]:
    errors: list[str] = []
    if not is_valid_date(entry_date):
        errors.append("Date must be a valid date (YYYY-MM-DD)")
    if not [m for m in (member_ids or []) if m]:
        errors.append("Select at least one member")
    if priority not in Priority.values():
        errors.append("Priority must be low, medium or high")
    if not isinstance(estimated_minutes, int) or not 0 <= estimated_minutes <= MAX_MINUTES_PER_DAY:
        errors.append(f"Estimated minutes must be between 0 and {MAX_MINUTES_PER_DAY}")
    return errors

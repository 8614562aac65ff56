"""Spreadsheet export of minute-tracker entries."""

from __future__ import annotations

import io
from datetime import date
from typing import Iterable, Mapping

import pandas as pd

from cabin.domain.models import MinuteTrackerEntry

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EXPORT_COLUMNS = ["Date", "Priority", "Estimated Minutes", "Member", "Task Number", "Task Description"]
UNKNOWN_MEMBER = "Unknown Member"


def export_filename(today: date | None = None) -> str:
    return f"minute-tracker-{(today or date.today()).isoformat()}.xlsx"


def entry_filename(entry: MinuteTrackerEntry) -> str:
    return f"TimeTracker_{entry.date.isoformat()}.xlsx"


def tracker_rows(entries: Iterable[MinuteTrackerEntry], member_names: Mapping[str, str]) -> list[dict]:
    """One row per non-blank task, numbered per member from 1."""
    rows = []
    for entry in entries:
        for member_id in entry.tasks:
            name = member_names.get(member_id, UNKNOWN_MEMBER)
            for number, task in enumerate(entry.filled_tasks(member_id), start=1):
                rows.append(
                    {
                        "Date": entry.date.isoformat(),
                        "Priority": entry.priority,
                        "Estimated Minutes": entry.estimated_minutes,
                        "Member": name,
                        "Task Number": number,
                        "Task Description": task,
                    }
                )
    return rows


def _to_xlsx(df: pd.DataFrame, sheet_name: str, *, header: bool = True) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, header=header, sheet_name=sheet_name)
    return output.getvalue()


def export_entries(entries: Iterable[MinuteTrackerEntry], member_names: Mapping[str, str]) -> bytes:
    df = pd.DataFrame(tracker_rows(entries, member_names), columns=EXPORT_COLUMNS)
    return _to_xlsx(df, "Minute Tracker")


def export_entry(entry: MinuteTrackerEntry, member_names: Mapping[str, str]) -> bytes:
    """Detail sheet for a single day: summary block, then tasks grouped by member."""
    rows: list[list] = [
        ["DATE", entry.date.strftime("%m/%d/%Y")],
        ["TOTAL MINUTES", entry.estimated_minutes],
        ["PRIORITY", str(entry.priority).lower()],
        ["CREATED AT", entry.created_at.astimezone().strftime("%m/%d/%Y %I:%M %p")],
        ["", ""],
        ["Tasks Description", ""],
    ]
    for member_id in entry.tasks:
        tasks = entry.filled_tasks(member_id)
        if not tasks:
            continue
        rows.append(["", ""])
        rows.append(["Member Name:", member_names.get(member_id, UNKNOWN_MEMBER)])
        rows.append(["Task(s) Done:", ""])
        rows.extend([[task, ""] for task in tasks])
    df = pd.DataFrame(rows, columns=["Detail", "Value"])
    return _to_xlsx(df, "Time Tracker", header=False)

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field

from cabin.core.utils import to_date
from cabin.domain.models import DEFAULT_ESTIMATED_MINUTES, MINUTE_TRACKER, Priority
from cabin.domain.validation import is_valid_date, validate_tracker_entry
from cabin.routers.deps import dump, form_errors, get_container, require_user
from cabin.services import export_service
from cabin.services.minute_tracker_service import (
    EntryNotFoundError,
    MemberNotInEntryError,
    compute_stats,
    filter_entries,
)

router = APIRouter(prefix="/minute-tracker", tags=["minute-tracker"])


class EntryForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str = ""
    member_ids: list[str] = Field(default_factory=list, alias="memberIds")
    template: str = ""
    priority: str = Priority.MEDIUM.value
    estimated_minutes: int = Field(DEFAULT_ESTIMATED_MINUTES, alias="estimatedMinutes")


class EntryUpdateForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str = ""
    members: list[str] = Field(default_factory=list)
    tasks: dict[str, list[str]] = Field(default_factory=dict)
    priority: str = Priority.MEDIUM.value
    estimated_minutes: int = Field(DEFAULT_ESTIMATED_MINUTES, alias="estimatedMinutes")


class DuplicateForm(BaseModel):
    date: Optional[str] = None


class TaskForm(BaseModel):
    value: str = ""


def _xlsx(content: bytes, filename: str) -> Response:
    return Response(
        content,
        media_type=export_service.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def _filtered(
    request: Request,
    user: dict,
    *,
    search: str,
    period: str,
    start: Optional[str],
    end: Optional[str],
    member_id: Optional[str],
    completed_only: bool,
):
    for value in (start, end):
        if value and not is_valid_date(value):
            raise HTTPException(400, "Dates must be valid (YYYY-MM-DD)")
    container = get_container(request)
    names = await container.member_service.names(user["id"])
    entries = filter_entries(
        await container.minute_tracker_service.list(user["id"]),
        search=search,
        period=period,
        start=to_date(start) if start else None,
        end=to_date(end) if end else None,
        member_id=member_id,
        completed_only=completed_only,
        member_names=names,
    )
    return entries, names


@router.get("")
async def list_entries(
    request: Request,
    search: str = "",
    period: str = "all",
    start: Optional[str] = None,
    end: Optional[str] = None,
    member_id: Optional[str] = None,
    completed_only: bool = False,
    user: dict = Depends(require_user),
):
    entries, _ = await _filtered(
        request, user, search=search, period=period, start=start, end=end,
        member_id=member_id, completed_only=completed_only,
    )
    stats = compute_stats(entries)
    return {"entries": [dump(MINUTE_TRACKER, e) for e in entries], "stats": asdict(stats)}


@router.get("/export")
async def export_all(
    request: Request,
    search: str = "",
    period: str = "all",
    start: Optional[str] = None,
    end: Optional[str] = None,
    member_id: Optional[str] = None,
    completed_only: bool = False,
    user: dict = Depends(require_user),
):
    entries, names = await _filtered(
        request, user, search=search, period=period, start=start, end=end,
        member_id=member_id, completed_only=completed_only,
    )
    return _xlsx(export_service.export_entries(entries, names), export_service.export_filename())


@router.post("", status_code=201)
async def create_entry(request: Request, form: EntryForm, user: dict = Depends(require_user)):
    errors = validate_tracker_entry(form.date, form.member_ids, form.priority, form.estimated_minutes)
    if errors:
        return form_errors(errors)
    container = get_container(request)
    known = await container.member_service.names(user["id"])
    member_ids = [m for m in form.member_ids if m in known]
    if not member_ids:
        return form_errors(["Select at least one member"])
    entry = await container.minute_tracker_service.create(
        user["id"],
        date=form.date,
        member_ids=member_ids,
        template=form.template,
        priority=form.priority,
        estimated_minutes=form.estimated_minutes,
    )
    return dump(MINUTE_TRACKER, entry)


@router.get("/{entry_id}/export")
async def export_one(entry_id: str, request: Request, user: dict = Depends(require_user)):
    container = get_container(request)
    try:
        entry = await container.minute_tracker_service.get(entry_id, user["id"])
    except EntryNotFoundError:
        raise HTTPException(404, "Entry not found")
    names = await container.member_service.names(user["id"])
    return _xlsx(export_service.export_entry(entry, names), export_service.entry_filename(entry))


@router.put("/{entry_id}")
async def update_entry(entry_id: str, request: Request, form: EntryUpdateForm, user: dict = Depends(require_user)):
    errors = validate_tracker_entry(form.date, form.members, form.priority, form.estimated_minutes)
    if errors:
        return form_errors(errors)
    service = get_container(request).minute_tracker_service
    try:
        entry = await service.get(entry_id, user["id"])
        entry.date = to_date(form.date)
        entry.members = list(dict.fromkeys(form.members))
        entry.tasks = {m: form.tasks.get(m) or entry.tasks.get(m) or [""] for m in entry.members}
        entry.priority = form.priority
        entry.estimated_minutes = form.estimated_minutes
        await service.update(entry)
    except EntryNotFoundError:
        raise HTTPException(404, "Entry not found")
    return dump(MINUTE_TRACKER, entry)


@router.delete("/{entry_id}")
async def delete_entry(entry_id: str, request: Request, user: dict = Depends(require_user)):
    try:
        await get_container(request).minute_tracker_service.delete(entry_id, user["id"])
    except EntryNotFoundError:
        raise HTTPException(404, "Entry not found")
    return {"ok": True}


@router.post("/{entry_id}/duplicate", status_code=201)
async def duplicate_entry(
    entry_id: str, request: Request, form: Optional[DuplicateForm] = None, user: dict = Depends(require_user)
):
    target = form.date if form else None
    if target and not is_valid_date(target):
        return form_errors(["Date must be a valid date (YYYY-MM-DD)"])
    try:
        copy = await get_container(request).minute_tracker_service.duplicate(entry_id, user["id"], date=target)
    except EntryNotFoundError:
        raise HTTPException(404, "Entry not found")
    return dump(MINUTE_TRACKER, copy)


@router.post("/{entry_id}/tasks/{member_id}")
async def add_task(entry_id: str, member_id: str, request: Request, user: dict = Depends(require_user)):
    try:
        entry = await get_container(request).minute_tracker_service.add_task(entry_id, user["id"], member_id)
    except EntryNotFoundError:
        raise HTTPException(404, "Entry not found")
    except MemberNotInEntryError:
        raise HTTPException(404, "Member is not part of this entry")
    return dump(MINUTE_TRACKER, entry)


@router.put("/{entry_id}/tasks/{member_id}/{index}")
async def update_task(
    entry_id: str, member_id: str, index: int, request: Request, form: TaskForm, user: dict = Depends(require_user)
):
    try:
        entry = await get_container(request).minute_tracker_service.update_task(
            entry_id, user["id"], member_id, index, form.value
        )
    except EntryNotFoundError:
        raise HTTPException(404, "Entry not found")
    except MemberNotInEntryError:
        raise HTTPException(404, "Member is not part of this entry")
    except IndexError:
        raise HTTPException(404, "Task not found")
    return dump(MINUTE_TRACKER, entry)


@router.delete("/{entry_id}/tasks/{member_id}/{index}")
async def remove_task(entry_id: str, member_id: str, index: int, request: Request, user: dict = Depends(require_user)):
    try:
        entry = await get_container(request).minute_tracker_service.remove_task(entry_id, user["id"], member_id, index)
    except EntryNotFoundError:
        raise HTTPException(404, "Entry not found")
    return dump(MINUTE_TRACKER, entry)

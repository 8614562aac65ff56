from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from cabin.core.utils import to_date
from cabin.domain.models import REGISTRY
from cabin.domain.validation import is_valid_date, is_valid_time
from cabin.routers.deps import dump, form_errors, get_container, require_user

router = APIRouter(prefix="/registry", tags=["registry"])


class MarkForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    member_id: str = Field("", alias="memberId")
    date: Optional[str] = None
    time: Optional[str] = None


@router.get("")
async def registry_for_date(request: Request, date: Optional[str] = None, user: dict = Depends(require_user)):
    if date and not is_valid_date(date):
        return form_errors(["Date must be a valid date (YYYY-MM-DD)"])
    day = to_date(date) if date else _today()
    container = get_container(request)
    entries = await container.registry_service.entries_for_date(day, user["id"])
    members = await container.member_service.list(user["id"])
    summary = await container.registry_service.attendance_summary(day, user["id"], len(members))
    return {
        "date": day.isoformat(),
        "entries": [dump(REGISTRY, e) for e in entries],
        "summary": {"present": summary.present, "checkedOut": summary.checked_out, "total": summary.total},
    }


async def _mark(kind: str, request: Request, form: MarkForm, user: dict):
    errors = []
    if form.date and not is_valid_date(form.date):
        errors.append("Date must be a valid date (YYYY-MM-DD)")
    if form.time and not is_valid_time(form.time):
        errors.append("Time must be HH:MM (24-hour)")
    if errors:
        return form_errors(errors)
    container = get_container(request)
    member = await container.member_service.get(form.member_id, user["id"])
    if not member:
        raise HTTPException(404, "Member not found")
    day = to_date(form.date) if form.date else _today()
    mark = container.registry_service.mark_in if kind == "in" else container.registry_service.mark_out
    entry = await mark(day, member.id, user["id"], member.name, form.time)
    return dump(REGISTRY, entry)


@router.post("/mark-in")
async def mark_in(request: Request, form: MarkForm, user: dict = Depends(require_user)):
    return await _mark("in", request, form, user)


@router.post("/mark-out")
async def mark_out(request: Request, form: MarkForm, user: dict = Depends(require_user)):
    return await _mark("out", request, form, user)


def _today() -> date:
    return date.today()

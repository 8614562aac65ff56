from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from cabin.domain.models import MEMBERS
from cabin.domain.validation import validate_member_name
from cabin.routers.deps import dump, form_errors, get_container, require_user
from cabin.services.member_service import MemberNotFoundError

router = APIRouter(prefix="/members", tags=["members"])


class MemberForm(BaseModel):
    name: str = ""


@router.get("")
async def list_members(request: Request, user: dict = Depends(require_user)):
    members = await get_container(request).member_service.list(user["id"])
    return {"members": [dump(MEMBERS, m) for m in members]}


@router.post("", status_code=201)
async def add_member(request: Request, form: MemberForm, user: dict = Depends(require_user)):
    errors = validate_member_name(form.name)
    if errors:
        return form_errors(errors)
    member = await get_container(request).member_service.add(form.name, user["id"])
    return dump(MEMBERS, member)


@router.delete("/{member_id}")
async def delete_member(member_id: str, request: Request, user: dict = Depends(require_user)):
    try:
        removed = await get_container(request).member_service.delete_member_and_dependents(member_id, user["id"])
    except MemberNotFoundError:
        raise HTTPException(404, "Member not found")
    return {"ok": True, "registryEntriesRemoved": removed}

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from cabin.core.utils import to_date
from cabin.domain.models import TODOS, Priority
from cabin.domain.validation import validate_todo
from cabin.routers.deps import dump, form_errors, get_container, require_user
from cabin.services.todo_service import TodoNotFoundError

router = APIRouter(prefix="/todos", tags=["todos"])


class TodoForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    description: Optional[str] = None
    priority: str = Priority.MEDIUM.value
    due_date: Optional[str] = Field(None, alias="dueDate")
    completed: bool = False


@router.get("")
async def list_todos(
    request: Request,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    period: Optional[str] = None,
    user: dict = Depends(require_user),
):
    todos = await get_container(request).todo_service.list(
        user["id"], status=status, priority=priority, period=period
    )
    return {"todos": [dump(TODOS, t) for t in todos]}


@router.post("", status_code=201)
async def add_todo(request: Request, form: TodoForm, user: dict = Depends(require_user)):
    errors = validate_todo(form.title, form.priority, form.due_date)
    if errors:
        return form_errors(errors)
    todo = await get_container(request).todo_service.add(
        user["id"],
        form.title,
        description=form.description,
        priority=form.priority,
        due_date=form.due_date or None,
    )
    return dump(TODOS, todo)


@router.put("/{todo_id}")
async def update_todo(todo_id: str, request: Request, form: TodoForm, user: dict = Depends(require_user)):
    errors = validate_todo(form.title, form.priority, form.due_date)
    if errors:
        return form_errors(errors)
    service = get_container(request).todo_service
    try:
        todo = await service.get(todo_id, user["id"])
        todo.title = form.title.strip()
        todo.description = (form.description or "").strip() or None
        todo.priority = form.priority
        todo.due_date = to_date(form.due_date) if form.due_date else None
        todo.completed = form.completed
        await service.update(todo)
    except TodoNotFoundError:
        raise HTTPException(404, "Todo not found")
    return dump(TODOS, todo)


@router.post("/{todo_id}/toggle")
async def toggle_todo(todo_id: str, request: Request, user: dict = Depends(require_user)):
    try:
        todo = await get_container(request).todo_service.toggle(todo_id, user["id"])
    except TodoNotFoundError:
        raise HTTPException(404, "Todo not found")
    return dump(TODOS, todo)


@router.delete("/{todo_id}")
async def delete_todo(todo_id: str, request: Request, user: dict = Depends(require_user)):
    try:
        await get_container(request).todo_service.delete(todo_id, user["id"])
    except TodoNotFoundError:
        raise HTTPException(404, "Todo not found")
    return {"ok": True}

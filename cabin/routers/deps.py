"""Helpers shared by the routers: container lookup, the signed-in team, error bodies."""
from __future__ import annotations

from typing import Iterable

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from cabin.container import Container
from cabin.domain.schema import serialize_record
from cabin.services.session_service import resolve_session, session_token


def get_container(request: Request) -> Container:
    container = getattr(getattr(request.app, "state", None), "container", None)
    if not container:
        raise RuntimeError("Container not configured")
    return container


async def current_user(request: Request) -> dict | None:
    container = get_container(request)
    return await resolve_session(container.store, container.auth_service, session_token(request))


async def require_user(request: Request) -> dict:
    user = await current_user(request)
    if not user:
        raise HTTPException(401, "Not authenticated")
    return user


def form_errors(errors: Iterable[str], status_code: int = 400) -> JSONResponse:
    return JSONResponse({"errors": list(errors)}, status_code=status_code)


def dump(collection: str, entity) -> dict:
    """JSON-ready persisted shape of an entity record."""
    return serialize_record(collection, entity.to_record())

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from cabin.routers.deps import current_user

router = APIRouter(prefix="", tags=["pages"])

HOME_PATH = "/registry"


@router.get("/")
async def index(request: Request):
    """Send signed-in teams to the main view and everyone else to login."""
    user = await current_user(request)
    return RedirectResponse(HOME_PATH if user else "/login", status_code=302)

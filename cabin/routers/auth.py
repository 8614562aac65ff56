from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from cabin.core.config import get_settings
from cabin.core.rate_limiter import rate_limit_ip
from cabin.domain.validation import validate_login, validate_registration
from cabin.routers.deps import current_user, form_errors, get_container
from cabin.services.session_service import (
    SessionManager,
    clear_session_cookie,
    delete_session,
    session_token,
    set_session_cookie,
)

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    team_name: str = Field("", alias="teamName")
    password: str = ""
    confirm_password: str = Field("", alias="confirmPassword")


class LoginForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    team_name: str = Field("", alias="teamName")
    password: str = ""


def _throttle(request: Request, scope: str) -> None:
    settings = get_settings()
    rate_limit_ip(request, scope, limit=settings.auth_rate_limit, window_seconds=settings.auth_rate_window_seconds)


@router.post("/register")
async def register(request: Request, form: RegisterForm):
    _throttle(request, "auth:register")
    errors = validate_registration(
        form.team_name,
        form.password,
        form.confirm_password,
        min_password_length=get_settings().min_password_length,
    )
    if errors:
        return form_errors(errors)
    container = get_container(request)
    manager = SessionManager(container.store, container.auth_service)
    if not await manager.register(form.team_name.strip(), form.password):
        return form_errors(["Team name already exists. Please choose a different name."], status_code=409)
    return JSONResponse({"ok": True, "redirect": "/login?registered=true"}, status_code=201)


@router.post("/login")
async def login(request: Request, form: LoginForm):
    _throttle(request, "auth:login")
    errors = validate_login(form.team_name, form.password)
    if errors:
        return form_errors(errors)
    container = get_container(request)
    manager = SessionManager(container.store, container.auth_service)
    if not await manager.login(form.team_name.strip(), form.password):
        return form_errors(["Invalid team name or password"], status_code=401)
    response = JSONResponse({"ok": True, "user": manager.user})
    set_session_cookie(response, manager.token)
    return response


@router.post("/logout")
async def logout(request: Request):
    await delete_session(get_container(request).store, session_token(request))
    response = JSONResponse({"ok": True})
    clear_session_cookie(response)
    return response


@router.get("/session")
async def session_state(request: Request):
    user = await current_user(request)
    return {"authenticated": user is not None, "user": user}

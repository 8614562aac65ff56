"""Session helpers (issue tokens, cookies, validation) and the client session state."""
from __future__ import annotations

import logging
import secrets
from enum import Enum
from typing import Optional

from fastapi import Request, Response

from cabin.core.config import get_settings
from cabin.core.utils import utcnow
from cabin.domain.models import SESSIONS
from cabin.repositories.base import KeyValueStore
from cabin.services.auth_service import AuthService

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "session"


async def issue_session(store: KeyValueStore, user_id: str) -> str:
    """Create a new session token and persist it. Sessions never expire."""
    token = secrets.token_urlsafe(32)
    await store.set(SESSIONS, token, {"token": token, "userId": user_id, "createdAt": utcnow()})
    return token


async def resolve_session(store: KeyValueStore, auth: AuthService, token: str | None) -> Optional[dict]:
    """Return the public user behind ``token``, if any."""
    if not token:
        return None
    record = await store.get(SESSIONS, token)
    if not record:
        return None
    return await auth.get_user(record["userId"])


async def delete_session(store: KeyValueStore, token: str | None) -> None:
    if not token:
        return
    await store.delete(SESSIONS, token)


def session_token(request: Request) -> str | None:
    return request.cookies.get(SESSION_COOKIE_NAME)


def set_session_cookie(response: Response, token: str) -> None:
    # no max_age: the cookie lasts for the browser session
    settings = get_settings()
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.app_env == "prod",
        samesite="strict",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class SessionManager:
    """Session state of one client.

    anonymous -> authenticating -> authenticated, and back to anonymous on
    logout or on a failed login/register.
    """

    def __init__(self, store: KeyValueStore, auth: AuthService | None = None) -> None:
        self.store = store
        self.auth = auth or AuthService(store)
        self.state = SessionState.ANONYMOUS
        self.user: Optional[dict] = None
        self.token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    def _reset(self) -> None:
        self.state = SessionState.ANONYMOUS
        self.user = None
        self.token = None

    async def bootstrap(self, token: str | None) -> bool:
        """Restore a stored session before protected views are served."""
        user = await resolve_session(self.store, self.auth, token)
        if not user:
            self._reset()
            return False
        self.user, self.token, self.state = user, token, SessionState.AUTHENTICATED
        return True

    async def login(self, team_name: str, password: str) -> bool:
        self.state = SessionState.AUTHENTICATING
        try:
            user = await self.auth.login(team_name, password)
        except Exception:
            self._reset()
            raise
        if not user:
            self._reset()
            return False
        self.token = await issue_session(self.store, user["id"])
        self.user = user
        self.state = SessionState.AUTHENTICATED
        return True

    async def register(self, team_name: str, password: str) -> bool:
        """Create the account. The session stays anonymous until an explicit login."""
        self.state = SessionState.AUTHENTICATING
        try:
            created = await self.auth.register(team_name, password)
        finally:
            self._reset()
        return created

    async def logout(self) -> None:
        token = self.token
        self._reset()
        await delete_session(self.store, token)

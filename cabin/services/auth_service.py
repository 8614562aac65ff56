"""
Team account registration and login.
"""

from __future__ import annotations

import logging
from typing import Optional

from starlette.concurrency import run_in_threadpool

from cabin.core.security import hash_password, verify_password
from cabin.core.utils import new_id, utcnow
from cabin.domain.models import USERS, User
from cabin.repositories.base import KeyValueStore

logger = logging.getLogger(__name__)


def _name_key(team_name: str) -> str:
    return (team_name or "").strip().casefold()


class AuthService:
    """Registers team accounts and checks their credentials."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    async def _find_by_team_name(self, team_name: str) -> Optional[User]:
        key = _name_key(team_name)
        if not key:
            return None
        # team names are unique ignoring case, so no equality query fits
        for record in await self.store.get_all(USERS):
            if _name_key(record.get("teamName", "")) == key:
                return User.from_record(record)
        return None

    async def is_team_name_available(self, team_name: str) -> bool:
        return await self._find_by_team_name(team_name) is None

    async def register(self, team_name: str, password: str) -> bool:
        """Create the account; False when the team name is already taken."""
        name = (team_name or "").strip()
        if not name or not password:
            return False
        if not await self.is_team_name_available(name):
            logger.info("Registration rejected, team name taken: %s", name)
            return False
        hashed = await run_in_threadpool(hash_password, password)
        user = User(id=new_id(), team_name=name, password=hashed, created_at=utcnow())
        await self.store.set(USERS, user.id, user.to_record())
        logger.info("Registered team %s (%s)", name, user.id)
        return True

    async def login(self, team_name: str, password: str) -> Optional[dict]:
        """Return the public user record when the credentials match."""
        user = await self._find_by_team_name(team_name)
        if not user or not await run_in_threadpool(verify_password, password or "", user.password):
            logger.warning("Failed login for team %s", (team_name or "").strip())
            return None
        return user.public()

    async def get_user(self, user_id: str) -> Optional[dict]:
        record = await self.store.get(USERS, user_id)
        return User.from_record(record).public() if record else None

"""Team members and the removal of everything that hangs off them."""

from __future__ import annotations

import logging
from typing import Optional

from cabin.core.utils import new_id, utcnow
from cabin.domain.models import MEMBERS, Member
from cabin.repositories.base import KeyValueStore
from cabin.services.registry_service import RegistryService

logger = logging.getLogger(__name__)


class MemberNotFoundError(Exception):
    pass


class MemberService:
    def __init__(self, store: KeyValueStore, registry: RegistryService | None = None) -> None:
        self.store = store
        self.registry = registry or RegistryService(store)

    async def list(self, user_id: str) -> list[Member]:
        records = await self.store.get_where(MEMBERS, "userId", user_id)
        members = [Member.from_record(r) for r in records]
        return sorted(members, key=lambda m: m.created_at)

    async def get(self, member_id: str, user_id: str) -> Optional[Member]:
        record = await self.store.get(MEMBERS, member_id)
        if not record or record.get("userId") != user_id:
            return None
        return Member.from_record(record)

    async def add(self, name: str, user_id: str) -> Member:
        member = Member(id=new_id(), name=(name or "").strip(), user_id=user_id, created_at=utcnow())
        await self.store.set(MEMBERS, member.id, member.to_record())
        return member

    async def names(self, user_id: str) -> dict[str, str]:
        return {m.id: m.name for m in await self.list(user_id)}

    async def delete_member_and_dependents(self, member_id: str, user_id: str) -> int:
        """Delete the member and its registry entries; returns how many entries went.

        The two steps are not atomic: if the member delete fails, the registry
        entries are already gone.
        """
        member = await self.get(member_id, user_id)
        if not member:
            raise MemberNotFoundError(member_id)
        removed = await self.registry.delete_all_for_member(member_id, user_id)
        await self.store.delete(MEMBERS, member_id)
        logger.info("Deleted member %s and %d registry entries", member_id, removed)
        return removed

    delete = delete_member_and_dependents

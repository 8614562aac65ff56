from __future__ import annotations

from datetime import date

import pytest

from cabin.services.member_service import MemberNotFoundError, MemberService
from cabin.services.registry_service import RegistryService

pytestmark = pytest.mark.anyio


async def test_add_and_list_members_by_owner(store):
    svc = MemberService(store)
    first = await svc.add("  Asha ", "u1")
    await svc.add("Ben", "u1")
    await svc.add("Other", "u2")

    members = await svc.list("u1")
    assert [m.name for m in members] == ["Asha", "Ben"]
    assert first.name == "Asha"
    assert await svc.get(first.id, "u2") is None


async def test_delete_removes_registry_entries(store):
    registry = RegistryService(store)
    svc = MemberService(store, registry)
    asha = await svc.add("Asha", "u1")
    ben = await svc.add("Ben", "u1")
    await registry.mark_in(date(2024, 1, 1), asha.id, "u1", "Asha", time="09:00")
    await registry.mark_in(date(2024, 1, 2), asha.id, "u1", "Asha", time="09:00")
    await registry.mark_in(date(2024, 1, 1), ben.id, "u1", "Ben", time="09:00")

    removed = await svc.delete_member_and_dependents(asha.id, "u1")

    assert removed == 2
    assert await svc.get(asha.id, "u1") is None
    assert await store.get_where("registry", "memberId", asha.id) == []
    assert [r["memberId"] for r in await store.get_all("registry")] == [ben.id]


async def test_delete_unknown_or_foreign_member(store):
    svc = MemberService(store)
    asha = await svc.add("Asha", "u1")
    with pytest.raises(MemberNotFoundError):
        await svc.delete(asha.id, "u2")
    with pytest.raises(MemberNotFoundError):
        await svc.delete("missing", "u1")
    assert await svc.get(asha.id, "u1") is not None

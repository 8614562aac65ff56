from __future__ import annotations

from dataclasses import dataclass

from cabin.repositories.base import KeyValueStore
from cabin.services.auth_service import AuthService
from cabin.services.member_service import MemberService
from cabin.services.minute_tracker_service import MinuteTrackerService
from cabin.services.registry_service import RegistryService
from cabin.services.todo_service import TodoService


@dataclass(frozen=True)
class Container:
    store: KeyValueStore

    auth_service: AuthService
    member_service: MemberService
    registry_service: RegistryService
    todo_service: TodoService
    minute_tracker_service: MinuteTrackerService


def build_container(store: KeyValueStore) -> Container:
    registry_service = RegistryService(store)
    return Container(
        store=store,
        auth_service=AuthService(store),
        member_service=MemberService(store, registry_service),
        registry_service=registry_service,
        todo_service=TodoService(store),
        minute_tracker_service=MinuteTrackerService(store),
    )

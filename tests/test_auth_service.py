from __future__ import annotations

import threading

import pytest

from cabin.core.security import hash_password, verify_password
from cabin.services.auth_service import AuthService
from cabin.services.session_service import SessionManager, SessionState, resolve_session

pytestmark = pytest.mark.anyio


async def test_team_name_is_unique_ignoring_case(store):
    svc = AuthService(store)
    assert await svc.register("alpha", "secret1") is True
    assert await svc.register("Alpha", "secret2") is False
    assert await svc.register("  ALPHA ", "secret3") is False
    assert len(await store.get_all("users")) == 1


async def test_password_is_not_stored_in_plaintext(store):
    svc = AuthService(store)
    await svc.register("Cabin Crew", "Secret1!")
    [record] = await store.get_all("users")
    assert record["password"] != "Secret1!"
    assert verify_password("Secret1!", record["password"])


async def test_register_then_login(store):
    svc = AuthService(store)
    assert await svc.register("Cabin Crew", "Secret1!")

    user = await svc.login("Cabin Crew", "Secret1!")
    assert user["teamName"] == "Cabin Crew"
    assert "password" not in user

    assert await svc.login("cabin crew", "Secret1!") is not None
    assert await svc.login("Cabin Crew", "wrong") is None
    assert await svc.login("Nobody", "Secret1!") is None


async def test_session_manager_states(store):
    manager = SessionManager(store)
    assert manager.state is SessionState.ANONYMOUS

    assert await manager.register("Cabin Crew", "Secret1!")
    assert manager.state is SessionState.ANONYMOUS

    assert await manager.login("Cabin Crew", "Secret1!")
    assert manager.state is SessionState.AUTHENTICATED
    assert manager.user["teamName"] == "Cabin Crew"
    token = manager.token
    assert (await resolve_session(store, manager.auth, token))["teamName"] == "Cabin Crew"

    await manager.logout()
    assert manager.state is SessionState.ANONYMOUS
    assert manager.user is None
    assert await resolve_session(store, manager.auth, token) is None


async def test_wrong_password_creates_no_session(store):
    manager = SessionManager(store)
    await manager.register("Cabin Crew", "Secret1!")
    assert await manager.login("Cabin Crew", "nope") is False
    assert manager.state is SessionState.ANONYMOUS
    assert manager.token is None
    assert await store.get_all("sessions") == []


async def test_bootstrap_restores_existing_session(store):
    first = SessionManager(store)
    await first.register("Cabin Crew", "Secret1!")
    await first.login("Cabin Crew", "Secret1!")

    second = SessionManager(store)
    assert await second.bootstrap(first.token) is True
    assert second.is_authenticated
    assert second.user["id"] == first.user["id"]

    assert await SessionManager(store).bootstrap("bogus") is False
    assert await SessionManager(store).bootstrap(None) is False


def test_verify_password_rejects_unhashed_values():
    assert verify_password("secret", "secret") is False
    assert verify_password("secret", None) is False
    assert verify_password("secret", hash_password("secret")) is True


async def test_password_hashing_runs_in_worker_thread(json_store, monkeypatch):
    from cabin.services import auth_service

    loop_thread = threading.get_ident()
    seen = []

    def tracking(fn):
        def wrapper(*args):
            seen.append(threading.get_ident())
            return fn(*args)

        return wrapper

    monkeypatch.setattr(auth_service, "hash_password", tracking(auth_service.hash_password))
    monkeypatch.setattr(auth_service, "verify_password", tracking(auth_service.verify_password))

    svc = AuthService(json_store)
    assert await svc.register("Cabin Crew", "Secret1!") is True
    assert await svc.login("Cabin Crew", "Secret1!") is not None
    assert len(seen) == 2
    assert loop_thread not in seen

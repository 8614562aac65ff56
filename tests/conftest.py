from __future__ import annotations

import sys
from pathlib import Path

import pytest

# make the cabin package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cabin.core import config as core_config  # noqa: E402
from cabin.core.rate_limiter import reset_limits  # noqa: E402
from cabin.db import models  # noqa: E402
from cabin.db import session as db_session  # noqa: E402
from cabin.repositories.json_storage import JsonStore  # noqa: E402
from cabin.repositories.sql_repository import SQLStore  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def json_store(tmp_path) -> JsonStore:
    return JsonStore(tmp_path / "data.json")


@pytest.fixture()
def sql_store(tmp_path, monkeypatch):
    """Temporary SQLite database; engine caches are reset on both sides."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    _clear_caches()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield SQLStore()

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    _clear_caches()


@pytest.fixture(params=["json", "sql"])
def store(request):
    """Runs the test once per storage backend."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture()
def client(tmp_path, monkeypatch):
    from fastapi.testclient import TestClient

    from cabin.app import create_app

    monkeypatch.setenv("DATA_FILE", str(tmp_path / "api-data.json"))
    monkeypatch.setenv("STORAGE_BACKEND", "json")
    _clear_caches()
    reset_limits()
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
    reset_limits()
    _clear_caches()

from __future__ import annotations

from sqlalchemy import inspect

from cabin.core import config as core_config
from cabin.db import session as db_session
from cabin.db.create_tables import create_all


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


def test_create_all_builds_documents_table(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'fresh.db'}")
    _clear_caches()
    try:
        create_all()
        create_all()
        engine = db_session.get_engine()
        inspector = inspect(engine)
        assert inspector.has_table("documents")
        assert "ix_documents_collection_user" in {ix["name"] for ix in inspector.get_indexes("documents")}
        engine.dispose()
    finally:
        _clear_caches()

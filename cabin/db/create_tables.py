"""Creates the ``documents`` table that backs the SQL store.

Run ``python -m cabin.db.create_tables`` once against a fresh database; the
app also calls create_all() on startup when STORAGE_BACKEND=sql.
"""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from . import models
from .session import Base, get_engine

logger = logging.getLogger(__name__)


def create_all() -> None:
    """Create missing tables; existing ones are left untouched."""
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Ensured table %s on %s", models.Document.__tablename__, engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    try:
        create_all()
        print("documents table is ready.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Could not create the documents table: {exc}") from exc

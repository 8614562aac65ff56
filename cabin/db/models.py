"""SQLAlchemy model holding every collection as JSON documents."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, String, JSON, func

from .session import Base


class Document(Base):
    __tablename__ = "documents"

    collection = Column(String(64), primary_key=True)
    id = Column(String(191), primary_key=True)
    user_id = Column(String(191), nullable=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (Index("ix_documents_collection_user", "collection", "user_id"),)

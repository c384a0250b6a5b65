"""
SQLAlchemy 2.0 model backing the document-database store.

Every entity (users, assistants, chat threads, messages, files) lives in one
``documents`` table: the collection name, the caller-assigned id and the
record itself as JSON (JSONB on PostgreSQL). ``seq`` preserves insertion order.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from userlink.db.base import Base

DocumentData = JSON().with_variant(JSONB(), "postgresql")


class Document(Base):
    """One record of one collection."""

    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("collection", "id", name="unique_collection_document_id"),
        Index("idx_documents_collection", "collection"),
    )

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String(50), nullable=False)
    id: Mapped[str] = mapped_column(String(255), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(DocumentData, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

"""
Type Editor Backend — Document SQLAlchemy Model
================================================

What:  ORM model for the `documents` table, the root of ownership.
Who:   DocumentService for CRUD; Base.metadata for create_all and Alembic.

Table Design:
    - Integer autoincrement primary key (the editor frontend addresses
      documents by number)
    - updated_at drives the list order (most recently edited first)
    - Nodes reference documents with ON DELETE CASCADE; deleting a document
      row removes its whole outline in the database itself
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from type_editor.database import Base, utc_now


class Document(Base):
    """
    A titled document owning zero or more nodes.

    Query Patterns:
        - List: SELECT ... ORDER BY updated_at DESC
          → idx_documents_updated_at
        - Get/update/delete by id → primary key
    """

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    # Set by the server only; clients never send them.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_documents_updated_at", updated_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, title='{self.title}')>"

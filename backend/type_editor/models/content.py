"""
Type Editor Backend — Content SQLAlchemy Model
===============================================

What:  ORM model for the `content` table: the rich editor payload of a node.

One row per node, enforced by the UNIQUE constraint on node_id. The row is
created by the first save and upserted on every later save
(INSERT ... ON CONFLICT(node_id) DO UPDATE), so concurrent saves for the same
node are serialized by the database. content_json is opaque to the backend.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from type_editor.database import Base, utc_now


class Content(Base):
    __tablename__ = "content"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    node_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("nodes.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    content_json: Mapped[str] = mapped_column(Text, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Content(id={self.id}, node_id={self.node_id})>"

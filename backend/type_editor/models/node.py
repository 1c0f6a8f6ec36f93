"""
Type Editor Backend — Node SQLAlchemy Model
============================================

What:  ORM model for the `nodes` table: the titled, typed, orderable units
       (sections, equations, figures) that make up a document outline.
Who:   NodeService for CRUD; Base.metadata for create_all and Alembic.

Hierarchy columns:
    parent_id     optional self-reference, ON DELETE CASCADE
    order_index   sibling ordering hint; uniqueness/contiguity not enforced
    indent_level  depth hint; not checked against the real parent depth

    The backend stores these as given and never walks the tree. A parent in
    another document or a cyclic parent chain is accepted; the cascades only
    guarantee that deleting a parent (or the document) leaves no orphans.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from type_editor.database import Base, utc_now


class Node(Base):
    """
    One entry of a document outline.

    Query Patterns:
        - List by document: WHERE document_id = :id ORDER BY order_index
          → idx_nodes_document_order
        - Get/update/delete by id → primary key
    """

    __tablename__ = "nodes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    document_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
    )

    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("nodes.id", ondelete="CASCADE"),
        nullable=True,
        default=None,
    )

    # Free-text tag: "section" | "equation" | "figure" by convention
    node_type: Mapped[str] = mapped_column(Text, nullable=False)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    order_index: Mapped[int] = mapped_column(Integer, nullable=False)

    indent_level: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    # Public /uploads/... path set by the client after an image upload
    image_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    # ── Timestamps ────────────────────────────────────────────────────────
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
        Index("idx_nodes_document_order", "document_id", "order_index"),
    )

    def __repr__(self) -> str:
        return (
            f"<Node(id={self.id}, document_id={self.document_id}, "
            f"node_type='{self.node_type}', order_index={self.order_index})>"
        )

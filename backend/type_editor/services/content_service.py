"""
Type Editor Backend — Content Service
======================================

What:  Read, upsert and delete the per-node editor payload (`content` table).
Who:   Called by the /api/content handlers.

Upsert:
    INSERT INTO content (node_id, content_json, updated_at) VALUES (...)
    ON CONFLICT (node_id) DO UPDATE
        SET content_json = excluded.content_json,
            updated_at   = excluded.updated_at

    The UNIQUE(node_id) constraint makes the database resolve concurrent
    saves for one node; the last writer wins. There is no application lock.
"""

import logging
from typing import List

from sqlalchemy import asc, delete, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from type_editor.database import utc_now
from type_editor.exceptions import DatabaseError, NotFoundError
from type_editor.models.content import Content
from type_editor.models.node import Node
from type_editor.schemas.content import ContentResponse, ContentSave

logger = logging.getLogger(__name__)

# Dialect-specific INSERT constructs that support ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


class ContentService:
    """Business logic layer for node content."""

    async def _fetch(self, db: AsyncSession, node_id: int):
        result = await db.execute(
            select(Content)
            .where(Content.node_id == node_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_content(self, db: AsyncSession, node_id: int) -> ContentResponse:
        """
        Content of a node.

        Raises:
            NotFoundError: Nothing was ever saved for this node. The same
                           error is raised when the node itself is missing.
        """
        try:
            content = await self._fetch(db, node_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching content for node %s: %s", node_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the content. Please try again.",
                context={"node_id": node_id},
            )

        if content is None:
            raise NotFoundError(resource="content", resource_id=str(node_id))

        return ContentResponse.model_validate(content)

    async def save_content(
        self,
        db: AsyncSession,
        node_id: int,
        payload: ContentSave,
    ) -> ContentResponse:
        """
        Create the node's content row on first save, overwrite it afterwards.

        Raises:
            DatabaseError: Upsert failed, e.g. the node does not exist
                           (foreign key violation) (→ 500)
        """
        dialect = db.bind.dialect.name
        insert = UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise DatabaseError(
                message="Saving content is not supported on this database.",
                context={"dialect": dialect},
            )

        stmt = insert(Content).values(
            node_id=node_id,
            content_json=payload.content_json,
            updated_at=utc_now(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["node_id"],
            set_={
                "content_json": stmt.excluded.content_json,
                "updated_at": stmt.excluded.updated_at,
            },
        )

        try:
            await db.execute(stmt)
            content = await self._fetch(db, node_id)
        except SQLAlchemyError as e:
            logger.error("Database error saving content for node %s: %s", node_id, str(e))
            raise DatabaseError(
                message="Could not save the content. Please try again.",
                context={"node_id": node_id, "error_type": type(e).__name__},
            )

        if content is None:
            raise DatabaseError(
                message="Could not save the content. Please try again.",
                context={"node_id": node_id, "reason": "row missing after upsert"},
            )

        logger.info("Content saved for node %s (%d chars)", node_id, len(payload.content_json))
        return ContentResponse.model_validate(content)

    async def delete_content(self, db: AsyncSession, node_id: int) -> None:
        """Drop a node's content row; the node itself stays. Not existence-checked."""
        try:
            result = await db.execute(delete(Content).where(Content.node_id == node_id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting content for node %s: %s", node_id, str(e))
            raise DatabaseError(
                message="Could not delete the content. Please try again.",
                context={"node_id": node_id},
            )
        if result.rowcount:
            logger.info("Content deleted for node %s", node_id)

    async def list_document_content(
        self,
        db: AsyncSession,
        document_id: int,
    ) -> List[ContentResponse]:
        """
        Saved content of every node in a document, in outline order.

        Nodes that were never saved have no row and are simply absent.
        """
        try:
            result = await db.execute(
                select(Content)
                .join(Node, Node.id == Content.node_id)
                .where(Node.document_id == document_id)
                .order_by(asc(Node.order_index), asc(Node.id))
            )
            return [ContentResponse.model_validate(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing content of document %s: %s", document_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the document content. Please try again.",
                context={"document_id": document_id},
            )


content_service = ContentService()

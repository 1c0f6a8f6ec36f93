"""
Type Editor Backend — Node Service
===================================

What:  CRUD statements for the `nodes` table.
Who:   Called by the /api/nodes and /api/documents/{doc_id}/nodes handlers.

The outline hierarchy is stored, not enforced:
    - document_id / parent_id existence is not pre-checked; a dangling
      reference is left to the database foreign keys (→ DatabaseError)
    - a parent in another document, or a cycle, is accepted
    - nodes are returned as a flat list ordered by order_index
    - a batch reorder is the one place ownership is checked: every listed
      node must exist and belong to the target document (→ ValidationError)
"""

import logging
from typing import List

from sqlalchemy import asc, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from type_editor.database import utc_now
from type_editor.exceptions import DatabaseError, NotFoundError, ValidationError
from type_editor.models.document import Document
from type_editor.models.node import Node
from type_editor.schemas.node import (
    NodeCreate,
    NodeReorder,
    NodeResponse,
    NodeUpdate,
    ReorderResponse,
)

logger = logging.getLogger(__name__)

# Fields PUT /api/nodes/{id} may change, in the order they are written
UPDATABLE_FIELDS = ("title", "order_index", "indent_level", "parent_id")


class NodeService:
    """Business logic layer for node operations."""

    async def list_nodes(self, db: AsyncSession, document_id: int) -> List[NodeResponse]:
        """
        Nodes of one document in ascending order_index.

        An unknown document yields an empty list, not a 404.
        """
        try:
            result = await db.execute(
                select(Node)
                .where(Node.document_id == document_id)
                .order_by(asc(Node.order_index), asc(Node.id))
            )
            return [NodeResponse.model_validate(node) for node in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing nodes of document %s: %s", document_id, str(e))
            raise DatabaseError(
                message="Could not retrieve nodes. Please try again.",
                context={"document_id": document_id},
            )

    async def create_node(self, db: AsyncSession, payload: NodeCreate) -> NodeResponse:
        """Insert a node as given and return the stored row."""
        try:
            node = Node(**payload.model_dump())
            db.add(node)
            await db.flush()
            await db.refresh(node)
            logger.info(
                "Node created: %s (document=%s, parent=%s, type=%s)",
                node.id,
                node.document_id,
                node.parent_id,
                node.node_type,
            )
            return NodeResponse.model_validate(node)
        except SQLAlchemyError as e:
            logger.error("Database error creating node: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the node. Please try again.",
                context={"document_id": payload.document_id, "error_type": type(e).__name__},
            )

    async def get_node(self, db: AsyncSession, node_id: int) -> NodeResponse:
        """
        Raises:
            NotFoundError: No node with this id (→ 404)
        """
        try:
            result = await db.execute(
                select(Node)
                .where(Node.id == node_id)
                .execution_options(populate_existing=True)
            )
            node = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching node %s: %s", node_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the node. Please try again.",
                context={"node_id": node_id},
            )

        if node is None:
            raise NotFoundError(resource="node", resource_id=str(node_id))

        return NodeResponse.model_validate(node)

    async def update_node(
        self,
        db: AsyncSession,
        node_id: int,
        payload: NodeUpdate,
    ) -> NodeResponse:
        """
        Partial update.

        Each supplied field is written by its own UPDATE, each refreshing
        updated_at; absent or null fields are skipped. The writes share the
        request transaction. The final read decides NotFoundError.
        """
        for field in UPDATABLE_FIELDS:
            value = getattr(payload, field)
            if value is None:
                continue
            try:
                await db.execute(
                    update(Node)
                    .where(Node.id == node_id)
                    .values({field: value, "updated_at": utc_now()})
                )
            except SQLAlchemyError as e:
                logger.error("Database error updating node %s (%s): %s", node_id, field, str(e))
                raise DatabaseError(
                    message="Could not update the node. Please try again.",
                    context={"node_id": node_id, "field": field},
                )

        node = await self.get_node(db, node_id)
        logger.info("Node updated: %s", node_id)
        return node

    async def list_children(self, db: AsyncSession, parent_id: int) -> List[NodeResponse]:
        """Direct children of a node in ascending order_index; unknown parent → []."""
        try:
            result = await db.execute(
                select(Node)
                .where(Node.parent_id == parent_id)
                .order_by(asc(Node.order_index), asc(Node.id))
            )
            return [NodeResponse.model_validate(node) for node in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing children of node %s: %s", parent_id, str(e))
            raise DatabaseError(
                message="Could not retrieve child nodes. Please try again.",
                context={"parent_id": parent_id},
            )

    async def reorder_nodes(
        self,
        db: AsyncSession,
        document_id: int,
        payload: NodeReorder,
    ) -> ReorderResponse:
        """
        Rewrite the position of several nodes of one document at once.

        Entry i gets order_index = i plus the given parent_id and
        indent_level (a null parent_id moves the node to top level). Every
        node is checked before anything is written, so a bad entry leaves the
        outline untouched. The document's updated_at is refreshed.

        Raises:
            ValidationError: A node is listed twice, does not exist, or
                             belongs to another document (→ 400)
        """
        node_ids = [entry.node_id for entry in payload.node_orders]
        if len(set(node_ids)) != len(node_ids):
            raise ValidationError(
                message="Each node may appear only once in a reorder request",
                field="node_orders",
                context={"document_id": document_id},
            )

        try:
            result = await db.execute(
                select(Node.id, Node.document_id).where(Node.id.in_(node_ids))
            )
            owners = {row.id: row.document_id for row in result.all()}
        except SQLAlchemyError as e:
            logger.error("Database error loading nodes to reorder: %s", str(e))
            raise DatabaseError(
                message="Could not reorder the nodes. Please try again.",
                context={"document_id": document_id},
            )

        for node_id in node_ids:
            if node_id not in owners:
                raise ValidationError(
                    message=f"Node {node_id} not found",
                    field="node_orders",
                    context={"node_id": node_id},
                )
            if owners[node_id] != document_id:
                raise ValidationError(
                    message=f"Node {node_id} does not belong to document {document_id}",
                    field="node_orders",
                    context={"node_id": node_id, "owner_document_id": owners[node_id]},
                )

        now = utc_now()
        try:
            for position, entry in enumerate(payload.node_orders):
                await db.execute(
                    update(Node)
                    .where(Node.id == entry.node_id)
                    .values(
                        order_index=position,
                        parent_id=entry.parent_id,
                        indent_level=entry.indent_level,
                        updated_at=now,
                    )
                )
            await db.execute(
                update(Document).where(Document.id == document_id).values(updated_at=now)
            )
        except SQLAlchemyError as e:
            logger.error("Database error reordering document %s: %s", document_id, str(e))
            raise DatabaseError(
                message="Could not reorder the nodes. Please try again.",
                context={"document_id": document_id, "error_type": type(e).__name__},
            )

        logger.info("Reordered %d nodes of document %s", len(node_ids), document_id)
        return ReorderResponse(
            message="Nodes reordered successfully",
            document_id=document_id,
            count=len(node_ids),
        )

    async def delete_node(self, db: AsyncSession, node_id: int) -> None:
        """
        Delete a node; its content row and child nodes cascade.

        Not existence-checked.
        """
        try:
            await db.execute(delete(Node).where(Node.id == node_id))
            logger.info("Node deleted: %s", node_id)
        except SQLAlchemyError as e:
            logger.error("Database error deleting node %s: %s", node_id, str(e))
            raise DatabaseError(
                message="Could not delete the node. Please try again.",
                context={"node_id": node_id},
            )


node_service = NodeService()

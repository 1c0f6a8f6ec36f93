"""
Type Editor Backend — Node Route Handlers
==========================================

What:  /api/nodes create, read, partial update and delete, the children of
       a node, and the batch reorder of a document's outline.
Who:   Called by the outline editor when sections, equations and figures
       are added, renamed, moved or removed.

Listing a document's nodes lives in documents.py, next to its parent
resource.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from type_editor.database import get_db_session
from type_editor.schemas.common import ErrorResponse
from type_editor.schemas.node import (
    NodeCreate,
    NodeReorder,
    NodeResponse,
    NodeUpdate,
    ReorderResponse,
)
from type_editor.services.node_service import node_service

router = APIRouter(prefix="/api", tags=["Nodes"])


@router.post(
    "/nodes",
    response_model=NodeResponse,
    responses={
        400: {"description": "Malformed body", "model": ErrorResponse},
        500: {"description": "Unknown document or parent, or server error", "model": ErrorResponse},
    },
    summary="Create a node",
    description=(
        "Stores the node as given. The hierarchy fields (parent_id, "
        "order_index, indent_level) are not validated."
    ),
)
async def create_node(
    payload: NodeCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NodeResponse:
    return await node_service.create_node(db, payload)


@router.get(
    "/nodes/{node_id}",
    response_model=NodeResponse,
    responses={
        404: {"description": "Node not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single node",
)
async def get_node(
    node_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> NodeResponse:
    return await node_service.get_node(db, node_id)


@router.put(
    "/nodes/{node_id}",
    response_model=NodeResponse,
    responses={
        400: {"description": "Malformed body", "model": ErrorResponse},
        404: {"description": "Node not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Partially update a node",
    description=(
        "Only title, order_index, indent_level and parent_id are writable. "
        "Omitted or null fields keep their stored value."
    ),
)
async def update_node(
    node_id: int,
    payload: NodeUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NodeResponse:
    return await node_service.update_node(db, node_id, payload)


@router.delete(
    "/nodes/{node_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Delete a node",
    description="Child nodes and the node's content are removed with it.",
)
async def delete_node(
    node_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await node_service.delete_node(db, node_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/nodes/{node_id}/children",
    response_model=List[NodeResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List the direct children of a node",
    description="Ordered by order_index. An unknown node yields an empty list.",
)
async def list_child_nodes(
    node_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[NodeResponse]:
    return await node_service.list_children(db, node_id)


@router.post(
    "/nodes/document/{document_id}/reorder",
    response_model=ReorderResponse,
    responses={
        400: {
            "description": "Unknown node, node of another document, or malformed body",
            "model": ErrorResponse,
        },
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Reorder the nodes of a document",
    description=(
        "Each listed node gets its list position as order_index, plus the "
        "given parent_id and indent_level. Nothing is written unless every "
        "node belongs to the document."
    ),
)
async def reorder_nodes(
    document_id: int,
    payload: NodeReorder,
    db: AsyncSession = Depends(get_db_session),
) -> ReorderResponse:
    return await node_service.reorder_nodes(db, document_id, payload)

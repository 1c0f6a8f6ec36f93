"""
Type Editor Backend — Content Route Handlers
=============================================

What:  GET/PUT/DELETE /api/content/{node_id}, the editor payload of one
       node, and GET /api/content/document/{document_id} for all of a
       document's saved content.
How:   content_json is an opaque string (the editor's serialized document);
       it is stored and returned verbatim.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from type_editor.database import get_db_session
from type_editor.schemas.common import ErrorResponse
from type_editor.schemas.content import ContentResponse, ContentSave
from type_editor.services.content_service import content_service

router = APIRouter(prefix="/api", tags=["Content"])


@router.get(
    "/content/{node_id}",
    response_model=ContentResponse,
    responses={
        404: {"description": "No content saved for this node", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a node's content",
)
async def get_content(
    node_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> ContentResponse:
    return await content_service.get_content(db, node_id)


@router.put(
    "/content/{node_id}",
    response_model=ContentResponse,
    responses={
        400: {"description": "Malformed body", "model": ErrorResponse},
        500: {"description": "Unknown node or server error", "model": ErrorResponse},
    },
    summary="Save a node's content",
    description="Creates the content on first save and overwrites it afterwards.",
)
async def save_content(
    node_id: int,
    payload: ContentSave,
    db: AsyncSession = Depends(get_db_session),
) -> ContentResponse:
    return await content_service.save_content(db, node_id, payload)


@router.delete(
    "/content/{node_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Delete a node's content",
    description="The node itself is kept. Deleting content that was never saved also returns 204.",
)
async def delete_content(
    node_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await content_service.delete_content(db, node_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/content/document/{document_id}",
    response_model=List[ContentResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Get all saved content of a document",
    description=(
        "Ordered like the outline (node order_index). Nodes without saved "
        "content are left out; an unknown document yields an empty list."
    ),
)
async def list_document_content(
    document_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[ContentResponse]:
    return await content_service.list_document_content(db, document_id)

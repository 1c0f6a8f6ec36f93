"""
Type Editor Backend — Document Route Handlers
==============================================

What:  /api/documents CRUD plus the per-document node listing.
How:   Decode path/body, delegate to DocumentService / NodeService, return
       the response model. The session dependency commits on success.
Who:   Called by the editor's document sidebar and outline view.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from type_editor.database import get_db_session
from type_editor.schemas.common import ErrorResponse
from type_editor.schemas.document import DocumentCreate, DocumentResponse
from type_editor.schemas.node import NodeResponse
from type_editor.services.document_service import document_service
from type_editor.services.node_service import node_service

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Documents"])


@router.get(
    "/documents",
    response_model=List[DocumentResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List documents",
    description="Returns every document, most recently updated first.",
)
async def list_documents(db: AsyncSession = Depends(get_db_session)) -> List[DocumentResponse]:
    return await document_service.list_documents(db)


@router.post(
    "/documents",
    response_model=DocumentResponse,
    responses={
        400: {"description": "Malformed body", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a document",
)
async def create_document(
    payload: DocumentCreate,
    db: AsyncSession = Depends(get_db_session),
) -> DocumentResponse:
    return await document_service.create_document(db, payload)


@router.get(
    "/documents/{document_id}",
    response_model=DocumentResponse,
    responses={
        404: {"description": "Document not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single document",
)
async def get_document(
    document_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> DocumentResponse:
    return await document_service.get_document(db, document_id)


@router.put(
    "/documents/{document_id}",
    response_model=DocumentResponse,
    responses={
        400: {"description": "Malformed body", "model": ErrorResponse},
        404: {"description": "Document not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Rename a document",
    description="Overwrites the title and refreshes updated_at.",
)
async def update_document(
    document_id: int,
    payload: DocumentCreate,
    db: AsyncSession = Depends(get_db_session),
) -> DocumentResponse:
    return await document_service.update_document(db, document_id, payload)


@router.delete(
    "/documents/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Delete a document",
    description=(
        "Deletes the document together with its nodes and their content. "
        "Deleting an unknown id also returns 204."
    ),
)
async def delete_document(
    document_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await document_service.delete_document(db, document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/documents/{document_id}/nodes",
    response_model=List[NodeResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List the nodes of a document",
    description=(
        "Flat list ordered by order_index. An unknown document yields an "
        "empty list."
    ),
)
async def list_document_nodes(
    document_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[NodeResponse]:
    return await node_service.list_nodes(db, document_id)

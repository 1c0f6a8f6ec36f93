"""
Type Editor Backend — Export Route
===================================

What:  POST /api/export/pdf placeholder. Echoes the request; nothing is
       rendered and the document id is not looked up.
"""

import logging

from fastapi import APIRouter

from type_editor.schemas.common import ErrorResponse
from type_editor.schemas.upload import ExportRequest, ExportResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Export"])

EXPORT_PLACEHOLDER_MESSAGE = "PDF export not yet implemented"


@router.post(
    "/export/pdf",
    response_model=ExportResponse,
    responses={400: {"description": "Malformed body", "model": ErrorResponse}},
    summary="Export a document as PDF (placeholder)",
)
async def export_pdf(payload: ExportRequest) -> ExportResponse:
    logger.info(
        "PDF export requested for document %s (template=%s)",
        payload.document_id,
        payload.template,
    )
    return ExportResponse(
        message=EXPORT_PLACEHOLDER_MESSAGE,
        document_id=payload.document_id,
        template=payload.template,
    )

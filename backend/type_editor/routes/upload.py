"""
Type Editor Backend — Upload Route Handlers
============================================

What:  Image upload, stored-file listing and deletion under /api/upload,
       plus GET /uploads/{path} serving the stored bytes back.
How:   The handler pulls the first multipart field, reads it fully, and hands
       name + bytes to FileService. All validation lives in the service.
Who:   Called by the figure node editor when the user attaches an image; the
       returned url is written into the node's image_url by the client.

Multipart handling:
    Only the FIRST field of the form is looked at, whatever its name.
    No fields, a plain text field, or a file part without a filename → 400.
"""

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import FileResponse
from starlette.datastructures import UploadFile

from type_editor.exceptions import NotFoundError, ValidationError
from type_editor.schemas.common import ErrorResponse
from type_editor.schemas.upload import StoredFileList, UploadResponse
from type_editor.services.file_service import file_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Upload"])

# Stored files are served outside /api, at the url returned by the upload
files_router = APIRouter(tags=["Upload"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        200: {"description": "Image stored", "model": UploadResponse},
        400: {"description": "Missing file or invalid image", "model": ErrorResponse},
        413: {"description": "File exceeds size limit", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Upload an image",
    description=(
        "Accepts a multipart/form-data body and stores its first field. "
        "Supported formats: JPEG, PNG, GIF, WebP. Maximum size: 10MB. "
        "The file content must match its extension."
    ),
)
async def upload_image(request: Request) -> UploadResponse:
    """
    Validate and store one uploaded image.

    Flow:
        1. Parse the multipart form and take its first field
        2. Require a file part with a filename
        3. Read the body fully
        4. FileService: size → sanitize → extension → magic number → store

    Example:
        curl -F "image=@figure.png" http://localhost:3001/api/upload
        → {"url": "/uploads/1718000000_figure.png", "filename": "1718000000_figure.png"}
    """
    async with request.form() as form:
        items = form.multi_items()
        if not items:
            raise ValidationError(message="No file uploaded", field="file")

        field_name, field = items[0]
        if not isinstance(field, UploadFile) or not field.filename:
            raise ValidationError(
                message="The uploaded field has no filename",
                field="file",
                context={"form_field": field_name},
            )

        try:
            content = await field.read()
        except OSError as e:
            logger.warning("Failed to read upload body for %s: %s", field.filename, str(e))
            raise ValidationError(
                message="Could not read the uploaded file",
                field="file",
                context={"filename": field.filename},
            )

        filename = field.filename

    logger.info("Upload received: %s (%d bytes)", filename, len(content))
    return await file_service.validate_and_store(filename, content)


@router.get(
    "/upload/list",
    response_model=StoredFileList,
    responses={500: {"description": "Storage failure", "model": ErrorResponse}},
    summary="List stored uploads",
    description="Every file in the upload directory, newest first.",
)
async def list_uploads() -> StoredFileList:
    files = file_service.list_files()
    return StoredFileList(files=files, count=len(files))


@router.delete(
    "/upload/{filename}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        400: {"description": "Unsafe filename", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Delete a stored upload",
)
async def delete_upload(filename: str) -> Response:
    file_service.delete_file(filename)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@files_router.get(
    "/uploads/{file_path:path}",
    summary="Serve an uploaded image",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Path outside the upload directory", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_upload(file_path: str) -> FileResponse:
    """
    Serve a stored upload.

    Security:
        The resolved path must stay inside the upload directory, so
        ../ segments cannot reach other files.
    """
    upload_root = file_service.upload_dir
    full_path = (upload_root / file_path).resolve()

    if not full_path.is_relative_to(upload_root):
        raise ValidationError(message="Invalid file path", field="file_path")

    if not full_path.is_file():
        raise NotFoundError(resource="file", resource_id=file_path)

    # media type is guessed from the extension
    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )

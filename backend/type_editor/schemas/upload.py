"""
Type Editor Backend — Upload and Export Schemas
================================================

What:  Response models for the image upload endpoints and the request/response
       pair of the PDF export placeholder.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """
    Returned by POST /api/upload.

    Example:
        {"url": "/uploads/1718000000_figure.png", "filename": "1718000000_figure.png"}
    """
    url: str = Field(description="Public path the stored image is served from")
    filename: str = Field(description="Stored filename: <unix-seconds>_<sanitized name>")


class StoredFile(BaseModel):
    """One entry of GET /api/upload/list."""
    filename: str
    size: int = Field(description="Size in bytes")
    modified_at: datetime
    url: str


class StoredFileList(BaseModel):
    files: List[StoredFile]
    count: int


class ExportRequest(BaseModel):
    """Body of POST /api/export/pdf."""
    document_id: int
    template: str = Field(description="Template name, e.g. paper, report, resume")


class ExportResponse(BaseModel):
    """Acknowledgement returned while PDF rendering is not available."""
    message: str
    document_id: int
    template: str

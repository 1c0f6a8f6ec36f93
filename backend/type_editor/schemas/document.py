"""
Type Editor Backend — Document Request/Response Schemas
========================================================

What:  Pydantic models for the /api/documents contract.
How:   FastAPI validates request bodies against these and serializes ORM rows
       through them (from_attributes).
"""

from datetime import datetime

from pydantic import BaseModel, Field


class DocumentCreate(BaseModel):
    """
    Body of POST /api/documents and PUT /api/documents/{id}.

    The update endpoint takes the same shape: the title is the only
    client-writable field of a document.
    """
    title: str = Field(description="Document title")


class DocumentResponse(BaseModel):
    """A persisted document row."""
    id: int = Field(description="Document identifier")
    title: str = Field(description="Document title")
    created_at: datetime = Field(description="When the document was created")
    updated_at: datetime = Field(description="When the document was last modified")

    model_config = {"from_attributes": True}

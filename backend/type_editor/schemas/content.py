"""
Type Editor Backend — Content Request/Response Schemas
=======================================================
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ContentSave(BaseModel):
    """Body of PUT /api/content/{node_id}."""
    content_json: str = Field(description="Serialized editor state; stored verbatim")


class ContentResponse(BaseModel):
    id: int
    node_id: int
    content_json: str
    updated_at: datetime

    model_config = {"from_attributes": True}

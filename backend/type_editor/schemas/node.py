"""
Type Editor Backend — Node Request/Response Schemas
====================================================

What:  Pydantic models for the /api/nodes contract.

Validation scope:
    Only types are checked here. Whether document_id or parent_id point at
    existing rows, or whether order_index/indent_level are consistent with
    the outline, is left to the client (and to the database foreign keys).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class NodeCreate(BaseModel):
    """Body of POST /api/nodes."""
    document_id: int = Field(description="Owning document")
    parent_id: Optional[int] = Field(default=None, description="Parent node, null for top level")
    node_type: str = Field(description="section, equation or figure by convention")
    title: str = Field(description="Node title")
    order_index: int = Field(description="Sibling ordering hint")
    indent_level: int = Field(description="Depth hint used by the outline view")
    image_url: Optional[str] = Field(default=None, description="Uploaded image path (/uploads/...)")


class NodeUpdate(BaseModel):
    """
    Body of PUT /api/nodes/{id}.

    Partial: a field that is absent or null is left untouched.
    """
    title: Optional[str] = None
    order_index: Optional[int] = None
    indent_level: Optional[int] = None
    parent_id: Optional[int] = None


class NodeResponse(BaseModel):
    """A persisted node row."""
    id: int
    document_id: int
    parent_id: Optional[int] = None
    node_type: str
    title: str
    order_index: int
    indent_level: int
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class NodeOrder(BaseModel):
    """One entry of a reorder request; its list position becomes order_index."""
    node_id: int
    parent_id: Optional[int] = Field(default=None, description="New parent, null for top level")
    indent_level: int = Field(default=0, description="New depth hint")


class NodeReorder(BaseModel):
    """Body of POST /api/nodes/document/{document_id}/reorder."""
    node_orders: List[NodeOrder] = Field(description="Every moved node, in its new order")


class ReorderResponse(BaseModel):
    message: str
    document_id: int
    count: int = Field(description="Number of nodes rewritten")

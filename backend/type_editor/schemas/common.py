"""
Type Editor Backend — Shared Schemas
=====================================

What:  Error and health response models used across routes.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "document with ID '42' was not found",
            "request_id": "550e8400"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    timestamp: datetime = Field(description="Server time of the check (UTC)")
    uptime_seconds: float = Field(description="Seconds since service started")


class DatabaseHealth(BaseModel):
    connected: bool


class DetailedHealthResponse(HealthResponse):
    """Returned by GET /health/detailed."""
    database: DatabaseHealth

"""
Type Editor Backend — Health Check Routes
==========================================

What:  Liveness endpoints for monitoring and load balancer probes.
How:   Probes the database with SELECT 1 and reports the aggregate status.
Who:   Called by Docker health checks, load balancers and uptime monitors.

Status levels:
    - healthy:   database reachable
    - unhealthy: database probe failed

Both endpoints always answer 200; the status field carries the verdict.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from type_editor import __version__
from type_editor.database import engine
from type_editor.schemas.common import DatabaseHealth, DetailedHealthResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module load time stands in for service start
_start_time = time.time()


async def _database_connected() -> bool:
    """Runs SELECT 1 on a pooled connection."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        return False


def _uptime() -> float:
    return round(time.time() - _start_time, 2)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns healthy when the database answers, unhealthy otherwise.",
)
async def health_check() -> HealthResponse:
    connected = await _database_connected()
    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=_uptime(),
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    summary="Health check with dependency status",
)
async def detailed_health_check() -> DetailedHealthResponse:
    """Same verdict as /health, plus the database probe result."""
    connected = await _database_connected()
    return DetailedHealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=_uptime(),
        database=DatabaseHealth(connected=connected),
    )

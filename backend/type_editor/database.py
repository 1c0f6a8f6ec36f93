"""
Type Editor Backend — Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, schema bootstrap and the
       FastAPI session dependency.
How:   One async engine with a small bounded pool; one session per request
       that commits on success and rolls back on error.
Who:   Route handlers (via Depends), the app lifespan, Alembic and tests.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling:
    pool_size=5, max_overflow=0:  at most five concurrent sessions; further
                                  requests wait in the pool queue
    pool_timeout=30:              how long a queued request waits
    pool_pre_ping:                validates connections before use

SQLite:
    Foreign keys are off by default in SQLite. Every new connection turns
    them on so ON DELETE CASCADE removes nodes and content with their
    document.
"""

import logging
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from type_editor.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.log_level == "DEBUG",
    }
    # In-memory SQLite runs on a single static connection; pool sizing
    # arguments are not accepted there.
    if ":memory:" not in settings.database_url:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())


if settings.is_sqlite:

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: rows stay readable after the request commits
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object between the app (create_all) and Alembic.
    """
    pass


def utc_now() -> datetime:
    """Server-side timestamp source for created_at/updated_at columns."""
    return datetime.now(timezone.utc)


# ── Schema Bootstrap ──────────────────────────────────────────────────────
async def init_db() -> None:
    """
    Create the documents, nodes and content tables if they do not exist.

    Idempotent: CREATE TABLE is only issued for missing tables, so this runs
    on every startup.
    """
    # Registers the models on Base.metadata
    from type_editor.models import content, document, node  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready (%s)", engine.url.render_as_string(hide_password=True))


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (the handler performs queries)
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/documents")
        async def list_documents(db: AsyncSession = Depends(get_db_session)):
            return await document_service.list_documents(db)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Closes all pooled connections. Called during application shutdown."""
    await engine.dispose()

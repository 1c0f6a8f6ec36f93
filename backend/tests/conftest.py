"""
Type Editor Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied before the package is imported, so
       the module-level settings, engine and file_service all point at
       throwaway locations.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── db: Creates the schema on the test engine, drops it afterwards
    ├── db_session: Real AsyncSession on the test database
    ├── upload_dir: The upload directory, emptied around each test
    ├── sample_image_bytes / image_samples: Minimal bytes per image format
    └── test_client: HTTPX AsyncClient bound to the FastAPI app
"""

import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before any type_editor import
_TEST_ROOT = tempfile.mkdtemp(prefix="type_editor_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_ROOT}/test.db"
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"

from type_editor.database import Base, async_session_factory, engine, init_db  # noqa: E402
from type_editor.services.file_service import file_service  # noqa: E402


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_TEST_ROOT, ignore_errors=True)


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        result = MagicMock()
        result.scalar_one_or_none.return_value = row
        mock_db_session.execute.return_value = result
    """
    session = AsyncMock()
    session.execute = AsyncMock(return_value=MagicMock())
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.bind = MagicMock()
    session.bind.dialect.name = "sqlite"
    return session


@pytest_asyncio.fixture
async def db():
    """
    Fresh schema on the SQLite test database.

    The engine is disposed afterwards: pooled aiosqlite connections belong
    to the event loop of the test that opened them.
    """
    await init_db()
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db):
    """Real session on the test database; uncommitted work is discarded."""
    async with async_session_factory() as session:
        yield session
        await session.rollback()


# ══════════════════════════════════════════════════════════════════════════
# File Fixtures
# ══════════════════════════════════════════════════════════════════════════

def _empty(directory: Path) -> None:
    if directory.is_dir():
        for entry in directory.iterdir():
            if entry.is_file():
                entry.unlink()


@pytest.fixture
def upload_dir():
    """The configured upload directory, empty at start and end of the test."""
    directory = file_service.upload_dir
    _empty(directory)
    yield directory
    _empty(directory)


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI + JFIF APP0 header + EOI."""
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xd9"
    )


@pytest.fixture
def image_samples(sample_image_bytes):
    """Leading bytes of each accepted format, keyed by extension."""
    return {
        ".jpg": sample_image_bytes,
        ".png": b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01",
        ".gif": b"GIF89a\x01\x00\x01\x00\x80\x00\x00\xff\xff\xff\x00\x00\x00;",
        ".webp": b"RIFF\x1a\x00\x00\x00WEBPVP8L\x0d\x00\x00\x00/\x00\x00\x00",
    }


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db, upload_dir):
    """
    HTTPX AsyncClient talking to the app in-process.

    ASGITransport does not run the lifespan; the `db` fixture creates the
    schema instead.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from type_editor.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

"""
Type Editor Backend — Application Package
==========================================

What: Persistence and HTTP API for the outline editor (documents, nodes,
      node content, image uploads).
Who:  Imported by uvicorn (`type_editor.main:app`), Alembic and pytest.

Layers:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← SQL statements, upload checks
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

"""
Type Editor Backend — Migration Tests
======================================

What:  Alembic revision 001 applied to and rolled back from a scratch
       SQLite file.
"""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

BACKEND_DIR = Path(__file__).resolve().parents[1]


def _config(db_path: Path) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    cfg.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_path}")
    return cfg


def test_upgrade_creates_schema(tmp_path):
    db_path = tmp_path / "migrate.db"

    command.upgrade(_config(db_path), "head")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        inspector = inspect(engine)
        assert {"documents", "nodes", "content"} <= set(inspector.get_table_names())

        node_fks = {fk["referred_table"]: fk for fk in inspector.get_foreign_keys("nodes")}
        assert node_fks["documents"]["options"].get("ondelete") == "CASCADE"
        assert node_fks["nodes"]["options"].get("ondelete") == "CASCADE"

        unique = inspector.get_unique_constraints("content")
        assert [c["column_names"] for c in unique] == [["node_id"]]

        index_names = {ix["name"] for ix in inspector.get_indexes("nodes")}
        assert "idx_nodes_document_order" in index_names
    finally:
        engine.dispose()


def test_downgrade_drops_schema(tmp_path):
    db_path = tmp_path / "migrate.db"
    cfg = _config(db_path)

    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        assert set(inspect(engine).get_table_names()) == {"alembic_version"}
    finally:
        engine.dispose()

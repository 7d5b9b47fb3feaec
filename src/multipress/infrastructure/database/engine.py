"""Database engine setup for SQLite with WAL mode.

SQLAlchemy Core (not ORM) is used because the domain layer owns identity
and caching itself; rows cross the storage port as plain mappings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from multipress.infrastructure.database.schema import metadata

logger = logging.getLogger(__name__)


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(db_path: Path) -> Engine:
    """Create the database file at *db_path* with all tables.

    Parent directories are created as needed. Idempotent: safe to call on
    an existing database.

    Returns the engine ready for use.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    logger.debug("Initialized database at %s", db_path)
    return engine

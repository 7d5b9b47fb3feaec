"""Storage adapters: an in-memory store and SQLite via SQLAlchemy Core."""

from multipress.infrastructure.database.engine import create_db_engine, init_database
from multipress.infrastructure.database.memory import MemoryDatabase
from multipress.infrastructure.database.schema import documents, domains, metadata, users
from multipress.infrastructure.database.sql import SqlDatabase

__all__ = [
    "MemoryDatabase",
    "SqlDatabase",
    "create_db_engine",
    "documents",
    "domains",
    "init_database",
    "metadata",
    "users",
]

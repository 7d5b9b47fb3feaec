"""SQLAlchemy Core table definitions for the multipress database.

Relations are plain integer columns without foreign keys: origins and owners
may point at the genesis id 0, which has no row, and dangling references
are tolerated (the domain layer skips rows it cannot resolve).
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

domains = Table(
    "domains",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("owner", Integer, nullable=False),
    Column("origin", Integer, nullable=False),
    Column("data", Text, nullable=False, default="{}", server_default="{}"),  # JSON object
    sqlite_autoincrement=True,
)

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("origin", Integer, nullable=False),
    Column("data", Text, nullable=False, default="{}", server_default="{}"),  # JSON object
    sqlite_autoincrement=True,
)

documents = Table(
    "documents",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("type", Text, nullable=False),
    Column("owner", Integer, nullable=False),
    Column("origin", Integer, nullable=False),
    Column("data", Text, nullable=False, default="{}", server_default="{}"),  # JSON object
    sqlite_autoincrement=True,
)

# ---------------------------------------------------------------------------
# Indexes for lookup columns
# ---------------------------------------------------------------------------

Index("ix_domains_name", domains.c.name)
Index("ix_documents_type", documents.c.type)

"""SQLite storage adapter implementing the domain's storage port."""

from __future__ import annotations

import json
from typing import Any

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.engine import Engine

from multipress.domain.storage import DocumentRow, DomainRow, UserRow, ensure_storable_id
from multipress.infrastructure.database.schema import documents, domains, users


def _dump(data: dict[str, str]) -> str:
    return json.dumps({str(k): str(v) for k, v in data.items()})


def _load(raw: str | None) -> dict[str, str]:
    if not raw:
        return {}
    return {str(k): str(v) for k, v in json.loads(raw).items()}


class SqlDatabase:
    """Encapsulates SQL for the domains, users and documents tables.

    Each call runs in its own connection; writes use ``engine.begin()`` so
    every storage operation commits atomically.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_documents_by_type(self, type: str) -> dict[int, DocumentRow]:
        stmt = select(documents).where(documents.c.type == type).order_by(documents.c.id)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return {
            int(row["id"]): DocumentRow(
                type=str(row["type"]),
                owner=int(row["owner"]),
                origin=int(row["origin"]),
                data=_load(row["data"]),
            )
            for row in rows
        }

    def get_domain_by_id(self, id: int) -> dict[int, DomainRow]:
        ensure_storable_id(id, "domain")
        return self._select_domains(select(domains).where(domains.c.id == id))

    def get_domain_by_name(self, name: str) -> dict[int, DomainRow]:
        return self._select_domains(
            select(domains).where(domains.c.name == name).order_by(domains.c.id)
        )

    def get_user_by_id(self, id: int) -> dict[int, UserRow]:
        ensure_storable_id(id, "user")
        stmt = select(users).where(users.c.id == id)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return {
            int(row["id"]): UserRow(origin=int(row["origin"]), data=_load(row["data"]))
            for row in rows
        }

    def _select_domains(self, stmt: Any) -> dict[int, DomainRow]:
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return {
            int(row["id"]): DomainRow(
                name=str(row["name"]),
                owner=int(row["owner"]),
                origin=int(row["origin"]),
                data=_load(row["data"]),
            )
            for row in rows
        }

    # ------------------------------------------------------------------
    # Inserts
    # ------------------------------------------------------------------

    def insert_document(self, origin: int, owner: int, type: str, data: dict[str, str]) -> int:
        return self._insert(
            documents, type=type, owner=owner, origin=origin, data=_dump(data)
        )

    def insert_domain(self, name: str, origin: int, owner: int, data: dict[str, str]) -> int:
        return self._insert(domains, name=name, owner=owner, origin=origin, data=_dump(data))

    def insert_user(self, origin: int, data: dict[str, str]) -> int:
        return self._insert(users, origin=origin, data=_dump(data))

    def _insert(self, table: Table, **values: Any) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(insert(table).values(**values))
        return int(result.inserted_primary_key[0])

    # ------------------------------------------------------------------
    # Updates and deletes
    # ------------------------------------------------------------------

    def update_document(self, id: int, data: dict[str, str]) -> None:
        self._update(documents, ensure_storable_id(id, "document"), data)

    def update_domain(self, id: int, data: dict[str, str]) -> None:
        self._update(domains, ensure_storable_id(id, "domain"), data)

    def update_user(self, id: int, data: dict[str, str]) -> None:
        self._update(users, ensure_storable_id(id, "user"), data)

    def delete_document(self, id: int) -> None:
        self._delete(documents, ensure_storable_id(id, "document"))

    def delete_domain(self, id: int) -> None:
        self._delete(domains, ensure_storable_id(id, "domain"))

    def delete_user(self, id: int) -> None:
        self._delete(users, ensure_storable_id(id, "user"))

    def _update(self, table: Table, row_id: int, data: dict[str, str]) -> None:
        with self._engine.begin() as conn:
            conn.execute(update(table).where(table.c.id == row_id).values(data=_dump(data)))

    def _delete(self, table: Table, row_id: int) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(table).where(table.c.id == row_id))

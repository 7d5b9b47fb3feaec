"""Dict-backed storage adapter.

Useful for tests and throwaway sessions. Ids come from one counter per
table starting at 1 and are never reused, so a deleted-then-saved entity
always receives a new id. Data maps are copied on the way in and out;
callers can never mutate stored rows through a returned row.
"""

from __future__ import annotations

import copy
import itertools
from typing import Any

from multipress.domain.storage import DocumentRow, DomainRow, UserRow, ensure_storable_id


class MemoryDatabase:
    """In-process implementation of the storage port."""

    def __init__(self) -> None:
        self.domains: dict[int, DomainRow] = {}
        self.users: dict[int, UserRow] = {}
        self.documents: dict[int, DocumentRow] = {}
        self._counters = {
            "domain": itertools.count(1),
            "user": itertools.count(1),
            "document": itertools.count(1),
        }

    def _next_id(self, kind: str) -> int:
        return next(self._counters[kind])

    @staticmethod
    def _copy(rows: dict[int, Any]) -> dict[int, Any]:
        return {row_id: copy.deepcopy(row) for row_id, row in sorted(rows.items())}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_documents_by_type(self, type: str) -> dict[int, DocumentRow]:
        return self._copy({i: row for i, row in self.documents.items() if row["type"] == type})

    def get_domain_by_id(self, id: int) -> dict[int, DomainRow]:
        ensure_storable_id(id, "domain")
        return self._copy({id: self.domains[id]} if id in self.domains else {})

    def get_domain_by_name(self, name: str) -> dict[int, DomainRow]:
        return self._copy({i: row for i, row in self.domains.items() if row["name"] == name})

    def get_user_by_id(self, id: int) -> dict[int, UserRow]:
        ensure_storable_id(id, "user")
        return self._copy({id: self.users[id]} if id in self.users else {})

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_document(self, origin: int, owner: int, type: str, data: dict[str, str]) -> int:
        row_id = self._next_id("document")
        self.documents[row_id] = DocumentRow(type=type, owner=owner, origin=origin, data=dict(data))
        return row_id

    def insert_domain(self, name: str, origin: int, owner: int, data: dict[str, str]) -> int:
        row_id = self._next_id("domain")
        self.domains[row_id] = DomainRow(name=name, owner=owner, origin=origin, data=dict(data))
        return row_id

    def insert_user(self, origin: int, data: dict[str, str]) -> int:
        row_id = self._next_id("user")
        self.users[row_id] = UserRow(origin=origin, data=dict(data))
        return row_id

    def update_document(self, id: int, data: dict[str, str]) -> None:
        ensure_storable_id(id, "document")
        if id in self.documents:
            self.documents[id]["data"] = dict(data)

    def update_domain(self, id: int, data: dict[str, str]) -> None:
        ensure_storable_id(id, "domain")
        if id in self.domains:
            self.domains[id]["data"] = dict(data)

    def update_user(self, id: int, data: dict[str, str]) -> None:
        ensure_storable_id(id, "user")
        if id in self.users:
            self.users[id]["data"] = dict(data)

    def delete_document(self, id: int) -> None:
        self.documents.pop(ensure_storable_id(id, "document"), None)

    def delete_domain(self, id: int) -> None:
        self.domains.pop(ensure_storable_id(id, "domain"), None)

    def delete_user(self, id: int) -> None:
        self.users.pop(ensure_storable_id(id, "user"), None)

"""The storage port consumed by the domain layer.

Any persistence technology can back the graph as long as it implements
:class:`Database`. Rows are returned indexed by id; scalar fields carry ids
of related entities, and ``data`` is the entity's free-form string map.

INVARIANT: id 0 is reserved for the genesis nodes. Adapters never assign it
and refuse to read, update, or delete it.
"""

from __future__ import annotations

from typing import Protocol, TypedDict, runtime_checkable

from multipress.domain.errors import ReservedIdentifierError
from multipress.domain.types import GENESIS_ID


class DomainRow(TypedDict):
    name: str
    owner: int
    origin: int
    data: dict[str, str]


class UserRow(TypedDict):
    origin: int
    data: dict[str, str]


class DocumentRow(TypedDict):
    type: str
    owner: int
    origin: int
    data: dict[str, str]


@runtime_checkable
class Database(Protocol):
    """Generic CRUD contract implemented by storage adapters."""

    def get_documents_by_type(self, type: str) -> dict[int, DocumentRow]: ...

    def get_domain_by_id(self, id: int) -> dict[int, DomainRow]: ...

    def get_domain_by_name(self, name: str) -> dict[int, DomainRow]: ...

    def get_user_by_id(self, id: int) -> dict[int, UserRow]: ...

    def insert_document(self, origin: int, owner: int, type: str, data: dict[str, str]) -> int: ...

    def insert_domain(self, name: str, origin: int, owner: int, data: dict[str, str]) -> int: ...

    def insert_user(self, origin: int, data: dict[str, str]) -> int: ...

    def update_document(self, id: int, data: dict[str, str]) -> None: ...

    def update_domain(self, id: int, data: dict[str, str]) -> None: ...

    def update_user(self, id: int, data: dict[str, str]) -> None: ...

    def delete_document(self, id: int) -> None: ...

    def delete_domain(self, id: int) -> None: ...

    def delete_user(self, id: int) -> None: ...


def ensure_storable_id(entity_id: int, kind: str) -> int:
    """Reject the reserved genesis id on the storage path.

    Raises:
        ReservedIdentifierError: If *entity_id* is the genesis id.
    """
    if entity_id == GENESIS_ID:
        msg = f"{kind} id {GENESIS_ID} is reserved for genesis and has no stored row"
        raise ReservedIdentifierError(msg)
    return entity_id

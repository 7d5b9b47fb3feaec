"""Identity, equality, and the free-form data bag shared by all entities.

INVARIANT: Two entities are the same iff they are the same instance, or both
carry an id and the ids match. Unsaved drafts never match each other, which
keeps origin comparisons in permission checks honest.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, ClassVar

from multipress.domain.errors import ReservedKeyError

if TYPE_CHECKING:
    from multipress.domain.environment import Environment
    from multipress.domain.types import EntityKind


class Entity:
    """Base for Domain, User and Document.

    Subclasses set :attr:`kind` and :attr:`reserved_keys`. The data bag is an
    ordered ``str -> str`` mapping; typed fields (id, owner, origin, ...) live
    on attributes and cannot be shadowed through it.
    """

    kind: ClassVar[EntityKind]
    reserved_keys: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, environment: Environment, entity_id: int | None = None) -> None:
        self._environment = environment
        self._id = entity_id
        self._data: dict[str, str] = {}

    @property
    def id(self) -> int | None:
        return self._id

    @property
    def is_draft(self) -> bool:
        """Whether this instance has not been persisted (or was deleted)."""
        return self._id is None

    @property
    def environment(self) -> Environment:
        return self._environment

    # ------------------------------------------------------------------
    # Equality
    # ------------------------------------------------------------------

    def is_(self, other: Entity | None) -> bool:
        """Whether *other* denotes the same entity as this one."""
        if other is None or type(other) is not type(self):
            return False
        if self is other:
            return True
        return self._id is not None and other._id is not None and self._id == other._id

    def in_(self, items: Iterable[Entity]) -> bool:
        """Whether any entity in *items* is the same as this one."""
        return any(self.is_(other) for other in items)

    # ------------------------------------------------------------------
    # Data bag
    # ------------------------------------------------------------------

    @property
    def data(self) -> dict[str, str]:
        """A copy of the free-form attributes."""
        return dict(self._data)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key, default)

    def __getitem__(self, key: str) -> str | None:
        return self._data.get(key)

    def __setitem__(self, key: str, value: object) -> None:
        if key in self.reserved_keys:
            msg = f"{key!r} is a reserved {self.kind} field and cannot be stored as data"
            raise ReservedKeyError(msg)
        self._data[key] = str(value)

    def __delitem__(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def update(self, values: Mapping[str, object]) -> None:
        """Set several data keys at once; reserved keys are rejected."""
        for key, value in values.items():
            self[key] = value

    def _load_data(self, values: Mapping[str, object] | None) -> None:
        """Replace the data bag wholesale (rows from storage, genesis seeds)."""
        self._data = {str(k): str(v) for k, v in (values or {}).items()}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self._id!r}>"

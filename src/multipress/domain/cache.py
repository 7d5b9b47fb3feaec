"""Request-scoped lookup cache and the construction guard.

The cache memoizes resolved entities for one Environment so repeated
lookups never hit storage twice. The guard tracks which stored rows are
being resolved right now: a row that is already in progress is skipped
instead of recursed into, which keeps resolution total even when stored
origins form a cycle.

Neither structure is shared between Environments.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from multipress.domain.identity import Entity
    from multipress.domain.types import EntityKind


class LookupCache:
    """Multi-valued mapping ``kind -> section -> key -> [entity, ...]``.

    Entries are append-only and never deduplicated; the most recently saved
    entry is last. An empty list from :meth:`get` tells the caller to fall
    through to the storage port.
    """

    def __init__(self) -> None:
        self._entries: dict[str, dict[str, dict[str, list[Entity]]]] = defaultdict(
            lambda: defaultdict(dict)
        )
        self._loaded: set[tuple[str, str, str]] = set()

    def save(self, kind: EntityKind, section: str, key: object, entity: Entity) -> None:
        """Append *entity* under ``(kind, section, key)``."""
        self._entries[kind][section].setdefault(str(key), []).append(entity)

    def get(self, kind: EntityKind, section: str, key: object) -> list[Entity]:
        """Return the entries under ``(kind, section, key)``, or ``[]``."""
        sections = self._entries.get(kind)
        if sections is None:
            return []
        keys = sections.get(section)
        if keys is None:
            return []
        return list(keys.get(str(key), []))

    def mark_loaded(self, kind: EntityKind, section: str, key: object) -> None:
        """Record that storage filled ``(kind, section, key)`` with every matching row."""
        self._loaded.add((kind, section, str(key)))

    def is_loaded(self, kind: EntityKind, section: str, key: object) -> bool:
        return (kind, section, str(key)) in self._loaded

    def sections(self, kind: EntityKind) -> list[str]:
        """Names of the sections populated for *kind*."""
        return list(self._entries.get(kind, {}))

    @staticmethod
    def first_created(entries: Iterable[Entity]) -> Entity | None:
        """Pick the persisted entry with the smallest id.

        Entries deleted since they were cached have lost their id and are
        ignored, so a stale entry never shadows storage.
        """
        persisted = [entry for entry in entries if entry.id is not None]
        if not persisted:
            return None
        return min(persisted, key=lambda entry: entry.id)  # type: ignore[arg-type,return-value]


class ConstructionGuard:
    """Per-kind sets of stored ids whose rows are currently being resolved."""

    def __init__(self) -> None:
        self._active: dict[str, set[int]] = defaultdict(set)

    def is_constructing(self, kind: EntityKind, entity_id: int) -> bool:
        return entity_id in self._active[kind]

    @contextmanager
    def constructing(self, kind: EntityKind, entity_id: int) -> Iterator[None]:
        """Mark ``(kind, entity_id)`` in progress for the duration of the block."""
        self._active[kind].add(entity_id)
        try:
            yield
        finally:
            self._active[kind].discard(entity_id)

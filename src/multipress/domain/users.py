"""Users: principals that originate on a domain.

The genesis user has id 0, no origin, and is never stored. It owns the
genesis domain and bypasses every structural permission check.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, cast

from multipress.domain.cache import LookupCache
from multipress.domain.errors import GenesisConflictError
from multipress.domain.identity import Entity
from multipress.domain.types import GENESIS_ID, USER_RESERVED_KEYS, EntityKind

if TYPE_CHECKING:
    from multipress.domain.domains import Domain
    from multipress.domain.environment import Environment
    from multipress.domain.storage import UserRow

logger = logging.getLogger(__name__)


class User(Entity):
    """A principal. Use :meth:`genesis`, :meth:`create`, or :meth:`get_by_id`."""

    kind = EntityKind.USER
    reserved_keys = USER_RESERVED_KEYS

    def __init__(
        self,
        environment: Environment,
        origin: Domain | None,
        *,
        entity_id: int | None = None,
    ) -> None:
        super().__init__(environment, entity_id)
        self._origin = origin
        self._seed: dict[str, str] | None = None

    @classmethod
    def genesis(cls, environment: Environment, data: Mapping[str, str] | None = None) -> User:
        """Return the context's genesis user, building it on first use.

        Raises:
            GenesisConflictError: If *data* differs from the seed the genesis
                user was already built with in this context.
        """
        source = environment.genesis_user_data if data is None else data
        seed = {str(k): str(v) for k, v in source.items()}
        cached = environment.cache.get(cls.kind, "id", GENESIS_ID)
        if cached:
            genesis = cast(User, cached[0])
            if data is not None and seed != genesis._seed:
                msg = "Genesis user already seeded with different data in this environment"
                raise GenesisConflictError(msg)
            return genesis

        genesis = cls(environment, None, entity_id=GENESIS_ID)
        genesis._load_data(seed)
        genesis._seed = seed
        environment.cache.save(cls.kind, "id", GENESIS_ID, genesis)
        return genesis

    @classmethod
    def create(cls, environment: Environment, origin: Domain) -> User:
        """Construct a new, unsaved user originating on *origin*."""
        return cls(environment, origin)

    @classmethod
    def get_by_id(cls, environment: Environment, entity_id: int) -> User | None:
        """Return the user with *entity_id*, or None if it cannot be resolved."""
        if entity_id == GENESIS_ID:
            return cls.genesis(environment)

        entries = environment.cache.get(cls.kind, "id", entity_id)
        cached = LookupCache.first_created(e for e in entries if e.id == entity_id)
        if cached is not None:
            return cached  # type: ignore[return-value]

        rows = environment.database.get_user_by_id(entity_id)
        user = next(cls._construct(environment, rows), None)
        if user is not None:
            environment.cache.save(cls.kind, "id", user.id, user)
        return user

    @classmethod
    def _construct(cls, environment: Environment, rows: Mapping[int, UserRow]) -> Iterator[User]:
        from multipress.domain.domains import Domain

        guard = environment.guard
        for row_id, row in sorted(rows.items(), key=lambda item: int(item[0])):
            row_id = int(row_id)
            if guard.is_constructing(cls.kind, row_id):
                logger.debug("Skipping user %s: already being resolved", row_id)
                continue

            with guard.constructing(cls.kind, row_id):
                origin = Domain.get_by_id(environment, int(row["origin"]))

            if origin is None:
                logger.debug("Skipping user %s: unresolvable origin", row_id)
                continue

            user = cls(environment, origin, entity_id=row_id)
            user._load_data(row.get("data"))
            yield user

    @property
    def origin(self) -> Domain | None:
        """The domain this user originates on; None only for the genesis user."""
        return self._origin

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    def is_creatable(self, actor: User) -> bool:
        """Whether *actor* may save this user for the first time.

        Anyone who can edit the origin may create users there. A draft may
        register itself when the origin allows registration.
        """
        if self._origin is None:
            return False
        return self._origin.is_editable(actor) or (
            self.is_(actor) and self._origin.users_can_register
        )

    def is_readable(self, actor: User) -> bool:
        return self.is_editable(actor)

    def is_editable(self, actor: User) -> bool:
        """Creatable by *actor*, or *actor* is this user (self-edit always allowed)."""
        return self.is_creatable(actor) or self.is_(actor)

    def is_deletable(self, actor: User) -> bool:
        return self.is_editable(actor)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def save(self, actor: User) -> bool:
        """Persist changes authored by *actor*. Silently does nothing without permission."""
        database = self._environment.database
        if self._id is not None:
            if self._id == GENESIS_ID or not self.is_editable(actor):
                logger.debug("User %s not saved: not editable by user %s", self._id, actor.id)
                return False
            database.update_user(self._id, self.data)
            return True

        if self._origin is None or self._origin.id is None:
            return False
        if not self.is_creatable(actor):
            logger.debug("User not created: not creatable by user %s", actor.id)
            return False
        self._id = database.insert_user(self._origin.id, self.data)
        self._environment.cache.save(self.kind, "id", self._id, self)
        return True

    def delete(self, actor: User) -> bool:
        """Delete this user; the instance reverts to an unsaved draft."""
        if self._id is None or self._id == GENESIS_ID or not self.is_deletable(actor):
            return False
        self._environment.database.delete_user(self._id)
        self._id = None
        return True

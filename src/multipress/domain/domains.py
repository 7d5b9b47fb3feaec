"""Domains: the tenant hierarchy and its depth-quota algebra.

Every domain except genesis has exactly one parent domain (its origin) and
an owning user. The genesis domain has id 0, is never stored, and reports
itself as its own origin.

Depth quota: ``depth_allowed(user)`` is how many further levels of domains
the user may originate beneath this one. Any negative value (canonically -1)
means unlimited and is never treated as a numeric bound.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, cast

from multipress.domain.cache import LookupCache
from multipress.domain.errors import GenesisConflictError
from multipress.domain.identity import Entity
from multipress.domain.types import (
    DOMAIN_RESERVED_KEYS,
    GENESIS_ID,
    UNLIMITED_DEPTH,
    EntityKind,
    parse_flag,
)
from multipress.domain.users import User

if TYPE_CHECKING:
    from multipress.domain.environment import Environment
    from multipress.domain.storage import DomainRow

logger = logging.getLogger(__name__)


class Domain(Entity):
    """A tenant node. Use :meth:`genesis`, :meth:`create`, or the lookups."""

    kind = EntityKind.DOMAIN
    reserved_keys = DOMAIN_RESERVED_KEYS

    def __init__(
        self,
        environment: Environment,
        name: str,
        owner: User,
        parent: Domain | None,
        *,
        entity_id: int | None = None,
    ) -> None:
        super().__init__(environment, entity_id)
        self._name = name
        self._owner = owner
        self._parent = parent
        self._seed: dict[str, str] | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def genesis(cls, environment: Environment, data: Mapping[str, str] | None = None) -> Domain:
        """Return the context's genesis domain, building it on first use.

        Raises:
            GenesisConflictError: If *data* differs from the seed the genesis
                domain was already built with in this context.
        """
        source = environment.genesis_domain_data if data is None else data
        seed = {str(k): str(v) for k, v in source.items()}
        cached = environment.cache.get(cls.kind, "id", GENESIS_ID)
        if cached:
            genesis = cast(Domain, cached[0])
            if data is not None and seed != genesis._seed:
                msg = "Genesis domain already seeded with different data in this environment"
                raise GenesisConflictError(msg)
            return genesis

        genesis = cls(
            environment,
            environment.genesis_name,
            User.genesis(environment),
            None,
            entity_id=GENESIS_ID,
        )
        genesis._load_data(seed)
        genesis._seed = seed
        environment.cache.save(cls.kind, "id", GENESIS_ID, genesis)
        return genesis

    @classmethod
    def create(cls, environment: Environment, name: str, owner: User, origin: Domain) -> Domain:
        """Construct a new, unsaved domain."""
        return cls(environment, name, owner, origin)

    @classmethod
    def get_by_id(cls, environment: Environment, entity_id: int) -> Domain | None:
        """Return the domain with *entity_id*, or None if it cannot be resolved."""
        if entity_id == GENESIS_ID:
            return cls.genesis(environment)

        entries = environment.cache.get(cls.kind, "id", entity_id)
        cached = LookupCache.first_created(e for e in entries if e.id == entity_id)
        if cached is not None:
            return cached  # type: ignore[return-value]

        rows = environment.database.get_domain_by_id(entity_id)
        domain = next(cls._construct(environment, rows), None)
        if domain is not None:
            domain._remember()
        return domain

    @classmethod
    def get_by_name(cls, environment: Environment, name: str) -> Domain | None:
        """Return the domain named *name*; the earliest-created one wins ties."""
        if name == environment.genesis_name:
            return cls.genesis(environment)

        cache = environment.cache
        if cache.is_loaded(cls.kind, "name", name):
            cached = LookupCache.first_created(cache.get(cls.kind, "name", name))
            if cached is not None:
                return cached  # type: ignore[return-value]

        # The name section is complete only after a fetch by name.
        found: Domain | None = None
        for domain in cls._construct(environment, environment.database.get_domain_by_name(name)):
            known = LookupCache.first_created(
                e for e in cache.get(cls.kind, "id", domain.id) if e.id == domain.id
            )
            if known is None:
                cache.save(cls.kind, "id", domain.id, domain)
                known = domain
            if not known.in_(cache.get(cls.kind, "name", name)):
                cache.save(cls.kind, "name", name, known)
            if found is None:
                found = cast(Domain, known)
        cache.mark_loaded(cls.kind, "name", name)
        return found

    @classmethod
    def _construct(
        cls,
        environment: Environment,
        rows: Mapping[int, DomainRow],
    ) -> Iterator[Domain]:
        """Yield valid domains from storage rows in ascending id order.

        Rows already being resolved further up the stack, and rows whose
        origin or owner cannot be resolved, are skipped.
        """
        guard = environment.guard
        for row_id, row in sorted(rows.items(), key=lambda item: int(item[0])):
            row_id = int(row_id)
            if guard.is_constructing(cls.kind, row_id):
                logger.debug("Skipping domain %s: already being resolved", row_id)
                continue

            with guard.constructing(cls.kind, row_id):
                origin = cls.get_by_id(environment, int(row["origin"]))
                owner = User.get_by_id(environment, int(row["owner"]))

            if origin is None or owner is None:
                logger.debug("Skipping domain %s: unresolvable origin or owner", row_id)
                continue

            domain = cls(environment, str(row["name"]), owner, origin, entity_id=row_id)
            domain._load_data(row.get("data"))
            yield domain

    def _remember(self) -> None:
        cache = self._environment.cache
        cache.save(self.kind, "id", self._id, self)
        if cache.is_loaded(self.kind, "name", self._name):
            cache.save(self.kind, "name", self._name, self)

    # ------------------------------------------------------------------
    # Fields and derived views
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def owner(self) -> User:
        return self._owner

    @property
    def parent(self) -> Domain | None:
        """The raw origin relationship; None only for genesis."""
        return self._parent

    @property
    def origin(self) -> Domain:
        """The domain this one originates on. Genesis is its own origin."""
        return self._parent if self._parent is not None else self

    @property
    def is_genesis(self) -> bool:
        return self._parent is None

    @property
    def ancestry(self) -> list[Domain]:
        """Successive origins, starting at :attr:`origin` and ending at genesis.

        Stops at the first repeat, so it terminates on any graph.
        """
        ancestry: list[Domain] = []
        current: Domain | None = self.origin
        while current is not None and not current.in_(ancestry):
            ancestry.append(current)
            current = current._parent
        return ancestry

    @property
    def users_can_register(self) -> bool:
        """Whether users may register themselves here (``data`` key, default True)."""
        return parse_flag(self._data.get("users_can_register"), True)

    @property
    def declared_depth_allowed(self) -> int:
        """This domain's own depth cap from ``data`` (default -1, unlimited)."""
        raw = self._data.get("depth_allowed")
        if raw is None:
            return UNLIMITED_DEPTH
        try:
            return int(raw.strip())
        except ValueError:
            logger.warning("Ignoring non-integer depth_allowed %r on domain %s", raw, self._id)
            return UNLIMITED_DEPTH

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    def depth_allowed(self, user: User) -> int:
        """How many successive levels *user* may originate beneath this domain.

        A positive N allows a chain of N domains, 0 allows none, and any
        negative value means unlimited. The genesis user is never bound.
        """
        if user.id == GENESIS_ID:
            return UNLIMITED_DEPTH

        grandparent = user.origin.parent if user.origin is not None else None
        if grandparent is None and not self.is_editable(user):
            return 0

        own = self.declared_depth_allowed
        if self._parent is None:
            return own

        parent_max = self._parent.depth_allowed(self._owner) - 1
        if parent_max < 0:
            parent_max += 1

        if own < 0:
            return parent_max
        if parent_max < 0:
            return own
        return min(own, parent_max)

    def is_creatable(self, user: User) -> bool:
        """Whether *user* may save this domain for the first time.

        Requires a remaining depth quota on the origin, and either ownership
        of this domain or edit rights on the origin. Always False for genesis.
        """
        return (
            self._parent is not None
            and self._parent.depth_allowed(user) != 0
            and (self._owner.is_(user) or self._parent.is_editable(user))
        )

    def is_readable(self, user: User) -> bool:
        """Genesis, editable domains, and domains hanging off the user's ancestry."""
        if self._parent is None or self.is_editable(user):
            return True
        return user.origin is not None and self._parent.in_(user.origin.ancestry)

    def is_editable(self, user: User) -> bool:
        return user.id == GENESIS_ID or self.is_creatable(user)

    def is_deletable(self, user: User) -> bool:
        return self.is_editable(user)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def save(self, user: User) -> bool:
        """Persist changes authored by *user*. Silently does nothing without permission.

        Returns whether a storage write happened.
        """
        database = self._environment.database
        if self._id is not None:
            if self._id == GENESIS_ID or not self.is_editable(user):
                logger.debug("Domain %s not saved: not editable by user %s", self._id, user.id)
                return False
            database.update_domain(self._id, self.data)
            return True

        if not self.is_creatable(user):
            logger.debug("Domain %r not created: not creatable by user %s", self._name, user.id)
            return False
        if self.origin.id is None or self._owner.id is None:
            logger.debug("Domain %r not created: origin or owner is unsaved", self._name)
            return False
        self._id = database.insert_domain(self._name, self.origin.id, self._owner.id, self.data)
        self._remember()
        return True

    def delete(self, user: User) -> bool:
        """Delete this domain; the instance reverts to an unsaved draft.

        Saving it again stores a new domain with a new id. Genesis is never
        deleted. Returns whether a storage delete happened.
        """
        if self._id is None or self._id == GENESIS_ID or not self.is_deletable(user):
            return False
        self._environment.database.delete_domain(self._id)
        self._id = None
        return True

    def not_found(self) -> str:
        """Body served when a request on this domain matches nothing."""
        return "Not found"

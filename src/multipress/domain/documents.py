"""Documents: typed content owned by a user and anchored to a domain.

Permissions combine the structural rule (can the actor write to the
document's origin?) with the document type's own policy hooks. Documents
are loaded by type, and rows the session cannot read never leave this
module.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from multipress.domain.domains import Domain
from multipress.domain.identity import Entity
from multipress.domain.types import DOCUMENT_RESERVED_KEYS, GENESIS_ID, EntityKind
from multipress.domain.users import User

if TYPE_CHECKING:
    from multipress.domain.document_types import DocumentType
    from multipress.domain.environment import Environment
    from multipress.domain.storage import DocumentRow

logger = logging.getLogger(__name__)


class Document(Entity):
    """A typed content node. ``type``, ``owner`` and ``origin`` are fixed at construction."""

    kind = EntityKind.DOCUMENT
    reserved_keys = DOCUMENT_RESERVED_KEYS

    def __init__(
        self,
        environment: Environment,
        doc_type: DocumentType,
        owner: User,
        origin: Domain,
    ) -> None:
        super().__init__(environment)
        self._type = doc_type
        self._owner = owner
        self._origin = origin

    @property
    def type(self) -> DocumentType:
        return self._type

    @property
    def owner(self) -> User:
        return self._owner

    @property
    def origin(self) -> Domain:
        return self._origin

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @classmethod
    def get_by_type(cls, environment: Environment, slug: str) -> list[Document]:
        """Return the readable documents of type *slug*, ordered by id."""
        cached = [d for d in environment.cache.get(cls.kind, "type", slug) if d.id is not None]
        if cached:
            return cached  # type: ignore[return-value]

        rows = environment.database.get_documents_by_type(slug)
        documents = list(cls._construct(environment, rows))
        for document in documents:
            environment.cache.save(cls.kind, "id", document.id, document)
            environment.cache.save(cls.kind, "type", slug, document)
        return documents

    @classmethod
    def get_by_data(
        cls,
        environment: Environment,
        slug: str,
        key: str,
        value: object,
    ) -> list[Document]:
        """Return readable documents of type *slug* whose ``data[key]`` equals *value*."""
        section = f"{slug}.{key}"
        wanted = str(value)
        cached = [
            d
            for d in environment.cache.get(cls.kind, section, wanted)
            if d.id is not None and d.get(key) == wanted
        ]
        if cached:
            return cached  # type: ignore[return-value]

        documents = [d for d in cls.get_by_type(environment, slug) if d.get(key) == wanted]
        known = environment.cache.get(cls.kind, section, wanted)
        for document in documents:
            if not document.in_(known):
                environment.cache.save(cls.kind, section, wanted, document)
        return documents

    @classmethod
    def get_by_id(cls, environment: Environment, entity_id: int) -> Document | None:
        """Return an already-loaded document by id, or None."""
        for document in environment.cache.get(cls.kind, "id", entity_id):
            if document.id == entity_id:
                return document  # type: ignore[return-value]
        return None

    @classmethod
    def _construct(
        cls,
        environment: Environment,
        rows: Mapping[int, DocumentRow],
    ) -> Iterator[Document]:
        """Yield documents from rows, dropping unresolvable and unreadable ones."""
        for row_id, row in sorted(rows.items(), key=lambda item: int(item[0])):
            doc_type = environment.get_type(str(row["type"]))
            origin = Domain.get_by_id(environment, int(row["origin"]))
            owner = User.get_by_id(environment, int(row["owner"]))
            if doc_type is None or origin is None or owner is None:
                logger.debug("Skipping document %s: unresolvable type, origin, or owner", row_id)
                continue

            document = cls(environment, doc_type, owner, origin)
            document._load_data(row.get("data"))
            document._id = int(row_id)
            if not document.is_visible():
                continue
            yield document

    def is_visible(self) -> bool:
        """Whether the environment's session may see this document.

        Anonymous sessions see what is public from the current domain;
        signed-in sessions see what the current user can read.
        """
        user = self._environment.current_user
        if user is None:
            domain = self._environment.current_domain
            return domain is not None and self.is_readable_by_public(domain)
        return self.is_readable(user)

    def _remember(self) -> None:
        """Index a freshly inserted document in the sections already loaded."""
        cache = self._environment.cache
        cache.save(self.kind, "id", self._id, self)
        if not self.is_visible():
            return
        slug = self._type.slug
        if cache.get(self.kind, "type", slug):
            cache.save(self.kind, "type", slug, self)
        self._index_data()

    def _index_data(self) -> None:
        """Add this document to the loaded ``<slug>.<key>`` sections its data now matches."""
        cache = self._environment.cache
        slug = self._type.slug
        for key, value in self._data.items():
            entries = cache.get(self.kind, f"{slug}.{key}", value)
            if entries and not self.in_(entries):
                cache.save(self.kind, f"{slug}.{key}", value, self)

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    def origin_is_writable(self, actor: User) -> bool:
        """Whether *actor* may write into this document's origin.

        Actors may write to domains they can edit and to the origin of their
        own origin. The genesis user may write anywhere.
        """
        if actor.id == GENESIS_ID:
            return True
        if actor.origin is None or actor.origin.id == GENESIS_ID:
            return False
        return self._origin.is_(actor.origin.origin) or self._origin.is_editable(actor)

    def is_creatable(self, actor: User) -> bool:
        return self.is_editable(actor) and self._type.is_creatable(
            actor, self._owner, self._origin, self.data
        )

    def is_readable_by_public(self, domain: Domain) -> bool:
        """Whether an anonymous visitor of *domain* may read this document.

        The document's origin must hang off *domain*'s ancestry, and the
        type must allow public reads.
        """
        return self._origin.origin.in_(domain.ancestry) and self._type.is_readable_by_public(
            domain, self._owner, self._origin, self.data
        )

    def is_readable(self, actor: User) -> bool:
        if not self._origin.is_readable(actor):
            return False
        if self._type.is_readable(actor, self._owner, self._origin, self.data):
            return True
        home = actor.origin if actor.origin is not None else Domain.genesis(self._environment)
        return self.is_readable_by_public(home)

    def is_editable(self, actor: User) -> bool:
        return self.origin_is_writable(actor) and self._type.is_editable(
            actor, self._owner, self._origin, self.data
        )

    def is_deletable(self, actor: User) -> bool:
        return self.origin_is_writable(actor) and self._type.is_deletable(
            actor, self._owner, self._origin, self.data
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def save(self, actor: User) -> bool:
        """Persist changes authored by *actor* and fire the type's callbacks.

        Silently does nothing without permission. Returns whether a storage
        write happened.
        """
        database = self._environment.database
        if self._id is not None:
            if not self.is_editable(actor):
                logger.debug("Document %s not saved: not editable by user %s", self._id, actor.id)
                return False
            database.update_document(self._id, self.data)
            if self.is_visible():
                self._index_data()
            self._type.on_update(self)
            self._environment.notify("post_update", self)
            return True

        if not self.is_creatable(actor):
            logger.debug("Document not created: not creatable by user %s", actor.id)
            return False
        if self._origin.id is None or self._owner.id is None:
            logger.debug("Document not created: origin or owner is unsaved")
            return False
        self._id = database.insert_document(
            self._origin.id, self._owner.id, self._type.slug, self.data
        )
        self._remember()
        self._type.on_insert(self)
        self._environment.notify("post_insert", self)
        return True

    def delete(self, actor: User) -> bool:
        """Delete this document; the instance reverts to an unsaved draft."""
        if self._id is None or not self.is_deletable(actor):
            return False
        self._environment.database.delete_document(self._id)
        deleted_id = self._id
        self._id = None
        self._environment.notify("post_delete", self, deleted_id=deleted_id)
        return True

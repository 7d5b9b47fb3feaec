"""Environment: the per-session resolution context.

One Environment serves one logical session. It owns the lookup cache and
construction guard that make lazy resolution cheap and cycle-safe, holds
the registered document types, and knows which domain is being accessed
and which user (if any) is signed in. Entities reach storage only through
it.

INVARIANT: Environments share no mutable state. Concurrent sessions each
get their own instance.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from multipress.domain.cache import ConstructionGuard, LookupCache
from multipress.domain.document_types import DocumentType, DocumentTypeRegistry

if TYPE_CHECKING:
    from multipress.domain.documents import Document
    from multipress.domain.domains import Domain
    from multipress.domain.storage import Database
    from multipress.domain.users import User

logger = logging.getLogger(__name__)


class Environment:
    """Resolution context for one session.

    Args:
        database: Storage port backing every non-genesis entity.
        genesis_name: Host name of the genesis domain, e.g. ``example.org``.
        genesis_domain_data: Seed data for the genesis domain.
        genesis_user_data: Seed data for the genesis user.
        host: Host name being accessed; resolved once into :attr:`current_domain`.
        current_user: The signed-in user, or None for an anonymous session.
        plugin_manager: Optional loaded plugin manager. Its
            ``register_document_types`` results are registered here and its
            lifecycle hooks receive document events.
    """

    def __init__(
        self,
        database: Database,
        genesis_name: str,
        genesis_domain_data: Mapping[str, str] | None = None,
        genesis_user_data: Mapping[str, str] | None = None,
        *,
        host: str | None = None,
        current_user: User | None = None,
        plugin_manager: Any | None = None,
    ) -> None:
        self._database = database
        self._genesis_name = genesis_name
        self._genesis_domain_data = dict(genesis_domain_data or {})
        self._genesis_user_data = dict(genesis_user_data or {})
        self._cache = LookupCache()
        self._guard = ConstructionGuard()
        self._types = DocumentTypeRegistry()
        self._plugin_manager = plugin_manager
        self._current_user = current_user

        if plugin_manager is not None:
            for doc_type in plugin_manager.collect_document_types():
                if not self.add_type(doc_type):
                    logger.warning("Document type %r rejected: empty or taken slug", doc_type.slug)

        self._current_domain: Domain | None = None
        if host:
            from multipress.domain.domains import Domain

            self._current_domain = Domain.get_by_name(self, host)
            if self._current_domain is None:
                logger.debug("No domain resolved for host %r", host)

    # ------------------------------------------------------------------
    # Read-only surface
    # ------------------------------------------------------------------

    @property
    def database(self) -> Database:
        return self._database

    @property
    def genesis_name(self) -> str:
        return self._genesis_name

    @property
    def genesis_domain_data(self) -> dict[str, str]:
        return dict(self._genesis_domain_data)

    @property
    def genesis_user_data(self) -> dict[str, str]:
        return dict(self._genesis_user_data)

    @property
    def cache(self) -> LookupCache:
        return self._cache

    @property
    def guard(self) -> ConstructionGuard:
        return self._guard

    @property
    def types(self) -> DocumentTypeRegistry:
        return self._types

    @property
    def current_domain(self) -> Domain | None:
        """The domain being accessed, or None if no host resolved."""
        return self._current_domain

    @property
    def current_user(self) -> User | None:
        return self._current_user

    def authenticate(self, user: User | None) -> None:
        """Set (or clear, with None) the signed-in user for this session."""
        self._current_user = user

    # ------------------------------------------------------------------
    # Document types
    # ------------------------------------------------------------------

    def add_type(self, doc_type: DocumentType) -> bool:
        """Register a document type. Returns False for an empty or taken slug."""
        if not isinstance(doc_type, DocumentType):
            msg = f"{type(doc_type).__name__} does not implement the DocumentType contract"
            raise TypeError(msg)
        return self._types.add(doc_type)

    def get_type(self, slug: str) -> DocumentType | None:
        return self._types.get(slug)

    # ------------------------------------------------------------------
    # Events and fallbacks
    # ------------------------------------------------------------------

    def notify(self, hook_name: str, document: Document, **extra: Any) -> None:
        """Dispatch a document lifecycle hook to plugins.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugin_manager is None:
            return
        hook = getattr(self._plugin_manager.hook, hook_name)
        try:
            hook(document=document, **extra)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)

    def not_found(self) -> str:
        """Body served when a request matches nothing."""
        if self._current_domain is not None:
            return self._current_domain.not_found()
        return "Error 404"

"""Document type capability contract and the by-slug registry.

A document type contributes per-kind policy on top of the structural rules
in :mod:`multipress.domain.documents`: five permission predicates, two
lifecycle callbacks, and a render entry point used by the router. Types are
independent implementations of :class:`DocumentType`; nothing needs to
inherit from a base class.

INVARIANT: A slug is non-empty and never changes once a type is registered.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from multipress.domain.documents import Document
    from multipress.domain.domains import Domain
    from multipress.domain.environment import Environment
    from multipress.domain.users import User


@runtime_checkable
class DocumentType(Protocol):
    """Capabilities the core invokes for every document of a given kind."""

    @property
    def slug(self) -> str:
        """Identifier used in storage rows and as the first request path segment."""
        ...

    def is_creatable(
        self, actor: User, owner: User, origin: Domain, data: Mapping[str, str]
    ) -> bool: ...

    def is_readable_by_public(
        self, domain: Domain, owner: User, origin: Domain, data: Mapping[str, str]
    ) -> bool: ...

    def is_readable(
        self, actor: User, owner: User, origin: Domain, data: Mapping[str, str]
    ) -> bool: ...

    def is_editable(
        self, actor: User, owner: User, origin: Domain, data: Mapping[str, str]
    ) -> bool: ...

    def is_deletable(
        self, actor: User, owner: User, origin: Domain, data: Mapping[str, str]
    ) -> bool: ...

    def on_insert(self, document: Document) -> None:
        """Called after a document of this type is first stored."""
        ...

    def on_update(self, document: Document) -> None:
        """Called after a stored document of this type is updated."""
        ...

    def render(self, environment: Environment, request: str) -> str:
        """Render *request* (the path with the slug segment removed)."""
        ...


class DocumentTypeRegistry:
    """Registered document types of one environment, keyed by slug."""

    def __init__(self) -> None:
        self._types: dict[str, DocumentType] = {}

    def add(self, doc_type: DocumentType) -> bool:
        """Register *doc_type*. Returns False for an empty or already-taken slug."""
        slug = doc_type.slug
        if not slug or slug in self._types:
            return False
        self._types[slug] = doc_type
        return True

    def get(self, slug: str) -> DocumentType | None:
        return self._types.get(slug)

    def __contains__(self, slug: object) -> bool:
        return slug in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

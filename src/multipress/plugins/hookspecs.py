"""Pluggy hook specifications for multipress.

One setup-time hook lets plugins contribute document types. Three lifecycle
hooks fire synchronously after a document write reaches storage.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from multipress.domain.document_types import DocumentType
    from multipress.domain.documents import Document

hookspec = pluggy.HookspecMarker("multipress")


class MultipressHookSpec:
    """Hook specifications for the multipress plugin system."""

    @hookspec
    def register_document_types(self) -> list[DocumentType] | None:
        """Return document type instances to register in each Environment."""

    @hookspec
    def post_insert(self, document: Document) -> None:
        """Called after a document is first stored."""

    @hookspec
    def post_update(self, document: Document) -> None:
        """Called after a stored document's data is updated."""

    @hookspec
    def post_delete(self, document: Document, deleted_id: int) -> None:
        """Called after a document row is removed. ``document`` is a draft again."""

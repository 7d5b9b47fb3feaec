"""Built-in ``pages`` document type.

Pages are plain titled documents. Their owner (or the genesis user) manages
them; anyone who can reach a page may read it; anonymous visitors see pages
whose ``visibility`` is ``public``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

import pluggy

from multipress.domain.documents import Document
from multipress.domain.types import GENESIS_ID

if TYPE_CHECKING:
    from multipress.domain.domains import Domain
    from multipress.domain.environment import Environment
    from multipress.domain.users import User

hookimpl = pluggy.HookimplMarker("multipress")

logger = logging.getLogger(__name__)


class PageType:
    """Document type served under ``/pages``."""

    def __init__(self, slug: str = "pages") -> None:
        self._slug = slug

    @property
    def slug(self) -> str:
        return self._slug

    @staticmethod
    def _manages(actor: User, owner: User) -> bool:
        return actor.id == GENESIS_ID or actor.is_(owner)

    def is_creatable(
        self, actor: User, owner: User, origin: Domain, data: Mapping[str, str]
    ) -> bool:
        return self._manages(actor, owner)

    def is_readable_by_public(
        self, domain: Domain, owner: User, origin: Domain, data: Mapping[str, str]
    ) -> bool:
        return data.get("visibility") == "public"

    def is_readable(
        self, actor: User, owner: User, origin: Domain, data: Mapping[str, str]
    ) -> bool:
        return True

    def is_editable(
        self, actor: User, owner: User, origin: Domain, data: Mapping[str, str]
    ) -> bool:
        return self._manages(actor, owner)

    def is_deletable(
        self, actor: User, owner: User, origin: Domain, data: Mapping[str, str]
    ) -> bool:
        return self._manages(actor, owner)

    def on_insert(self, document: Document) -> None:
        logger.debug("Page %s inserted", document.id)

    def on_update(self, document: Document) -> None:
        logger.debug("Page %s updated", document.id)

    def render(self, environment: Environment, request: str) -> str:
        """Render ``/`` as an index of readable pages and ``/<id>`` as one page."""
        target = request.strip("/")
        pages = Document.get_by_type(environment, self._slug)
        if not target:
            return "\n".join(f"{page.id}: {page.get('title', '')}" for page in pages)

        try:
            page_id = int(target)
        except ValueError:
            return environment.not_found()

        for page in pages:
            if page.id == page_id:
                return f"{page.get('title', '')}\n\n{page.get('body', '')}"
        return environment.not_found()


class PagesPlugin:
    """Registers :class:`PageType` in every Environment."""

    @hookimpl
    def register_document_types(self) -> list[PageType]:
        return [PageType()]

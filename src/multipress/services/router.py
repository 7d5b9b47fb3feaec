"""Request routing by document type slug."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from multipress.domain.environment import Environment

logger = logging.getLogger(__name__)


class Router:
    """Dispatch request paths to the document type named by their first segment.

    ``/pages/12`` renders through the ``pages`` type with request ``/12``;
    ``/pages`` renders with request ``/``. Unknown types, and the empty
    path, get the environment's not-found body.
    """

    def __init__(self, environment: Environment) -> None:
        self._environment = environment

    def dispatch(self, path: str) -> str:
        slug, _, rest = path.lstrip("/").partition("/")
        doc_type = self._environment.get_type(slug) if slug else None
        if doc_type is None:
            logger.debug("No document type for path %r", path)
            return self._environment.not_found()
        return doc_type.render(self._environment, f"/{rest}")

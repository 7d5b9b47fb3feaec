"""TenancyService: inspect and grow the domain/user graph as the current user."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from multipress.domain.documents import Document
from multipress.domain.domains import Domain
from multipress.domain.errors import ReservedKeyError
from multipress.domain.identity import Entity
from multipress.domain.types import EntityKind
from multipress.domain.users import User
from multipress.services.base import BaseService
from multipress.services.result import ErrorCode, ServiceResult

ACTIONS = ("create", "read", "update", "delete")

_PREDICATES = {
    "create": "is_creatable",
    "read": "is_readable",
    "update": "is_editable",
    "delete": "is_deletable",
}


def _domain_payload(domain: Domain, actor: User) -> dict[str, Any]:
    return {
        "id": domain.id,
        "name": domain.name,
        "owner": domain.owner.id,
        "origin": domain.origin.name,
        "ancestry": [d.name for d in domain.ancestry],
        "depth_allowed": domain.depth_allowed(actor),
        "data": domain.data,
    }


class TenancyService(BaseService):
    """Domain and user operations, checked against the acting user."""

    def show_domain(self, name: str) -> ServiceResult:
        """Describe the domain called *name* if the current user may read it."""
        op = "show_domain"
        actor = self._actor
        if actor is None:
            return ServiceResult.failure(op, ErrorCode.UNAUTHENTICATED, "No acting user")

        domain = Domain.get_by_name(self._environment, name)
        if domain is None:
            return ServiceResult.failure(op, ErrorCode.NOT_FOUND, f"No domain named {name!r}")
        if not domain.is_readable(actor):
            return ServiceResult.failure(
                op, ErrorCode.FORBIDDEN, f"User {actor.id} may not read {name!r}"
            )
        return ServiceResult(ok=True, op=op, data=_domain_payload(domain, actor))

    def create_domain(
        self,
        name: str,
        *,
        origin: str,
        owner_id: int | None = None,
        data: Mapping[str, str] | None = None,
    ) -> ServiceResult:
        """Originate a new domain *name* beneath *origin*.

        The owner defaults to the acting user.
        """
        op = "create_domain"
        actor = self._actor
        if actor is None:
            return ServiceResult.failure(op, ErrorCode.UNAUTHENTICATED, "No acting user")

        parent = Domain.get_by_name(self._environment, origin)
        if parent is None:
            return ServiceResult.failure(op, ErrorCode.NOT_FOUND, f"No domain named {origin!r}")
        owner = actor if owner_id is None else User.get_by_id(self._environment, owner_id)
        if owner is None:
            return ServiceResult.failure(op, ErrorCode.NOT_FOUND, f"No user with id {owner_id}")

        domain = Domain.create(self._environment, name, owner, parent)
        try:
            domain.update(data or {})
        except ReservedKeyError as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))

        if not domain.save(actor):
            return ServiceResult.failure(
                op,
                ErrorCode.FORBIDDEN,
                f"User {actor.id} may not create {name!r} beneath {origin!r}",
                depth_allowed=parent.depth_allowed(actor),
            )
        return ServiceResult(ok=True, op=op, data=_domain_payload(domain, actor))

    def create_user(self, *, origin: str, data: Mapping[str, str] | None = None) -> ServiceResult:
        """Create a user originating on *origin*."""
        op = "create_user"
        actor = self._actor
        if actor is None:
            return ServiceResult.failure(op, ErrorCode.UNAUTHENTICATED, "No acting user")

        home = Domain.get_by_name(self._environment, origin)
        if home is None:
            return ServiceResult.failure(op, ErrorCode.NOT_FOUND, f"No domain named {origin!r}")

        user = User.create(self._environment, home)
        try:
            user.update(data or {})
        except ReservedKeyError as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))

        if not user.save(actor):
            return ServiceResult.failure(
                op, ErrorCode.FORBIDDEN, f"User {actor.id} may not create users on {origin!r}"
            )
        return ServiceResult(
            ok=True, op=op, data={"id": user.id, "origin": home.name, "data": user.data}
        )

    def check_permission(self, action: str, kind: str, target: str) -> ServiceResult:
        """Report whether the acting user may perform *action* on a target.

        Domains are named by host name; users and documents by numeric id.
        """
        op = "check_permission"
        actor = self._actor
        if actor is None:
            return ServiceResult.failure(op, ErrorCode.UNAUTHENTICATED, "No acting user")
        if action not in _PREDICATES:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_ARGUMENT, f"Unknown action {action!r}", allowed=list(ACTIONS)
            )

        try:
            entity = self._resolve(EntityKind(kind), target)
        except ValueError:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_ARGUMENT, f"Cannot look up {kind!r} by {target!r}"
            )
        if entity is None:
            return ServiceResult.failure(op, ErrorCode.NOT_FOUND, f"No {kind} {target!r}")

        allowed = bool(getattr(entity, _PREDICATES[action])(actor))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "action": action,
                "kind": kind,
                "target": target,
                "actor": actor.id,
                "allowed": allowed,
            },
        )

    def _resolve(self, kind: EntityKind, target: str) -> Entity | None:
        env = self._environment
        if kind is EntityKind.DOMAIN:
            return Domain.get_by_name(env, target)
        if kind is EntityKind.USER:
            return User.get_by_id(env, int(target))

        document_id = int(target)
        for slug in env.types:
            Document.get_by_type(env, slug)
            document = Document.get_by_id(env, document_id)
            if document is not None:
                return document
        return None

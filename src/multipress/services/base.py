"""BaseService: foundation for multipress services.

Every service receives an :class:`Environment` at construction time and
acts as the environment's current user.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from multipress.domain.environment import Environment
    from multipress.domain.users import User


class BaseService:
    """Base for service-layer classes.

    Usage::

        class TenancyService(BaseService):
            def show_domain(self, name: str) -> ServiceResult:
                domain = Domain.get_by_name(self._environment, name)
                ...
    """

    def __init__(self, environment: Environment) -> None:
        self._environment = environment

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def _actor(self) -> User | None:
        return self._environment.current_user

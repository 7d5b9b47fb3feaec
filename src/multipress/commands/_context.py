"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Environment construction and centralized
result emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from multipress.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from multipress.config.settings import MultipressSettings
    from multipress.domain.environment import Environment
    from multipress.domain.storage import Database
    from multipress.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The environment is built on first use so ``--help`` and ``--version``
    never touch storage. Without ``--as`` the CLI acts as the genesis user.
    """

    def __init__(self, settings: MultipressSettings) -> None:
        self.settings = settings
        self._environment: Environment | None = None

        from multipress.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

    def open_database(self) -> Database:
        """Open the configured storage backend, creating SQLite tables if needed."""
        if self.settings.database.backend == "memory":
            from multipress.infrastructure.database.memory import MemoryDatabase

            return MemoryDatabase()

        from multipress.infrastructure.database.engine import init_database
        from multipress.infrastructure.database.sql import SqlDatabase

        return SqlDatabase(init_database(self.settings.database_path))

    @property
    def environment(self) -> Environment:
        """The session's Environment (created lazily on first access)."""
        if self._environment is None:
            self._environment = self._build_environment()
        return self._environment

    def _build_environment(self) -> Environment:
        from multipress.domain.environment import Environment
        from multipress.domain.users import User
        from multipress.plugins.manager import PluginManager

        plugins = PluginManager()
        loaded = plugins.discover_and_load(builtins=self.settings.plugins.builtins)
        logger.debug("Loaded plugins: %s", loaded)

        genesis = self.settings.genesis
        environment = Environment(
            self.open_database(),
            genesis.name,
            genesis.domain_data,
            genesis.user_data,
            host=self.settings.host,
            plugin_manager=plugins,
        )

        acting = self.settings.acting_user
        user = User.genesis(environment) if acting is None else User.get_by_id(environment, acting)
        if user is None:
            msg = f"No user with id {acting}"
            raise click.ClickException(msg)
        environment.authenticate(user)
        return environment

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

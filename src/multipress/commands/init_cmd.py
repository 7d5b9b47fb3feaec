"""Command: database initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from multipress.commands._base import MultipressCommand
from multipress.services.result import ServiceResult

if TYPE_CHECKING:
    from multipress.commands._context import AppContext

_INIT_EXAMPLES = """\
  multipress init
  multipress -c /srv/site/multipress.toml init
  MULTIPRESS_DATABASE__PATH=/tmp/mp.db multipress init"""


@click.command("init", cls=MultipressCommand, examples=_INIT_EXAMPLES)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the configured database and its tables."""
    settings = app.settings
    if settings.database.backend == "memory":
        app.emit(
            ServiceResult(
                ok=True,
                op="init",
                data={"backend": "memory", "genesis": settings.genesis.name},
                warnings=["The memory backend keeps nothing between invocations"],
            )
        )
        return

    from multipress.infrastructure.database.engine import init_database

    engine = init_database(settings.database_path)
    engine.dispose()
    app.emit(
        ServiceResult(
            ok=True,
            op="init",
            data={
                "backend": "sqlite",
                "path": str(settings.database_path),
                "genesis": settings.genesis.name,
            },
        )
    )

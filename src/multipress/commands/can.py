"""Command: check one permission for the acting user."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from multipress.commands._base import MultipressCommand
from multipress.domain.types import EntityKind
from multipress.services.tenancy import ACTIONS, TenancyService

if TYPE_CHECKING:
    from multipress.commands._context import AppContext

_CAN_EXAMPLES = """\
  multipress --as 3 can create domain blog.example.org
  multipress --as 3 can update user 7
  multipress --json --host example.org --as 3 can read document 12"""


@click.command(cls=MultipressCommand, examples=_CAN_EXAMPLES)
@click.argument("action", type=click.Choice(ACTIONS))
@click.argument("kind", type=click.Choice([k.value for k in EntityKind]))
@click.argument("target")
@click.pass_obj
def can(app: AppContext, action: str, kind: str, target: str) -> None:
    """Report whether the acting user may ACTION the KIND named TARGET.

    Domains are named by host name; users and documents by numeric id.
    """
    app.emit(TenancyService(app.environment).check_permission(action, kind, target))

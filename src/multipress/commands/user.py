"""Command group: create users."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from multipress.commands._base import MultipressGroup
from multipress.commands.domain import _parse_pairs
from multipress.services.tenancy import TenancyService

if TYPE_CHECKING:
    from multipress.commands._context import AppContext

_USER_EXAMPLES = """\
  multipress user create --origin localhost
  multipress --as 3 user create --origin blog.localhost --set display_name=Sam"""


@click.group(cls=MultipressGroup, examples=_USER_EXAMPLES)
@click.pass_obj
def user(app: AppContext) -> None:
    """Create users."""


@user.command()
@click.option("--origin", required=True, help="Name of the domain the user originates on.")
@click.option("--set", "pairs", multiple=True, help="Data entry as KEY=VALUE (repeatable).")
@click.pass_obj
def create(app: AppContext, origin: str, pairs: tuple[str, ...]) -> None:
    """Create a user originating on --origin."""
    app.emit(TenancyService(app.environment).create_user(origin=origin, data=_parse_pairs(pairs)))

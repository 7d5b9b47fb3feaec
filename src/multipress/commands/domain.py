"""Command group: inspect and create domains."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from multipress.commands._base import MultipressGroup
from multipress.services.tenancy import TenancyService

if TYPE_CHECKING:
    from multipress.commands._context import AppContext

_DOMAIN_EXAMPLES = """\
  multipress domain show localhost
  multipress domain create blog.localhost --origin localhost
  multipress --as 3 domain create a.blog.localhost --origin blog.localhost --owner 3
  multipress domain create shop.localhost --origin localhost --set depth_allowed=1"""


def _parse_pairs(pairs: tuple[str, ...]) -> dict[str, str]:
    data: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            msg = f"Expected KEY=VALUE, got {pair!r}"
            raise click.BadParameter(msg, param_hint="--set")
        data[key] = value
    return data


@click.group(cls=MultipressGroup, examples=_DOMAIN_EXAMPLES)
@click.pass_obj
def domain(app: AppContext) -> None:
    """Inspect and create domains."""


@domain.command(
    examples="""\
  multipress domain show localhost
  multipress --json --as 3 domain show blog.localhost"""
)
@click.argument("name")
@click.pass_obj
def show(app: AppContext, name: str) -> None:
    """Show the domain NAME, its ancestry and remaining depth quota."""
    app.emit(TenancyService(app.environment).show_domain(name))


@domain.command(
    examples="""\
  multipress domain create blog.localhost --origin localhost
  multipress domain create blog.localhost --origin localhost --owner 3
  multipress domain create blog.localhost --origin localhost --set users_can_register=no"""
)
@click.argument("name")
@click.option("--origin", required=True, help="Name of the parent domain.")
@click.option(
    "--owner", "owner_id", type=int, default=None, help="Owner user id (default: acting user)."
)
@click.option("--set", "pairs", multiple=True, help="Data entry as KEY=VALUE (repeatable).")
@click.pass_obj
def create(
    app: AppContext, name: str, origin: str, owner_id: int | None, pairs: tuple[str, ...]
) -> None:
    """Create the domain NAME beneath --origin."""
    data = _parse_pairs(pairs)
    app.emit(
        TenancyService(app.environment).create_domain(
            name, origin=origin, owner_id=owner_id, data=data
        )
    )

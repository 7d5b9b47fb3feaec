"""Command: render a request path through the document type router."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from multipress.commands._base import MultipressCommand
from multipress.services.router import Router

if TYPE_CHECKING:
    from multipress.commands._context import AppContext

_ROUTE_EXAMPLES = """\
  multipress --host example.org route /pages
  multipress --host example.org route /pages/3 --public
  multipress --as 4 route /pages/3"""


@click.command(cls=MultipressCommand, examples=_ROUTE_EXAMPLES)
@click.argument("path")
@click.option("--public", is_flag=True, help="Render as an anonymous visitor.")
@click.pass_obj
def route(app: AppContext, path: str, public: bool) -> None:
    """Render PATH as the document type named by its first segment."""
    environment = app.environment
    if public:
        environment.authenticate(None)
    click.echo(Router(environment).dispatch(path))

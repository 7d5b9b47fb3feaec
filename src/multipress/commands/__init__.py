"""Subcommand modules for multipress.

Provides register_commands() which uses deferred imports to keep
``multipress --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from multipress.commands.domain import domain
    from multipress.commands.user import user

    cli.add_command(domain)
    cli.add_command(user)

    # --- Standalone commands ---
    from multipress.commands.can import can
    from multipress.commands.init_cmd import init_cmd
    from multipress.commands.route import route

    cli.add_command(init_cmd)
    cli.add_command(route)
    cli.add_command(can)

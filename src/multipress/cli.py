"""Root CLI group for multipress with global flags and command registration."""

from __future__ import annotations

import click

from multipress import __version__
from multipress.commands import register_commands
from multipress.commands._context import AppContext
from multipress.config.settings import MultipressSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="multipress")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--host", default=None, help="Host name of the domain being accessed.")
@click.option("--as", "acting_user", type=int, default=None, help="Act as this user id.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    host: str | None,
    acting_user: int | None,
) -> None:
    """multipress: multi-tenant domains, users and documents."""
    ctx.ensure_object(dict)
    settings = MultipressSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        host=host,
        acting_user=acting_user,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)

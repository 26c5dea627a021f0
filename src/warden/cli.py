"""Root CLI group for warden with global flags and command registration."""

from __future__ import annotations

import click

from warden import __version__
from warden.commands import register_commands
from warden.commands._base import WardenGroup
from warden.commands._context import AppContext
from warden.config.settings import WardenSettings


@click.group(cls=WardenGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="warden")
@click.option("-q", "--quiet", is_flag=True, help="Only warnings and errors.")
@click.option("-v", "--verbose", is_flag=True, help="Debug diagnostics.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-w", "--wardenfile", default=None, help="Path to the Wardenfile.")
@click.pass_context
def cli(
    ctx: click.Context,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    wardenfile: str | None,
) -> None:
    """warden: rerun plugins when watched files change."""
    ctx.ensure_object(dict)
    settings = WardenSettings.from_cli(
        wardenfile=wardenfile,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)

"""Command: show the groups and plugins of the Wardenfile."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from warden.commands._base import WardenCommand
from warden.output.renderers import render_wardenfile

if TYPE_CHECKING:
    from warden.commands._context import AppContext

_SHOW_EXAMPLES = """\
  warden show
  WARDEN_WARDENFILE=ci/Wardenfile.toml warden show"""


@click.command("show", cls=WardenCommand, examples=_SHOW_EXAMPLES)
@click.pass_obj
def show(app: AppContext) -> None:
    """Show groups and plugins with their options."""
    click.echo(render_wardenfile(app.evaluate()))

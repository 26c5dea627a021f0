"""Command: list available plugin types (named list_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from warden.commands._base import WardenCommand
from warden.output.renderers import render_plugin_types

if TYPE_CHECKING:
    from warden.commands._context import AppContext

_LIST_EXAMPLES = """\
  warden list
  warden -w other/Wardenfile.toml list"""


@click.command("list", cls=WardenCommand, examples=_LIST_EXAMPLES)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List plugin types; * marks those the Wardenfile uses."""
    used: list[str] = []
    if app.settings.wardenfile_path is not None:
        used = [entry.type or entry.name for entry in app.evaluate().plugins]
    click.echo(render_plugin_types(app.plugin_manager.plugin_types(), used))

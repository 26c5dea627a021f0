"""Command: write a starter Wardenfile (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from warden.commands._base import WardenCommand
from warden.config.discovery import WARDENFILE_NAME

if TYPE_CHECKING:
    from warden.commands._context import AppContext

_INIT_EXAMPLES = """\
  warden init
  warden init shell
  warden init --bare"""


@click.command("init", cls=WardenCommand, examples=_INIT_EXAMPLES)
@click.argument("types", nargs=-1)
@click.option("--bare", is_flag=True, help="Write the skeleton only, without plugin stanzas.")
@click.pass_obj
def init_cmd(app: AppContext, types: tuple[str, ...], bare: bool) -> None:
    """Write Wardenfile.toml in the current directory.

    Appends the template stanza of each named plugin type, or of every
    type that has one when no TYPES are given.
    """
    from warden.wardenfile import create_wardenfile

    path = Path.cwd() / WARDENFILE_NAME
    if path.exists():
        app.fail(f"{WARDENFILE_NAME} already exists at {path}")

    templates: list[str] = []
    if not bare:
        available = app.plugin_manager.plugin_types()
        wanted = [t.lower() for t in types] or sorted(available)
        for type_name in wanted:
            cls = available.get(type_name)
            if cls is None:
                app.fail(f"Could not load plugin type {type_name!r}")
            template = getattr(cls, "TEMPLATE", "")
            if template:
                templates.append(template)
            elif types:
                click.echo(f"WARNING: plugin type {type_name!r} has no template", err=True)

    create_wardenfile(path, templates=templates)
    click.echo(f"Writing new {WARDENFILE_NAME} to {path}")

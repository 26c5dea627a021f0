"""Command: list desktop notifier backends and which one a session would use."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from warden.commands._base import WardenCommand
from warden.config.options import OptionsStore, rename_legacy_keys
from warden.notifier import available_backends, resolve_enabled
from warden.output.renderers import render_notifiers

if TYPE_CHECKING:
    from warden.commands._context import AppContext

_NOTIFIERS_EXAMPLES = """\
  warden notifiers
  WARDEN_NOTIFY=false warden notifiers"""


@click.command("notifiers", cls=WardenCommand, examples=_NOTIFIERS_EXAMPLES)
@click.pass_obj
def notifiers(app: AppContext) -> None:
    """List notifier backends found on PATH; * marks the one in use."""
    configured = True
    if app.settings.wardenfile_path is not None:
        data, _renamed = rename_legacy_keys(app.evaluate().options)
        try:
            configured = OptionsStore.merge(data).notify
        except ValueError as exc:
            app.fail(f"Invalid [options] in Wardenfile: {exc}")
    enabled = resolve_enabled(configured, app.settings.notify)
    click.echo(render_notifiers(available_backends(), enabled))

"""Command: run the watch session until quit."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any

import click

from warden.commands._base import WardenCommand

if TYPE_CHECKING:
    from warden.commands._context import AppContext

_START_EXAMPLES = """\
  warden start
  warden start --clear --group backend
  warden start --plugin tests --watchdir src --watchdir tests
  warden start --no-interactions --force-polling --latency 1.5
  warden -w ci/Wardenfile.toml start --fail-on-empty"""


@click.command("start", cls=WardenCommand, examples=_START_EXAMPLES)
@click.option("-c", "--clear", is_flag=True, help="Clear the screen before plugins run.")
@click.option("-n", "--no-notify", is_flag=True, help="Disable desktop notifications.")
@click.option("-d", "--debug", is_flag=True, help="Show debug diagnostics and tracebacks.")
@click.option(
    "--watchdir",
    multiple=True,
    help="Directory to watch (repeatable). Defaults to the project root.",
)
@click.option("-g", "--group", multiple=True, help="Only run plugins in this group (repeatable).")
@click.option("-P", "--plugin", multiple=True, help="Only run this plugin (repeatable).")
@click.option("-i", "--no-interactions", is_flag=True, help="Do not read commands from stdin.")
@click.option("-l", "--latency", type=float, default=None, help="Debounce window in seconds.")
@click.option("-p", "--force-polling", is_flag=True, help="Poll instead of native events.")
@click.option("--fail-on-empty", is_flag=True, help="Exit 1 when no plugins are configured.")
@click.pass_obj
def start(
    app: AppContext,
    clear: bool,
    no_notify: bool,
    debug: bool,
    watchdir: tuple[str, ...],
    group: tuple[str, ...],
    plugin: tuple[str, ...],
    no_interactions: bool,
    latency: float | None,
    force_polling: bool,
    fail_on_empty: bool,
) -> None:
    """Watch files and rerun plugins until quit.

    SIGUSR1 toggles pause, SIGUSR2 resumes, SIGHUP reloads the Wardenfile
    and SIGINT or SIGTERM quits. On a terminal, type pause, reload, all or quit.
    """
    from warden.interactor import Interactor
    from warden.runtime.session import SessionCoordinator
    from warden.runtime.signals import SignalBridge
    from warden.ui import UI

    # Unset flags stay out so they never mask the Wardenfile's [options].
    overrides: dict[str, Any] = {
        "clear": clear or None,
        "notify": False if no_notify else None,
        "debug": debug or None,
        "watchdir": list(watchdir) or None,
        "group": list(group) or None,
        "plugin": list(plugin) or None,
        "no_interactions": no_interactions or None,
        "latency": latency,
        "force_polling": force_polling or None,
        "fail_on_empty": fail_on_empty or None,
    }
    session = SessionCoordinator(
        app.plugin_manager,
        app.session_options(**{k: v for k, v in overrides.items() if v is not None}),
        ui=UI(silence_deprecations=app.settings.silence_deprecations),
        notify_override=app.settings.notify,
        interactor_factory=Interactor if sys.stdin.isatty() else None,
    )
    bridge = SignalBridge(session.queue, lambda: session.state)
    bridge.install()
    try:
        code = session.run()
    finally:
        bridge.uninstall()
    if code:
        raise SystemExit(code)

"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. The plugin manager is built lazily so ``--help`` and
``--version`` never import third-party plugins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NoReturn

import click

from warden.config.logging import configure_logging
from warden.errors import WardenError

if TYPE_CHECKING:
    from warden.config.models import Wardenfile
    from warden.config.settings import WardenSettings
    from warden.plugins.manager import PluginManager

LOCAL_PLUGIN_DIR = ".warden/plugins"


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: WardenSettings) -> None:
        self.settings = settings
        self._plugin_manager: PluginManager | None = None
        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

    @property
    def plugin_manager(self) -> PluginManager:
        """Plugin manager with built-in, entry-point and local types loaded."""
        if self._plugin_manager is None:
            from warden.plugins.manager import PluginManager

            manager = PluginManager()
            manager.discover_and_load(local_dir=self.settings.project_root / LOCAL_PLUGIN_DIR)
            self._plugin_manager = manager
        return self._plugin_manager

    def session_options(self, **overrides: Any) -> dict[str, Any]:
        """Option overrides for a session: resolved paths plus *overrides*."""
        return {**self.settings.session_overrides(), **overrides}

    def evaluate(self) -> Wardenfile:
        """Evaluate the current Wardenfile, exiting with status 1 on error."""
        from warden.config.options import OptionsStore
        from warden.wardenfile import WardenfileEvaluator

        options = OptionsStore.merge(self.session_options())
        try:
            return WardenfileEvaluator(options).evaluate()
        except WardenError as exc:
            self.fail(str(exc))

    def fail(self, message: str) -> NoReturn:
        """Write *message* to stderr and exit with status 1."""
        click.echo(f"ERROR: {message}", err=True)
        raise SystemExit(1)

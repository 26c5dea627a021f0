"""Built-in shell plugin: run a command when watched files change.

Options (Wardenfile ``[[plugin]]`` keys):

``command``          command line run on change (required)
``run_all_command``  command line for ``run-all`` (default: ``command``)
``pass_paths``       append the changed paths as arguments (default: false)
``run_on_start``     run ``run_all_command`` once when watching starts

Output streams straight to the terminal. A non-zero exit raises
:class:`~warden.errors.PluginError`, which the coordinator reports.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import Any

from warden.errors import ConfigurationError, PluginError
from warden.plugins.base import BasePlugin, SessionHandle

logger = logging.getLogger(__name__)


class ShellPlugin(BasePlugin):
    TEMPLATE = """\
[[plugin]]
name = "tests"
type = "shell"
group = "backend"
watch = ["src/**/*.py", "tests/**/*.py"]
command = "pytest -q"
"""

    def __init__(
        self,
        name: str,
        options: dict[str, Any] | None = None,
        session: SessionHandle | None = None,
    ) -> None:
        super().__init__(name, options, session)
        command = self.options.get("command")
        if not command:
            msg = f"Plugin {name!r} of type 'shell' needs a 'command' option"
            raise ConfigurationError(msg)
        self.command: list[str] = shlex.split(str(command))
        run_all = self.options.get("run_all_command")
        self.run_all_command: list[str] = shlex.split(str(run_all)) if run_all else self.command
        self.pass_paths = bool(self.options.get("pass_paths", False))
        self.run_on_start = bool(self.options.get("run_on_start", False))

    def on_start(self) -> None:
        if self.run_on_start:
            self._run(self.run_all_command, "on_start")

    def on_change(self, paths: list[str]) -> None:
        args = [*self.command, *paths] if self.pass_paths else list(self.command)
        self._run(args, "on_change")

    def run_all(self) -> None:
        self._run(self.run_all_command, "run_all")

    def _run(self, args: list[str], callback: str) -> None:
        logger.debug("Running %s", shlex.join(args))
        try:
            result = subprocess.run(args, cwd=self.cwd, check=False)
        except OSError as exc:
            raise PluginError(self.name, callback, exc) from exc
        if result.returncode != 0:
            raise PluginError(
                self.name,
                callback,
                f"`{shlex.join(args)}` exited with status {result.returncode}",
            )

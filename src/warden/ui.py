"""Operator-facing diagnostics.

Everything logged through :class:`UI` is either an error or a diagnostic
message and goes to stderr through structlog. Plugins that produce output
meant for piping should write to stdout themselves.

Messages can be filtered per plugin with the ``only`` / ``except`` regexes
of the ``[options.ui]`` table.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

import structlog

from warden import terminal
from warden.config.models import UIOptions
from warden.errors import ResourceError

if TYPE_CHECKING:
    from warden.runtime.scope import Scope

DEFAULT_PLUGIN_NAME = "warden"


class UI:
    """Formats and filters messages for the operator."""

    def __init__(
        self,
        options: UIOptions | None = None,
        *,
        clear_enabled: bool = False,
        silence_deprecations: bool = False,
    ) -> None:
        self._log = structlog.get_logger("warden.ui")
        self.options = options or UIOptions()
        self.clear_enabled = clear_enabled
        self.silence_deprecations = silence_deprecations
        self._clearable = False

    @property
    def options(self) -> UIOptions:
        return self._options

    @options.setter
    def options(self, options: UIOptions) -> None:
        self._options = options
        self._only = re.compile(options.only) if options.only else None
        self._except = re.compile(options.except_) if options.except_ else None

    def set_level(self, level: str) -> None:
        """Assign a log level (``debug``, ``info``, ...) to the warden logger."""
        logging.getLogger("warden").setLevel(level.upper())

    # ------------------------------------------------------------------
    # Message levels
    # ------------------------------------------------------------------

    def info(self, message: str, *, plugin: str | None = None, **kw: Any) -> None:
        self._emit("info", message, plugin, **kw)

    def warning(self, message: str, *, plugin: str | None = None, **kw: Any) -> None:
        self._emit("warning", message, plugin, **kw)

    def error(self, message: str, *, plugin: str | None = None, **kw: Any) -> None:
        self._emit("error", message, plugin, **kw)

    def debug(self, message: str, *, plugin: str | None = None, **kw: Any) -> None:
        self._emit("debug", message, plugin, **kw)

    def deprecation(self, message: str, *, plugin: str | None = None) -> None:
        """Warning-level deprecation notice, unless deprecations are silenced."""
        if self.silence_deprecations:
            return
        self._emit("warning", message, plugin, deprecation=True, stack_info=True)

    def action_with_scopes(self, action: str, scope: Scope) -> None:
        """Log "<action> <scope titles>", or "<action> all" for the empty scope."""
        titles = scope.titles()
        self.info(f"{action} {', '.join(titles) if titles else 'all'}")

    # ------------------------------------------------------------------
    # Screen clearing
    # ------------------------------------------------------------------

    def clearable(self) -> None:
        """Allow the screen to be cleared again."""
        self._clearable = True

    def clear(self, *, force: bool = False) -> None:
        """Clear the screen if the ``clear`` option is on and it is clearable."""
        if not self.clear_enabled:
            return
        if not (self._clearable or force):
            return
        self._clearable = False
        try:
            terminal.clear()
        except ResourceError as exc:
            self.warning(f"Failed to clear the screen: {exc}")

    def reset_and_clear(self) -> None:
        self._clearable = False
        self.clear(force=True)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _passes_filter(self, plugin: str) -> bool:
        if self._only is None and self._except is None:
            return True
        if self._only is not None and self._only.search(plugin):
            return True
        return self._except is not None and not self._except.search(plugin)

    def _emit(self, level: str, message: str, plugin: str | None, **kw: Any) -> None:
        name = plugin or DEFAULT_PLUGIN_NAME
        if not self._passes_filter(name):
            return
        getattr(self._log, level)(message, plugin=name, **kw)

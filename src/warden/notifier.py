"""Desktop notifications, fire-and-forget.

Delivery shells out to the first notifier command found on PATH. Every
failure is swallowed with a debug log: a missing notifier never interrupts
the watch loop.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable, Sequence
from typing import Any

logger = logging.getLogger(__name__)

KINDS: frozenset[str] = frozenset({"success", "failed", "pending", "notify"})


def _notify_send(title: str, message: str, kind: str) -> list[str]:
    urgency = "critical" if kind == "failed" else "normal"
    return ["notify-send", "--app-name=warden", f"--urgency={urgency}", title, message]


def _terminal_notifier(title: str, message: str, kind: str) -> list[str]:
    return ["terminal-notifier", "-title", title, "-message", message, "-group", "warden"]


def _osascript(title: str, message: str, kind: str) -> list[str]:
    script = f"display notification {_quote(message)} with title {_quote(title)}"
    return ["osascript", "-e", script]


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


# Looked up in order; the first executable found wins.
BACKENDS: tuple[tuple[str, Callable[[str, str, str], list[str]]], ...] = (
    ("notify-send", _notify_send),
    ("terminal-notifier", _terminal_notifier),
    ("osascript", _osascript),
)


def available_backends(
    which: Callable[[str], str | None] | None = None,
) -> list[tuple[str, str | None]]:
    """Each backend in lookup order with its executable path, or None when missing."""
    finder = which or shutil.which
    return [(name, finder(name)) for name, _build in BACKENDS]


def resolve_enabled(configured: bool, env_override: bool | None) -> bool:
    """The environment override, when set, wins over configuration."""
    return configured if env_override is None else env_override


class Notifier:
    """Delivers ``notify(title, message, kind)`` calls to the desktop."""

    def __init__(
        self,
        *,
        which: Callable[[str], str | None] = shutil.which,
        spawn: Callable[..., Any] = subprocess.Popen,
    ) -> None:
        self._which = which
        self._spawn = spawn
        self._enabled = False
        self._backend: tuple[str, Callable[[str, str, str], list[str]]] | None = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def backend(self) -> str | None:
        return self._backend[0] if self._backend else None

    def turn_on(self) -> None:
        """Enable notifications, probing for an available backend."""
        self._backend = next(((name, build) for name, build in BACKENDS if self._which(name)), None)
        self._enabled = True
        if self._backend is None:
            logger.debug("No desktop notifier found on PATH; notifications are logged only")
        else:
            logger.debug("Using %s for notifications", self._backend[0])

    def turn_off(self) -> None:
        self._enabled = False

    def notify(self, title: str, message: str, kind: str = "notify") -> None:
        """Send a notification. The result is never reported back."""
        if not self._enabled:
            return
        if kind not in KINDS:
            kind = "notify"
        if self._backend is None:
            logger.debug("Notification [%s] %s: %s", kind, title, message)
            return
        name, build = self._backend
        args: Sequence[str] = build(title, message, kind)
        try:
            self._spawn(args, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError:
            logger.debug("Notifier %s failed", name, exc_info=True)

"""Signal bridge: OS signals become queued commands.

Handlers never touch session state. They read the (eventually consistent)
current state, enqueue one :class:`Command` and return.

    SIGUSR1          pause toggle
    SIGUSR2          unpause
    SIGINT, SIGTERM  interrupt (quit, with cooperative cancellation)
    SIGHUP           reload
"""

from __future__ import annotations

import logging
import signal
from collections.abc import Callable
from types import FrameType
from typing import Any

from warden.runtime.command_queue import CommandQueue
from warden.runtime.commands import Command
from warden.runtime.state import SessionState

logger = logging.getLogger(__name__)

PAUSE_SIGNALS: tuple[str, ...] = ("SIGUSR1",)
UNPAUSE_SIGNALS: tuple[str, ...] = ("SIGUSR2",)
INTERRUPT_SIGNALS: tuple[str, ...] = ("SIGINT", "SIGTERM")
RELOAD_SIGNALS: tuple[str, ...] = ("SIGHUP",)


def pause_toggle_command(state: SessionState) -> Command | None:
    """Command a pause toggle maps to in *state* (None means no-op)."""
    if state is SessionState.RUNNING:
        return Command.pause()
    if state is SessionState.PAUSED:
        return Command.unpause()
    return None


class SignalBridge:
    """Installs and removes the operator signal handlers."""

    def __init__(self, queue: CommandQueue, state: Callable[[], SessionState]) -> None:
        self._queue = queue
        self._state = state
        self._previous: dict[signal.Signals, Any] = {}

    @property
    def installed(self) -> list[str]:
        return [sig.name for sig in self._previous]

    def install(self) -> list[str]:
        """Register every handler the host supports.

        Registration failures (unknown signal, not on the main thread) are
        non-fatal: that control path is simply unavailable.
        """
        for names, handler in (
            (PAUSE_SIGNALS, self._on_pause),
            (UNPAUSE_SIGNALS, self._on_unpause),
            (INTERRUPT_SIGNALS, self._on_interrupt),
            (RELOAD_SIGNALS, self._on_reload),
        ):
            for name in names:
                self._register(name, handler)
        return self.installed

    def uninstall(self) -> None:
        """Restore the handlers that were in place before :meth:`install`."""
        for sig, previous in self._previous.items():
            try:
                signal.signal(sig, previous)
            except (OSError, ValueError):
                logger.debug("Could not restore handler for %s", sig.name, exc_info=True)
        self._previous.clear()

    def _register(self, name: str, handler: Callable[[int, FrameType | None], None]) -> None:
        sig = getattr(signal, name, None)
        if sig is None:
            logger.debug("Signal %s is not available on this platform", name)
            return
        try:
            self._previous[sig] = signal.signal(sig, handler)
        except (OSError, ValueError, RuntimeError):
            logger.debug("Could not install handler for %s", name, exc_info=True)

    # ------------------------------------------------------------------
    # Handlers: enqueue and return
    # ------------------------------------------------------------------

    def _on_pause(self, signum: int, frame: FrameType | None) -> None:
        command = pause_toggle_command(self._state())
        if command is not None:
            self._queue.enqueue(command)

    def _on_unpause(self, signum: int, frame: FrameType | None) -> None:
        self._queue.enqueue(Command.unpause())

    def _on_interrupt(self, signum: int, frame: FrameType | None) -> None:
        self._queue.enqueue(Command.quit())

    def _on_reload(self, signum: int, frame: FrameType | None) -> None:
        self._queue.enqueue(Command.reload())

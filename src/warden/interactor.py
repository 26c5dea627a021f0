"""Interactive console: one text line in, one queued command out.

Runs on a daemon thread and, like the signal bridge, only enqueues.

    pause | p | unpause | resume   pause toggle
    reload | r [names...]          reload
    all | a | run-all [names...]   run-all (an empty line too)
    quit | q | exit                quit (end-of-file too)
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Callable
from typing import TextIO

from warden.runtime.command_queue import CommandQueue
from warden.runtime.commands import Command, CommandKind, ScopeRequest
from warden.runtime.signals import pause_toggle_command
from warden.runtime.state import SessionState

logger = logging.getLogger(__name__)

_ALIASES: dict[str, str] = {
    "pause": "pause",
    "p": "pause",
    "unpause": "pause",
    "resume": "pause",
    "reload": "reload",
    "r": "reload",
    "all": "all",
    "a": "all",
    "run-all": "all",
    "quit": "quit",
    "q": "quit",
    "exit": "quit",
}


class UnknownCommand(ValueError):
    """Raised by :func:`parse_command` for unrecognised input."""


def parse_command(line: str, state: SessionState) -> Command | None:
    """Map one console line to a command.

    Returns None when the line maps to a no-op (a pause toggle while
    stopping).

    Raises:
        UnknownCommand: the first word is not a known command.
    """
    words = line.split()
    if not words:
        return Command.run_all()
    head, names = words[0].lower(), tuple(words[1:])
    action = _ALIASES.get(head)
    scope = ScopeRequest(groups=names, plugins=names)
    if action == "pause":
        return pause_toggle_command(state)
    if action == "reload":
        return Command.reload(scope)
    if action == "all":
        return Command.run_all(scope)
    if action == "quit":
        return Command.quit()
    raise UnknownCommand(head)


class Interactor:
    """Reads commands from *stream* on a background thread."""

    def __init__(
        self,
        queue: CommandQueue,
        state: Callable[[], SessionState],
        *,
        stream: TextIO | None = None,
    ) -> None:
        self._queue = queue
        self._state = state
        self._stream = stream or sys.stdin
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self._loop, name="warden-interactor", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        # The thread may stay blocked in readline(); it is a daemon and
        # exits with the process.
        self._stopped.set()

    def handle_line(self, line: str) -> Command | None:
        """Parse *line* and enqueue the resulting command, if any."""
        try:
            command = parse_command(line, self._state())
        except UnknownCommand as exc:
            logger.warning("Unknown command %r (try: pause, reload, all, quit)", str(exc))
            return None
        if command is not None:
            self._queue.enqueue(command)
        return command

    def _loop(self) -> None:
        while not self._stopped.is_set():
            line = self._stream.readline()
            if self._stopped.is_set():
                return
            if line == "":
                # End of input behaves like "quit".
                self._queue.enqueue(Command.quit())
                return
            command = self.handle_line(line)
            if command is not None and command.kind is CommandKind.QUIT:
                return

"""Command queue: the single ordered channel into the session coordinator.

Built on :class:`queue.SimpleQueue`, whose ``put`` is reentrant and may be
called from a signal handler. Per-producer FIFO order is preserved; no
total order is promised across independent producers.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Final, cast

from warden.runtime.commands import Command, CommandKind

logger = logging.getLogger(__name__)


class _Closed:
    """Sentinel type returned by :meth:`CommandQueue.dequeue_blocking`."""

    _instance: _Closed | None = None

    def __new__(cls) -> _Closed:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CLOSED"


CLOSED: Final = _Closed()

# Internal wake-up token pushed by close() so blocked consumers return.
_WAKE: Final = object()


class CommandQueue:
    """Multi-producer, single-consumer command channel.

    ``quit_requested`` flips as soon as a quit is *enqueued* (not applied),
    which lets the coordinator abort a running batch cooperatively.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[object] = queue.SimpleQueue()
        self._closed = threading.Event()
        self.quit_requested: bool = False

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def enqueue(self, command: Command) -> bool:
        """Append *command*. Never blocks; returns False once closed.

        Safe from any thread and from signal handlers: only a flag read,
        a plain attribute store and a reentrant ``put``.
        """
        if self._closed.is_set():
            return False
        if command.kind is CommandKind.QUIT:
            self.quit_requested = True
        self._queue.put(command)
        return True

    def dequeue_blocking(self, timeout: float | None = None) -> Command | _Closed | None:
        """Block until a command is available, the queue closes, or *timeout*.

        Returns the command, :data:`CLOSED`, or ``None`` on timeout.
        """
        if self._closed.is_set():
            return CLOSED
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _WAKE or self._closed.is_set():
            # Re-arm the wake token for any other waiter.
            self._queue.put(_WAKE)
            return CLOSED
        return cast(Command, item)

    def close(self) -> None:
        """Close the queue. Idempotent."""
        if self._closed.is_set():
            return
        self._closed.set()
        self._queue.put(_WAKE)
        logger.debug("Command queue closed")

    def pending(self) -> int:
        """Approximate number of queued items."""
        if self._closed.is_set():
            return 0
        return self._queue.qsize()

"""Filesystem watcher built on watchdog.

The observer thread feeds a :class:`ChangeCollector`, which debounces raw
events for ``latency`` seconds and then reports one change-set through the
callback. The callback runs on the collector's timer thread and must only
enqueue.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import threading
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver
from watchdog.observers.polling import PollingObserver

logger = logging.getLogger(__name__)

DEFAULT_LATENCY = 0.25

DEFAULT_IGNORE: tuple[str, ...] = (
    ".git/*",
    "*/.git/*",
    "__pycache__/*",
    "*/__pycache__/*",
    "*.py[co]",
    "*.sw[px]",
    "*~",
)

# (created, modified, removed) with absolute path strings
ChangeCallback = Callable[[list[str], list[str], list[str]], None]


class ChangeCollector(FileSystemEventHandler):
    """Accumulates file events under *root* and flushes them as one batch."""

    def __init__(
        self,
        root: Path,
        callback: ChangeCallback,
        *,
        latency: float = DEFAULT_LATENCY,
        ignore: Iterable[str] = (),
    ) -> None:
        super().__init__()
        self.root = root
        self._callback = callback
        self._latency = latency
        self._ignore = (*DEFAULT_IGNORE, *ignore)
        self._lock = threading.Lock()
        self._created: dict[str, None] = {}
        self._modified: dict[str, None] = {}
        self._removed: dict[str, None] = {}
        self._timer: threading.Timer | None = None

    def ignored(self, path: str) -> bool:
        try:
            rel = Path(path).relative_to(self.root).as_posix()
        except ValueError:
            rel = Path(path).as_posix()
        name = Path(path).name
        return any(fnmatch.fnmatch(rel, pat) or fnmatch.fnmatch(name, pat) for pat in self._ignore)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        src = os.fsdecode(event.src_path)
        if event.event_type == EVENT_TYPE_MOVED:
            self.record_removed(src)
            self.record_created(os.fsdecode(event.dest_path))
        elif event.event_type == EVENT_TYPE_CREATED:
            self.record_created(src)
        elif event.event_type == EVENT_TYPE_MODIFIED:
            self.record_modified(src)
        elif event.event_type == EVENT_TYPE_DELETED:
            self.record_removed(src)

    def record_created(self, path: str) -> None:
        if self.ignored(path):
            return
        with self._lock:
            self._removed.pop(path, None)
            self._modified.pop(path, None)
            self._created[path] = None
            self._schedule()

    def record_modified(self, path: str) -> None:
        if self.ignored(path):
            return
        with self._lock:
            if path not in self._created:
                self._modified[path] = None
            self._schedule()

    def record_removed(self, path: str) -> None:
        if self.ignored(path):
            return
        with self._lock:
            self._modified.pop(path, None)
            if path in self._created:
                # Created and removed within one window: nothing to report.
                del self._created[path]
            else:
                self._removed[path] = None
            self._schedule()

    def flush(self) -> None:
        """Report everything collected so far as one change-set."""
        with self._lock:
            created, modified, removed = (
                list(self._created),
                list(self._modified),
                list(self._removed),
            )
            self._created.clear()
            self._modified.clear()
            self._removed.clear()
            self._timer = None
        if created or modified or removed:
            self._callback(created, modified, removed)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _schedule(self) -> None:
        # Caller holds the lock.
        if self._timer is not None:
            return
        self._timer = threading.Timer(self._latency, self.flush)
        self._timer.daemon = True
        self._timer.start()


class Watcher:
    """Watches *directories* recursively and reports debounced change-sets."""

    def __init__(
        self,
        directories: Sequence[Path],
        callback: ChangeCallback,
        *,
        latency: float | None = None,
        force_polling: bool = False,
        ignore: Iterable[str] = (),
    ) -> None:
        self.directories = [Path(d).resolve() for d in directories]
        self.force_polling = force_polling
        self._collectors = [
            ChangeCollector(
                d,
                callback,
                latency=DEFAULT_LATENCY if latency is None else latency,
                ignore=ignore,
            )
            for d in self.directories
        ]
        self._observer: BaseObserver | None = None

    @property
    def running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def start(self) -> None:
        observer: BaseObserver = PollingObserver() if self.force_polling else Observer()
        for collector in self._collectors:
            if not collector.root.is_dir():
                logger.warning("Watch directory does not exist: %s", collector.root)
                continue
            observer.schedule(collector, str(collector.root), recursive=True)
            logger.debug("Watching directory: %s", collector.root)
        observer.start()
        self._observer = observer

    def stop(self) -> None:
        for collector in self._collectors:
            collector.cancel()
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None

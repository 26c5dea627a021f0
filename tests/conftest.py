"""Shared pytest fixtures and test doubles for warden tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, ClassVar

import pytest
from click.testing import CliRunner

from warden.config.discovery import WARDENFILE_ENV_VAR
from warden.plugins.base import BasePlugin
from warden.plugins.hookspecs import hookimpl
from warden.plugins.manager import PluginManager
from warden.runtime.commands import Command
from warden.runtime.session import SessionCoordinator

# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class CallLog:
    """Ordered record of plugin callbacks: ``(slot_name, callback, args)``."""

    def __init__(self) -> None:
        self.entries: list[tuple[str, str, tuple[Any, ...]]] = []

    def record(self, name: str, callback: str, *args: Any) -> None:
        self.entries.append((name, callback, args))

    def calls(self, callback: str) -> list[tuple[str, tuple[Any, ...]]]:
        return [(name, args) for name, cb, args in self.entries if cb == callback]

    def names(self, callback: str) -> list[str]:
        return [name for name, _args in self.calls(callback)]


class RecordingPlugin(BasePlugin):
    """Plugin type ``recording``: logs every callback into a :class:`CallLog`.

    Options: ``fail_on`` (callback name that raises) and ``quit_on``
    (callback name that enqueues a quit through the session).
    """

    log: ClassVar[CallLog]

    def _record(self, callback: str, *args: Any) -> None:
        self.log.record(self.name, callback, *args)
        if self.options.get("quit_on") == callback and self.session is not None:
            self.session.enqueue(Command.quit())
        if self.options.get("fail_on") == callback:
            msg = f"{callback} exploded"
            raise RuntimeError(msg)

    def on_start(self) -> None:
        self._record("on_start")

    def on_stop(self) -> None:
        self._record("on_stop")

    def on_change(self, paths: list[str]) -> None:
        self._record("on_change", list(paths))

    def on_reload(self) -> None:
        self._record("on_reload")

    def run_all(self) -> None:
        self._record("run_all")


class RecordingTypes:
    """Contributes the ``recording`` type bound to one :class:`CallLog`."""

    def __init__(self, log: CallLog) -> None:
        self.plugin_class = type("BoundRecordingPlugin", (RecordingPlugin,), {"log": log})

    @hookimpl
    def warden_plugin_types(self) -> dict[str, type]:
        return {"recording": self.plugin_class}


class FakeWatcher:
    """Records start/stop instead of observing the filesystem."""

    def __init__(self, directories: list[Path], callback: Any, **kwargs: Any) -> None:
        self.directories = list(directories)
        self.callback = callback
        self.kwargs = kwargs
        self.started = 0
        self.stopped = 0

    def start(self) -> None:
        self.started += 1

    def stop(self) -> None:
        self.stopped += 1


class FakeNotifier:
    """Collects notifications in memory."""

    def __init__(self) -> None:
        self.enabled = False
        self.sent: list[tuple[str, str, str]] = []

    def turn_on(self) -> None:
        self.enabled = True

    def turn_off(self) -> None:
        self.enabled = False

    def notify(self, title: str, message: str, kind: str = "notify") -> None:
        if self.enabled:
            self.sent.append((title, message, kind))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_warden_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's WARDEN_* environment out of every test."""
    for name in (WARDENFILE_ENV_VAR, "WARDEN_NOTIFY", "WARDEN_SILENCE_DEPRECATIONS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    warden = logging.getLogger("warden")
    warden_level = warden.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    warden.setLevel(warden_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def call_log() -> CallLog:
    return CallLog()


@pytest.fixture
def plugin_manager(call_log: CallLog) -> PluginManager:
    """Plugin manager with the built-in types plus ``recording``."""
    pm = PluginManager()
    pm.discover_and_load()
    pm.register_plugin(RecordingTypes(call_log), name="recording")
    return pm


@pytest.fixture
def watchers() -> list[FakeWatcher]:
    """Every FakeWatcher created by sessions in this test."""
    return []


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    return tmp_path.resolve()


@pytest.fixture
def make_session(
    plugin_manager: PluginManager,
    watchers: list[FakeWatcher],
    notifier: FakeNotifier,
    project_root: Path,
) -> Iterator[Callable[..., SessionCoordinator]]:
    """Factory for coordinators wired to fakes.

    Pass the Wardenfile text to evaluate it inline, or ``wardenfile=`` to
    read a file. Extra keyword arguments become option overrides.
    """
    created: list[SessionCoordinator] = []

    def watcher_factory(directories: list[Path], callback: Any, **kwargs: Any) -> FakeWatcher:
        watcher = FakeWatcher(directories, callback, **kwargs)
        watchers.append(watcher)
        return watcher

    def factory(contents: str | None = None, **overrides: Any) -> SessionCoordinator:
        options: dict[str, Any] = {"project_root": str(project_root), **overrides}
        if contents is not None:
            options["wardenfile_contents"] = contents
        session = SessionCoordinator(
            plugin_manager,
            options,
            notifier=notifier,  # type: ignore[arg-type]
            watcher_factory=watcher_factory,
            poll_interval=0.01,
        )
        created.append(session)
        return session

    yield factory
    for session in created:
        session.queue.close()


# ---------------------------------------------------------------------------
# Wardenfiles
# ---------------------------------------------------------------------------

TWO_GROUPS = """\
[[group]]
name = "backend"

[[group]]
name = "frontend"

[[plugin]]
name = "api"
type = "recording"
group = "backend"
watch = ["backend/**/*.py"]

[[plugin]]
name = "web"
type = "recording"
group = "frontend"
watch = ["frontend/**/*.js"]
"""


@pytest.fixture
def two_groups() -> str:
    """Wardenfile with groups backend/frontend, one recording plugin each."""
    return TWO_GROUPS

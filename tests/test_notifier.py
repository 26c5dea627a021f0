"""Tests for desktop notifications."""

from __future__ import annotations

from typing import Any

import pytest

from warden.notifier import Notifier, available_backends, resolve_enabled


class _Spawn:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[list[str]] = []
        self.error = error

    def __call__(self, args: list[str], **kwargs: Any) -> None:
        self.calls.append(list(args))
        if self.error is not None:
            raise self.error


def _which(*available: str):
    return lambda name: f"/usr/bin/{name}" if name in available else None


class TestResolveEnabled:
    @pytest.mark.parametrize(
        ("configured", "override", "expected"),
        [(True, None, True), (False, None, False), (False, True, True), (True, False, False)],
    )
    def test_env_override_wins(self, configured: bool, override: bool | None, expected: bool) -> None:
        assert resolve_enabled(configured, override) is expected


class TestNotifier:
    def test_disabled_by_default(self) -> None:
        spawn = _Spawn()
        notifier = Notifier(which=_which("notify-send"), spawn=spawn)
        notifier.notify("title", "message")
        assert spawn.calls == []

    def test_first_available_backend_wins(self) -> None:
        notifier = Notifier(which=_which("osascript", "terminal-notifier"))
        notifier.turn_on()
        assert notifier.backend == "terminal-notifier"

    def test_notify_send_failed_is_critical(self) -> None:
        spawn = _Spawn()
        notifier = Notifier(which=_which("notify-send"), spawn=spawn)
        notifier.turn_on()
        notifier.notify("Tests failed", "boom", kind="failed")
        assert spawn.calls == [
            ["notify-send", "--app-name=warden", "--urgency=critical", "Tests failed", "boom"]
        ]

    def test_osascript_quotes(self) -> None:
        spawn = _Spawn()
        notifier = Notifier(which=_which("osascript"), spawn=spawn)
        notifier.turn_on()
        notifier.notify('say "hi"', "ok")
        assert spawn.calls[0][-1] == 'display notification "ok" with title "say \\"hi\\""'

    def test_no_backend_is_silent(self) -> None:
        spawn = _Spawn()
        notifier = Notifier(which=_which(), spawn=spawn)
        notifier.turn_on()
        notifier.notify("title", "message")
        assert notifier.enabled is True
        assert spawn.calls == []

    def test_spawn_failure_is_swallowed(self) -> None:
        notifier = Notifier(which=_which("notify-send"), spawn=_Spawn(OSError("gone")))
        notifier.turn_on()
        notifier.notify("title", "message")


class TestAvailableBackends:
    def test_lookup_order_and_paths(self) -> None:
        found = available_backends({"osascript": "/usr/bin/osascript"}.get)
        assert found == [
            ("notify-send", None),
            ("terminal-notifier", None),
            ("osascript", "/usr/bin/osascript"),
        ]

"""Tests for UI: levels, plugin filters, deprecations and clearing."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from warden import terminal
from warden.config.models import UIOptions
from warden.errors import ResourceError
from warden.runtime.registry import Group, PluginSlot
from warden.runtime.scope import Scope
from warden.ui import UI


class TestLevels:
    @pytest.mark.parametrize("level", ["info", "warning", "error", "debug"])
    def test_level_and_default_plugin(self, level: str) -> None:
        with capture_logs() as logs:
            getattr(UI(), level)("hello")
        assert logs == [{"event": "hello", "plugin": "warden", "log_level": level}]

    def test_plugin_name_is_attached(self) -> None:
        with capture_logs() as logs:
            UI().info("ran", plugin="tests")
        assert logs[0]["plugin"] == "tests"


class TestFilters:
    def test_only(self) -> None:
        ui = UI(UIOptions(only="^tests$"))
        with capture_logs() as logs:
            ui.info("a", plugin="tests")
            ui.info("b", plugin="lint")
        assert [e["event"] for e in logs] == ["a"]

    def test_except(self) -> None:
        ui = UI(UIOptions.model_validate({"except": "lint"}))
        with capture_logs() as logs:
            ui.info("a", plugin="tests")
            ui.info("b", plugin="lint")
        assert [e["event"] for e in logs] == ["a"]

    def test_options_can_be_replaced(self) -> None:
        ui = UI(UIOptions(only="^tests$"))
        ui.options = UIOptions()
        with capture_logs() as logs:
            ui.info("b", plugin="lint")
        assert len(logs) == 1


class TestDeprecation:
    def test_emitted_as_warning(self) -> None:
        with capture_logs() as logs:
            UI().deprecation("old option")
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["deprecation"] is True

    def test_silenced(self) -> None:
        with capture_logs() as logs:
            UI(silence_deprecations=True).deprecation("old option")
        assert logs == []


class TestActionWithScopes:
    def test_all(self) -> None:
        with capture_logs() as logs:
            UI().action_with_scopes("Run", Scope())
        assert logs[0]["event"] == "Run all"

    def test_plugin_titles(self) -> None:
        group = Group("default")
        slot = PluginSlot(name="unit_tests", type_name="shell", group=group, plugin=object())
        with capture_logs() as logs:
            UI().action_with_scopes("Reload", Scope(groups=(group,), plugins=(slot,)))
        assert logs[0]["event"] == "Reload UnitTests"


class TestClear:
    @pytest.fixture
    def clears(self, monkeypatch: pytest.MonkeyPatch) -> list[int]:
        calls: list[int] = []
        monkeypatch.setattr(terminal, "clear", lambda: calls.append(1))
        return calls

    def test_disabled_by_option(self, clears: list[int]) -> None:
        ui = UI(clear_enabled=False)
        ui.clear(force=True)
        assert clears == []

    def test_needs_clearable_unless_forced(self, clears: list[int]) -> None:
        ui = UI(clear_enabled=True)
        ui.clear()
        assert clears == []
        ui.clearable()
        ui.clear()
        ui.clear()
        assert clears == [1]
        ui.clear(force=True)
        assert clears == [1, 1]

    def test_reset_and_clear(self, clears: list[int]) -> None:
        ui = UI(clear_enabled=True)
        ui.clearable()
        ui.reset_and_clear()
        ui.clear()
        assert clears == [1]

    def test_failure_becomes_warning(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken() -> None:
            raise ResourceError('Failed to run "clear;": missing')

        monkeypatch.setattr(terminal, "clear", broken)
        ui = UI(clear_enabled=True)
        with capture_logs() as logs:
            ui.clear(force=True)
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["event"].startswith("Failed to clear the screen")

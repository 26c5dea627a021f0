"""Tests for WardenSettings: CLI flags, WARDEN_* env vars and defaults."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from warden.config.discovery import WARDENFILE_NAME
from warden.config.settings import WardenSettings


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = WardenSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.verbose is False
        assert settings.quiet is False
        assert settings.log_json is False
        assert settings.notify is None
        assert settings.silence_deprecations is False

    def test_frozen(self, tmp_path: Path) -> None:
        settings = WardenSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestWardenfileResolution:
    def test_project_root_follows_discovered_wardenfile(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / WARDENFILE_NAME).write_text("")
        child = tmp_path / "src"
        child.mkdir()
        monkeypatch.chdir(child)
        settings = WardenSettings.from_cli()
        assert settings.wardenfile_path == (tmp_path / WARDENFILE_NAME).resolve()
        assert settings.project_root == tmp_path.resolve()

    def test_explicit_wardenfile(self, tmp_path: Path) -> None:
        custom = tmp_path / "ci" / "Wardenfile.toml"
        custom.parent.mkdir()
        custom.write_text("")
        settings = WardenSettings.from_cli(wardenfile=str(custom))
        assert settings.wardenfile_path == custom
        assert settings.project_root == custom.parent

    def test_no_wardenfile_uses_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        settings = WardenSettings.from_cli()
        assert settings.wardenfile_path is None
        assert settings.project_root == Path.cwd()


class TestEnvironment:
    @pytest.mark.parametrize(("value", "expected"), [("1", True), ("false", False)])
    def test_notify_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, value: str, expected: bool
    ) -> None:
        monkeypatch.setenv("WARDEN_NOTIFY", value)
        assert WardenSettings.from_cli(project_root=tmp_path).notify is expected

    def test_empty_env_is_ignored(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WARDEN_NOTIFY", "")
        assert WardenSettings.from_cli(project_root=tmp_path).notify is None

    def test_silence_deprecations(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WARDEN_SILENCE_DEPRECATIONS", "1")
        assert WardenSettings.from_cli(project_root=tmp_path).silence_deprecations is True

    def test_cli_flags_beat_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WARDEN_VERBOSE", "1")
        settings = WardenSettings.from_cli(project_root=tmp_path, verbose=False)
        assert settings.verbose is False


class TestSessionOverrides:
    def test_includes_resolved_paths(self, tmp_path: Path) -> None:
        wardenfile = tmp_path / WARDENFILE_NAME
        wardenfile.write_text("")
        settings = WardenSettings.from_cli(wardenfile=str(wardenfile))
        assert settings.session_overrides() == {
            "project_root": str(tmp_path),
            "wardenfile": str(wardenfile),
        }

    def test_option_overrides_are_not_settings(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            WardenSettings(project_root=tmp_path, option_overrides={"clear": True})

"""Tests for local directory plugin discovery in PluginManager."""

from __future__ import annotations

from pathlib import Path

from warden.plugins.hookspecs import hookimpl
from warden.plugins.manager import PluginManager, has_hook_impls

# -- Plugin source code used in tests ------------------------------------------

_VALID_PLUGIN_SRC = """\
from warden.plugins import BasePlugin, hookimpl


class Rubocop(BasePlugin):
    pass


class LocalTypes:
    \"\"\"Contributes one local plugin type.\"\"\"

    @hookimpl
    def warden_plugin_types(self):
        return {"rubocop": Rubocop}
"""

_SYNTAX_ERROR_SRC = """\
def broken(
    # missing closing paren and colon
"""

_NO_HOOKS_SRC = """\
class PlainClass:
    \"\"\"A class with no hookimpl-decorated methods.\"\"\"
    def hello(self) -> str:
        return "world"
"""


class TestLocalDiscovery:
    def test_discovers_local_plugin_type(self, tmp_path: Path) -> None:
        (tmp_path / "rubocop.py").write_text(_VALID_PLUGIN_SRC, encoding="utf-8")

        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path)

        assert "warden_local_plugin_rubocop" in pm.list_plugin_names()
        assert "rubocop" in pm.plugin_types()

    def test_skips_bad_plugin_gracefully(self, tmp_path: Path) -> None:
        (tmp_path / "broken.py").write_text(_SYNTAX_ERROR_SRC, encoding="utf-8")

        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path)

        assert all("broken" not in n for n in names)
        assert "shell" in pm.plugin_types()

    def test_nonexistent_dir_is_noop(self, tmp_path: Path) -> None:
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path / "does_not_exist")
        assert pm.is_loaded is True
        assert isinstance(names, list)

    def test_skips_underscore_prefixed_files(self, tmp_path: Path) -> None:
        (tmp_path / "_helpers.py").write_text(_VALID_PLUGIN_SRC, encoding="utf-8")

        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path)

        assert all("_helpers" not in n for n in pm.list_plugin_names())

    def test_skips_classes_without_hookimpls(self, tmp_path: Path) -> None:
        (tmp_path / "plain.py").write_text(_NO_HOOKS_SRC, encoding="utf-8")

        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path)

        assert all("plain" not in n for n in pm.list_plugin_names())

    def test_has_hook_impls(self) -> None:
        class _WithHook:
            @hookimpl
            def warden_plugin_types(self) -> dict[str, type]:
                return {}

        class _NoHook:
            def warden_plugin_types(self) -> dict[str, type]:
                return {}

        assert has_hook_impls(_WithHook) is True
        assert has_hook_impls(_NoHook) is False

    def test_second_hook_class_is_skipped(self, tmp_path: Path, caplog) -> None:
        src = _VALID_PLUGIN_SRC + '''

class MoreTypes:
    @hookimpl
    def warden_plugin_types(self):
        return {"extra": Rubocop}
'''
        (tmp_path / "rubocop.py").write_text(src, encoding="utf-8")

        pm = PluginManager()
        with caplog.at_level("WARNING", logger="warden.plugins.manager"):
            pm.discover_and_load(local_dir=tmp_path)

        assert pm.list_plugin_names().count("warden_local_plugin_rubocop") == 1
        assert "Skipping second hook class" in caplog.text

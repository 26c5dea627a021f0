"""Plugin types shipped with warden."""

from __future__ import annotations

from warden.plugins.builtins.reevaluator import ReevaluatorPlugin
from warden.plugins.builtins.shell import ShellPlugin
from warden.plugins.hookspecs import hookimpl


class BuiltinPluginTypes:
    """Contributes the ``shell`` and ``reevaluator`` types."""

    @hookimpl
    def warden_plugin_types(self) -> dict[str, type]:
        return {
            "shell": ShellPlugin,
            "reevaluator": ReevaluatorPlugin,
        }


__all__ = ["BuiltinPluginTypes", "ReevaluatorPlugin", "ShellPlugin"]

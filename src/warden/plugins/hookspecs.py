"""Pluggy hook specifications for warden plugin types.

Plugin *types* are contributed through hooks; the Wardenfile then names a
type per ``[[plugin]]`` entry and the manager builds the instances.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("warden")
hookimpl = pluggy.HookimplMarker("warden")


class WardenHookSpec:
    """Hook specifications for the warden plugin system."""

    @hookspec
    def warden_plugin_types(self) -> dict[str, type] | None:
        """Return type-name -> plugin class mappings.

        Classes are called as ``cls(name=..., options=..., session=...)``.
        """

"""Scope resolution: which groups and plugins an operation applies to.

Resolution order:
  1. Names given in the request (case-insensitive, unknown names dropped)
  2. The global scope stored in options (``group`` / ``plugin``)
  3. The empty scope, meaning "all"

Output order is always registration order, never request order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TypeVar

from warden.config.models import Options
from warden.runtime.commands import ScopeRequest
from warden.runtime.registry import Group, PluginSlot, Registry


@dataclass(frozen=True)
class Scope:
    """Selected groups and plugins. Both empty means "all"."""

    groups: tuple[Group, ...] = ()
    plugins: tuple[PluginSlot, ...] = ()

    @property
    def is_all(self) -> bool:
        return not self.groups and not self.plugins

    def select(self, registry: Registry) -> list[PluginSlot]:
        """Plugin slots this scope covers, in registration order."""
        if self.plugins:
            return list(self.plugins)
        if self.groups:
            return registry.plugins_in(self.groups)
        return registry.plugins

    def titles(self) -> list[str]:
        """Titles of the first non-empty selection (plugins, then groups)."""
        for selection in (self.plugins, self.groups):
            if selection:
                return [item.title for item in selection]
        return []


_T = TypeVar("_T", Group, PluginSlot)


def _pick(registered: Iterable[_T], names: Iterable[str]) -> tuple[_T, ...]:
    wanted = {n.strip().lower() for n in names}
    return tuple(item for item in registered if item.name in wanted)


class ScopeResolver:
    """Computes a fresh :class:`Scope` per operation; nothing is persisted."""

    def resolve(
        self,
        registry: Registry,
        options: Options,
        request: ScopeRequest | None = None,
    ) -> Scope:
        if request:
            return Scope(
                groups=_pick(registry.groups, request.groups),
                plugins=_pick(registry.plugins, request.plugins),
            )
        if options.group or options.plugin:
            return Scope(
                groups=_pick(registry.groups, options.group),
                plugins=_pick(registry.plugins, options.plugin),
            )
        return Scope()

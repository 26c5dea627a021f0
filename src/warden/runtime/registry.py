"""Registry: ordered groups and plugin slots for one session.

Ownership: the registry owns every Group and PluginSlot; a slot only holds
a reference to its group. Mutators are called by the session coordinator
alone, so no locking is done here.
"""

from __future__ import annotations

import fnmatch
import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

BUILTIN_GROUPS: tuple[str, ...] = ("common", "default")
DEFAULT_GROUP = "default"

# (type_name, slot_name, plugin_options) -> plugin instance
PluginFactory = Callable[[str, str, dict[str, Any]], object]


def _normalize(name: str) -> str:
    return name.strip().lower()


def _title(name: str) -> str:
    return "".join(part.capitalize() for part in re.split(r"[^a-z0-9]", name) if part)


@dataclass
class Group:
    """A named collection of plugins sharing options."""

    name: str
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return _title(self.name)


@dataclass(frozen=True)
class WatchPattern:
    """One watch pattern: a glob, or a regex when prefixed with ``re:``."""

    pattern: str

    def matches(self, path: str) -> bool:
        if self.pattern.startswith("re:"):
            return re.search(self.pattern[3:], path) is not None
        if fnmatch.fnmatchcase(path, self.pattern):
            return True
        # Let "dir/**/*.py" also match files directly inside "dir/".
        return "**/" in self.pattern and fnmatch.fnmatchcase(
            path, self.pattern.replace("**/", "")
        )


@dataclass
class PluginSlot:
    """A registered, named plugin instance bound to a group."""

    name: str
    type_name: str
    group: Group
    plugin: object
    watchers: tuple[WatchPattern, ...] = ()
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return _title(self.name)

    def match(self, paths: Iterable[str]) -> list[str]:
        """Return the subset of *paths* this slot watches, order preserved."""
        return [p for p in paths if any(w.matches(p) for w in self.watchers)]


class Registry:
    """Ordered collection of groups and plugin slots."""

    def __init__(self, factory: PluginFactory) -> None:
        self._factory = factory
        self._groups: list[Group] = []
        self._plugins: list[PluginSlot] = []
        self.reset_groups()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def groups(self) -> list[Group]:
        return list(self._groups)

    @property
    def plugins(self) -> list[PluginSlot]:
        return list(self._plugins)

    def group(self, name: str) -> Group | None:
        key = _normalize(name)
        return next((g for g in self._groups if g.name == key), None)

    def plugin(self, name: str) -> PluginSlot | None:
        key = _normalize(name)
        return next((p for p in self._plugins if p.name == key), None)

    def plugins_in(self, groups: Iterable[Group]) -> list[PluginSlot]:
        """Slots belonging to any of *groups*, in registration order."""
        wanted = {g.name for g in groups}
        return [p for p in self._plugins if p.group.name in wanted]

    # ------------------------------------------------------------------
    # Mutators (coordinator only)
    # ------------------------------------------------------------------

    def add_group(self, name: str, options: Mapping[str, Any] | None = None) -> Group:
        """Create a group, or return the existing one with the same name."""
        existing = self.group(name)
        if existing is not None:
            return existing
        group = Group(name=_normalize(name), options=dict(options or {}))
        self._groups.append(group)
        logger.debug("Added group %s", group.name)
        return group

    def add_plugin(self, name: str, options: Mapping[str, Any] | None = None) -> PluginSlot:
        """Instantiate a plugin slot; a reused name replaces the prior instance.

        Recognised keys in *options*: ``type`` (defaults to *name*),
        ``group`` (defaults to ``default``) and ``watch``. The remaining
        keys are handed to the plugin factory.
        """
        opts = dict(options or {})
        slot_name = _normalize(name)
        type_name = str(opts.pop("type", None) or slot_name)
        group = self.add_group(str(opts.pop("group", None) or DEFAULT_GROUP))
        watchers = tuple(WatchPattern(str(p)) for p in opts.pop("watch", None) or ())

        instance = self._factory(type_name, slot_name, dict(opts))
        slot = PluginSlot(
            name=slot_name,
            type_name=type_name,
            group=group,
            plugin=instance,
            watchers=watchers,
            options=opts,
        )

        for index, existing in enumerate(self._plugins):
            if existing.name == slot_name:
                logger.warning(
                    "Plugin %s is registered more than once; the last registration wins",
                    slot_name,
                )
                self._plugins[index] = slot
                return slot

        self._plugins.append(slot)
        logger.debug("Added plugin %s (type %s) to group %s", slot_name, type_name, group.name)
        return slot

    def reset_groups(self) -> None:
        """Drop every group except freshly re-created built-ins."""
        self._groups = [Group(name=name) for name in BUILTIN_GROUPS]

    def reset_plugins(self) -> None:
        """Drop every plugin slot."""
        self._plugins = []

"""Rich renderers for plugin types, notifier backends and Wardenfile contents.

Each renderer writes to a Rich Console (backed by StringIO) and returns
the rendered text via ``get_output(console)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from warden.output.console import create_console, get_output
from warden.runtime.registry import BUILTIN_GROUPS, DEFAULT_GROUP

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from warden.config.models import Wardenfile


def render_plugin_types(types: Mapping[str, type], used: Iterable[str] = ()) -> str:
    """Table of available plugin types; ``*`` marks types the Wardenfile uses."""
    console = create_console()
    used_types = {u.lower() for u in used}
    table = Table(title="Available plugin types", title_justify="left")
    table.add_column("Type", style="warden.type")
    table.add_column("Wardenfile", justify="center")
    table.add_column("Class", style="warden.key")
    for type_name in sorted(types):
        cls = types[type_name]
        marker = Text("*", style="warden.ok") if type_name in used_types else Text("")
        table.add_row(type_name, marker, f"{cls.__module__}.{cls.__qualname__}")
    console.print(table)
    if used_types - set(types):
        missing = ", ".join(sorted(used_types - set(types)))
        console.print(Text(f"Unknown types in Wardenfile: {missing}", style="warden.warning"))
    return get_output(console).rstrip("\n")


def render_notifiers(backends: Sequence[tuple[str, str | None]], enabled: bool) -> str:
    """Table of notifier backends; the first available one is used when enabled."""
    console = create_console()
    table = Table(title="Available notifiers", title_justify="left")
    table.add_column("Backend", style="warden.plugin")
    table.add_column("Available", justify="center")
    table.add_column("Used", justify="center")
    table.add_column("Path", style="warden.path")
    used = next((name for name, path in backends if path), None) if enabled else None
    for name, path in backends:
        available = Text("yes", style="warden.ok") if path else Text("no", style="warden.key")
        marker = Text("*", style="warden.ok") if name == used else Text("")
        table.add_row(name, available, marker, path or "")
    console.print(table)
    if not enabled:
        console.print(Text("Notifications are turned off.", style="warden.warning"))
    elif used is None:
        console.print(Text("No notifier found on PATH.", style="warden.warning"))
    return get_output(console).rstrip("\n")


def render_wardenfile(wardenfile: Wardenfile) -> str:
    """Groups in registration order, each with its plugins and options."""
    console = create_console()
    group_options: dict[str, dict[str, Any]] = {name: {} for name in BUILTIN_GROUPS}
    for group in wardenfile.groups:
        group_options.setdefault(group.name.lower(), group.options)

    by_group: dict[str, list[Any]] = {}
    for entry in wardenfile.plugins:
        group_name = (entry.group or DEFAULT_GROUP).lower()
        group_options.setdefault(group_name, {})
        by_group.setdefault(group_name, []).append(entry)

    table = Table(show_lines=False)
    table.add_column("Group", style="warden.group")
    table.add_column("Plugin", style="warden.plugin")
    table.add_column("Type", style="warden.type")
    table.add_column("Option", style="warden.key")
    table.add_column("Value")

    for group_name, options in group_options.items():
        entries = by_group.get(group_name, [])
        if not entries and group_name in BUILTIN_GROUPS and not options:
            continue
        table.add_row(group_name, "", "", *_first_option(options))
        for key, value in list(options.items())[1:]:
            table.add_row("", "", "", key, _format(value))
        for entry in entries:
            plugin_options = {
                k: v for k, v in entry.registration_options().items() if k not in ("type", "group")
            }
            table.add_row("", entry.name, entry.type or entry.name, *_first_option(plugin_options))
            for key, value in list(plugin_options.items())[1:]:
                table.add_row("", "", "", key, _format(value))

    console.print(table)
    return get_output(console).rstrip("\n")


def _first_option(options: Mapping[str, Any]) -> tuple[str, str]:
    for key, value in options.items():
        return key, _format(value)
    return "", ""


def _format(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)

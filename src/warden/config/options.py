"""Options store: defaults merged with caller-supplied overrides.

Pure value store. Never performs I/O; the session coordinator is the only
writer, readers get whatever :class:`Options` snapshot is current.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from warden.config.models import Options


class OptionsStore:
    """Holds the current :class:`Options` for one session."""

    def __init__(self, overrides: Mapping[str, Any] | None = None) -> None:
        self._options = self.merge(overrides)

    @property
    def options(self) -> Options:
        return self._options

    @staticmethod
    def merge(overrides: Mapping[str, Any] | None = None) -> Options:
        """Return a new view where *overrides* take precedence over defaults.

        Unrecognised keys pass through unchanged. ``None`` values are
        treated as "not given" so unset CLI flags never mask a default.
        """
        data = {k: v for k, v in (overrides or {}).items() if v is not None}
        return Options.model_validate(data)

    def reset(self, overrides: Mapping[str, Any] | None = None) -> Options:
        """Discard session-scoped options and re-merge *overrides* onto defaults."""
        self._options = self.merge(overrides)
        return self._options


# Old [options] keys that are still accepted under their current name.
RENAMED_OPTIONS: dict[str, str] = {
    "watch_dir": "watchdir",
    "clear_screen": "clear",
    "notification": "notify",
}


def rename_legacy_keys(data: Mapping[str, Any]) -> tuple[dict[str, Any], list[tuple[str, str]]]:
    """Map renamed option keys to their current name.

    Returns the upgraded mapping and the ``(old, new)`` pairs that were
    found. When both spellings are present the current one wins.
    """
    upgraded = dict(data)
    renamed: list[tuple[str, str]] = []
    for old, new in RENAMED_OPTIONS.items():
        if old not in upgraded:
            continue
        value = upgraded.pop(old)
        upgraded.setdefault(new, value)
        renamed.append((old, new))
    return upgraded, renamed

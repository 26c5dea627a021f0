"""Pydantic configuration models with code-baked defaults.

Sparse Wardenfile contract: defaults baked here, ``Wardenfile.toml`` only
contains overrides. Unknown option keys are preserved verbatim so newer
Wardenfiles keep working against older releases.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Session options ---


def _as_list(value: Any) -> Any:
    """Accept a bare string where a list of names is expected."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


class UIOptions(BaseModel):
    """[options.ui] section: diagnostic filtering and formatting."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    level: str | None = None
    only: str | None = None
    except_: str | None = Field(default=None, alias="except")

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if value.lower() not in ("debug", "info", "warning", "error"):
            msg = f"unknown log level {value!r}"
            raise ValueError(msg)
        return value.lower()

    @field_validator("only", "except_")
    @classmethod
    def _compiles(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            re.compile(value)
        except re.error as exc:
            msg = f"invalid regex {value!r}: {exc}"
            raise ValueError(msg) from exc
        return value


class Options(BaseModel):
    """Merged session options.

    Known keys carry typed defaults; anything else is kept as an extra
    field and round-trips through :meth:`model_dump` unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    clear: bool = False
    notify: bool = True
    debug: bool = False
    group: list[str] = Field(default_factory=list)
    plugin: list[str] = Field(default_factory=list)
    watchdir: list[str] = Field(default_factory=list)
    wardenfile: str | None = None
    wardenfile_contents: str | None = None
    no_interactions: bool = False
    latency: float | None = None
    force_polling: bool = False
    ignore: list[str] = Field(default_factory=list)
    fail_on_empty: bool = False
    project_root: str | None = None
    ui: UIOptions = Field(default_factory=UIOptions)

    @field_validator("group", "plugin", "watchdir", "ignore", mode="before")
    @classmethod
    def _coerce_names(cls, value: Any) -> Any:
        return _as_list(value)

    def get(self, key: str, default: Any = None) -> Any:
        """Dict-style lookup that also covers extra (unknown) keys."""
        if key in type(self).model_fields:
            return getattr(self, key)
        return (self.model_extra or {}).get(key, default)


# --- Wardenfile sections ---


class GroupEntry(BaseModel):
    """One ``[[group]]`` table. Keys other than ``name`` are group options."""

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str

    @property
    def options(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class PluginEntry(BaseModel):
    """One ``[[plugin]]`` table. Unrecognised keys become plugin options."""

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str
    type: str | None = None
    group: str = "default"
    watch: list[str] = Field(default_factory=list)

    @field_validator("watch", mode="before")
    @classmethod
    def _coerce_watch(cls, value: Any) -> Any:
        return _as_list(value)

    def registration_options(self) -> dict[str, Any]:
        """Options as passed to :meth:`Registry.add_plugin`."""
        return {
            **(self.model_extra or {}),
            "type": self.type or self.name,
            "group": self.group,
            "watch": list(self.watch),
        }


class Wardenfile(BaseModel):
    """Root of an evaluated Wardenfile."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    options: dict[str, Any] = Field(default_factory=dict)
    groups: list[GroupEntry] = Field(default_factory=list, alias="group")
    plugins: list[PluginEntry] = Field(default_factory=list, alias="plugin")

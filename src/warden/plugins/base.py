"""The plugin interface the session coordinator drives.

Variants are supplied by registration (see :mod:`warden.plugins.hookspecs`),
not by inheritance: anything with the lifecycle methods below is a plugin.
:class:`BasePlugin` only saves implementers from writing no-ops.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Protocol, runtime_checkable

from warden.config.models import Options
from warden.runtime.commands import Command

LIFECYCLE_CALLBACKS: tuple[str, ...] = ("on_start", "on_stop", "on_change", "on_reload", "run_all")


@runtime_checkable
class Plugin(Protocol):
    """Lifecycle operations invoked on the coordinator's thread."""

    def on_start(self) -> None: ...

    def on_stop(self) -> None: ...

    def on_change(self, paths: list[str]) -> None: ...

    def on_reload(self) -> None: ...


class SessionHandle(Protocol):
    """What a plugin may see of the running session."""

    @property
    def project_root(self) -> Path: ...

    @property
    def options(self) -> Options: ...

    def enqueue(self, command: Command) -> bool: ...


class BasePlugin:
    """Convenience base with no-op callbacks.

    Attributes:
        TEMPLATE: Wardenfile stanza written by ``warden init <type>``.
    """

    TEMPLATE: ClassVar[str] = ""

    def __init__(
        self,
        name: str,
        options: dict[str, Any] | None = None,
        session: SessionHandle | None = None,
    ) -> None:
        self.name = name
        self.options = dict(options or {})
        self.session = session

    @property
    def cwd(self) -> Path:
        return self.session.project_root if self.session is not None else Path.cwd()

    def on_start(self) -> None:
        """Called once when the session starts watching."""

    def on_stop(self) -> None:
        """Called once when the session stops, or before a reload replaces it."""

    def on_change(self, paths: list[str]) -> None:
        """Called with the changed paths this plugin watches."""

    def on_reload(self) -> None:
        """Called on the fresh instance after a reload. Defaults to :meth:`on_start`."""
        self.on_start()

    def run_all(self) -> None:
        """Called by the ``run-all`` command."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

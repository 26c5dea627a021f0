"""Commands: immutable instructions applied one at a time by the coordinator.

Every asynchronous actor (signal handlers, the interactive session, the
watcher callback) talks to the session exclusively by enqueuing one of
these values.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum


class CommandKind(StrEnum):
    """Tag of a :class:`Command`."""

    PAUSE = "pause"
    UNPAUSE = "unpause"
    RELOAD = "reload"
    CHANGE_SET = "change-set"
    RUN_ALL = "run-all"
    QUIT = "quit"


@dataclass(frozen=True)
class ScopeRequest:
    """Explicit group and plugin names an operation should be limited to."""

    groups: tuple[str, ...] = ()
    plugins: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.groups or self.plugins)


@dataclass(frozen=True)
class ChangeSet:
    """A batch of created/modified/removed paths reported together."""

    created: tuple[str, ...] = ()
    modified: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()

    @classmethod
    def of(
        cls,
        created: Iterable[str] = (),
        modified: Iterable[str] = (),
        removed: Iterable[str] = (),
    ) -> ChangeSet:
        return cls(tuple(created), tuple(modified), tuple(removed))

    @property
    def paths(self) -> tuple[str, ...]:
        """All paths, created then modified then removed, without duplicates."""
        return tuple(dict.fromkeys((*self.created, *self.modified, *self.removed)))

    def __bool__(self) -> bool:
        return bool(self.created or self.modified or self.removed)


@dataclass(frozen=True)
class Command:
    """Tagged command value. Payload only carries what its tag needs."""

    kind: CommandKind
    changes: ChangeSet | None = None
    scope: ScopeRequest = field(default_factory=ScopeRequest)

    @classmethod
    def pause(cls) -> Command:
        return cls(CommandKind.PAUSE)

    @classmethod
    def unpause(cls) -> Command:
        return cls(CommandKind.UNPAUSE)

    @classmethod
    def reload(cls, scope: ScopeRequest | None = None) -> Command:
        return cls(CommandKind.RELOAD, scope=scope or ScopeRequest())

    @classmethod
    def change_set(cls, changes: ChangeSet) -> Command:
        return cls(CommandKind.CHANGE_SET, changes=changes)

    @classmethod
    def run_all(cls, scope: ScopeRequest | None = None) -> Command:
        return cls(CommandKind.RUN_ALL, scope=scope or ScopeRequest())

    @classmethod
    def quit(cls) -> Command:
        return cls(CommandKind.QUIT)

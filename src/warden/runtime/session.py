"""Session coordinator: the single writer of session state.

Every asynchronous actor (watcher, signal handlers, interactor) reaches the
coordinator through its :class:`CommandQueue`. The coordinator drains that
queue on one thread and applies each command in order, so the registry,
the scope and the lifecycle state are never mutated concurrently.

States::

    starting -> running <-> paused
    running | paused -> stopping -> stopped
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from warden.config.models import Options, Wardenfile
from warden.config.options import OptionsStore, rename_legacy_keys
from warden.errors import ConfigurationError, FatalStartupError, PluginError, WardenError
from warden.notifier import Notifier, resolve_enabled
from warden.plugins.builtins.reevaluator import BUILTIN_PLUGIN_TYPES
from warden.plugins.manager import PluginManager
from warden.runtime.command_queue import CLOSED, CommandQueue
from warden.runtime.commands import ChangeSet, Command, CommandKind, ScopeRequest
from warden.runtime.registry import PluginSlot, Registry
from warden.runtime.scope import Scope, ScopeResolver
from warden.runtime.state import SessionState, is_valid_transition
from warden.ui import UI
from warden.wardenfile import WardenfileEvaluator
from warden.watcher import ChangeCallback, Watcher

logger = logging.getLogger(__name__)

NO_PLUGINS_MESSAGE = "No plugins found in Wardenfile, please add at least one."
POLL_INTERVAL = 0.5


class WatcherLike(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...


class InteractorLike(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...


WatcherFactory = Callable[..., WatcherLike]
InteractorFactory = Callable[[CommandQueue, Callable[[], SessionState]], InteractorLike]


@dataclass(frozen=True)
class SessionStatus:
    """Read-only snapshot of a session, safe to take from any thread."""

    state: SessionState
    groups: tuple[str, ...]
    plugins: tuple[str, ...]
    scope: tuple[str, ...]
    pending: int


class SessionCoordinator:
    """Owns the registry, options, scope and lifecycle of one session.

    Args:
        plugin_manager: Builds plugin instances by type name.
        overrides: Option overrides from the command line. They are merged
            above the Wardenfile's ``[options]`` on every (re)load.
        notify_override: ``WARDEN_NOTIFY``; when not None it wins over the
            ``notify`` option.
        watcher_factory: Called as ``factory(directories, callback,
            latency=..., force_polling=..., ignore=...)``.
        interactor_factory: Called as ``factory(queue, state_getter)``;
            None disables the interactive console.
    """

    def __init__(
        self,
        plugin_manager: PluginManager,
        overrides: Mapping[str, Any] | None = None,
        *,
        ui: UI | None = None,
        notifier: Notifier | None = None,
        queue: CommandQueue | None = None,
        notify_override: bool | None = None,
        watcher_factory: WatcherFactory = Watcher,
        interactor_factory: InteractorFactory | None = None,
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        self._plugin_manager = plugin_manager
        self._overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
        self._store = OptionsStore(self._overrides)
        self.ui = ui or UI()
        self.notifier = notifier or Notifier()
        self.queue = queue or CommandQueue()
        self._notify_override = notify_override
        self._watcher_factory = watcher_factory
        self._interactor_factory = interactor_factory
        self._poll_interval = poll_interval
        self._resolver = ScopeResolver()

        self._state = SessionState.STARTING
        self._registry = Registry(self._create_plugin)
        self._scope = Scope()
        self._watcher: WatcherLike | None = None
        self._watch_settings: tuple[Any, ...] | None = None
        self._interactor: InteractorLike | None = None

        self._apply_options(self._store.options)

    # ------------------------------------------------------------------
    # Read-only views (any thread, eventually consistent)
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def options(self) -> Options:
        return self._store.options

    @property
    def scope(self) -> Scope:
        return self._scope

    @property
    def project_root(self) -> Path:
        root = self.options.project_root
        return Path(root).resolve() if root else Path.cwd()

    def status(self) -> SessionStatus:
        registry = self._registry
        return SessionStatus(
            state=self._state,
            groups=tuple(g.name for g in registry.groups),
            plugins=tuple(p.name for p in registry.plugins),
            scope=tuple(self._scope.titles()),
            pending=self.queue.pending(),
        )

    # ------------------------------------------------------------------
    # Producers
    # ------------------------------------------------------------------

    def enqueue(self, command: Command) -> bool:
        return self.queue.enqueue(command)

    def handle_changes(self, created: list[str], modified: list[str], removed: list[str]) -> None:
        """Watcher callback: wrap the batch into a ``change-set`` command."""
        changes = ChangeSet.of(created, modified, removed)
        if changes:
            self.queue.enqueue(Command.change_set(changes))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def setup(self) -> None:
        """Evaluate the Wardenfile and register its groups and plugins.

        Raises:
            ConfigurationError: the Wardenfile could not be evaluated.
            FatalStartupError: no user plugins and ``fail_on_empty`` is set.
        """
        evaluator = WardenfileEvaluator(self.options)
        wardenfile = evaluator.evaluate()
        data = self._option_data(wardenfile)
        options = self._merge(data)
        registry = self._build_registry(wardenfile, evaluator.path)

        if not self._user_plugins(registry):
            if options.fail_on_empty:
                raise FatalStartupError(NO_PLUGINS_MESSAGE)
            self.ui.error(NO_PLUGINS_MESSAGE)

        self._store.reset(data)
        self._registry = registry
        self._apply_options(self.options)
        self._scope = self._resolver.resolve(registry, self.options)

    def start(self) -> None:
        """Set up, start every plugin, and begin watching.

        A :class:`ConfigurationError` is reported and the session stays up
        idle so the Wardenfile can be fixed and reloaded.

        Raises:
            FatalStartupError: propagated from :meth:`setup`.
        """
        try:
            self.setup()
        except ConfigurationError as exc:
            self.ui.error(str(exc), exc_info=self._debug)

        self._setup_notifier()
        self._transition(SessionState.RUNNING)
        self.ui.reset_and_clear()

        for slot in self._registry.plugins:
            if self._cancelled("start"):
                break
            self._invoke(slot, "on_start")

        self._start_watcher()
        watched = ", ".join(str(d) for d in self._watch_directories(self.options))
        self.ui.info(f"Warden is now watching at '{watched}'")

        if self._interactor_factory is not None and not self.options.no_interactions:
            self._interactor = self._interactor_factory(self.queue, lambda: self._state)
            self._interactor.start()

    def run(self) -> int:
        """Start, then apply queued commands until the queue is closed.

        Returns the process exit code: 0 after a clean quit, 1 when
        startup failed fatally.
        """
        try:
            self.start()
        except FatalStartupError as exc:
            self.ui.error(str(exc))
            self.stop()
            return 1

        while True:
            item = self.queue.dequeue_blocking(timeout=self._poll_interval)
            if item is None:
                continue
            if item is CLOSED:
                break
            self.apply(item)

        self.stop()
        return 0

    def stop(self) -> None:
        """``quit``: stop every plugin, close the queue, stop watching.

        Idempotent. Plugin ``on_stop`` calls are never cancelled.
        """
        if self._state in (SessionState.STOPPING, SessionState.STOPPED):
            return
        self._transition(SessionState.STOPPING)
        for slot in self._registry.plugins:
            self._invoke(slot, "on_stop")
        self.queue.close()
        self._stop_watcher()
        if self._interactor is not None:
            self._interactor.stop()
            self._interactor = None
        self.notifier.turn_off()
        self._transition(SessionState.STOPPED)
        self.ui.info("Bye bye...")

    # ------------------------------------------------------------------
    # Command application
    # ------------------------------------------------------------------

    def apply(self, command: Command) -> None:
        """Apply one command. Never raises: failures become diagnostics."""
        if self._state is SessionState.STOPPED:
            logger.debug("Ignoring %s: session is stopped", command.kind)
            return
        handlers: dict[CommandKind, Callable[[Command], None]] = {
            CommandKind.PAUSE: self._pause,
            CommandKind.UNPAUSE: self._unpause,
            CommandKind.RELOAD: self._reload,
            CommandKind.CHANGE_SET: self._change_set,
            CommandKind.RUN_ALL: self._run_all,
            CommandKind.QUIT: self._quit,
        }
        try:
            handlers[command.kind](command)
        except WardenError as exc:
            self.ui.error(str(exc), exc_info=self._debug)
        except Exception as exc:
            self.ui.error(f"Could not apply {command.kind}: {exc}", exc_info=self._debug)

    def _pause(self, command: Command) -> None:
        if self._state is not SessionState.RUNNING:
            logger.debug("Pause ignored in state %s", self._state)
            return
        self._transition(SessionState.PAUSED)
        self.ui.info("File event handling has been paused")

    def _unpause(self, command: Command) -> None:
        if self._state is not SessionState.PAUSED:
            logger.debug("Unpause ignored in state %s", self._state)
            return
        self._transition(SessionState.RUNNING)
        self.ui.info("File event handling has been resumed")

    def _reload(self, command: Command) -> None:
        try:
            if command.scope:
                self._reload_plugins(command.scope)
            else:
                self._reevaluate()
        finally:
            if self._state is SessionState.PAUSED:
                self._transition(SessionState.RUNNING)

    def _reload_plugins(self, request: ScopeRequest) -> None:
        """Scoped reload: ``on_reload`` on the selected slots, no re-evaluation."""
        scope = self._resolver.resolve(self._registry, self.options, request)
        self.ui.clear(force=True)
        self.ui.action_with_scopes("Reload", scope)
        for slot in scope.select(self._registry):
            if self._cancelled("reload"):
                return
            self._invoke(slot, "on_reload")

    def _reevaluate(self) -> None:
        """Full reload: the new registry replaces the old one, or nothing changes."""
        self.ui.clear(force=True)
        evaluator = WardenfileEvaluator(self.options)
        try:
            wardenfile = evaluator.evaluate()
            data = self._option_data(wardenfile)
            options = self._merge(data)
            staged = self._build_registry(wardenfile, evaluator.path)
            if not self._user_plugins(staged):
                raise ConfigurationError(NO_PLUGINS_MESSAGE)
        except ConfigurationError as exc:
            self.notifier.notify("Warden re-evaluate", str(exc), kind="failed")
            msg = f"Failed to reload the Wardenfile, keeping the current one: {exc}"
            raise ConfigurationError(msg) from exc

        if self._cancelled("reload"):
            return

        for slot in self._registry.plugins:
            self._invoke(slot, "on_stop")

        self._registry = staged
        self._store.reset(data)
        self._apply_options(options)
        self._restart_watcher_if_changed()

        for slot in staged.plugins:
            if self._cancelled("reload"):
                break
            self._invoke(slot, "on_reload")

        self._scope = self._resolver.resolve(staged, self.options)
        message = "Wardenfile has been re-evaluated."
        self.ui.info(message)
        self.notifier.notify("Warden re-evaluate", message)

    def _change_set(self, command: Command) -> None:
        if self._state is SessionState.PAUSED:
            logger.debug("Discarding change-set while paused")
            return
        if self._state is not SessionState.RUNNING or command.changes is None:
            return
        paths = [self._relative(p) for p in command.changes.paths]
        self._scope = self._resolver.resolve(self._registry, self.options)
        self.ui.clearable()
        for slot in self._scope.select(self._registry):
            if self._cancelled("change-set"):
                return
            matched = slot.match(paths)
            if not matched:
                continue
            self.ui.clear()
            logger.debug("%s: %s", slot.name, ", ".join(matched))
            self._invoke(slot, "on_change", matched)

    def _run_all(self, command: Command) -> None:
        if self._state is not SessionState.RUNNING:
            self.ui.info("Warden is paused, resume it before running all plugins")
            return
        scope = self._resolver.resolve(self._registry, self.options, command.scope)
        self.ui.clear(force=True)
        self.ui.action_with_scopes("Run", scope)
        for slot in scope.select(self._registry):
            if self._cancelled("run-all"):
                return
            self._invoke(slot, "run_all")

    def _quit(self, command: Command) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _invoke(self, slot: PluginSlot, callback: str, *args: Any) -> bool:
        """Call *callback* on a slot's plugin; a missing method is a no-op.

        Returns False when the plugin raised. The failure is reported and
        never propagates.
        """
        method = getattr(slot.plugin, callback, None)
        if not callable(method):
            return True
        try:
            method(*args)
        except Exception as exc:
            error = exc if isinstance(exc, PluginError) else PluginError(slot.name, callback, exc)
            self.ui.error(str(error), plugin=slot.name, exc_info=self._debug)
            self.notifier.notify(f"{slot.title} failed", str(error), kind="failed")
            return False
        return True

    def _cancelled(self, batch: str) -> bool:
        if self.queue.quit_requested:
            logger.debug("Quit requested; cancelling the rest of %s", batch)
            return True
        return False

    def _transition(self, target: SessionState) -> None:
        if not is_valid_transition(self._state, target):
            msg = f"Invalid session transition: {self._state} -> {target}"
            raise WardenError(msg)
        logger.debug("Session %s -> %s", self._state, target)
        self._state = target

    def _option_data(self, wardenfile: Wardenfile) -> dict[str, Any]:
        """Wardenfile options with renamed keys upgraded and overrides on top."""
        data, renamed = rename_legacy_keys(wardenfile.options)
        for old, new in renamed:
            self.ui.deprecation(f"Option '{old}' in Wardenfile is deprecated, use '{new}' instead.")
        return {**data, **self._overrides}

    def _merge(self, data: Mapping[str, Any]) -> Options:
        """Validate the options *data* would produce without storing them.

        Every field, including the [options.ui] regexes, is checked here,
        before any registry or UI state is replaced.
        """
        try:
            return OptionsStore.merge(data)
        except ValueError as exc:
            msg = f"Invalid [options] in Wardenfile: {exc}"
            raise ConfigurationError(msg) from exc

    def _build_registry(self, wardenfile: Wardenfile, path: Path | None) -> Registry:
        registry = Registry(self._create_plugin)
        registry.reset_plugins()
        for group in wardenfile.groups:
            registry.add_group(group.name, group.options)
        if path is not None and path.is_file():
            registry.add_plugin(
                "reevaluator",
                {
                    "type": "reevaluator",
                    "group": "common",
                    "watch": [self._relative(str(path.resolve()))],
                },
            )
        for entry in wardenfile.plugins:
            registry.add_plugin(entry.name, entry.registration_options())
        return registry

    def _create_plugin(self, type_name: str, name: str, options: dict[str, Any]) -> object:
        return self._plugin_manager.create(type_name, name=name, options=options, session=self)

    @staticmethod
    def _user_plugins(registry: Registry) -> list[PluginSlot]:
        return [p for p in registry.plugins if p.type_name not in BUILTIN_PLUGIN_TYPES]

    def _apply_options(self, options: Options) -> None:
        self.ui.options = options.ui
        self.ui.clear_enabled = options.clear
        if options.debug:
            self.ui.set_level("debug")
        elif options.ui.level:
            self.ui.set_level(options.ui.level)

    def _setup_notifier(self) -> None:
        if resolve_enabled(self.options.notify, self._notify_override):
            self.notifier.turn_on()
        else:
            self.notifier.turn_off()

    @property
    def _debug(self) -> bool:
        return self.options.debug or logging.getLogger("warden").isEnabledFor(logging.DEBUG)

    def _relative(self, path: str) -> str:
        """*path* relative to the project root; outside paths stay absolute."""
        candidate = Path(path)
        if not candidate.is_absolute():
            return candidate.as_posix()
        try:
            return candidate.relative_to(self.project_root).as_posix()
        except ValueError:
            return candidate.as_posix()

    # --- watcher ---

    def _watch_directories(self, options: Options) -> list[Path]:
        root = self.project_root
        return [(root / d).resolve() for d in options.watchdir] or [root]

    def _watcher_key(self, options: Options) -> tuple[Any, ...]:
        return (
            tuple(self._watch_directories(options)),
            options.latency,
            options.force_polling,
            tuple(options.ignore),
        )

    def _start_watcher(self) -> None:
        options = self.options
        callback: ChangeCallback = self.handle_changes
        directories: Sequence[Path] = self._watch_directories(options)
        self._watcher = self._watcher_factory(
            directories,
            callback,
            latency=options.latency,
            force_polling=options.force_polling,
            ignore=options.ignore,
        )
        self._watcher.start()
        self._watch_settings = self._watcher_key(options)

    def _stop_watcher(self) -> None:
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None

    def _restart_watcher_if_changed(self) -> None:
        if self._watcher is None or self._watch_settings == self._watcher_key(self.options):
            return
        logger.debug("Watch settings changed; restarting the watcher")
        self._stop_watcher()
        self._start_watcher()

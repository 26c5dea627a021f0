"""Plugin type registry backed by pluggy.

Plugin types arrive from three places, in registration order:

1. the built-in types (``shell``, ``reevaluator``),
2. distributions exposing the ``warden.plugins`` entry point group,
3. single-file modules in the project's ``.warden/plugins/`` directory.

Each source registers a hook object implementing ``warden_plugin_types``;
:meth:`PluginManager.plugin_types` merges their answers.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any

import pluggy

from warden.errors import ConfigurationError
from warden.plugins.hookspecs import WardenHookSpec

if TYPE_CHECKING:
    from warden.plugins.base import SessionHandle

PROJECT_NAME = "warden"
ENTRY_POINT_GROUP = "warden.plugins"
BUILTIN_NAME = "warden.builtins"
LOCAL_MODULE_PREFIX = "warden_local_plugin_"

logger = logging.getLogger(__name__)


def has_hook_impls(cls: type) -> bool:
    """True when *cls* has a public method marked with ``@hookimpl``.

    ``HookimplMarker("warden")`` tags marked functions with a
    ``warden_impl`` attribute.
    """
    return any(
        getattr(member, f"{PROJECT_NAME}_impl", None) is not None
        for attr, member in inspect.getmembers(cls, callable)
        if not attr.startswith("_")
    )


class PluginManager:
    """Collects plugin types and builds plugin instances from them."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(WardenHookSpec)
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has run."""
        return self._loaded

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Register the built-in, entry point and *local_dir* hook objects.

        Safe to call more than once. Returns the registered hook names.
        """
        if not self._pm.has_plugin(BUILTIN_NAME):
            from warden.plugins.builtins import BuiltinPluginTypes

            self.register_plugin(BuiltinPluginTypes(), name=BUILTIN_NAME)
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_registered_classes()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a hook object contributing plugin types."""
        resolved_name = name or type(plugin).__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin types from %s", resolved_name)

    def list_plugin_names(self) -> list[str]:
        return [name for name, _plugin in self._pm.list_name_plugin()]

    # ------------------------------------------------------------------
    # Plugin types
    # ------------------------------------------------------------------

    def plugin_types(self) -> dict[str, type]:
        """Every contributed plugin type, keyed by lower-cased name.

        A later registration shadows an earlier type of the same name, so a
        local plugin can replace ``shell``.
        """
        types: dict[str, type] = {}
        # pluggy answers last-registered first.
        for result in reversed(self._pm.hook.warden_plugin_types()):
            if result is None:
                continue
            if not isinstance(result, dict):
                logger.warning("Ignoring non-dict plugin type registration: %r", result)
                continue
            types.update({str(key).lower(): cls for key, cls in result.items()})
        return types

    def create(
        self,
        type_name: str,
        *,
        name: str,
        options: dict[str, Any],
        session: SessionHandle | None = None,
    ) -> object:
        """Instantiate the plugin type *type_name* as slot *name*.

        Raises:
            ConfigurationError: unknown type, or the constructor raised.
        """
        types = self.plugin_types()
        cls = types.get(type_name.lower())
        if cls is None:
            available = ", ".join(sorted(types)) or "none"
            msg = f"Could not load plugin type {type_name!r} (available: {available})"
            raise ConfigurationError(msg)
        try:
            return cls(name=name, options=options, session=session)
        except ConfigurationError:
            raise
        except Exception as exc:
            msg = f"Could not create plugin {name!r} of type {type_name!r}: {exc}"
            raise ConfigurationError(msg) from exc

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def _instantiate_registered_classes(self) -> None:
        """Swap hook classes registered by entry points for instances.

        A class registered as-is would be called with ``self`` unbound.
        """
        classes = [
            (name, plugin)
            for name, plugin in self._pm.list_name_plugin()
            if inspect.isclass(plugin) and has_hook_impls(plugin)
        ]
        for name, cls in classes:
            self._pm.unregister(cls)
            try:
                instance = cls()
            except Exception:
                logger.warning("Failed to instantiate entry-point plugin %s", name, exc_info=True)
                continue
            self._pm.register(instance, name=name)
            logger.debug("Instantiated entry-point plugin: %s", name)

    # ------------------------------------------------------------------
    # Local directory
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Load each ``*.py`` in *local_dir* and register its hook class.

        ``_``-prefixed files are skipped. A module that fails to import or
        instantiate is logged and skipped; it never stops the session.
        """
        for py_file in _local_plugin_files(local_dir):
            module = _import_local(py_file)
            if module is None:
                continue
            hook_classes = list(_hook_classes(module))
            if not hook_classes:
                logger.debug("No hook class in local plugin %s", py_file)
                continue
            for extra in hook_classes[1:]:
                logger.warning("Skipping second hook class %s in %s", extra.__name__, py_file)
            cls = hook_classes[0]
            try:
                self.register_plugin(cls(), name=module.__name__)
            except Exception:
                logger.warning(
                    "Failed to instantiate plugin class %s from %s",
                    cls.__name__,
                    py_file,
                    exc_info=True,
                )


def _local_plugin_files(local_dir: Path) -> Iterator[Path]:
    if not local_dir.is_dir():
        return
    for py_file in sorted(local_dir.glob("*.py")):
        if not py_file.name.startswith("_"):
            yield py_file


def _import_local(py_file: Path) -> ModuleType | None:
    module_name = f"{LOCAL_MODULE_PREFIX}{py_file.stem}"
    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        logger.warning("Could not create module spec for %s", py_file)
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
        sys.modules.pop(module_name, None)
        return None
    return module


def _hook_classes(module: ModuleType) -> Iterator[type]:
    """Classes defined in *module* itself that carry hook implementations."""
    for _attr, obj in inspect.getmembers(module, inspect.isclass):
        if obj.__module__ == module.__name__ and has_hook_impls(obj):
            yield obj

"""Extension layer: plugin types via pluggy.

Discovery: built-ins, entry points (``warden.plugins`` group) and
``.warden/plugins/*.py``.
INVARIANT: A plugin that fails to load is a warning, never fatal.
"""

from warden.plugins.base import BasePlugin, Plugin
from warden.plugins.hookspecs import hookimpl
from warden.plugins.manager import PluginManager

__all__ = ["BasePlugin", "Plugin", "PluginManager", "hookimpl"]

"""Error kinds raised inside warden.

INVARIANT: None of these cross the command queue. The session coordinator
turns every one of them into a formatted diagnostic line.
"""

from __future__ import annotations


class WardenError(Exception):
    """Base class for all warden errors."""


class ConfigurationError(WardenError):
    """The Wardenfile could not be evaluated into registrations.

    Recovered: the prior registry and options are retained.
    """


class PluginError(WardenError):
    """A plugin callback raised.

    Recovered per plugin: siblings in the same batch still run.
    """

    def __init__(self, plugin: str, callback: str, cause: BaseException | str) -> None:
        self.plugin = plugin
        self.callback = callback
        self.cause = cause
        super().__init__(f"{plugin} failed to achieve its <{callback}>, exception was: {cause}")


class ResourceError(WardenError):
    """A required external executable is missing or failed.

    Recovered: reported as a warning and the operation degrades.
    """


class FatalStartupError(WardenError):
    """No plugins are registered after the initial evaluation."""

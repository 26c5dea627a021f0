"""Built-in reevaluator: reload the session when the Wardenfile changes.

Registered automatically in the ``common`` group whenever the Wardenfile is
a real file. It never reloads inline: it enqueues a ``reload`` command that
the coordinator applies after the current change-set.
"""

from __future__ import annotations

import logging

from warden.plugins.base import BasePlugin
from warden.runtime.commands import Command

logger = logging.getLogger(__name__)

BUILTIN_PLUGIN_TYPES: frozenset[str] = frozenset({"reevaluator"})


class ReevaluatorPlugin(BasePlugin):
    """Enqueues a reload for any change to the watched Wardenfile."""

    def on_change(self, paths: list[str]) -> None:
        if self.session is None:
            return
        logger.debug("Wardenfile changed (%s); requesting reload", ", ".join(paths))
        self.session.enqueue(Command.reload())

    def on_reload(self) -> None:
        """No-op: a fresh reevaluator has nothing to start."""

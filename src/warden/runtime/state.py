"""Session lifecycle states and the allowed transitions between them."""

from __future__ import annotations

from enum import StrEnum


class SessionState(StrEnum):
    """Lifecycle of the session coordinator."""

    STARTING = "starting"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPING = "stopping"
    STOPPED = "stopped"


SESSION_TRANSITIONS: dict[str, list[str]] = {
    "starting": ["running", "stopping"],
    "running": ["paused", "running", "stopping"],
    "paused": ["running", "stopping"],
    "stopping": ["stopped"],
    "stopped": [],
}


def is_valid_transition(current: str, target: str) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    return target in SESSION_TRANSITIONS.get(current, [])

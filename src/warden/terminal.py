"""Terminal helpers.

The screen is cleared by running the platform's clear command and echoing
its output, so terminals that ignore raw escape codes still work.
"""

from __future__ import annotations

import subprocess
import sys

from warden.errors import ResourceError


def clear_command() -> str:
    """Shell command that clears the screen on this platform."""
    return "cls" if sys.platform.startswith("win") else "clear;"


def clear() -> None:
    """Clear the screen.

    Raises:
        ResourceError: the clear command is missing or failed.
    """
    cmd = clear_command()
    try:
        result = subprocess.run(cmd, shell=True, capture_output=True, text=True, check=False)
    except OSError as exc:
        msg = f'Failed to run "{cmd}": {exc}'
        raise ResourceError(msg) from exc
    if result.returncode != 0:
        msg = f'Failed to run "{cmd}": {result.stderr.strip() or result.returncode}'
        raise ResourceError(msg)
    sys.stdout.write(result.stdout)
    sys.stdout.flush()

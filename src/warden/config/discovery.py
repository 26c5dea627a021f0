"""Locating the Wardenfile a session should evaluate.

An explicit ``--wardenfile`` bypasses this module. Otherwise
``WARDEN_WARDENFILE`` names the file (or a directory holding one), and
failing that the nearest ``Wardenfile.toml`` above the working directory
is used. The file's directory becomes the project root, so a Wardenfile
found in a parent directory watches the whole project.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

WARDENFILE_NAME = "Wardenfile.toml"
WARDENFILE_ENV_VAR = "WARDEN_WARDENFILE"


def find_wardenfile(start: Path | None = None) -> Path | None:
    """Resolved path of the Wardenfile for *start* (default: cwd), or None.

    A set ``WARDEN_WARDENFILE`` is authoritative: when it points nowhere
    the walk-up is skipped and a warning is logged.
    """
    env_path = os.environ.get(WARDENFILE_ENV_VAR)
    if env_path:
        return _from_env(env_path)

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / WARDENFILE_NAME
        if candidate.is_file():
            return candidate
    return None


def _from_env(value: str) -> Path | None:
    path = Path(value).expanduser()
    if path.is_dir():
        path = path / WARDENFILE_NAME
    if path.is_file():
        return path.resolve()
    logger.warning("%s=%s does not name a Wardenfile", WARDENFILE_ENV_VAR, value)
    return None

"""Wardenfile evaluation and creation.

A Wardenfile is plain TOML::

    [options]
    clear = true

    [[group]]
    name = "backend"

    [[plugin]]
    name = "pytest"
    type = "shell"
    group = "backend"
    watch = ["src/**/*.py", "tests/**/*.py"]
    command = "pytest -q"

Evaluation never mutates session state; it returns a validated
:class:`~warden.config.models.Wardenfile` that the coordinator registers.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import ValidationError

from warden.config.discovery import WARDENFILE_NAME, find_wardenfile
from warden.config.models import Options, Wardenfile
from warden.errors import ConfigurationError

WARDENFILE_SKELETON = """\
# Wardenfile: groups and plugins rerun by `warden start`.

[options]
# clear = true
# notify = false
# ignore = ["*.pyc", ".git/*"]

[[group]]
name = "backend"
"""


class WardenfileEvaluator:
    """Reads the Wardenfile selected by *options* into registrations.

    Source precedence: ``wardenfile_contents`` (inline), then the
    ``wardenfile`` path, then walk-up discovery from ``project_root``.
    """

    def __init__(self, options: Options) -> None:
        self._options = options

    @property
    def inline(self) -> bool:
        return self._options.wardenfile_contents is not None

    @property
    def path(self) -> Path | None:
        """The file this evaluator reads, or None for inline contents."""
        if self.inline:
            return None
        if self._options.wardenfile:
            return Path(self._options.wardenfile)
        root = Path(self._options.project_root) if self._options.project_root else None
        return find_wardenfile(root)

    def evaluate(self) -> Wardenfile:
        """Parse and validate the Wardenfile.

        Raises:
            ConfigurationError: missing file, invalid TOML, or invalid schema.
        """
        text, label = self._read()
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {label}: {exc}"
            raise ConfigurationError(msg) from exc
        try:
            return Wardenfile.model_validate(data)
        except ValidationError as exc:
            msg = f"Invalid Wardenfile {label}: {exc.error_count()} error(s)\n{exc}"
            raise ConfigurationError(msg) from exc

    def _read(self) -> tuple[str, str]:
        contents = self._options.wardenfile_contents
        if contents is not None:
            return contents, "(inline contents)"
        path = self.path
        if path is None:
            msg = f"No {WARDENFILE_NAME} found, please create one with `warden init`."
            raise ConfigurationError(msg)
        try:
            return path.read_text(encoding="utf-8"), str(path)
        except OSError as exc:
            msg = f"Could not read {path}: {exc.strerror or exc}"
            raise ConfigurationError(msg) from exc


def create_wardenfile(path: Path, *, templates: list[str] | None = None) -> bool:
    """Write a starter Wardenfile at *path* followed by plugin *templates*.

    Never overwrites: returns False when the file already exists.
    """
    if path.exists():
        return False
    body = WARDENFILE_SKELETON
    for template in templates or []:
        body += "\n" + template.strip() + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return True

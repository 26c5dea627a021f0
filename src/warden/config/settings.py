"""Process-level settings: CLI flags, env vars, and code defaults in one object.

Priority chain (highest to lowest):
  1. Init kwargs  - CLI flags passed by Click
  2. Env vars     - ``WARDEN_*`` prefix
  3. Code defaults

Session options (``clear``, ``group``, ``watchdir`` ...) are not settings:
they live in the Wardenfile's ``[options]`` table and are layered by the
:class:`~warden.config.options.OptionsStore`. Command-line option flags are
handed to the session alongside :meth:`WardenSettings.session_overrides`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from warden.config.discovery import find_wardenfile


class WardenSettings(BaseSettings):
    """Unified settings for the warden CLI.

    Stored in ``click.Context.obj`` (via :class:`AppContext`) at the CLI
    root level.

    Attributes:
        project_root: Directory plugins run in and paths are reported
            relative to (parent of ``Wardenfile.toml``, or CWD).
        wardenfile_path: Explicit ``--wardenfile`` or the discovered file.
        notify: ``WARDEN_NOTIFY`` override; when set it turns desktop
            notifications on or off irrespective of configuration.
        silence_deprecations: ``WARDEN_SILENCE_DEPRECATIONS`` silences
            deprecation diagnostics.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="WARDEN_",
        env_ignore_empty=True,
    )

    project_root: Path = Field(default_factory=Path.cwd)
    wardenfile_path: Path | None = None

    # --- CLI flags ---
    verbose: bool = False
    quiet: bool = False
    log_json: bool = False

    # --- Environment-only switches ---
    notify: bool | None = None
    silence_deprecations: bool = False

    @classmethod
    def from_cli(
        cls,
        *,
        wardenfile: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> WardenSettings:
        """Construct settings from a CLI invocation.

        Discovers ``Wardenfile.toml`` via walk-up (or explicit *wardenfile*)
        and resolves *project_root* from the file's parent directory.
        """
        wardenfile_path: Path | None
        if wardenfile:
            wardenfile_path = Path(wardenfile)
        else:
            wardenfile_path = find_wardenfile(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = wardenfile_path.parent if wardenfile_path else Path.cwd()

        return cls(
            project_root=resolved_root,
            wardenfile_path=wardenfile_path,
            **cli_flags,
        )

    def session_overrides(self) -> dict[str, Any]:
        """Resolved paths every session is started with."""
        overrides: dict[str, Any] = {"project_root": str(self.project_root)}
        if self.wardenfile_path is not None:
            overrides["wardenfile"] = str(self.wardenfile_path)
        return overrides

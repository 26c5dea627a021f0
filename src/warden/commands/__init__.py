"""Subcommand modules for warden.

Provides register_commands(), which imports each command module only when
the CLI is built.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every standalone command on the root CLI group."""
    from warden.commands.init_cmd import init_cmd
    from warden.commands.list_cmd import list_cmd
    from warden.commands.notifiers import notifiers
    from warden.commands.show import show
    from warden.commands.start import start

    cli.add_command(start)
    cli.add_command(list_cmd)
    cli.add_command(show)
    cli.add_command(init_cmd)
    cli.add_command(notifiers)

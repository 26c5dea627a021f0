"""Click command classes carrying an ``--examples`` flag.

``@click.command(cls=WardenCommand, examples=...)`` keeps ``--help`` to the
options while ``--examples`` prints copy-pasteable invocations and exits
before the command body runs.
"""

from __future__ import annotations

from typing import Any

import click


class ExamplesMixin:
    """Adds an eager ``--examples`` option when *examples* text is given."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(  # type: ignore[attr-defined]
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
        ctx.exit(0)


class WardenCommand(ExamplesMixin, click.Command):
    pass


class WardenGroup(ExamplesMixin, click.Group):
    """Group whose ``@group.command()`` subcommands are WardenCommands."""

    command_class = WardenCommand

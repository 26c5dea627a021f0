"""Tests for --examples flag on CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from warden.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["start", "--examples"], ["warden start --clear --group backend", "--fail-on-empty"]),
    (["list", "--examples"], ["warden list"]),
    (["show", "--examples"], ["warden show", "WARDEN_WARDENFILE"]),
    (["init", "--examples"], ["warden init shell", "--bare"]),
    (["notifiers", "--examples"], ["warden notifiers", "WARDEN_NOTIFY=false"]),
]


@pytest.mark.parametrize(
    "args,expected_keywords",
    EXAMPLES_COMMANDS,
    ids=[args[0] for args, _ in EXAMPLES_COMMANDS],
)
def test_examples_flag(
    cli_runner: CliRunner, args: list[str], expected_keywords: list[str]
) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "Examples for" in result.output
    for kw in expected_keywords:
        assert kw in result.output, f"Expected '{kw}' in examples output for {args}"


class TestExamplesInHelp:
    @pytest.mark.parametrize("name", ["start", "list", "show", "init", "notifiers"])
    def test_examples_listed_in_help(self, cli_runner: CliRunner, name: str) -> None:
        result = cli_runner.invoke(cli, [name, "--help"])
        assert result.exit_code == 0
        assert "--examples" in result.output

    def test_examples_is_eager(self, cli_runner: CliRunner) -> None:
        # Runs before the command body, so no session is started.
        result = cli_runner.invoke(cli, ["start", "--examples", "--fail-on-empty"])
        assert result.exit_code == 0
        assert "Examples for" in result.output

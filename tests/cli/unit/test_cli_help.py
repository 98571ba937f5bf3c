"""CLI smoke tests."""

from click.testing import CliRunner
from template_smoketest.cli import cli


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "generate-config" in result.output
    assert "run" in result.output
    assert "monitor" in result.output


def test_monitor_help_lists_monitor_options() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["monitor", "--help"])

    assert result.exit_code == 0
    assert "--listen-address" in result.output
    assert "--interval" in result.output
    assert "--keep-objects" in result.output
    assert "--timeout" in result.output

"""CLI smoke tests."""

from click.testing import CliRunner
from openapi_typegen.cli import cli


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "generate-config" in result.output
    assert "generate" in result.output
    assert "inspect" in result.output


def test_inspect_help_lists_schema_types() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["inspect", "--help"])

    assert result.exit_code == 0
    assert "[yaml|json|custom]" in result.output
    assert "--webhooks / --no-webhooks" in result.output

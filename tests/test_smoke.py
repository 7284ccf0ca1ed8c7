from __future__ import annotations

from typer.main import get_command
from typer.testing import CliRunner

from rulecheck import __version__
from rulecheck.main import app

runner = CliRunner()


def test_app_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_commands_accept_help() -> None:
    commands = getattr(get_command(app), "commands", {})
    assert {"check", "check-branch", "validate-config", "init"} <= set(commands)
    for name in commands:
        result = runner.invoke(app, [name, "--help"])
        assert result.exit_code == 0, f"{name} --help failed: {result.output}"


def test_module_entry_point_imports() -> None:
    from rulecheck.__main__ import main

    assert callable(main)

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console
from typer.testing import CliRunner

from rulecheck.governance.config import RuleConfig, default_rule_config_data, validate_rule_config


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolate_config(tmp_path: Path, monkeypatch: Any) -> Path:
    """Point settings to a temp path so tests don't touch user state."""
    cfg_path = tmp_path / "settings.toml"
    monkeypatch.setenv("RULECHECK_CONFIG", str(cfg_path))
    monkeypatch.delenv("RULECHECK_HOOK_TYPE", raising=False)
    return cfg_path


@pytest.fixture(autouse=True)
def capture_console(monkeypatch: Any) -> Console:
    """Use a wide, colorless Rich console so CLI output is easy to match."""
    test_console = Console(record=True, width=200, color_system=None)
    import rulecheck.commands.check as check_cmd
    import rulecheck.commands.init as init_cmd
    import rulecheck.core.console as core_console
    import rulecheck.main as rc_main

    for module in (core_console, rc_main, check_cmd, init_cmd):
        monkeypatch.setattr(module, "console", test_console)
    return test_console


@pytest.fixture
def raw_rules() -> dict[str, Any]:
    """A fresh, mutable copy of the bundled rule document."""
    return copy.deepcopy(default_rule_config_data())


@pytest.fixture
def rule_config(raw_rules: dict[str, Any]) -> RuleConfig:
    return validate_rule_config(raw_rules)


@pytest.fixture
def repo(tmp_path: Path, raw_rules: dict[str, Any]) -> Path:
    """A directory holding the default rule file, used as --repo."""
    root = tmp_path / "repo"
    root.mkdir()
    (root / ".rulecheck.json").write_text(json.dumps(raw_rules), encoding="utf-8")
    return root

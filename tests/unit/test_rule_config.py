"""Tests for rule configuration loading and validation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from rulecheck.core.result import ConfigError
from rulecheck.governance.config import (
    DEFAULT_ISSUE_PATTERN,
    DEFAULT_PROTECTED_FILES,
    DEFAULT_QUALITY_PATTERNS,
    QualityPattern,
    load_rule_config,
    validate_rule_config,
)


def _minimal() -> dict[str, Any]:
    return {
        "level1": {"secretPatterns": []},
        "level2": {"branchPatterns": ["^feature/"]},
        "level3": {"testCoverage": 0},
        "level4": {"maxFileLines": 100},
    }


class TestRequiredSections:
    """Every level must be present and be an object."""

    def test_missing_level3_names_level3(self) -> None:
        raw = _minimal()
        del raw["level3"]
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == "level3"
        assert "level3" in exc_info.value.message

    def test_lists_every_missing_section(self) -> None:
        raw = _minimal()
        del raw["level2"]
        del raw["level4"]
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert "level2, level4" in exc_info.value.message
        assert exc_info.value.field == "level2"

    def test_root_must_be_object(self) -> None:
        with pytest.raises(ConfigError):
            validate_rule_config(["level1"])

    def test_section_must_be_object(self) -> None:
        raw = _minimal()
        raw["level4"] = 400
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == "level4"


class TestPatterns:
    def test_unterminated_regex_names_index(self) -> None:
        raw = _minimal()
        raw["level1"]["secretPatterns"] = ["(unterminated"]
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == "level1.secretPatterns[0]"
        assert "level1.secretPatterns[0]" in exc_info.value.message

    def test_second_bad_pattern_reports_its_own_index(self) -> None:
        raw = _minimal()
        raw["level1"]["secretPatterns"] = ["AKIA[0-9A-Z]{16}", "[bad"]
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == "level1.secretPatterns[1]"

    def test_patterns_must_be_strings(self) -> None:
        raw = _minimal()
        raw["level1"]["secretPatterns"] = ["ok", 42]
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == "level1.secretPatterns[1]"

    def test_patterns_must_be_a_list(self) -> None:
        raw = _minimal()
        raw["level1"]["secretPatterns"] = "AKIA.*"
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == "level1.secretPatterns"

    def test_branch_patterns_cannot_be_empty(self) -> None:
        raw = _minimal()
        raw["level2"]["branchPatterns"] = []
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == "level2.branchPatterns"

    def test_invalid_issue_pattern(self) -> None:
        raw = _minimal()
        raw["level2"]["issuePattern"] = "#(\\d+"
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == "level2.issuePattern"


class TestThresholds:
    @pytest.mark.parametrize("value", [-1, 100.5, "80", True, None, float("nan")])
    def test_bad_coverage(self, value: Any) -> None:
        raw = _minimal()
        raw["level3"]["testCoverage"] = value
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == "level3.testCoverage"

    @pytest.mark.parametrize("value", [0, 50, 100, 72.5])
    def test_good_coverage(self, value: float) -> None:
        raw = _minimal()
        raw["level3"]["testCoverage"] = value
        assert validate_rule_config(raw).test_coverage == value

    @pytest.mark.parametrize("value", [0, -5, 1.5, "400", False])
    def test_bad_max_file_lines(self, value: Any) -> None:
        raw = _minimal()
        raw["level4"]["maxFileLines"] = value
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == "level4.maxFileLines"


class TestOptionalFields:
    def test_defaults_apply_when_absent(self) -> None:
        config = validate_rule_config(_minimal())
        assert config.protected_files == DEFAULT_PROTECTED_FILES
        assert config.issue_pattern == DEFAULT_ISSUE_PATTERN
        assert config.require_issue_reference is True

    def test_overrides_are_kept(self) -> None:
        raw = _minimal()
        raw["level1"]["protectedFiles"] = [".env", "secrets.json"]
        raw["level2"]["issuePattern"] = "JIRA-\\d+"
        raw["level2"]["requireIssueReference"] = False
        raw["level3"]["testFilePatterns"] = ["*_spec.rb"]
        config = validate_rule_config(raw)
        assert config.protected_files == (".env", "secrets.json")
        assert config.issue_regex.search("JIRA-12 fix")
        assert config.require_issue_reference is False
        assert config.test_file_patterns == ("*_spec.rb",)

    def test_require_issue_reference_must_be_bool(self) -> None:
        raw = _minimal()
        raw["level2"]["requireIssueReference"] = "yes"
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == "level2.requireIssueReference"


def test_bundled_template_is_valid(raw_rules: dict[str, Any]) -> None:
    config = validate_rule_config(raw_rules)
    assert len(config.secret_regexes) == len(raw_rules["level1"]["secretPatterns"])
    assert config.max_file_lines == 400
    assert config.test_coverage == 80
    assert [q.name for q in config.quality_patterns] == [q.name for q in DEFAULT_QUALITY_PATTERNS]


def test_compiled_patterns_are_cached(raw_rules: dict[str, Any]) -> None:
    config = validate_rule_config(raw_rules)
    assert config.secret_regexes is config.secret_regexes


class TestLoadRuleConfig:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_rule_config(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_rule_config(path)

    def test_loads_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.json"
        path.write_text(json.dumps(_minimal()), encoding="utf-8")
        config = load_rule_config(path)
        assert config.branch_patterns == ("^feature/",)


class TestQualityPatterns:
    def test_defaults_when_absent(self) -> None:
        config = validate_rule_config(_minimal())
        assert config.quality_patterns == DEFAULT_QUALITY_PATTERNS
        assert len(config.quality_regexes) == len(DEFAULT_QUALITY_PATTERNS)

    def test_custom_patterns(self) -> None:
        raw = _minimal()
        raw["level4"]["qualityPatterns"] = [{"name": "print-call", "pattern": r"\bprint\("}]
        config = validate_rule_config(raw)
        assert config.quality_patterns == (QualityPattern("print-call", r"\bprint\("),)

    def test_empty_list_disables(self) -> None:
        raw = _minimal()
        raw["level4"]["qualityPatterns"] = []
        assert validate_rule_config(raw).quality_patterns == ()

    @pytest.mark.parametrize(
        ("entry", "field"),
        [
            ("TODO:", "level4.qualityPatterns[0]"),
            ({"pattern": "x"}, "level4.qualityPatterns[0].name"),
            ({"name": "n", "pattern": 3}, "level4.qualityPatterns[0].pattern"),
            ({"name": "n", "pattern": "(open"}, "level4.qualityPatterns[0].pattern"),
        ],
    )
    def test_bad_entries(self, entry: Any, field: str) -> None:
        raw = _minimal()
        raw["level4"]["qualityPatterns"] = [entry]
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == field

    def test_must_be_list(self) -> None:
        raw = _minimal()
        raw["level4"]["qualityPatterns"] = {"name": "n"}
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_config(raw)
        assert exc_info.value.field == "level4.qualityPatterns"

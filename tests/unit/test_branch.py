"""Tests for branch name validation."""

from __future__ import annotations

import pytest

from rulecheck.governance.branch import (
    BranchStatus,
    branch_violation,
    validate_branch,
)
from rulecheck.governance.config import RuleConfig
from rulecheck.governance.types import BRANCH_RULE, Severity


@pytest.mark.parametrize(
    ("name", "status"),
    [
        ("feature/add-login", BranchStatus.VALID),
        ("Feature/add-login", BranchStatus.INVALID),
        ("feature/", BranchStatus.INVALID),
        ("main", BranchStatus.SKIP),
        ("master", BranchStatus.SKIP),
        ("fix/issue-42", BranchStatus.VALID),
        ("chore/bump-deps", BranchStatus.VALID),
    ],
)
def test_branch_table(rule_config: RuleConfig, name: str, status: BranchStatus) -> None:
    assert validate_branch(name, rule_config.branch_regexes).status is status


class TestReasons:
    """Rejected names explain the first convention they break."""

    @pytest.mark.parametrize(
        ("name", "fragment"),
        [
            ("", "empty"),
            ("feature/add login", "spaces"),
            ("Feature/add-login", "lowercase"),
            ("add-login", "missing type prefix"),
            ("feat/add-login", "unknown type prefix 'feat'"),
            ("feature/", "missing description"),
            ("feature/" + "a" * 60, "limit is 50"),
            ("feature/add--login", "kebab-case"),
            ("feature/add_login", "kebab-case"),
        ],
    )
    def test_reason(self, rule_config: RuleConfig, name: str, fragment: str) -> None:
        result = validate_branch(name, rule_config.branch_regexes)
        assert result.status is BranchStatus.INVALID
        assert fragment in result.reason
        assert not result.ok


def test_custom_main_branches(rule_config: RuleConfig) -> None:
    result = validate_branch("trunk", rule_config.branch_regexes, main_branches={"trunk"})
    assert result.status is BranchStatus.SKIP
    assert validate_branch("main", rule_config.branch_regexes, main_branches={"trunk"}).status is (
        BranchStatus.INVALID
    )


def test_violation_only_for_invalid(rule_config: RuleConfig) -> None:
    assert branch_violation(validate_branch("main", rule_config.branch_regexes)) is None
    assert branch_violation(validate_branch("fix/typo", rule_config.branch_regexes)) is None

    violation = branch_violation(validate_branch("Bad_Branch", rule_config.branch_regexes))
    assert violation is not None
    assert violation.rule == BRANCH_RULE
    assert violation.severity is Severity.MANDATORY
    assert violation.evidence == ("Bad_Branch",)

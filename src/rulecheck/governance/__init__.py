"""
Rule compliance checking for rulecheck.

This package validates the four-level rule configuration, scans changed
files and commit metadata for violations, and turns them into a score and
a report.

Levels and severities:
- level1 security  -> BLOCKER      (secrets, protected env files)
- level2 workflow  -> MANDATORY    (branch naming, issue references)
- level3 quality   -> MANDATORY    (tests accompany source changes)
- level4 patterns  -> RECOMMENDED  (file size, quality patterns)

Scoring starts at 10 and subtracts 3/2/1 per violation by severity.
"""

from rulecheck.governance.branch import (
    MAIN_BRANCHES,
    BranchCheck,
    BranchStatus,
    branch_violation,
    validate_branch,
)
from rulecheck.governance.checks import CHECK_REGISTRY, CheckContext, CheckRegistry, RuleCheck
from rulecheck.governance.compliance import (
    CheckResult,
    build_context,
    check_paths,
    load_changed_files,
    run_checks,
)
from rulecheck.governance.config import (
    RuleConfig,
    default_rule_config_data,
    load_rule_config,
    validate_rule_config,
)
from rulecheck.governance.report import render, render_json
from rulecheck.governance.scoring import count_by_severity, score
from rulecheck.governance.secret_scanner import PLACEHOLDER_VALUES, check_for_secrets, scan
from rulecheck.governance.types import ComplianceScore, Severity, Violation

__all__ = [
    "CHECK_REGISTRY",
    "MAIN_BRANCHES",
    "PLACEHOLDER_VALUES",
    "BranchCheck",
    "BranchStatus",
    "CheckContext",
    "CheckRegistry",
    "CheckResult",
    "ComplianceScore",
    "RuleCheck",
    "RuleConfig",
    "Severity",
    "Violation",
    "branch_violation",
    "build_context",
    "check_for_secrets",
    "check_paths",
    "count_by_severity",
    "default_rule_config_data",
    "load_changed_files",
    "load_rule_config",
    "render",
    "render_json",
    "run_checks",
    "scan",
    "score",
    "validate_branch",
    "validate_rule_config",
]

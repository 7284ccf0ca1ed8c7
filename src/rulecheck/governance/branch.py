"""Branch name validation.

A branch is valid when it matches at least one level2.branchPatterns entry.
Long-lived branches (main, master, develop, ...) are skipped entirely.
When a name is rejected, the reason names the first convention it breaks
so hook output is actionable.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from enum import Enum

from rulecheck.governance.types import BRANCH_RULE, Severity, Violation

MAIN_BRANCHES: frozenset[str] = frozenset(
    {"main", "master", "develop", "staging", "production", "preview"}
)
BRANCH_TYPES: tuple[str, ...] = (
    "feature",
    "fix",
    "bugfix",
    "hotfix",
    "docs",
    "refactor",
    "test",
    "chore",
)
MAX_BRANCH_LENGTH = 50

_DESCRIPTION = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")


class BranchStatus(Enum):
    SKIP = "skip"
    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class BranchCheck:
    name: str
    status: BranchStatus
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not BranchStatus.INVALID


def _diagnose(name: str) -> str:
    """Explain which naming convention a rejected branch breaks."""
    if not name:
        return "branch name is empty"
    if any(ch.isspace() for ch in name):
        return "branch name must not contain spaces"
    if name != name.lower():
        return "branch name must be lowercase"
    if "/" not in name:
        return f"missing type prefix; use <type>/<description> with type one of {', '.join(BRANCH_TYPES)}"
    prefix, _, description = name.partition("/")
    if prefix not in BRANCH_TYPES:
        return f"unknown type prefix '{prefix}'; expected one of {', '.join(BRANCH_TYPES)}"
    if not description:
        return "missing description after '/'"
    if len(name) > MAX_BRANCH_LENGTH:
        return f"branch name is {len(name)} characters; the limit is {MAX_BRANCH_LENGTH}"
    if not _DESCRIPTION.fullmatch(description):
        return "description must be lowercase kebab-case (a-z, 0-9 and single '-' separators)"
    return "branch name does not match any configured branch pattern"


def validate_branch(
    name: str,
    patterns: Sequence[re.Pattern[str]],
    main_branches: Collection[str] = MAIN_BRANCHES,
) -> BranchCheck:
    """Classify a branch name as skip, valid or invalid."""
    if name in main_branches:
        return BranchCheck(name=name, status=BranchStatus.SKIP, reason="main branch")

    if name and any(pattern.search(name) for pattern in patterns):
        return BranchCheck(name=name, status=BranchStatus.VALID)

    return BranchCheck(name=name, status=BranchStatus.INVALID, reason=_diagnose(name))


def branch_violation(check: BranchCheck) -> Violation | None:
    """Convert an invalid branch result into a workflow violation."""
    if check.status is not BranchStatus.INVALID:
        return None
    return Violation(
        rule=BRANCH_RULE,
        severity=Severity.for_level(2),
        message=f"Branch name '{check.name}' does not follow convention: {check.reason}",
        evidence=(check.name,),
        suggestion="Rename the branch, e.g. `git branch -m feature/short-description`.",
    )


__all__ = [
    "BRANCH_TYPES",
    "MAIN_BRANCHES",
    "MAX_BRANCH_LENGTH",
    "BranchCheck",
    "BranchStatus",
    "branch_violation",
    "validate_branch",
]

"""Types and data structures for rule compliance checking."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Severity(Enum):
    """Severity tiers, ordered from most to least severe."""

    BLOCKER = "BLOCKER"  # level 1: security
    MANDATORY = "MANDATORY"  # levels 2 and 3: workflow, quality
    RECOMMENDED = "RECOMMENDED"  # level 4: patterns

    @classmethod
    def for_level(cls, level: int) -> Severity:
        if level == 1:
            return cls.BLOCKER
        if level in (2, 3):
            return cls.MANDATORY
        if level == 4:
            return cls.RECOMMENDED
        raise ValueError(f"Unknown rule level: {level}")


SEVERITY_ORDER: tuple[Severity, ...] = (
    Severity.BLOCKER,
    Severity.MANDATORY,
    Severity.RECOMMENDED,
)

# Rule identifiers
PROTECTED_FILE_RULE = "protected-env-file"
SECRET_RULE = "secret-detection"
BRANCH_RULE = "branch-naming"
ISSUE_RULE = "issue-reference"
TEST_COVERAGE_RULE = "test-coverage"
FILE_SIZE_RULE = "file-size"
QUALITY_PATTERN_RULE = "quality-pattern"
UNREADABLE_FILE_RULE = "unreadable-file"


@dataclass(frozen=True)
class Violation:
    """A single detected non-compliance instance."""

    rule: str
    severity: Severity
    message: str
    evidence: tuple[str, ...] = ()
    file: Path | None = None
    line: int | None = None  # 1-based
    suggestion: str = ""

    @property
    def location(self) -> str:
        if self.file is None:
            return ""
        if self.line is None:
            return str(self.file)
        return f"{self.file}:{self.line}"


@dataclass(frozen=True)
class ComplianceScore:
    """Score of one check run; derived, never stored."""

    value: int
    merge_allowed: bool
    blockers: int = 0
    mandatory: int = 0
    recommended: int = 0


__all__ = [
    "BRANCH_RULE",
    "FILE_SIZE_RULE",
    "ISSUE_RULE",
    "PROTECTED_FILE_RULE",
    "QUALITY_PATTERN_RULE",
    "SECRET_RULE",
    "SEVERITY_ORDER",
    "TEST_COVERAGE_RULE",
    "UNREADABLE_FILE_RULE",
    "ComplianceScore",
    "Severity",
    "Violation",
]

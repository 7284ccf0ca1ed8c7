"""Rule checks and the registry that holds them.

Every check is a plain function over a CheckContext (the changed files and
any branch or commit message supplied by the caller) and the RuleConfig.
Checks are registered explicitly as RuleCheck values; each one carries its
rule id, level and callable, so there is nothing to discover at runtime
and nothing left unimplemented.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path

from rulecheck.governance.branch import MAIN_BRANCHES, branch_violation, validate_branch
from rulecheck.governance.config import RuleConfig
from rulecheck.governance.secret_scanner import (
    PLACEHOLDER_VALUES,
    check_for_secrets,
    scan,
    split_lines,
)
from rulecheck.governance.types import (
    BRANCH_RULE,
    FILE_SIZE_RULE,
    ISSUE_RULE,
    PROTECTED_FILE_RULE,
    QUALITY_PATTERN_RULE,
    SECRET_RULE,
    TEST_COVERAGE_RULE,
    Severity,
    Violation,
)

SOURCE_SUFFIXES: frozenset[str] = frozenset(
    {
        ".py",
        ".js",
        ".jsx",
        ".ts",
        ".tsx",
        ".mjs",
        ".cjs",
        ".go",
        ".rb",
        ".java",
        ".kt",
        ".php",
        ".rs",
        ".cs",
        ".swift",
    }
)


@dataclass(frozen=True)
class ChangedFile:
    """A changed file whose text content was read successfully."""

    path: Path
    content: str


@dataclass(frozen=True)
class CheckContext:
    """Inputs for one check run, gathered by the caller."""

    files: tuple[ChangedFile, ...] = ()
    paths: tuple[Path, ...] = ()  # every changed path, readable or not
    branch: str | None = None
    message: str | None = None
    main_branches: frozenset[str] = MAIN_BRANCHES
    placeholders: frozenset[str] = PLACEHOLDER_VALUES


CheckFn = Callable[[CheckContext, RuleConfig], list[Violation]]


@dataclass(frozen=True)
class RuleCheck:
    rule: str
    level: int
    description: str
    run: CheckFn

    @property
    def severity(self) -> Severity:
        return Severity.for_level(self.level)


# ---------------------------------------------------------------------------
# Level 1: security
# ---------------------------------------------------------------------------


def check_protected_files(ctx: CheckContext, config: RuleConfig) -> list[Violation]:
    protected = set(config.protected_files)
    hits = [path for path in ctx.paths if path.name in protected]
    if not hits:
        return []
    return [
        Violation(
            rule=PROTECTED_FILE_RULE,
            severity=Severity.for_level(1),
            message="Environment files must not be committed",
            evidence=tuple(str(path) for path in hits),
            suggestion="Unstage the file, add it to .gitignore and commit a .env.example instead.",
        )
    ]


def check_secrets(ctx: CheckContext, config: RuleConfig) -> list[Violation]:
    violations: list[Violation] = []
    for changed in ctx.files:
        violations.extend(check_for_secrets(changed.content, changed.path, config, ctx.placeholders))
    return violations


# ---------------------------------------------------------------------------
# Level 2: workflow
# ---------------------------------------------------------------------------


def check_branch_name(ctx: CheckContext, config: RuleConfig) -> list[Violation]:
    if ctx.branch is None:
        return []
    result = validate_branch(ctx.branch, config.branch_regexes, ctx.main_branches)
    violation = branch_violation(result)
    return [violation] if violation else []


def check_issue_reference(ctx: CheckContext, config: RuleConfig) -> list[Violation]:
    if not config.require_issue_reference or ctx.message is None:
        return []
    if config.issue_regex.search(ctx.message):
        return []
    first_line = ctx.message.strip().splitlines()[0] if ctx.message.strip() else ""
    return [
        Violation(
            rule=ISSUE_RULE,
            severity=Severity.for_level(2),
            message="Commit message or PR title does not reference an issue",
            evidence=(first_line,) if first_line else (),
            suggestion=f"Reference the issue (pattern {config.issue_pattern}), e.g. 'Fix login bug (#123)'.",
        )
    ]


# ---------------------------------------------------------------------------
# Level 3: quality
# ---------------------------------------------------------------------------


def is_test_file(path: Path, patterns: Sequence[str]) -> bool:
    posix = path.as_posix()
    return any(
        fnmatch(path.name, pattern) or fnmatch(posix, pattern) or fnmatch(posix, f"*/{pattern}")
        for pattern in patterns
    )


def check_test_coverage(ctx: CheckContext, config: RuleConfig) -> list[Violation]:
    """Estimate coverage of the change as changed tests per changed source file."""
    if config.test_coverage <= 0:
        return []

    tests = [p for p in ctx.paths if is_test_file(p, config.test_file_patterns)]
    sources = [
        p
        for p in ctx.paths
        if p.suffix in SOURCE_SUFFIXES and not is_test_file(p, config.test_file_patterns)
    ]
    if not sources:
        return []

    coverage = math.floor(len(tests) * 100 / len(sources) + 0.5)
    if coverage >= config.test_coverage:
        return []

    untested = [
        str(src) for src in sources if not any(src.stem in test.name for test in tests)
    ]
    return [
        Violation(
            rule=TEST_COVERAGE_RULE,
            severity=Severity.for_level(3),
            message=(
                f"Change includes {len(tests)} test file(s) for {len(sources)} source file(s) "
                f"({coverage}%), below the required {config.test_coverage:g}%"
            ),
            evidence=tuple(untested),
            suggestion="Add or update tests alongside the source files in this change.",
        )
    ]


# ---------------------------------------------------------------------------
# Level 4: patterns
# ---------------------------------------------------------------------------


def check_file_size(ctx: CheckContext, config: RuleConfig) -> list[Violation]:
    violations: list[Violation] = []
    for changed in ctx.files:
        line_count = len(split_lines(changed.content))
        if line_count > config.max_file_lines:
            violations.append(
                Violation(
                    rule=FILE_SIZE_RULE,
                    severity=Severity.for_level(4),
                    message=(
                        f"File has {line_count} lines; the recommended maximum is "
                        f"{config.max_file_lines}"
                    ),
                    evidence=(f"{line_count} lines",),
                    file=changed.path,
                    suggestion="Consider splitting the file into smaller, focused modules.",
                )
            )
    return violations


def check_quality_patterns(ctx: CheckContext, config: RuleConfig) -> list[Violation]:
    """Flag debugging leftovers and markers in changed source files."""
    names = [q.name for q in config.quality_patterns]
    violations: list[Violation] = []
    for changed in ctx.files:
        if changed.path.suffix not in SOURCE_SUFFIXES:
            continue
        violations.extend(
            scan(
                changed.content,
                config.quality_regexes,
                (),
                file=changed.path,
                rule=QUALITY_PATTERN_RULE,
                severity=Severity.for_level(4),
                describe=lambda index: f"Found {names[index]} (level4.qualityPatterns[{index}])",
                suggestion="Remove it before merging, or track the work in an issue.",
            )
        )
    return violations


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class CheckRegistry:
    """Rule checks keyed by rule id, iterated in level order."""

    def __init__(self, checks: Sequence[RuleCheck] = ()) -> None:
        self._checks: dict[str, RuleCheck] = {}
        for check in checks:
            self.register(check)

    def register(self, check: RuleCheck) -> None:
        if check.rule in self._checks:
            raise ValueError(f"Duplicate rule check: {check.rule}")
        Severity.for_level(check.level)
        self._checks[check.rule] = check

    def get(self, rule: str) -> RuleCheck:
        return self._checks[rule]

    def __contains__(self, rule: object) -> bool:
        return rule in self._checks

    def __iter__(self) -> Iterator[RuleCheck]:
        # sorted() is stable, so registration order holds within a level
        return iter(sorted(self._checks.values(), key=lambda check: check.level))

    def __len__(self) -> int:
        return len(self._checks)


def default_checks() -> CheckRegistry:
    return CheckRegistry(
        [
            RuleCheck(PROTECTED_FILE_RULE, 1, "No environment files in the change", check_protected_files),
            RuleCheck(SECRET_RULE, 1, "No secrets in changed content", check_secrets),
            RuleCheck(BRANCH_RULE, 2, "Branch follows the naming convention", check_branch_name),
            RuleCheck(ISSUE_RULE, 2, "Commit message references an issue", check_issue_reference),
            RuleCheck(TEST_COVERAGE_RULE, 3, "Source changes come with tests", check_test_coverage),
            RuleCheck(FILE_SIZE_RULE, 4, "Files stay under the size limit", check_file_size),
            RuleCheck(
                QUALITY_PATTERN_RULE, 4, "No debugging leftovers or markers", check_quality_patterns
            ),
        ]
    )


CHECK_REGISTRY = default_checks()


__all__ = [
    "CHECK_REGISTRY",
    "SOURCE_SUFFIXES",
    "ChangedFile",
    "CheckContext",
    "CheckRegistry",
    "RuleCheck",
    "check_branch_name",
    "check_file_size",
    "check_issue_reference",
    "check_protected_files",
    "check_quality_patterns",
    "check_secrets",
    "check_test_coverage",
    "default_checks",
    "is_test_file",
]

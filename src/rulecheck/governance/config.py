"""Rule configuration loading and validation.

The rule configuration is a JSON document with four severity levels:

    level1  security   secretPatterns (regex list), protectedFiles
    level2  workflow   branchPatterns (regex list), issuePattern, requireIssueReference
    level3  quality    testCoverage (0-100), testFilePatterns
    level4  patterns   maxFileLines (positive integer), qualityPatterns

Validation is fail-fast: the first failing check raises ConfigError naming
the offending field and nothing is partially applied. The configuration is
read fresh on every invocation and is immutable for the rest of the run.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Any

from rulecheck.core.result import ConfigError

REQUIRED_LEVELS: tuple[str, ...] = ("level1", "level2", "level3", "level4")

DEFAULT_PROTECTED_FILES: tuple[str, ...] = (
    ".env",
    ".env.local",
    ".env.production",
    ".env.development",
)
DEFAULT_ISSUE_PATTERN = r"#\d+"
DEFAULT_TEST_FILE_PATTERNS: tuple[str, ...] = (
    "*.test.*",
    "*.spec.*",
    "test_*.py",
    "*_test.py",
    "*_test.go",
    "tests/*",
    "test/*",
    "__tests__/*",
)


@dataclass(frozen=True)
class QualityPattern:
    """A named level4 pattern flagged as a recommended fix."""

    name: str
    pattern: str


DEFAULT_QUALITY_PATTERNS: tuple[QualityPattern, ...] = (
    QualityPattern("console-statement", r"console\.(?:log|debug|info|warn|error)\s*\("),
    QualityPattern("debugger-statement", r"\bdebugger;|\bbreakpoint\(\)"),
    QualityPattern("todo-comment", r"(?i)\b(?:TODO|FIXME|HACK|XXX):"),
    QualityPattern("focused-test", r"\.(?:only|skip)\s*\("),
)


@dataclass(frozen=True)
class RuleConfig:
    """Validated rule configuration.

    Regex sources are kept verbatim for reporting; compiled forms are built
    once per instance and shared by every check in the run.
    """

    secret_patterns: tuple[str, ...]
    branch_patterns: tuple[str, ...]
    test_coverage: float
    max_file_lines: int
    protected_files: tuple[str, ...] = DEFAULT_PROTECTED_FILES
    issue_pattern: str = DEFAULT_ISSUE_PATTERN
    require_issue_reference: bool = True
    test_file_patterns: tuple[str, ...] = DEFAULT_TEST_FILE_PATTERNS
    quality_patterns: tuple[QualityPattern, ...] = DEFAULT_QUALITY_PATTERNS

    @cached_property
    def secret_regexes(self) -> tuple[re.Pattern[str], ...]:
        return tuple(re.compile(p) for p in self.secret_patterns)

    @cached_property
    def branch_regexes(self) -> tuple[re.Pattern[str], ...]:
        return tuple(re.compile(p) for p in self.branch_patterns)

    @cached_property
    def quality_regexes(self) -> tuple[re.Pattern[str], ...]:
        return tuple(re.compile(q.pattern) for q in self.quality_patterns)

    @cached_property
    def issue_regex(self) -> re.Pattern[str]:
        return re.compile(self.issue_pattern)


def _templates_dir() -> Path:
    return Path(__file__).parent.parent / "templates"


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = raw[name]
    if not isinstance(value, Mapping):
        raise ConfigError(f"{name} must be an object, got {type(value).__name__}", field=name)
    return value


def _string_list(section: Mapping[str, Any], field: str, key: str) -> tuple[str, ...]:
    value = section.get(key)
    if not isinstance(value, list):
        raise ConfigError(f"{field} must be an array of strings", field=field)
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise ConfigError(
                f"{field}[{index}] must be a string, got {type(item).__name__}",
                field=f"{field}[{index}]",
            )
    return tuple(value)


def _compiled_list(section: Mapping[str, Any], field: str, key: str) -> tuple[str, ...]:
    patterns = _string_list(section, field, key)
    for index, pattern in enumerate(patterns):
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ConfigError(
                f"Invalid regex pattern at {field}[{index}]: {pattern!r} ({exc})",
                field=f"{field}[{index}]",
            ) from exc
    return patterns


def _quality_patterns(section: Mapping[str, Any]) -> tuple[QualityPattern, ...]:
    field = "level4.qualityPatterns"
    value = section.get("qualityPatterns")
    if not isinstance(value, list):
        raise ConfigError(f"{field} must be an array of objects", field=field)
    patterns: list[QualityPattern] = []
    for index, item in enumerate(value):
        where = f"{field}[{index}]"
        if not isinstance(item, Mapping):
            raise ConfigError(f"{where} must be an object with name and pattern", field=where)
        name, pattern = item.get("name"), item.get("pattern")
        if not isinstance(name, str) or not name:
            raise ConfigError(f"{where}.name must be a non-empty string", field=f"{where}.name")
        if not isinstance(pattern, str):
            raise ConfigError(f"{where}.pattern must be a string", field=f"{where}.pattern")
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ConfigError(
                f"Invalid regex pattern at {where}.pattern: {pattern!r} ({exc})",
                field=f"{where}.pattern",
            ) from exc
        patterns.append(QualityPattern(name=name, pattern=pattern))
    return tuple(patterns)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_rule_config(raw: Any) -> RuleConfig:
    """Type-check a parsed rule document and build a RuleConfig.

    Raises:
        ConfigError: on the first failing check, naming the field.
    """
    if not isinstance(raw, Mapping):
        raise ConfigError("Rule configuration root must be a JSON object")

    missing = [name for name in REQUIRED_LEVELS if name not in raw]
    if missing:
        raise ConfigError(
            f"Missing required section(s): {', '.join(missing)}",
            field=missing[0],
        )

    level1 = _section(raw, "level1")
    level2 = _section(raw, "level2")
    level3 = _section(raw, "level3")
    level4 = _section(raw, "level4")

    secret_patterns = _compiled_list(level1, "level1.secretPatterns", "secretPatterns")

    branch_patterns = _compiled_list(level2, "level2.branchPatterns", "branchPatterns")
    if not branch_patterns:
        raise ConfigError(
            "level2.branchPatterns must contain at least one pattern",
            field="level2.branchPatterns",
        )

    coverage = level3.get("testCoverage")
    if not _is_number(coverage) or math.isnan(coverage) or not 0 <= coverage <= 100:
        raise ConfigError(
            f"level3.testCoverage must be a number between 0 and 100, got {coverage!r}",
            field="level3.testCoverage",
        )

    max_lines = level4.get("maxFileLines")
    if not isinstance(max_lines, int) or isinstance(max_lines, bool) or max_lines < 1:
        raise ConfigError(
            f"level4.maxFileLines must be a positive integer, got {max_lines!r}",
            field="level4.maxFileLines",
        )

    # Optional fields: validated only when present.
    protected_files = DEFAULT_PROTECTED_FILES
    if "protectedFiles" in level1:
        protected_files = _string_list(level1, "level1.protectedFiles", "protectedFiles")

    issue_pattern = DEFAULT_ISSUE_PATTERN
    if "issuePattern" in level2:
        value = level2["issuePattern"]
        if not isinstance(value, str):
            raise ConfigError("level2.issuePattern must be a string", field="level2.issuePattern")
        try:
            re.compile(value)
        except re.error as exc:
            raise ConfigError(
                f"Invalid regex pattern at level2.issuePattern: {value!r} ({exc})",
                field="level2.issuePattern",
            ) from exc
        issue_pattern = value

    require_issue = level2.get("requireIssueReference", True)
    if not isinstance(require_issue, bool):
        raise ConfigError(
            "level2.requireIssueReference must be true or false",
            field="level2.requireIssueReference",
        )

    test_file_patterns = DEFAULT_TEST_FILE_PATTERNS
    if "testFilePatterns" in level3:
        test_file_patterns = _string_list(level3, "level3.testFilePatterns", "testFilePatterns")

    quality_patterns = DEFAULT_QUALITY_PATTERNS
    if "qualityPatterns" in level4:
        quality_patterns = _quality_patterns(level4)

    return RuleConfig(
        secret_patterns=secret_patterns,
        branch_patterns=branch_patterns,
        test_coverage=coverage,
        max_file_lines=max_lines,
        protected_files=protected_files,
        issue_pattern=issue_pattern,
        require_issue_reference=require_issue,
        test_file_patterns=test_file_patterns,
        quality_patterns=quality_patterns,
    )


def load_rule_config(path: Path) -> RuleConfig:
    """Read and validate a rule configuration file."""
    if not path.is_file():
        raise ConfigError(f"Rule configuration not found: {path}", context={"path": str(path)})

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc

    return validate_rule_config(raw)


def default_rule_config_data() -> dict[str, Any]:
    """Return the bundled default rule document."""
    data: dict[str, Any] = json.loads(
        (_templates_dir() / "rules.json").read_text(encoding="utf-8")
    )
    return data


__all__ = [
    "DEFAULT_ISSUE_PATTERN",
    "DEFAULT_PROTECTED_FILES",
    "DEFAULT_QUALITY_PATTERNS",
    "DEFAULT_TEST_FILE_PATTERNS",
    "REQUIRED_LEVELS",
    "QualityPattern",
    "RuleConfig",
    "default_rule_config_data",
    "load_rule_config",
    "validate_rule_config",
]

"""Secret detection over file content.

Patterns come from level1.secretPatterns and are applied line by line.
Matches whose value is a known placeholder (``test``, ``mock``,
``example``, or a value containing one of them as a whole token) are
ignored so fixtures and documentation do not block commits.

Ordering is part of the contract: lines top to bottom, then patterns in
configuration order, then matches left to right.
Only "\n" starts a new line. The level4 quality check reuses ``scan``
with its own rule, severity and message.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Collection, Sequence
from pathlib import Path

from rulecheck.governance.config import RuleConfig
from rulecheck.governance.types import SECRET_RULE, Severity, Violation

PLACEHOLDER_VALUES: frozenset[str] = frozenset({"test", "mock", "example"})

_MAX_EVIDENCE_CHARS = 100
_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


def _matched_value(match: re.Match[str]) -> str:
    """Pick the part of a match that holds the secret-like value.

    Named group ``value`` wins, then the last group that participated,
    then the whole match.
    """
    if "value" in match.re.groupindex:
        value = match.group("value")
        if value is not None:
            return value
    for group in reversed(match.groups()):
        if group is not None:
            return group
    return match.group(0)


def is_placeholder(value: str, ignore: Collection[str] = PLACEHOLDER_VALUES) -> bool:
    """Return True when value is, or contains as a token, a placeholder."""
    lowered = value.strip().lower()
    if lowered in ignore:
        return True
    return any(token in ignore for token in _TOKEN_SPLIT.split(lowered) if token)


def split_lines(content: str) -> list[str]:
    """Split content on newlines only.

    Form feeds, vertical tabs and Unicode line separators stay inside
    their line. One trailing empty element (from a final newline) is
    dropped and a trailing carriage return is stripped from each line.
    """
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _secret_message(index: int) -> str:
    return f"Potential secret matched level1.secretPatterns[{index}]"


_SECRET_SUGGESTION = (
    "Remove the secret, rotate the credential, and load it from "
    "the environment or a secret manager."
)


def scan(
    content: str,
    patterns: Sequence[re.Pattern[str]],
    ignore: Collection[str] = PLACEHOLDER_VALUES,
    *,
    file: Path | None = None,
    rule: str = SECRET_RULE,
    severity: Severity = Severity.BLOCKER,
    describe: Callable[[int], str] = _secret_message,
    suggestion: str = _SECRET_SUGGESTION,
) -> list[Violation]:
    """Apply patterns to content and return one violation per real match.

    describe maps a pattern's index to the violation message. Each call
    builds its own match iterators, so repeated calls on the same or
    different content are independent.
    """
    ignore_set = frozenset(item.lower() for item in ignore)
    violations: list[Violation] = []

    for line_no, line in enumerate(split_lines(content), start=1):
        for index, pattern in enumerate(patterns):
            for match in pattern.finditer(line):
                if not match.group(0):
                    continue
                if ignore_set and is_placeholder(_matched_value(match), ignore_set):
                    continue
                violations.append(
                    Violation(
                        rule=rule,
                        severity=severity,
                        message=describe(index),
                        evidence=(match.group(0)[:_MAX_EVIDENCE_CHARS],),
                        file=file,
                        line=line_no,
                        suggestion=suggestion,
                    )
                )

    return violations


def check_for_secrets(
    content: str,
    file_path: Path,
    config: RuleConfig,
    ignore: Collection[str] = PLACEHOLDER_VALUES,
) -> list[Violation]:
    """Scan content with the configured level1 secret patterns."""
    return scan(content, config.secret_regexes, ignore, file=file_path)


__all__ = [
    "PLACEHOLDER_VALUES",
    "check_for_secrets",
    "is_placeholder",
    "scan",
    "split_lines",
]

"""Compliance scoring.

Each violation costs points by severity: BLOCKER 3, MANDATORY 2,
RECOMMENDED 1, starting from a maximum of 10. The value has no floor.
Merging is allowed only with no blockers, no mandatory violations and a
score of at least 6.
"""

from __future__ import annotations

from collections.abc import Iterable

from rulecheck.governance.types import ComplianceScore, Severity, Violation

MAX_SCORE = 10
MERGE_THRESHOLD = 6
PENALTIES: dict[Severity, int] = {
    Severity.BLOCKER: 3,
    Severity.MANDATORY: 2,
    Severity.RECOMMENDED: 1,
}


def count_by_severity(violations: Iterable[Violation]) -> dict[Severity, int]:
    counts = dict.fromkeys(Severity, 0)
    for violation in violations:
        counts[violation.severity] += 1
    return counts


def score(violations: Iterable[Violation]) -> ComplianceScore:
    """Aggregate violations into a score and a merge decision."""
    counts = count_by_severity(violations)
    value = MAX_SCORE - sum(PENALTIES[severity] * count for severity, count in counts.items())
    blockers = counts[Severity.BLOCKER]
    mandatory = counts[Severity.MANDATORY]
    return ComplianceScore(
        value=value,
        merge_allowed=blockers == 0 and mandatory == 0 and value >= MERGE_THRESHOLD,
        blockers=blockers,
        mandatory=mandatory,
        recommended=counts[Severity.RECOMMENDED],
    )


__all__ = [
    "MAX_SCORE",
    "MERGE_THRESHOLD",
    "PENALTIES",
    "count_by_severity",
    "score",
]

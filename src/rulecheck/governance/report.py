"""Report rendering for check results.

Pure formatting: callers decide where the text goes.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from rulecheck.core.result import RenderError
from rulecheck.governance.scoring import MAX_SCORE
from rulecheck.governance.types import SEVERITY_ORDER, ComplianceScore, Severity, Violation

_GROUP_TITLES: dict[Severity, str] = {
    Severity.BLOCKER: "BLOCKER (must fix, blocks merge)",
    Severity.MANDATORY: "MANDATORY (must fix before merge)",
    Severity.RECOMMENDED: "RECOMMENDED (should fix)",
}


def _group(violations: Sequence[Violation]) -> dict[Severity, list[Violation]]:
    groups: dict[Severity, list[Violation]] = {severity: [] for severity in SEVERITY_ORDER}
    for violation in violations:
        if not isinstance(violation.severity, Severity):
            raise RenderError(
                f"Violation for rule '{violation.rule}' has unknown severity {violation.severity!r}",
                context={"rule": violation.rule},
            )
        groups[violation.severity].append(violation)
    return groups


def render(violations: Sequence[Violation], score: ComplianceScore) -> str:
    """Render violations and score as a plain-text summary.

    Raises:
        RenderError: if a violation carries an unknown severity.
    """
    groups = _group(violations)

    verdict = "PASS (merge allowed)" if score.merge_allowed else "BLOCKED"
    lines = [
        f"Compliance score: {score.value}/{MAX_SCORE}",
        f"Verdict: {verdict}",
        (
            f"Violations: {score.blockers} blocker, {score.mandatory} mandatory, "
            f"{score.recommended} recommended"
        ),
    ]

    if not violations:
        lines.extend(["", "No violations found."])
        return "\n".join(lines)

    for severity in SEVERITY_ORDER:
        group = groups[severity]
        if not group:
            continue
        lines.append("")
        lines.append(_GROUP_TITLES[severity])
        for v in group:
            location = f" ({v.location})" if v.location else ""
            lines.append(f"  [{v.rule}] {v.message}{location}")
            for item in v.evidence:
                lines.append(f"      - {item}")
            if v.suggestion:
                lines.append(f"    Fix: {v.suggestion}")

    return "\n".join(lines)


def render_json(violations: Sequence[Violation], score: ComplianceScore) -> str:
    """Render violations and score as a JSON document."""
    _group(violations)
    payload = {
        "score": score.value,
        "maxScore": MAX_SCORE,
        "mergeAllowed": score.merge_allowed,
        "counts": {
            Severity.BLOCKER.value: score.blockers,
            Severity.MANDATORY.value: score.mandatory,
            Severity.RECOMMENDED.value: score.recommended,
        },
        "violations": [
            {
                "rule": v.rule,
                "severity": v.severity.value,
                "message": v.message,
                "evidence": list(v.evidence),
                "file": str(v.file) if v.file is not None else None,
                "line": v.line,
                "suggestion": v.suggestion,
            }
            for v in violations
        ],
    }
    return json.dumps(payload, indent=2)


__all__ = ["render", "render_json"]

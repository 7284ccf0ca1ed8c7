from __future__ import annotations

from rulecheck.governance.scoring import count_by_severity, score
from rulecheck.governance.types import Severity, Violation


def _v(severity: Severity) -> Violation:
    return Violation(rule="r", severity=severity, message="m")


def test_clean_run_scores_ten() -> None:
    result = score([])
    assert result.value == 10
    assert result.merge_allowed is True


def test_single_blocker_blocks_merge() -> None:
    result = score([_v(Severity.BLOCKER)])
    assert result.value == 7
    assert result.merge_allowed is False
    assert result.blockers == 1


def test_mandatory_blocks_merge() -> None:
    result = score([_v(Severity.MANDATORY)])
    assert result.value == 8
    assert result.merge_allowed is False


def test_recommended_only_allows_merge_down_to_six() -> None:
    assert score([_v(Severity.RECOMMENDED)] * 4).merge_allowed is True
    result = score([_v(Severity.RECOMMENDED)] * 5)
    assert result.value == 5
    assert result.merge_allowed is False


def test_score_has_no_floor() -> None:
    assert score([_v(Severity.BLOCKER)] * 4).value == -2


def test_counts() -> None:
    counts = count_by_severity(
        [_v(Severity.BLOCKER), _v(Severity.RECOMMENDED), _v(Severity.RECOMMENDED)]
    )
    assert counts == {Severity.BLOCKER: 1, Severity.MANDATORY: 0, Severity.RECOMMENDED: 2}


def test_severity_for_level() -> None:
    assert Severity.for_level(1) is Severity.BLOCKER
    assert Severity.for_level(2) is Severity.MANDATORY
    assert Severity.for_level(3) is Severity.MANDATORY
    assert Severity.for_level(4) is Severity.RECOMMENDED

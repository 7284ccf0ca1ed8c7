"""High-level compliance checking.

Reads the changed files, runs every registered rule check in level order
and scores the result:
- load_changed_files: read content, degrading unreadable files to warnings
- build_context: assemble a CheckContext from paths, branch and message
- run_checks: run the registry and score the violations
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass
from pathlib import Path

from rulecheck.core.console import get_logger
from rulecheck.core.result import ScanError
from rulecheck.governance.branch import MAIN_BRANCHES
from rulecheck.governance.checks import CHECK_REGISTRY, ChangedFile, CheckContext, CheckRegistry
from rulecheck.governance.config import RuleConfig
from rulecheck.governance.scoring import score
from rulecheck.governance.secret_scanner import PLACEHOLDER_VALUES
from rulecheck.governance.types import UNREADABLE_FILE_RULE, ComplianceScore, Severity, Violation

logger = get_logger(__name__)

_BINARY_SNIFF_BYTES = 8192


@dataclass(frozen=True)
class CheckResult:
    violations: tuple[Violation, ...]
    score: ComplianceScore
    files_scanned: int


def read_text_file(path: Path) -> str:
    """Read a file as UTF-8 text.

    Raises:
        ScanError: if the file is missing, unreadable, binary or not UTF-8.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ScanError(f"Cannot read {path}: {exc.strerror or exc}", context={"file": str(path)}) from exc

    if b"\0" in raw[:_BINARY_SNIFF_BYTES]:
        raise ScanError(f"{path} looks like a binary file", context={"file": str(path)})

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ScanError(f"{path} is not valid UTF-8 text", context={"file": str(path)}) from exc


def load_changed_files(
    paths: Sequence[Path], root: Path | None = None
) -> tuple[list[ChangedFile], list[Violation]]:
    """Read every changed file; unreadable ones become warning violations.

    Paths are reported as given; relative paths are read against root.
    """
    files: list[ChangedFile] = []
    warnings: list[Violation] = []

    for path in paths:
        target = path if root is None or path.is_absolute() else root / path
        try:
            content = read_text_file(target)
        except ScanError as exc:
            logger.warning("Skipping %s: %s", path, exc.message)
            warnings.append(
                Violation(
                    rule=UNREADABLE_FILE_RULE,
                    severity=Severity.RECOMMENDED,
                    message=f"File skipped: {exc.message}",
                    evidence=(str(path),),
                    file=path,
                    suggestion="Exclude binary or generated files from the change, or check them manually.",
                )
            )
            continue
        files.append(ChangedFile(path=path, content=content))

    return files, warnings


def build_context(
    paths: Sequence[Path],
    files: Sequence[ChangedFile],
    *,
    branch: str | None = None,
    message: str | None = None,
    main_branches: Collection[str] = MAIN_BRANCHES,
    placeholders: Collection[str] = PLACEHOLDER_VALUES,
) -> CheckContext:
    return CheckContext(
        files=tuple(files),
        paths=tuple(paths),
        branch=branch,
        message=message,
        main_branches=frozenset(main_branches),
        placeholders=frozenset(item.lower() for item in placeholders),
    )


def run_checks(
    config: RuleConfig,
    ctx: CheckContext,
    *,
    registry: CheckRegistry = CHECK_REGISTRY,
    extra: Sequence[Violation] = (),
) -> CheckResult:
    """Run every registered check and score the combined violations.

    extra carries violations produced before the checks ran, such as files
    that could not be read.
    """
    violations: list[Violation] = []
    for check in registry:
        found = check.run(ctx, config)
        logger.debug("%s: %d violation(s)", check.rule, len(found))
        violations.extend(found)
    violations.extend(extra)

    return CheckResult(
        violations=tuple(violations),
        score=score(violations),
        files_scanned=len(ctx.files),
    )


def check_paths(
    config: RuleConfig,
    paths: Sequence[Path],
    *,
    root: Path | None = None,
    branch: str | None = None,
    message: str | None = None,
    main_branches: Collection[str] = MAIN_BRANCHES,
    placeholders: Collection[str] = PLACEHOLDER_VALUES,
) -> CheckResult:
    """Read paths and run all checks in one call."""
    files, warnings = load_changed_files(paths, root)
    ctx = build_context(
        paths,
        files,
        branch=branch,
        message=message,
        main_branches=main_branches,
        placeholders=placeholders,
    )
    return run_checks(config, ctx, extra=warnings)


__all__ = [
    "CheckResult",
    "build_context",
    "check_paths",
    "load_changed_files",
    "read_text_file",
    "run_checks",
]

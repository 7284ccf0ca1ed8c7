"""
Unified Result types and error hierarchy for rulecheck.

This module provides:
1. Result[T, E] type for explicit error handling at process boundaries
2. Domain-specific exception hierarchy

Usage:
    from rulecheck.core.result import Ok, Err, Result, GitError

    async def current_branch(root: Path) -> Result[str, GitError]:
        ...

    match await current_branch(root):
        case Ok(branch):
            print(branch)
        case Err(err):
            print(err.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error."""

    error: E


Result = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Domain-specific error hierarchy
# ---------------------------------------------------------------------------


class RuleCheckError(Exception):
    """Base exception for all rulecheck errors.

    All custom exceptions inherit from this class so the CLI can turn any
    expected failure into a single readable message.
    """

    def __init__(self, message: str, *, context: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ConfigError(RuleCheckError):
    """Raised when the rule configuration is malformed or incomplete.

    Examples:
    - Missing level1..level4 section
    - Pattern list that is not a list of strings
    - Regex source that does not compile
    - Numeric threshold out of range

    Fatal: the run aborts before any scanning happens.
    """

    def __init__(self, message: str, *, field: str | None = None, context: dict | None = None) -> None:
        super().__init__(message, context=context)
        self.field = field


class ScanError(RuleCheckError):
    """Raised when a file's content cannot be scanned.

    Examples:
    - Binary file passed in with the changed set
    - Undecodable text
    - File removed between listing and reading

    Recovered per file: the file is skipped and a warning-level
    violation is recorded instead.
    """


class RenderError(RuleCheckError):
    """Raised when violation data breaks the renderer's contract.

    Only reachable through an internal bug (e.g. an unknown severity tag).
    """


class GitError(RuleCheckError):
    """Raised for git invocation failures.

    Examples:
    - git not on PATH
    - Not a repository
    - Command timed out
    """


__all__ = [
    # Result types
    "Ok",
    "Err",
    "Result",
    # Error hierarchy
    "RuleCheckError",
    "ConfigError",
    "ScanError",
    "RenderError",
    "GitError",
]

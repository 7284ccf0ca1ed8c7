"""Git access for collecting check inputs.

This package provides async git queries:
    - Repository root discovery
    - Current branch name
    - Files staged for commit
"""

from __future__ import annotations

from .client import DEFAULT_TIMEOUT, current_branch, repo_root, staged_files

__all__ = [
    "DEFAULT_TIMEOUT",
    "current_branch",
    "repo_root",
    "staged_files",
]

"""rulecheck - tiered compliance checks for code changes.

Scans changed files, branch names and commit messages against a three-level
rule configuration and reports a compliance score with a merge verdict.

Exports:
    __version__: Package version string.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"

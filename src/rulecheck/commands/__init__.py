"""CLI command modules for rulecheck.

This package contains the user-facing commands:
    - check: validate-config, check, check-branch
    - init: write default rules and install git hooks
"""

from __future__ import annotations

from . import check, init

__all__ = ["check", "init"]

"""Compliance check commands.

Provides CLI commands for:
    - Validating the rule configuration file
    - Checking changed files, branch and commit message against the rules
    - Validating a single branch name
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TypeVar

import typer
from rich import box
from rich.markup import escape
from rich.table import Table

from rulecheck.core.console import console, get_logger
from rulecheck.core.result import ConfigError, Err, GitError, Ok, RenderError, Result
from rulecheck.git import client as git_client
from rulecheck.governance import (
    BranchStatus,
    RuleConfig,
    check_paths,
    load_rule_config,
    render,
    render_json,
    validate_branch,
)

logger = get_logger(__name__)

HOOK_TYPE_ENV_VAR = "RULECHECK_HOOK_TYPE"

T = TypeVar("T")


def _rules_path(ctx: typer.Context, rules: Path | None, repo_path: Path) -> Path:
    path = (rules or ctx.obj.config.rules.rules_path).expanduser()
    return path if path.is_absolute() else repo_path / path


def _load_rules(path: Path) -> RuleConfig:
    try:
        return load_rule_config(path)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(exc.message)}")
        raise typer.Exit(code=1) from exc


def _unwrap_git(result: Result[T, GitError]) -> T:
    match result:
        case Ok(value):
            return value
        case Err(err):
            console.print(f"[red]git error:[/red] {escape(err.message)}")
            raise typer.Exit(code=1)


def _staged_paths(repo_path: Path, timeout: float) -> list[Path]:
    """Staged files, readable relative to repo_path.

    git reports staged names relative to the repository root, which may sit
    above repo_path. Files under repo_path stay relative to it; the rest
    become absolute.
    """
    root = _unwrap_git(asyncio.run(git_client.repo_root(repo_path, timeout)))
    staged = _unwrap_git(asyncio.run(git_client.staged_files(root, timeout)))
    base = repo_path.resolve()
    paths: list[Path] = []
    for name in staged:
        full = root / name
        try:
            paths.append(full.relative_to(base))
        except ValueError:
            paths.append(full)
    return paths


def _read_message_file(path: Path) -> str:
    """Read a commit message file, dropping git's comment lines."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        console.print(f"[red]Cannot read message file {escape(str(path))}:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    kept = [line for line in text.splitlines() if not (line == "#" or line.startswith("# "))]
    return "\n".join(kept).strip()


def validate_config(
    ctx: typer.Context,
    rules: Path | None = typer.Option(None, "--rules", help="Rule configuration file."),
    repo_path: Path = typer.Option(Path("."), "--repo", "-r", help="Repository path."),
) -> None:
    """Load and validate the rule configuration."""
    path = _rules_path(ctx, rules, repo_path.expanduser())
    config = _load_rules(path)

    table = Table(title="Rule configuration", box=box.SIMPLE, expand=False)
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Secret patterns", str(len(config.secret_patterns)))
    table.add_row("Protected files", escape(", ".join(config.protected_files)) or "none")
    table.add_row("Branch patterns", str(len(config.branch_patterns)))
    table.add_row("Issue pattern", escape(config.issue_pattern))
    table.add_row("Test coverage requirement", f"{config.test_coverage:g}%")
    table.add_row("Max file lines", str(config.max_file_lines))
    table.add_row(
        "Quality patterns", escape(", ".join(q.name for q in config.quality_patterns)) or "none"
    )

    console.print(f"[green]Configuration valid:[/green] {escape(str(path))}")
    console.print(table)


def check(
    ctx: typer.Context,
    files: list[Path] | None = typer.Argument(None, help="Files to check."),
    staged: bool = typer.Option(False, "--staged", help="Also check files staged for commit."),
    branch: str | None = typer.Option(None, "--branch", "-b", help="Branch name to validate."),
    use_current_branch: bool = typer.Option(
        False, "--current-branch", help="Validate the checked-out branch name."
    ),
    message: str | None = typer.Option(
        None, "--message", "-m", help="Commit message, or PR title and body."
    ),
    message_file: Path | None = typer.Option(
        None, "--message-file", help="Read the commit message from a file (commit-msg hook)."
    ),
    rules: Path | None = typer.Option(None, "--rules", help="Rule configuration file."),
    repo_path: Path = typer.Option(Path("."), "--repo", "-r", help="Repository path."),
    hook_type: str | None = typer.Option(
        None,
        "--hook-type",
        envvar=HOOK_TYPE_ENV_VAR,
        help="Hook context (pre-commit, pre-push, commit-msg); pre-push checks the current branch.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit the report as JSON."),
) -> None:
    """Check changed files and commit metadata against the rules; exit 1 unless merge is allowed."""
    state = ctx.obj
    repo_path = repo_path.expanduser()
    config = _load_rules(_rules_path(ctx, rules, repo_path))
    timeout = state.config.runtime.git_timeout

    if hook_type == "pre-push":
        use_current_branch = True

    paths: list[Path] = list(files or [])
    if staged:
        paths.extend(_staged_paths(repo_path, timeout))
    paths = list(dict.fromkeys(paths))

    if use_current_branch and branch is None:
        name = _unwrap_git(asyncio.run(git_client.current_branch(repo_path, timeout)))
        if name == "HEAD":
            logger.info("Detached HEAD; skipping branch validation")
        else:
            branch = name

    if message_file is not None:
        message = _read_message_file(message_file)

    logger.debug(
        "Checking %d file(s), branch=%s, hook=%s", len(paths), branch or "-", hook_type or "-"
    )
    result = check_paths(
        config,
        paths,
        root=repo_path,
        branch=branch,
        message=message,
        main_branches=state.config.rules.main_branches,
        placeholders=state.config.rules.placeholder_values,
    )

    try:
        output = (
            render_json(result.violations, result.score)
            if as_json
            else render(result.violations, result.score)
        )
    except RenderError as exc:
        console.print(f"[red]Internal error while rendering the report:[/red] {escape(exc.message)}")
        raise typer.Exit(code=1) from exc

    console.print(output, markup=False, highlight=False, soft_wrap=True)

    if not result.score.merge_allowed:
        raise typer.Exit(code=1)


def check_branch(
    ctx: typer.Context,
    name: str | None = typer.Argument(None, help="Branch name (defaults to the current branch)."),
    rules: Path | None = typer.Option(None, "--rules", help="Rule configuration file."),
    repo_path: Path = typer.Option(Path("."), "--repo", "-r", help="Repository path."),
) -> None:
    """Validate a branch name against level2.branchPatterns."""
    state = ctx.obj
    repo_path = repo_path.expanduser()
    config = _load_rules(_rules_path(ctx, rules, repo_path))

    if name is None:
        name = _unwrap_git(
            asyncio.run(git_client.current_branch(repo_path, state.config.runtime.git_timeout))
        )
        if name == "HEAD":
            console.print("[yellow]Detached HEAD - skipping validation[/yellow]")
            return

    result = validate_branch(name, config.branch_regexes, state.config.rules.main_branches)
    if result.status is BranchStatus.SKIP:
        console.print(f"[yellow]Main branch - skipping validation:[/yellow] {escape(name)}")
    elif result.status is BranchStatus.VALID:
        console.print(f"[green]Branch name OK:[/green] {escape(name)}")
    else:
        console.print(f"[red]Invalid branch name[/red] '{escape(name)}': {escape(result.reason)}")
        console.print("Expected format: <type>/<description>, e.g. feature/add-login")
        raise typer.Exit(code=1)

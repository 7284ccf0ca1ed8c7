"""Project initialization.

Provides the `init` command, which:
    - Writes the default rule configuration
    - Optionally installs git hooks that run `rulecheck check`
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.markup import escape

from rulecheck.core.console import console
from rulecheck.governance import default_rule_config_data

HOOK_SCRIPTS: dict[str, str] = {
    "pre-commit": "#!/bin/sh\nRULECHECK_HOOK_TYPE=pre-commit exec rulecheck check --staged\n",
    "pre-push": "#!/bin/sh\nRULECHECK_HOOK_TYPE=pre-push exec rulecheck check\n",
    "commit-msg": '#!/bin/sh\nRULECHECK_HOOK_TYPE=commit-msg exec rulecheck check --message-file "$1"\n',
}


def _write_rules(path: Path, force: bool) -> None:
    if path.exists() and not force:
        console.print(
            f"[yellow]{escape(str(path))} already exists; use --force to overwrite.[/yellow]"
        )
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(default_rule_config_data(), indent=2) + "\n", encoding="utf-8")
    console.print(f"[green]Wrote rule configuration to[/green] {escape(str(path))}")


def _install_hooks(repo_path: Path, force: bool) -> int:
    """Write hook scripts into .git/hooks; returns the number installed."""
    git_dir = repo_path / ".git"
    hooks_dir = git_dir / "hooks"

    if not git_dir.is_dir():
        console.print(f"[yellow]Skipping hook install: {escape(str(git_dir))} not found.[/yellow]")
        return 0

    installed = 0
    try:
        hooks_dir.mkdir(parents=True, exist_ok=True)
        for name, script in HOOK_SCRIPTS.items():
            hook = hooks_dir / name
            if hook.exists() and not force:
                console.print(f"[yellow]Keeping existing {name} hook (use --force to replace).[/yellow]")
                continue
            hook.write_text(script, encoding="utf-8")
            hook.chmod(0o755)
            installed += 1
            console.print(f"[green]Installed {name} hook at[/green] {escape(str(hook))}")
    except OSError as exc:
        console.print(f"[red]Failed to install hooks: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    return installed


def init(
    ctx: typer.Context,
    rules: Path | None = typer.Option(None, "--rules", help="Where to write the rule configuration."),
    repo_path: Path = typer.Option(Path("."), "--repo", "-r", help="Repository path."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing files."),
    install_hooks: bool = typer.Option(
        False, "--install-hooks", help="Install pre-commit, pre-push and commit-msg hooks."
    ),
) -> None:
    """Write the default rule configuration and optionally install git hooks."""
    repo_path = repo_path.expanduser()
    target = (rules or ctx.obj.config.rules.rules_path).expanduser()
    if not target.is_absolute():
        target = repo_path / target

    _write_rules(target, force)
    if install_hooks:
        _install_hooks(repo_path, force)
    console.print("Run `rulecheck validate-config` after editing the rules.")

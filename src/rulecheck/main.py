from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter

import typer
from rich import box
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from typer.main import get_command

from . import __version__
from .core.config import AppConfig, ConfigLoadResult, load_config
from .core.console import console, setup_logging
from .core.registry import builtin_commands

app = typer.Typer(help="rulecheck: score changes against a tiered rule configuration.")
logger = logging.getLogger(__name__)


@dataclass
class AppState:
    config: AppConfig
    config_meta: ConfigLoadResult
    logger: logging.Logger


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a rulecheck settings file (TOML or JSON)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    loaded_config, meta = load_config(config_path=config)
    logger = setup_logging(level=loaded_config.runtime.log_level, verbose=verbose)

    ctx.obj = AppState(config=loaded_config, config_meta=meta, logger=logger)

    if meta.error:
        console.print(
            Panel(
                f"[bold red]Settings Error - Safe Mode Active[/bold red]\n\n"
                f"Failed to load {escape(str(meta.path))}:\n{escape(meta.error)}\n\n"
                f"[yellow]Using default settings.[/yellow]",
                border_style="red",
            )
        )
    else:
        logger.debug(
            "Loaded settings from %s (env overrides: %s)",
            meta.path,
            sorted(meta.env_overrides),
        )


@app.command("com")
def command_catalog() -> None:
    """Display the available rulecheck commands and their descriptions."""
    click_app = get_command(app)
    table = Table(title="rulecheck commands", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Command", style="cyan", no_wrap=True)
    table.add_column("Summary", style="white")

    # TyperGroup is not always a click.Group subclass
    commands = getattr(click_app, "commands", {})
    for name, command in sorted(commands.items()):
        summary = (command.help or command.short_help or "").strip().splitlines()
        table.add_row(name, escape(summary[0]) if summary else "-")

    console.print(table)


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Show the active settings and where they came from."""
    state: AppState = ctx.obj
    meta = state.config_meta

    table = Table(title="Settings", box=box.SIMPLE, expand=True)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    for group, values in state.config.model_dump().items():
        for key, value in values.items():
            table.add_row(f"{group}.{key}", escape(str(value)))

    console.print(table)

    meta_lines = [
        f"Path: {escape(str(meta.path))}",
        "File loaded: yes" if meta.file_loaded else "File loaded: no (using defaults + env)",
    ]
    if meta.env_overrides:
        meta_lines.append("Env overrides: " + ", ".join(sorted(meta.env_overrides)))

    console.print(Panel("\n".join(meta_lines), title="Settings source", box=box.SIMPLE))


@app.command("version")
def show_version() -> None:
    """Print the rulecheck version."""
    console.print(__version__)


def _register_commands() -> None:
    for spec in builtin_commands():
        app.command(spec.name)(spec.handler)


def _register_commands_with_timing() -> None:
    start = perf_counter()
    _register_commands()
    elapsed = perf_counter() - start
    logger.debug("Command registry initialized in %.3f seconds", elapsed)


_register_commands_with_timing()


def cli() -> None:
    app()


if __name__ == "__main__":
    cli()

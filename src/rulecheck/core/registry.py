from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Callable

from rulecheck.commands import check, init

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandSpec:
    name: str
    handler: Callable[..., None]


class CommandRegistry:
    """Explicit name -> handler mapping, populated once at startup."""

    def __init__(self) -> None:
        self._commands: dict[str, CommandSpec] = {}

    def register(self, spec: CommandSpec) -> None:
        if spec.name in self._commands:
            raise ValueError(f"Command '{spec.name}' is already registered")
        self._commands[spec.name] = spec

    def get(self, name: str) -> CommandSpec:
        return self._commands[name]

    def names(self) -> list[str]:
        return list(self._commands)

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)


def builtin_commands() -> CommandRegistry:
    """Build the registry of commands shipped with rulecheck."""
    registry = CommandRegistry()
    for spec in (
        CommandSpec("check", check.check),
        CommandSpec("check-branch", check.check_branch),
        CommandSpec("validate-config", check.validate_config),
        CommandSpec("init", init.init),
    ):
        registry.register(spec)
    logger.debug("Registered commands: %s", ", ".join(registry.names()))
    return registry

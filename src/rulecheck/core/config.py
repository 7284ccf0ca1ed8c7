"""Application settings management.

Handles loading and validating the CLI's own settings from multiple sources:
    - TOML/JSON settings files
    - Environment variables (RULECHECK_* prefix)
    - Default values

These settings say *where* the rule configuration lives and how the CLI
behaves; the rule configuration itself is validated separately by
rulecheck.governance.config and fails fast.

Key components:
    - AppConfig: Main settings model
    - load_config(): Safe settings loading with fallback
    - ConfigLoadResult: Metadata about the settings source
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from unittest.mock import patch

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

CONFIG_ENV_VAR = "RULECHECK_CONFIG"

DEFAULT_MAIN_BRANCHES = ["main", "master", "develop", "staging", "production", "preview"]
DEFAULT_PLACEHOLDERS = ["test", "mock", "example"]


class SettingsError(RuntimeError):
    """Raised when the settings file cannot be parsed."""


# -----------------------------------------------------------------------------
# Sub-configuration Models
# -----------------------------------------------------------------------------


class RulesSettings(BaseModel):
    """Where the rule configuration lives and how it is applied."""

    rules_path: Path = Field(
        default=Path(".rulecheck.json"),
        description="Rule configuration file, relative to the repository root.",
    )
    main_branches: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MAIN_BRANCHES),
        description="Branches exempt from branch-name validation.",
    )
    placeholder_values: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PLACEHOLDERS),
        description="Secret-like values treated as harmless placeholders.",
    )

    @field_validator("placeholder_values", mode="after")
    @classmethod
    def lowercase_placeholders(cls, v: list[str]) -> list[str]:
        return [item.strip().lower() for item in v if item.strip()]


class RuntimeSettings(BaseModel):
    """Logging and subprocess behaviour."""

    log_level: str = Field(default="WARNING", description="Log level for rulecheck output.")
    git_timeout: float = Field(
        default=10.0, gt=0, description="Seconds to wait for a git subprocess."
    )


@dataclass
class ConfigLoadResult:
    path: Path
    file_loaded: bool
    env_overrides: set[str]
    error: str | None = None


class AppConfig(BaseSettings):
    """Application-wide settings with nested sub-configs."""

    model_config = SettingsConfigDict(
        env_prefix="RULECHECK_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    rules: RulesSettings = Field(default_factory=RulesSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        # Environment variables override settings file entries.
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)


def _resolve_config_path(config_path: Path | None, env_vars: Mapping[str, str]) -> Path:
    candidate = config_path or env_vars.get(CONFIG_ENV_VAR) or (Path.home() / ".rulecheck.toml")
    return Path(candidate).expanduser()


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsError(f"Cannot read {path}: {exc}") from exc
    suffix = path.suffix.lower()
    parser = json.loads if suffix == ".json" else tomllib.loads

    try:
        data = parser(raw)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise SettingsError(f"Syntax error in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise SettingsError(f"Settings root in {path} must be a mapping.")

    return data


def _detect_env_overrides(env_vars: Mapping[str, str]) -> set[str]:
    """Detect which fields are overridden by environment variables.

    For nested models, detects vars like RULECHECK_RULES__RULES_PATH.
    """
    prefix = AppConfig.model_config.get("env_prefix", "")
    delimiter = AppConfig.model_config.get("env_nested_delimiter", "__")
    overrides: set[str] = set()

    nested_models: dict[str, type[BaseModel]] = {
        "rules": RulesSettings,
        "runtime": RuntimeSettings,
    }

    for group_name, model_cls in nested_models.items():
        for field in model_cls.model_fields:
            env_key = f"{prefix}{group_name}{delimiter}{field}".upper()
            if env_key in env_vars:
                overrides.add(f"{group_name}.{field}")

    return overrides


def load_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[AppConfig, ConfigLoadResult]:
    """
    Load settings with Safe Mode fallback.
    If the file is invalid, returns default settings + error message.
    """
    env_vars: Mapping[str, str] = os.environ if env is None else {**os.environ, **env}
    resolved_path = _resolve_config_path(config_path, env_vars)
    env_overrides = _detect_env_overrides(env_vars)

    error: str | None = None
    file_loaded = False
    file_data: dict[str, Any] = {}

    try:
        file_data = _read_config_file(resolved_path)
        file_loaded = resolved_path.exists()
    except SettingsError as exc:
        error = str(exc)

    context_manager = (
        patch.dict(os.environ, env_vars, clear=False) if env is not None else nullcontext()
    )

    try:
        with context_manager:
            config = AppConfig(**file_data)
    except ValidationError as exc:
        error = str(exc)
        config = AppConfig()

    load_result = ConfigLoadResult(
        path=resolved_path,
        file_loaded=file_loaded,
        env_overrides=env_overrides,
        error=error,
    )

    return config, load_result


__all__ = [
    "CONFIG_ENV_VAR",
    "AppConfig",
    "ConfigLoadResult",
    "RulesSettings",
    "RuntimeSettings",
    "SettingsError",
    "load_config",
]

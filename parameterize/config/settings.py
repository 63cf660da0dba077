"""Configuration settings and loading."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from parameterize.errors import ConfigValidationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ParameterizeConfig(BaseSettings):
    """Configuration for a parameterized enumeration.

    The runner reads max_runs, verify_declarations and log_failures. log_level
    and json_logs only take effect once passed to
    parameterize.observability.configure_from(); the runner never installs
    handlers itself.
    """

    model_config = SettingsConfigDict(
        env_prefix="PARAMETERIZE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_runs: int | None = None
    verify_declarations: bool = True
    log_failures: bool = True
    log_level: str = "WARNING"
    json_logs: bool = False

    @field_validator("max_runs")
    @classmethod
    def validate_max_runs(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError("max_runs must be at least 1")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = str(v).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Valid: {VALID_LOG_LEVELS}")
        return level

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level)


def load_config(config_path: str | Path | None = None, **overrides: Any) -> ParameterizeConfig:
    """Load configuration from file and environment.

    Priority: keyword overrides > env vars > config file > defaults

    Raises:
        ConfigValidationError: The file is not a YAML mapping, or a value
            fails validation.
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                try:
                    loaded = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigValidationError(
                        f"Could not parse {config_path}: {e}", cause=e
                    ) from e
            if not isinstance(loaded, dict):
                raise ConfigValidationError(
                    f"{config_path} must contain a mapping, got {type(loaded).__name__}"
                )
            config_data = loaded

    config_data.update(_get_env_overrides())
    config_data.update(overrides)

    try:
        return ParameterizeConfig(**config_data)
    except ValidationError as e:
        raise ConfigValidationError(str(e), cause=e) from e


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings = {
        "PARAMETERIZE_MAX_RUNS": "max_runs",
        "PARAMETERIZE_VERIFY_DECLARATIONS": "verify_declarations",
        "PARAMETERIZE_LOG_FAILURES": "log_failures",
        "PARAMETERIZE_LOG_LEVEL": "log_level",
        "PARAMETERIZE_JSON_LOGS": "json_logs",
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            overrides[config_key] = value

    return overrides

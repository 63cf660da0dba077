"""Configuration management for parameterize."""

from parameterize.config.settings import ParameterizeConfig, load_config

__all__ = [
    "ParameterizeConfig",
    "load_config",
]

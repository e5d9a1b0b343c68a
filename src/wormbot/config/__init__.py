"""Configuration management for wormbot.

This module provides configuration loading and validation for the bot's
state loader and logging.
"""

from .config import (
    Config,
    ConfigError,
    LoaderConfig,
    LoggingConfig,
    find_config_file,
    load_config,
    load_config_from_env,
    load_config_from_file,
    validate_config,
)

__all__ = [
    "Config",
    "ConfigError",
    "LoaderConfig",
    "LoggingConfig",
    "find_config_file",
    "load_config",
    "load_config_from_env",
    "load_config_from_file",
    "validate_config",
]

"""Core configuration management for wormbot.

This module provides the configuration models and loading functionality
with YAML file and environment variable support.
"""

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

DEFAULT_CONFIG_FILES = (
    Path("config/wormbot.yaml"),
    Path("config/wormbot.yml"),
    Path("wormbot.yaml"),
    Path("wormbot.yml"),
)

ENV_VARS = {
    "WORMBOT_STATE_FILE": "loader.state_file",
    "WORMBOT_STRICT": "loader.strict",
    "WORMBOT_LOG_LEVEL": "logging.level",
    "WORMBOT_LOG_FORMAT": "logging.format",
}
"""Environment variables read by :func:`load_config_from_env`, by setting."""


class ConfigError(Exception):
    """Configuration-related errors."""

    pass


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "text"] = "json"


class LoaderConfig(BaseModel):
    """State loader configuration."""

    state_file: str = "state.json"
    strict: bool = False


class Config(BaseModel):
    """Main configuration class for wormbot."""

    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def find_config_file() -> Path | None:
    """Return the first default configuration file that exists, if any."""
    for path in DEFAULT_CONFIG_FILES:
        if path.exists():
            return path
    return None


def load_config_from_file(config_path: Path) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Loaded configuration

    Raises:
        ConfigError: If configuration is invalid or file cannot be read
    """
    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        if not isinstance(config_data, dict):
            raise ConfigError(
                f"Configuration file must contain a mapping: {config_path}"
            )

        return Config(**config_data)

    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Environment variables are mapped as follows:
    - WORMBOT_STATE_FILE: Path of the state snapshot to load
    - WORMBOT_STRICT: Reject inconsistent snapshots (true/false)
    - WORMBOT_LOG_LEVEL: Logging level
    - WORMBOT_LOG_FORMAT: Logging format (json/text)

    Returns:
        Configuration loaded from environment variables
    """
    config_data = {}

    loader_config = {}
    if env_val := os.getenv("WORMBOT_STATE_FILE"):
        loader_config["state_file"] = env_val
    if env_val := os.getenv("WORMBOT_STRICT"):
        loader_config["strict"] = env_val.lower() in ("true", "1", "yes", "on")
    if loader_config:
        config_data["loader"] = loader_config

    logging_config = {}
    if env_val := os.getenv("WORMBOT_LOG_LEVEL"):
        logging_config["level"] = env_val.upper()
    if env_val := os.getenv("WORMBOT_LOG_FORMAT"):
        logging_config["format"] = env_val.lower()
    if logging_config:
        config_data["logging"] = logging_config

    try:
        return Config(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Environment configuration validation failed: {e}") from e


def _merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded in the following order (later sources override earlier):
    1. Default values
    2. Configuration file (if provided, else the first default file found)
    3. Environment variables

    Args:
        config_path: Optional path to configuration file

    Returns:
        Merged configuration
    """
    config_data = Config().model_dump()

    if config_path is None:
        config_path = find_config_file()

    if config_path is not None:
        file_config = load_config_from_file(config_path)
        config_data = _merge(config_data, file_config.model_dump(exclude_unset=True))

    env_config = load_config_from_env()
    config_data = _merge(config_data, env_config.model_dump(exclude_unset=True))

    try:
        return Config(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e


def validate_config(config: Config) -> None:
    """Validate configuration for consistency and correctness.

    Args:
        config: Configuration to validate

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config.loader.state_file.strip():
        raise ConfigError("loader.state_file must not be empty")

    state_path = Path(config.loader.state_file)
    if state_path.exists() and state_path.is_dir():
        raise ConfigError(f"loader.state_file is a directory: {state_path}")

"""Configuration file manager for loading and merging toolhost settings."""

import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from toolhost.config.constants import DEFAULT_CONFIG_PATH
from toolhost.config.schema import HostSettings
from toolhost.exceptions import ConfigurationError


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Returns:
        Path to ~/.toolhost/settings.json
    """
    return DEFAULT_CONFIG_PATH


def load_config(config_path: Path | None = None) -> HostSettings:
    """Load configuration from JSON file.

    Args:
        config_path: Optional path to config file. Defaults to ~/.toolhost/settings.json

    Returns:
        HostSettings loaded from file, or default settings if file doesn't exist

    Raises:
        ConfigurationError: If file exists but is invalid JSON or fails validation

    Example:
        >>> settings = load_config()
        >>> settings.rg_path
        'rg'
    """
    if config_path is None:
        config_path = get_config_path()

    # Return defaults if file doesn't exist
    if not config_path.exists():
        return HostSettings()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)

        return HostSettings(**data)

    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in configuration file {config_path}: {e}") from e
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed for {config_path}:\n{e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to load configuration from {config_path}: {e}") from e


def get_env_overrides() -> dict[str, Any]:
    """Collect settings overrides from environment variables.

    Loads a .env file first (if present), then reads:
        TOOLHOST_WORKING_DIRECTORY (or CODEMODE_WORKING_DIRECTORY)
        TOOLHOST_RG_PATH
        TOOLHOST_SHELL
        TOOLHOST_SEARCH_TIMEOUT_MS
        TOOLHOST_WEB_TIMEOUT
        TOOLHOST_LOG_LEVEL (or LOG_LEVEL)
        TOOLHOST_LOG_FILE

    Returns:
        Dictionary of field name -> raw override value
    """
    load_dotenv()

    env_overrides: dict[str, Any] = {}

    working_dir = os.getenv("TOOLHOST_WORKING_DIRECTORY") or os.getenv(
        "CODEMODE_WORKING_DIRECTORY"
    )
    if working_dir:
        env_overrides["working_directory"] = working_dir

    if rg_path := os.getenv("TOOLHOST_RG_PATH"):
        env_overrides["rg_path"] = rg_path

    if shell := os.getenv("TOOLHOST_SHELL"):
        env_overrides["shell_path"] = shell

    if search_timeout := os.getenv("TOOLHOST_SEARCH_TIMEOUT_MS"):
        env_overrides["search_timeout_ms"] = search_timeout

    if web_timeout := os.getenv("TOOLHOST_WEB_TIMEOUT"):
        env_overrides["web_timeout_seconds"] = web_timeout

    log_level = os.getenv("TOOLHOST_LOG_LEVEL") or os.getenv("LOG_LEVEL")
    if log_level:
        env_overrides["log_level"] = log_level

    if log_file := os.getenv("TOOLHOST_LOG_FILE"):
        env_overrides["log_file"] = log_file

    return env_overrides


def merge_with_env(settings: HostSettings) -> HostSettings:
    """Apply environment variable overrides on top of file settings.

    Environment variables take precedence over file settings.

    Args:
        settings: HostSettings instance from file

    Returns:
        New HostSettings with overrides applied

    Raises:
        ConfigurationError: If an override fails validation
    """
    overrides = get_env_overrides()
    if not overrides:
        return settings

    data = settings.model_dump()
    data.update(overrides)
    try:
        return HostSettings(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid environment override:\n{e}") from e


def resolve_settings(
    config_path: Path | None = None, working_directory: Path | str | None = None
) -> HostSettings:
    """Load file settings, apply env overrides, then an explicit working directory.

    Args:
        config_path: Optional settings file path
        working_directory: Optional directory that wins over file and env values

    Returns:
        Fully resolved HostSettings
    """
    settings = merge_with_env(load_config(config_path))
    if working_directory is not None:
        settings = settings.model_copy(
            update={"working_directory": Path(working_directory).expanduser().resolve()}
        )
    return settings

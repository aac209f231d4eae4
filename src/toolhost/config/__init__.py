"""Configuration package for toolhost."""

from .constants import (
    ARRAY_LIMIT,
    DEFAULT_TIMEOUT_MS,
    MAX_TIMEOUT_MS,
    OUTPUT_LIMIT,
)
from .manager import (
    get_config_path,
    get_env_overrides,
    load_config,
    merge_with_env,
    resolve_settings,
)
from .schema import HostSettings

__all__ = [
    # Constants
    "OUTPUT_LIMIT",
    "ARRAY_LIMIT",
    "DEFAULT_TIMEOUT_MS",
    "MAX_TIMEOUT_MS",
    # Schema
    "HostSettings",
    # Manager
    "get_config_path",
    "get_env_overrides",
    "load_config",
    "merge_with_env",
    "resolve_settings",
]

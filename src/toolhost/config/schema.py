"""Pydantic models for toolhost configuration schema."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from toolhost.config.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_RG_PATH,
    DEFAULT_SEARCH_TIMEOUT_MS,
    DEFAULT_USER_AGENT,
    DEFAULT_WEB_TIMEOUT,
    MAX_TIMEOUT_MS,
)

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class HostSettings(BaseModel):
    """Settings for the tool host.

    The working directory is resolved once when settings are built and is then
    handed to every toolset explicitly. Handlers never consult the process-wide
    current directory during a call.
    """

    working_directory: Path = Field(
        default_factory=Path.cwd,
        description="Base directory for all relative path arguments",
    )
    rg_path: str = Field(default=DEFAULT_RG_PATH, description="ripgrep executable")
    shell_path: str | None = Field(
        default=None, description="Shell used by Bash (None = platform default)"
    )
    search_timeout_ms: int = Field(
        default=DEFAULT_SEARCH_TIMEOUT_MS,
        gt=0,
        le=MAX_TIMEOUT_MS,
        description="Timeout for ripgrep invocations",
    )
    web_timeout_seconds: float = Field(
        default=DEFAULT_WEB_TIMEOUT, gt=0, description="HTTP timeout for WebFetch"
    )
    web_user_agent: str = DEFAULT_USER_AGENT
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Path | None = None

    @field_validator("working_directory")
    @classmethod
    def resolve_working_directory(cls, v: Path) -> Path:
        """Expand user home and make the working directory absolute."""
        return Path(v).expanduser().resolve()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level and reject unknown names."""
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Valid levels: {sorted(VALID_LOG_LEVELS)}")
        return level

    @field_validator("log_file")
    @classmethod
    def expand_log_file(cls, v: Path | None) -> Path | None:
        """Expand user home directory in log_file."""
        if v is None:
            return None
        return Path(v).expanduser()

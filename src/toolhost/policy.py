"""Safety and size limits applied by every tool handler.

Pure functions only: output truncation, array capping, dangerous-command
screening, and timeout ceiling checks.
"""

from collections.abc import Sequence
from typing import TypeVar

from toolhost.config.constants import ARRAY_LIMIT, MAX_TIMEOUT_MS, OUTPUT_LIMIT

T = TypeVar("T")

# Literal substrings that mark a command as filesystem-destroying.
# This is a best-effort screen for well-known catastrophic patterns, not a sandbox:
# variable expansion, aliases or quoting trivially bypass it.
DANGEROUS_PATTERNS: tuple[str, ...] = (
    "rm -rf /",
    "sudo rm",
)


def truncate_output(text: str, limit: int = OUTPUT_LIMIT) -> str:
    """Cap text at limit characters, silently dropping the remainder.

    Args:
        text: Text to cap
        limit: Maximum number of characters (default 30,000)

    Returns:
        text unchanged if short enough, else its first limit characters
    """
    if len(text) > limit:
        return text[:limit]
    return text


def cap_entries(items: Sequence[T], limit: int = ARRAY_LIMIT) -> list[T]:
    """Return at most limit leading entries of items."""
    return list(items[:limit])


def is_dangerous_command(command: str) -> bool:
    """Check a shell command line against the denylist.

    Args:
        command: Full shell command line

    Returns:
        True if any denylisted pattern occurs literally in command

    Example:
        >>> is_dangerous_command("rm -rf / --no-preserve-root")
        True
        >>> is_dangerous_command("rm -rf ./build")
        False
    """
    return any(pattern in command for pattern in DANGEROUS_PATTERNS)


def validate_timeout(timeout_ms: int) -> str | None:
    """Check a requested timeout against the ceiling.

    Args:
        timeout_ms: Requested timeout in milliseconds

    Returns:
        Error message if the timeout is rejected, otherwise None
    """
    if timeout_ms > MAX_TIMEOUT_MS:
        return f"Timeout cannot exceed {MAX_TIMEOUT_MS}ms ({MAX_TIMEOUT_MS // 60_000} minutes)"
    if timeout_ms <= 0:
        return f"Timeout must be a positive number of milliseconds, got {timeout_ms}"
    return None

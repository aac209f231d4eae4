"""Configuration constants for toolhost.

This module provides a single source of truth for all default configuration values
and the fixed output limits every tool handler honors.
Separated from schema.py to avoid circular imports.
"""

from pathlib import Path

# Default paths
DEFAULT_CONFIG_PATH = Path.home() / ".toolhost" / "settings.json"

# Output limits shared by every handler
OUTPUT_LIMIT = 30_000  # characters
ARRAY_LIMIT = 1_000  # entries in as_array results

# Read handler
DEFAULT_READ_LIMIT = 2_000  # lines
MAX_LINE_LENGTH = 2_000  # characters per source line
LINE_NUMBER_WIDTH = 5
LINE_SEPARATOR = "→"

# Bash handler
DEFAULT_TIMEOUT_MS = 120_000
MAX_TIMEOUT_MS = 600_000
TERMINAL_TYPE = "xterm-256color"

# Search handler
DEFAULT_RG_PATH = "rg"
DEFAULT_SEARCH_TIMEOUT_MS = 120_000

# Web handler
DEFAULT_WEB_TIMEOUT = 30  # seconds
DEFAULT_USER_AGENT = "toolhost/1.0 (+https://pypi.org/project/toolhost/)"
WEB_TRUNCATION_SUFFIX = "\n\n[Content truncated due to length]"

# Sentinels returned as successful text
NO_FILES_MATCHED = "No files matched"
NO_MATCHES_FOUND = "No matches found"
EMPTY_DIRECTORY = "Empty directory"

# Logging
DEFAULT_LOG_LEVEL = "INFO"

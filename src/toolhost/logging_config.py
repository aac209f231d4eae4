"""Logging setup for the toolhost process."""

import logging
import os
import sys

from toolhost.config.schema import HostSettings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Loggers that are chatty at INFO and never useful to a tool host operator
NOISY_LOGGERS = ("httpx", "httpcore", "readability.readability")


def setup_logging(settings: HostSettings) -> None:
    """Configure the root logger once for the process.

    Logs go to stderr unless a log file is configured. stdout is never used,
    since the stdio transport owns it.

    Level precedence: TOOLHOST_LOG_LEVEL, then LOG_LEVEL, then settings.

    Args:
        settings: Host settings with log_level and log_file
    """
    log_level = os.getenv("TOOLHOST_LOG_LEVEL") or os.getenv("LOG_LEVEL") or settings.log_level
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(
            level=numeric_level,
            format=LOG_FORMAT,
            filename=str(settings.log_file),
            filemode="a",
            force=True,
        )
    else:
        logging.basicConfig(level=numeric_level, format=LOG_FORMAT, stream=sys.stderr, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

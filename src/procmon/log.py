"""structlog setup for procmon."""

import logging
import sys
from typing import TextIO

import structlog

from procmon.config import LOG_FILE, LOG_LEVEL

_log_file: TextIO | None = None


def _stderr_logger(*args) -> structlog.PrintLogger:
    """Build a PrintLogger on whatever sys.stderr is at the time of the call."""
    return structlog.PrintLogger(file=sys.stderr)


def close_logging() -> None:
    """Close the log file opened by configure_logging, if any."""
    global _log_file
    if _log_file is not None:
        _log_file.close()
        _log_file = None


def configure_logging(level: str = LOG_LEVEL, log_file: str | None = LOG_FILE) -> None:
    """
    Configure structlog for the application.

    Without a log file, loggers are not cached so each event looks up
    sys.stderr when it is written. While the Textual app runs that name is
    redirected into its capture and nothing is drawn over the screen.

    Args:
        level: Name of the minimum level to emit, e.g. "DEBUG" or "WARNING".
            Unknown names fall back to WARNING.
        log_file: Path to append log lines to. Logs go to stderr when unset.
    """
    global _log_file
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    close_logging()
    if log_file:
        _log_file = open(log_file, "a", encoding="utf-8")
        logger_factory = structlog.PrintLoggerFactory(file=_log_file)
    else:
        logger_factory = _stderr_logger

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=logger_factory,
        cache_logger_on_first_use=bool(log_file),
    )

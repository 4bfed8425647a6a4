"""Logging configuration for mokit."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Package-level logger name
LOGGER_NAME = "mokit"

# Loggers whose debug records -v shows: catalog loading and selection
VERBOSE_LOGGERS = ("mokit.catalog", "mokit.reader", "mokit.translator")


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger for a mokit module.

    Args:
        name: Module name (e.g., __name__). If None, returns root mokit logger.

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


class ConsoleFormatter(logging.Formatter):
    """Formatter for the CLI: plain messages, prefixed warnings and errors."""

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        elif record.levelno == logging.WARNING:
            return f"Warning: {record.getMessage()}"
        elif record.levelno == logging.ERROR:
            return f"Error: {record.getMessage()}"
        elif record.levelno == logging.DEBUG:
            return f"[debug] {record.getMessage()}"
        return super().format(record)


class DebugScopeFilter(logging.Filter):
    """Filter that drops DEBUG records outside the given logger names."""

    def __init__(self, names: tuple[str, ...]):
        super().__init__()
        self.names = names

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno > logging.DEBUG:
            return True
        return any(record.name == name or record.name.startswith(f"{name}.") for name in self.names)


class InfoFilter(logging.Filter):
    """Filter that only allows records below WARNING level."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def setup_logging(
    verbosity: int = 0,
    quiet: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure logging for the mokit CLI.

    Args:
        verbosity: 0=normal, 1=catalog loading details (-v), 2=debug (-vv)
        quiet: If True, suppress all output except errors
        log_file: Optional file path for logging
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    if quiet:
        console_level = logging.ERROR
    elif verbosity >= 1:
        console_level = logging.DEBUG
    else:
        console_level = logging.INFO

    # Capture everything at logger level, filter at handlers
    logger.setLevel(logging.DEBUG)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(console_level)
    stdout_handler.setFormatter(ConsoleFormatter())
    stdout_handler.addFilter(InfoFilter())
    if verbosity == 1 and not quiet:
        stdout_handler.addFilter(DebugScopeFilter(VERBOSE_LOGGERS))
    logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.ERROR if quiet else logging.WARNING)
    stderr_handler.setFormatter(ConsoleFormatter())
    logger.addHandler(stderr_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

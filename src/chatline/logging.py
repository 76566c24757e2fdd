"""Logging configuration for chatline.

Provides optional file logging for dispatch errors and debug info.
Logs are written to ~/.chatline/logs/chatline.log unless another path is given.
"""
from __future__ import annotations

import logging
import traceback
from pathlib import Path
from typing import Optional

# Directory for log files
LOGS_DIR = Path.home() / ".chatline" / "logs"

LOGGER_NAME = "chatline"

# Module-level state
_file_handler: Optional[logging.FileHandler] = None
_log_path: Optional[Path] = None


def default_log_path() -> Path:
    """Get the default log file path, creating its directory."""
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    return LOGS_DIR / "chatline.log"


def configure_file_logging(
    path: Optional[Path] = None,
    level: int = logging.INFO,
) -> Path:
    """Configure file logging for the chatline loggers.

    Args:
        path: Log file path (default: ~/.chatline/logs/chatline.log)
        level: Logging level for file output (default INFO)

    Returns:
        Path to the log file
    """
    global _file_handler, _log_path

    log_path = Path(path) if path is not None else default_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # Remove existing handler if any
    close_file_logging()

    _file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    _file_handler.setLevel(level)
    _file_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(_file_handler)
    logger.setLevel(level)

    _log_path = log_path
    logger.info("=== Session started ===")
    return log_path


def close_file_logging() -> None:
    """Flush and close the log file, if one is open."""
    global _file_handler, _log_path

    if _file_handler is not None:
        logger = logging.getLogger(LOGGER_NAME)
        logger.info("=== Session ended ===")
        logger.removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None
        _log_path = None


def get_current_log_path() -> Optional[Path]:
    """Get the current log file path, or None if file logging is off."""
    return _log_path


def log_command_error(error: Exception, context: str = "") -> str:
    """Log a failed command and return the message to show the user.

    Errors raised by the dispatcher itself (CommandError) are expected and
    logged without traceback; anything else gets the full traceback.

    Args:
        error: The exception to log
        context: The input line or what was happening

    Returns:
        User-friendly error message (without traceback)
    """
    from chatline.core.exceptions import CommandError

    logger = logging.getLogger(LOGGER_NAME)
    error_type = type(error).__name__
    error_msg = str(error)

    if isinstance(error, CommandError):
        logger.info(f"{context} - {error_type}: {error_msg}")
        return error_msg

    tb_str = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    logger.error(f"{context}\n{error_type}: {error_msg}\n\nTraceback:\n{tb_str}")
    return f"{error_type}: {error_msg}"

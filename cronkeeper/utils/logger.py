"""
Logging Configuration and Utilities

Provides the log sinks for the scheduler: console output split between
stdout and stderr by severity, an optional rotating log file, and JSON
formatting. A failing sink never raises into the scheduler.

Author: Cronkeeper Project
License: MIT
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from pythonjsonlogger import jsonlogger
from typing import Optional

ROOT_LOGGER_NAME = "cronkeeper"


class ColoredFormatter(logging.Formatter):
    """
    Custom formatter for colored console output.
    """

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Format log record with colors, leaving the record untouched for other handlers."""
        log_color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        original = record.levelname
        record.levelname = f"{log_color}{original}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class MaxLevelFilter(logging.Filter):
    """Pass only records strictly below a given level."""

    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record):
        return record.levelno < self.max_level


class SafeRotatingFileHandler(RotatingFileHandler):
    """
    Rotating file handler that reports write failures on stderr.

    The stock handler prints a full traceback per failed record; here a
    failure to persist a record is reduced to a one-line notice and the
    record is dropped.
    """

    def handleError(self, record):
        exc = sys.exc_info()[1]
        try:
            sys.stderr.write(f"Failed to write to log file: {exc}\n")
        except Exception:
            pass


def _console_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return jsonlogger.JsonFormatter(
            '%(asctime)s %(name)s %(levelname)s %(message)s'
        )
    return ColoredFormatter(
        '[%(asctime)s] %(levelname)s - %(name)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def setup_logging(
    log_level: str = "INFO",
    log_enabled: bool = True,
    log_to_file: bool = True,
    log_dir: str = "logs",
    log_file_name: str = "cronkeeper.log",
    log_rotation_size: int = 10485760,  # 10MB
    log_retention_count: int = 5,
    json_format: bool = False
) -> logging.Logger:
    """
    Configure scheduler logging.

    Records below WARNING go to stdout, WARNING and above to stderr. File
    logging writes to ``log_dir/log_file_name`` with size-based rotation.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_enabled: When False, all scheduler records are discarded
        log_to_file: Enable file logging
        log_dir: Directory for log files (created if missing)
        log_file_name: Log file name inside log_dir
        log_rotation_size: Max log file size before rotation (bytes)
        log_retention_count: Number of backup log files to keep
        json_format: Use JSON formatting for logs

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level = getattr(logging, str(log_level).upper())
    logger.setLevel(level)

    # Remove existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Prevent propagation to root logger
    logger.propagate = False

    if not log_enabled:
        logger.addHandler(logging.NullHandler())
        return logger

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.addFilter(MaxLevelFilter(logging.WARNING))
    stdout_handler.setFormatter(_console_formatter(json_format))
    logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(max(level, logging.WARNING))
    stderr_handler.setFormatter(_console_formatter(json_format))
    logger.addHandler(stderr_handler)

    log_file_path: Optional[Path] = None
    if log_to_file:
        log_file_path = Path(log_dir) / log_file_name
        try:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = SafeRotatingFileHandler(
                str(log_file_path),
                maxBytes=log_rotation_size,
                backupCount=log_retention_count,
                encoding='utf-8'
            )
        except OSError as e:
            sys.stderr.write(f"Failed to open log file {log_file_path}: {e}\n")
            log_file_path = None
        else:
            file_handler.setLevel(level)

            if json_format:
                file_formatter = jsonlogger.JsonFormatter(
                    '%(asctime)s %(name)s %(levelname)s %(module)s %(funcName)s %(lineno)d %(message)s'
                )
            else:
                file_formatter = logging.Formatter(
                    '[%(asctime)s] [%(levelname)s] %(name)s - %(message)s',
                    datefmt='%Y-%m-%dT%H:%M:%S'
                )

            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)

    logger.info(f"Logging initialized at {str(log_level).upper()} level")
    if log_file_path is not None:
        logger.info(f"File logging enabled: {log_file_path}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

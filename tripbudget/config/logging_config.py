"""Logging setup for the trip budget core and CLI."""

import json
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

from tripbudget.config.settings import TripBudgetConfig
from tripbudget.utils.logging_utils import _ContextFilter

# Attributes every LogRecord has; anything else came from LogContext or extra={}
_STANDARD_ATTRS = set(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per log line, including context fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class LoggingConfig:
    """
    Where and how log records are written.

    Attributes:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: 'standard' or 'json'
        log_file: Rotating log file; None logs to the console only
        max_file_size: Rotation size in bytes
        backup_count: Rotated files to keep
    """

    VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    VALID_FORMATS = {"standard", "json"}

    def __init__(
        self,
        log_level: str = "INFO",
        log_format: str = "standard",
        log_file: Optional[str] = None,
        max_file_size: int = 10 * 1024 * 1024,
        backup_count: int = 5,
    ):
        """
        Initialize logging configuration.

        Raises:
            ValueError: If the level or format is unknown
        """
        if log_level.upper() not in self.VALID_LEVELS:
            raise ValueError(
                f"Invalid log level: {log_level}. "
                f"Must be one of {', '.join(sorted(self.VALID_LEVELS))}"
            )
        if log_format not in self.VALID_FORMATS:
            raise ValueError(
                f"Invalid log format: {log_format}. "
                f"Must be one of {', '.join(sorted(self.VALID_FORMATS))}"
            )

        self.log_level = log_level.upper()
        self.log_format = log_format
        self.log_file = log_file
        self.max_file_size = max_file_size
        self.backup_count = backup_count

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """
        Create configuration from environment variables.

        Environment Variables:
            LOG_LEVEL: Log level (default: INFO)
            LOG_FORMAT: standard or json (default: standard)
            LOG_FILE: Rotating log file path (default: none)
        """
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            log_file=os.getenv("LOG_FILE") or None,
        )

    @classmethod
    def from_settings(
        cls,
        settings: TripBudgetConfig,
        log_format: str = "standard",
        log_file: Optional[str] = None,
    ) -> "LoggingConfig":
        """
        Build a logging configuration from application settings.

        DEBUG=true forces the DEBUG level regardless of LOG_LEVEL.
        """
        level = "DEBUG" if settings.debug else settings.log_level
        return cls(log_level=level, log_format=log_format, log_file=log_file)


def configure_logging(config: LoggingConfig) -> None:
    """
    Replace the root logger's handlers according to ``config``.

    Args:
        config: LoggingConfig instance
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    level = getattr(logging, config.log_level)
    root_logger.setLevel(level)

    if config.log_format == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handlers: list = [logging.StreamHandler()]
    if config.log_file:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=config.log_file,
                maxBytes=config.max_file_size,
                backupCount=config.backup_count,
            )
        )

    context_filter = _ContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; handlers come from configure_logging()."""
    return logging.getLogger(name)


def reset_logging() -> None:
    """Remove all root handlers and restore the default level (for tests)."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.WARNING)

"""
Centralized logging configuration for the Exa CLI.

This module provides:
- A stderr handler so diagnostics never mix with command output on stdout
- A compact "[debug] ..." format for interactive --debug sessions
- Optional structured JSON output (LOG_FORMAT=json) for log aggregation
- Environment-based configuration
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER_NAME = "exa"


class JsonFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.
    Outputs logs in JSON format for easy parsing by log aggregation systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as a JSON string.

        Args:
            record: The log record to format

        Returns:
            JSON string representation of the log record
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


class LoggerConfig:
    """
    Centralized logger configuration and management.

    All CLI loggers live under the "exa" namespace. Nothing is emitted unless
    the level is lowered (LOG_LEVEL env var or --debug), so normal command
    output on stdout stays clean.
    """

    LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text").lower()

    _initialized = False

    @classmethod
    def setup_logging(cls, debug: bool = False, stream=None) -> None:
        """
        Set up the logging configuration for the CLI.

        Safe to call more than once: the second call replaces the handler,
        which is how --debug takes effect after module-level loggers exist.

        Args:
            debug: Force DEBUG level with the "[debug]" console format
            stream: Output stream for the handler (defaults to stderr)
        """
        level_name = "DEBUG" if debug else cls.LOG_LEVEL
        level = getattr(logging, level_name, logging.WARNING)

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(level)
        root_logger.propagate = False

        # Remove any existing handlers
        root_logger.handlers.clear()

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(level)
        if cls.LOG_FORMAT == "json":
            handler.setFormatter(JsonFormatter())
        elif debug:
            handler.setFormatter(logging.Formatter(fmt="[debug] %(message)s"))
        else:
            handler.setFormatter(
                logging.Formatter(fmt="[%(levelname)s] [%(name)s] %(message)s")
            )
        root_logger.addHandler(handler)

        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger instance with the specified name.

        Args:
            name: The name of the logger (typically __name__)

        Returns:
            Configured logger instance under the "exa" namespace
        """
        if not cls._initialized:
            cls.setup_logging()

        if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
            return logging.getLogger(name)
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# Convenience function for getting loggers
def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: The name of the logger (typically __name__)

    Returns:
        Configured logger instance

    Example:
        >>> from utils.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("POST https://api.exa.ai/search")
    """
    return LoggerConfig.get_logger(name)

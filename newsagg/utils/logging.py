"""Structured logging configuration with JSON formatting.

This module provides centralized logging setup with support for both JSON
and text formats, rotating file handlers, and structured log messages.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from pythonjsonlogger import jsonlogger  # type: ignore[import-untyped, unused-ignore]

from newsagg.core.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):  # type: ignore[name-defined, misc]
    """Custom JSON formatter with additional context fields."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        """Add custom fields to log records.

        Args:
            log_record: The log record dictionary to modify
            record: The original LogRecord object
            message_dict: Additional message fields
        """
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno
        log_record["environment"] = settings.environment

        # Run-scoped context attached by LogContext
        run_id = getattr(record, "run_id", None)
        if run_id is not None:
            log_record["run_id"] = run_id

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def setup_logging(
    level: str | None = None,
    log_format: str | None = None,
    log_file: str | None = None,
) -> None:
    """Configure application-wide logging.

    Sets up logging with both console and file handlers, using JSON or text
    format based on configuration. Creates log directory if it doesn't exist.

    Args:
        level: Log level name (default from settings)
        log_format: "json" or "text" (default from settings)
        log_file: Path of the rotating log file (default from settings)
    """
    _level = getattr(logging, (level or settings.log_level).upper())
    _format = log_format or settings.log_format
    _file = log_file or settings.log_file

    log_file_path = Path(_file)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(_level)

    file_handler = RotatingFileHandler(
        _file,
        maxBytes=settings.log_max_bytes,
        backupCount=settings.log_backup_count,
    )
    file_handler.setLevel(_level)

    formatter: logging.Formatter
    if _format == "json":
        formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    console_handler.setFormatter(formatter)
    file_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str, extra: dict[str, Any] | None = None) -> logging.LoggerAdapter[logging.Logger]:
    """Get a logger with optional extra context.

    Args:
        name: Logger name (typically __name__)
        extra: Additional context to include in all log messages

    Returns:
        LoggerAdapter with extra context
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, extra or {})


class LogContext:
    """Context manager for adding temporary context to log messages.

    Example:
        with LogContext(run_id="abc123"):
            logger.info("Aggregating")
    """

    def __init__(self, **kwargs: Any) -> None:
        """Initialize log context.

        Args:
            **kwargs: Context fields to add to log messages
        """
        self.context = kwargs
        self.old_factory = logging.getLogRecordFactory()

    def __enter__(self) -> "LogContext":
        """Enter context and modify log record factory."""

        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = self.old_factory(*args, **kwargs)
            for key, value in self.context.items():
                setattr(record, key, value)
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context and restore original log record factory."""
        logging.setLogRecordFactory(self.old_factory)

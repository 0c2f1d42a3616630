#!/usr/bin/env python3
"""Centralized logging utilities with consistent formatting and structured events."""

import json
import logging
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

# Global configuration
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_DEFAULT_LEVEL = logging.INFO
_CONFIGURED_LOGGERS: set[str] = set()
_FILE_HANDLER: RotatingFileHandler | None = None


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


def setup_logger(
    name: str,
    level: int | None = None,
    format_string: str | None = None,
    stream: Any = None,
) -> logging.Logger:
    """Set up a logger with consistent formatting.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default: INFO)
        format_string: Custom format string (optional)
        stream: Output stream (default: sys.stderr)

    Returns:
        Configured logger instance

    Example:
        >>> from voicegrid.core.logging_utils import setup_logger
        >>> logger = setup_logger(__name__)
        >>> logger.info("Session started")
    """
    logger = logging.getLogger(name)

    # Only configure once per logger name
    if name in _CONFIGURED_LOGGERS:
        return logger

    if level is None:
        level = _DEFAULT_LEVEL
    logger.setLevel(level)

    # stderr keeps console-mode results output on stdout clean
    if not logger.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        formatter = logging.Formatter(
            format_string or _LOG_FORMAT,
            datefmt=_LOG_DATE_FORMAT,
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if _FILE_HANDLER is not None:
        logger.addHandler(_FILE_HANDLER)

    # Prevent propagation to root logger (avoid duplicate logs)
    logger.propagate = False

    _CONFIGURED_LOGGERS.add(name)

    return logger


def set_global_log_level(level: int | str):
    """Set log level for all configured loggers.

    Args:
        level: Logging level (e.g., logging.DEBUG or "DEBUG")
    """
    global _DEFAULT_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    _DEFAULT_LEVEL = level

    for logger_name in _CONFIGURED_LOGGERS:
        logging.getLogger(logger_name).setLevel(level)


def configure_file_logging(
    log_file: str | Path = "runtime/voicegrid.log",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 3,
    structured: bool = False,
) -> RotatingFileHandler:
    """Configure file-based logging with rotation.

    The handler is attached to every logger configured so far and to every
    logger configured afterwards.

    Args:
        log_file: Log file path
        max_bytes: Maximum file size before rotation
        backup_count: Number of backup files to keep
        structured: Write JSON lines instead of plain text

    Returns:
        The shared file handler
    """
    global _FILE_HANDLER

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
    )
    if structured:
        file_handler.setFormatter(JSONFormatter())
    else:
        file_handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT))

    for logger_name in _CONFIGURED_LOGGERS:
        logger = logging.getLogger(logger_name)
        if _FILE_HANDLER is not None:
            logger.removeHandler(_FILE_HANDLER)
        logger.addHandler(file_handler)

    if _FILE_HANDLER is not None:
        _FILE_HANDLER.close()
    _FILE_HANDLER = file_handler
    return file_handler


def close_file_logging():
    """Detach and close the shared file handler, if any."""
    global _FILE_HANDLER

    if _FILE_HANDLER is None:
        return
    for logger_name in _CONFIGURED_LOGGERS:
        logging.getLogger(logger_name).removeHandler(_FILE_HANDLER)
    _FILE_HANDLER.close()
    _FILE_HANDLER = None


def configure_from_config(config: dict[str, Any]):
    """Apply the ``logging`` section of the app config.

    Args:
        config: Configuration dictionary
    """
    log_config = config.get("logging", {})
    set_global_log_level(log_config.get("level", "INFO"))

    log_file = log_config.get("file")
    if log_file:
        configure_file_logging(
            log_file,
            max_bytes=int(log_config.get("max_size_mb", 10) * 1024 * 1024),
            backup_count=log_config.get("backup_count", 3),
            structured=log_config.get("structured", False),
        )


def get_logger_stats() -> dict[str, Any]:
    """Get statistics about configured loggers.

    Returns:
        Dictionary with logger statistics
    """
    return {
        "count": len(_CONFIGURED_LOGGERS),
        "loggers": sorted(_CONFIGURED_LOGGERS),
        "default_level": logging.getLevelName(_DEFAULT_LEVEL),
    }


def log_event(
    logger: logging.Logger,
    event_name: str,
    data: dict[str, Any] | None = None,
):
    """Log a structured event as a single line.

    Args:
        logger: Logger instance
        event_name: Event name (e.g., 'command_recognized')
        data: Optional event data

    Example:
        >>> log_event(logger, "command_recognized", {"type": "go_to_cell", "index": 4})
    """
    data_str = ""
    if data:
        data_str = " " + " ".join(f"{k}={v}" for k, v in data.items())
    logger.info(f"[EVENT] {event_name}{data_str}")

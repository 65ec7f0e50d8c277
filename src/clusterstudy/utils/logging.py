"""Logging utilities with type hints."""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, TextIO, Union


class JSONFormatter(logging.Formatter):
    """JSON formatter for standard Python logging."""

    def __init__(
        self,
        include_timestamp: bool = True,
        include_location: bool = True,
        extra_fields: Optional[Dict[str, Any]] = None,
    ):
        """Initialize JSON formatter.

        Args:
            include_timestamp: Include timestamp in logs
            include_location: Include file/line information
            extra_fields: Extra fields to include in all logs
        """
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_location = include_location
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON line."""
        log_entry: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_timestamp:
            log_entry["timestamp"] = datetime.fromtimestamp(record.created).isoformat()

        if self.include_location:
            log_entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        log_entry.update(self.extra_fields)

        return json.dumps(log_entry, default=str)


def setup_logger(
    name: Optional[str] = None,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    json_format: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Set up a logger with consistent formatting.

    Args:
        name: Logger name (defaults to root logger)
        level: Logging level (e.g., logging.INFO or "INFO")
        log_file: Optional file to write logs to
        format_string: Custom format string (ignored for JSON output)
        json_format: Emit one JSON object per line instead of plain text
        stream: Console stream (defaults to stdout)

    Returns:
        Configured logger instance
    """
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        if format_string is None:
            format_string = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
        formatter = logging.Formatter(format_string, datefmt="%Y-%m-%d %H:%M:%S")

    # Console handler
    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler if requested
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

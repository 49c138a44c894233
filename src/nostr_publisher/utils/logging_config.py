"""
Logging configuration for the Nostr publisher.

Provides plain and JSON log formats for library use; the CLI installs its
own rich console handler on top of this.
"""

import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union


class LogFormat(Enum):
    """Log format types."""
    STANDARD = "standard"
    JSON = "json"
    DETAILED = "detailed"


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Values passed through ``extra={"extra_data": {...}}`` are merged into
    the record, so compile summaries can be logged as structured fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        extra_data = getattr(record, "extra_data", None)
        if isinstance(extra_data, dict):
            log_data.update(extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False, separators=(",", ":"))


def create_formatter(log_format: LogFormat) -> logging.Formatter:
    """Formatter for the given format type."""
    if log_format is LogFormat.JSON:
        return JSONFormatter()
    if log_format is LogFormat.DETAILED:
        return logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s"
        )
    return logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_format: Union[LogFormat, str] = LogFormat.STANDARD,
    log_file: Optional[Union[str, Path]] = None,
    enable_console: bool = True
) -> logging.Logger:
    """
    Configure the ``nostr_publisher`` logger.

    Args:
        level: Log level name or number
        log_format: One of ``LogFormat`` or its value
        log_file: Optional file receiving the same records
        enable_console: Attach a stream handler

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    if isinstance(log_format, str):
        log_format = LogFormat(log_format.lower())

    logger = logging.getLogger("nostr_publisher")
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = create_formatter(log_format)

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

"""
Logging setup - Text or JSON log output for applications using aphrodite.

Library modules only create named loggers; applications call
setup_logging() once to decide where and how records are written.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO


TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# LogRecord attributes that are not user-supplied extras
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Formats each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value

        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human readable single-line format."""

    def __init__(self, fmt: str = TEXT_FORMAT):
        super().__init__(fmt)


def setup_logging(
    level: int = logging.INFO,
    log_format: str = "text",
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Minimum level to emit
        log_format: 'text' or 'json'
        stream: Destination; defaults to stderr

    Returns:
        The configured root logger
    """
    if log_format not in ("text", "json"):
        raise ValueError(f"Unknown log format: {log_format}")

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if log_format == "json" else TextFormatter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

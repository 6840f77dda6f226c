"""Logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

# Attributes every LogRecord carries; anything else came in through ``extra``.
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILE_NAME = "podcast-drafter.log"
LOG_FILE_MAX_BYTES = 5_000_000
LOG_FILE_BACKUPS = 3


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with ``extra`` fields merged in at the top level."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(
            (key, value) for key, value in vars(record).items() if key not in _STANDARD_ATTRS
        )
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False, default=str)


def _formatter(structured: bool) -> logging.Formatter:
    return JsonFormatter() if structured else logging.Formatter(_PLAIN_FORMAT)


def configure_logging(
    *,
    level: int = logging.INFO,
    structured: bool | None = None,
    log_dir: Path | None = None,
) -> None:
    """Set up the root logger once: stderr console plus a rotating JSON file.

    When handlers already exist only their formatter is swapped, and only if
    ``structured`` was given explicitly.
    """
    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        if structured is not None:
            for existing in root.handlers:
                existing.setFormatter(_formatter(structured))
        return

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_formatter(True if structured is None else structured))
    root.addHandler(console)

    if log_dir is None:
        return
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setFormatter(JsonFormatter())
    root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]

"""Logging setup for the snapline CLI and for applications embedding it.

Records can be rendered as one JSON object per line, tagged with a category
derived from the logger name (path, intersection, snapping, cli, system).
Anything passed through `extra=` is collected under the "extra" key.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import TextIO

PLAIN_FORMAT = "%(asctime)s %(levelname)5s [%(name)s] %(message)s"
PLAIN_DATE_FORMAT = "%H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


class StructuredFormatter(logging.Formatter):
    """Render records as single-line JSON objects."""

    # First matching prefix wins
    CATEGORIES: tuple[tuple[str, str], ...] = (
        ("snapline.path_parsing", "path"),
        ("snapline.curves", "path"),
        ("snapline.intersections", "intersection"),
        ("snapline.layout", "intersection"),
        ("snapline.snapping", "snapping"),
        ("snapline.grid", "snapping"),
        ("snapline.overlay", "snapping"),
        ("snapline.cli", "cli"),
    )

    def category_for(self, logger_name: str) -> str:
        return next(
            (category for prefix, category in self.CATEGORIES if logger_name.startswith(prefix)),
            "system",
        )

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "category": self.category_for(record.name),
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Values json can't encode are written as their str()
        return json.dumps(entry, default=str)


class ErrorFilter(logging.Filter):
    """Let through ERROR and CRITICAL records only."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def _rotating_handler(
    path: str, formatter: logging.Formatter, *, errors_only: bool = False
) -> RotatingFileHandler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    handler.setFormatter(formatter)
    if errors_only:
        handler.addFilter(ErrorFilter())
    return handler


def configure_logging(
    *,
    json_format: bool = True,
    log_level: int | str = logging.INFO,
    log_file: str | None = None,
    error_log_file: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Replace the root logger's handlers.

    Args:
        json_format: Write JSON lines instead of the plain text format
        log_level: Minimum level on the root logger
        log_file: Also write every record to this rotating file
        error_log_file: Also write ERROR and above to this rotating file
        stream: Console stream (default: sys.stderr)
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(log_level)

    formatter = (
        StructuredFormatter()
        if json_format
        else logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATE_FORMAT)
    )

    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    if log_file:
        handlers.append(_rotating_handler(log_file, formatter))
    if error_log_file:
        handlers.append(_rotating_handler(error_log_file, formatter, errors_only=True))

    for handler in handlers:
        root.addHandler(handler)


def configure_from_settings(*, verbose: bool = False, log_file: str | None = None) -> None:
    """Configure logging from SNAPLINE_LOG_* settings.

    verbose forces DEBUG; log_file overrides SNAPLINE_LOG_FILE.
    """
    from snapline.config import settings

    configure_logging(
        json_format=settings.log_json,
        log_level=logging.DEBUG if verbose else settings.log_level.upper(),
        log_file=log_file or settings.log_file,
        error_log_file=settings.error_log_file,
    )

"""
Logging setup for the StackBlitz BFF.

Modules log through ``logging.getLogger(__name__)``. ``setup_logging``
attaches handlers to the ``stackblitz_bff`` logger only, so uvicorn and
library loggers keep their own configuration.

Console lines are short and colored on a TTY (``NO_COLOR`` turns color
off). JSONL output writes one object per record, with any structured data
passed as ``extra={"context": {...}}``.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO, Any

ROOT_LOGGER = "stackblitz_bff"

_NO_COLOR = bool(os.environ.get("NO_COLOR")) or not sys.stdout.isatty()

_RESET = "\033[0m"
_DIM = "\033[2m"
_BLUE = "\033[34m"
_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}


def _paint(text: str, color: str) -> str:
    return text if _NO_COLOR or not color else f"{color}{text}{_RESET}"


def _source_of(record: logging.LogRecord) -> dict[str, Any]:
    source: dict[str, Any] = {}
    if record.pathname:
        source["file"] = record.pathname
    if record.lineno:
        source["line"] = record.lineno
    if record.funcName and record.funcName != "<module>":
        source["function"] = record.funcName
    return source


class JSONLFormatter(logging.Formatter):
    """
    One JSON object per record.

    Keys: ``timestamp`` (UTC, ISO 8601), ``level``, ``logger``, ``message``,
    plus ``context`` when the record carries one, ``source`` for warnings
    and above, and ``exception`` when exc_info is set.

    Example output:
    {"timestamp": "2026-01-15T10:30:45.123000+00:00", "level": "ERROR", "logger": "stackblitz_bff.graphql.adapters.base", "message": "[stackblitz] GET /projects/p1 failed: Not found (status: 404) [stackblitz]"}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = getattr(record, "context", None)
        if context:
            entry["context"] = context

        if record.levelno >= logging.WARNING:
            source = _source_of(record)
            if source:
                entry["source"] = source

        if record.exc_info and record.exc_info[0]:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {"type": exc_type.__name__, "message": str(exc_value)}

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """``HH:MM:SS [component] LEVEL: message``, the level omitted for INFO."""

    def format(self, record: logging.LogRecord) -> str:
        component = record.name.removeprefix(f"{ROOT_LOGGER}.")
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        if _NO_COLOR:
            parts = [f"[{clock}]", f"[{component}]"]
        else:
            parts = [_paint(clock, _DIM), _paint(f"[{component}]", _BLUE)]

        if record.levelno != logging.INFO:
            parts.append(_paint(record.levelname, _LEVEL_COLORS.get(record.levelno, "")) + ":")

        parts.append(record.getMessage())
        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(
    level: int | str = logging.INFO,
    json_output: bool = False,
    log_file: Path | str | None = None,
    *,
    stream: IO[str] | None = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """
    Configure the ``stackblitz_bff`` logger, replacing earlier handlers.

    Args:
        level: Minimum level, as a number or a name such as "debug"
        json_output: Write JSONL to the console instead of readable lines
        log_file: Also write JSONL to this file, rotated by size
        stream: Console stream (default: stderr)
        max_bytes: Size at which the log file rotates
        backup_count: Rotated files to keep

    Returns:
        The package logger

    Raises:
        ValueError: If ``level`` is not a known level name
    """
    level = _resolve_level(level)

    package_logger = logging.getLogger(ROOT_LOGGER)
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(JSONLFormatter() if json_output else ConsoleFormatter())
    handlers.append(console)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        rotating.setFormatter(JSONLFormatter())
        handlers.append(rotating)

    for handler in handlers:
        handler.setLevel(level)
        package_logger.addHandler(handler)

    package_logger.debug(
        "Logging initialized",
        extra={"context": {"json_output": json_output, "log_file": str(log_file or "")}},
    )
    return package_logger


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    context: dict[str, Any] | None = None,
    **kwargs: Any,
) -> None:
    """Log ``message`` with ``context`` and ``kwargs`` merged into the record's context."""
    merged = {**(context or {}), **kwargs}
    logger.log(level, message, extra={"context": merged} if merged else {})


__all__ = [
    "ConsoleFormatter",
    "JSONLFormatter",
    "ROOT_LOGGER",
    "log_with_context",
    "setup_logging",
]

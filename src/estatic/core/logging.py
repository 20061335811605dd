"""Structured logging for the field simulation.

Log calls take an event message plus a ``data`` dict of measurements (change
counts, line end tallies, timings). The console shows the data as trailing
``key=value`` pairs; the JSON lines file keeps it nested under ``data`` so
every record has the same top-level keys:

    {"schema": 1, "time": ..., "level": ..., "logger": ..., "event": ..., "data": {...}}

Handlers are installed on the ``estatic`` package logger, leaving the root
logger to the host application.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Iterator

import numpy as np

PACKAGE_LOGGER = "estatic"
SCHEMA_VERSION = 1


def _jsonable(value: Any) -> Any:
    """JSON fallback for values that show up in simulation log data."""
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, Enum):
        return value.value
    return str(value)


class JSONFormatter(logging.Formatter):
    """One JSON object per record with a fixed set of top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "schema": SCHEMA_VERSION,
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            "data": getattr(record, "data", {}),
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=_jsonable)


class ConsoleFormatter(logging.Formatter):
    """Human-readable lines with the data dict appended as key=value pairs."""

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        data = getattr(record, "data", None)
        if not data:
            return line
        fields = " ".join(f"{key}={_format_value(value)}" for key, value in data.items())
        return f"{line} | {fields}"


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.4g}"
    if isinstance(value, dict):
        return ",".join(f"{k}:{v}" for k, v in value.items())
    return str(value)


def setup_logging(log_path: Path | None = None, level: int = logging.INFO) -> None:
    """Install console and optional JSON lines handlers on the package logger.

    Args:
        log_path: Optional path for a JSON lines run log
        level: Logging level
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ConsoleFormatter())
    package_logger.addHandler(console_handler)

    if log_path:
        log_path = Path(log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(JSONFormatter())
        package_logger.addHandler(file_handler)


def get_logger(name: str) -> "StructuredLogger":
    """Get a structured logger for a module (usually ``__name__``)."""
    return StructuredLogger(logging.getLogger(name))


class StructuredLogger:
    """Logger taking an event message and a dict of measurements."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def _log(self, level: int, msg: str, data: dict[str, Any] | None = None) -> None:
        self.logger.log(level, msg, extra={"data": data or {}})

    def debug(self, msg: str, data: dict[str, Any] | None = None) -> None:
        self._log(logging.DEBUG, msg, data)

    def info(self, msg: str, data: dict[str, Any] | None = None) -> None:
        self._log(logging.INFO, msg, data)

    def warning(self, msg: str, data: dict[str, Any] | None = None) -> None:
        self._log(logging.WARNING, msg, data)

    def error(self, msg: str, data: dict[str, Any] | None = None) -> None:
        self._log(logging.ERROR, msg, data)

    @contextmanager
    def timed(self, msg: str, level: int = logging.INFO) -> Iterator[dict[str, Any]]:
        """Log ``msg`` with ``elapsed_s`` once the block completes.

        Yields a dict the block fills with measurements. Nothing is logged if
        the block raises or ``level`` is disabled.
        """
        data: dict[str, Any] = {}
        start = time.perf_counter()
        yield data
        if self.is_enabled_for(level):
            data["elapsed_s"] = time.perf_counter() - start
            self._log(level, msg, data)


__all__ = [
    "PACKAGE_LOGGER",
    "SCHEMA_VERSION",
    "setup_logging",
    "get_logger",
    "StructuredLogger",
    "JSONFormatter",
    "ConsoleFormatter",
]

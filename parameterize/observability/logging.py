"""Structured logging for parameterize.

Library modules log through ``logging.getLogger(__name__)``, so nothing is
printed unless the application configures the ``parameterize`` logger.
This module provides that configuration:
- JSON-formatted log output for machine consumption
- Human-readable colored output for development
- Context fields bound with ``log_context`` and attached to every record

Structured fields are passed with ``extra={"structured_data": {...}}``.

Example:
    Basic usage::

        from parameterize.observability.logging import configure_logging, log_context

        configure_logging(level="DEBUG", json_format=True)

        with log_context(suite="checkout"):
            parameterize(body)
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    from parameterize.config import ParameterizeConfig

ROOT_LOGGER_NAME = "parameterize"

_context_fields: ContextVar[dict[str, Any] | None] = ContextVar(
    "parameterize_log_context", default=None
)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Attributes:
        include_timestamp: Whether to include timestamp in output.
        include_location: Whether to include file/line/function in output.
        timestamp_format: Format for timestamp ('iso', 'unix', or strftime format).
        extra_fields: Additional fields to include in every log record.
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_location: bool = False,
        timestamp_format: str = "iso",
        extra_fields: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_location = include_location
        self.timestamp_format = timestamp_format
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {}

        if self.include_timestamp:
            if self.timestamp_format == "iso":
                log_data["timestamp"] = datetime.now(timezone.utc).isoformat()
            elif self.timestamp_format == "unix":
                log_data["timestamp"] = time.time()
            else:
                log_data["timestamp"] = self.formatTime(record, self.timestamp_format)

        log_data["level"] = record.levelname.lower()
        log_data["message"] = record.getMessage()
        log_data["logger"] = record.name

        if self.include_location:
            log_data["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        context = _context_fields.get()
        if context:
            log_data["context"] = dict(context)

        structured_data = getattr(record, "structured_data", None)
        if structured_data:
            log_data["data"] = dict(structured_data)

        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        for key, value in self.extra_fields.items():
            if key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str, ensure_ascii=False)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, stream: TextIO | None = None) -> None:
        super().__init__()
        self.use_colors = use_colors and self._supports_color(stream or sys.stderr)

    @staticmethod
    def _supports_color(stream: TextIO) -> bool:
        if os.environ.get("NO_COLOR"):
            return False
        if sys.platform == "win32":
            return os.environ.get("ANSICON") is not None or "WT_SESSION" in os.environ
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

        if self.use_colors:
            color = self.COLORS.get(record.levelname, "")
            level = f"{color}{record.levelname:8}{self.RESET}"
        else:
            level = f"{record.levelname:8}"

        base = f"{timestamp} {level} [{record.name}] {record.getMessage()}"

        context = _context_fields.get()
        if context:
            base += f" | context={json.dumps(dict(context), default=str)}"

        structured_data = getattr(record, "structured_data", None)
        if structured_data:
            base += f" | data={json.dumps(structured_data, default=str)}"

        if record.exc_info:
            base += f"\n{self.formatException(record.exc_info)}"

        return base


def configure_logging(
    level: int | str = logging.WARNING,
    json_format: bool = False,
    include_location: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the ``parameterize`` logger with a single stream handler.

    Calling it again replaces the previous handler.

    Args:
        level: Minimum log level.
        json_format: Use JSON format for output.
        include_location: Include file/line/function in JSON output.
        stream: Output stream (defaults to sys.stderr).

    Returns:
        The configured logger.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.propagate = False

    output = stream or sys.stderr
    handler = logging.StreamHandler(output)
    handler.setLevel(level)

    if json_format:
        formatter: logging.Formatter = StructuredFormatter(include_location=include_location)
    else:
        formatter = HumanReadableFormatter(stream=output)

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return root_logger


def configure_from(config: ParameterizeConfig, stream: TextIO | None = None) -> logging.Logger:
    """Apply the logging options of a ParameterizeConfig."""
    return configure_logging(
        level=config.log_level_number,
        json_format=config.json_logs,
        stream=stream,
    )


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Context manager for temporary log context.

    Adds the specified fields to all log messages within the context,
    then restores the previous context on exit.

    Example:
        >>> with log_context(suite="checkout"):
        ...     parameterize(body)  # Every record carries suite=checkout
    """
    current = dict(_context_fields.get() or {})
    current.update(kwargs)
    token = _context_fields.set(current)
    try:
        yield
    finally:
        _context_fields.reset(token)


def get_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    current = _context_fields.get()
    return dict(current) if current else {}

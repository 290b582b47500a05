"""Structured logging with OTEL trace context.

Provides JSON or colored log output on top of the standard logging
module. When a span is recording, its trace and span ids are added to
every JSON record.

Usage:
    from jinja_udf.logging import get_logger

    logger = get_logger("renderer")
    logger.info("Batch rendered", rows=2048)
"""

import json
import logging
import sys
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, TextIO

from opentelemetry import trace

from jinja_udf.logging.colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    RED,
    RESET,
    YELLOW,
)
from jinja_udf.types import LogFormat, LogLevel

LOGGER_NAMESPACE = "jinja_udf"

_RESERVED_RECORD_FIELDS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "taskName",
    }
)

_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


@dataclass
class LogConfig:
    """Logger configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    truncate_at: int = 200
    output: TextIO | None = None  # None = sys.stderr at handler creation


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Collect structured fields passed through ``extra``."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_RECORD_FIELDS
    }


class StructuredLogFormatter(logging.Formatter):
    """JSON formatter with trace context injection.

    Formats log records as JSON with:
    - timestamp (ISO 8601)
    - level
    - component (logger name)
    - message
    - trace_id / span_id (if a span is recording)
    - Additional fields from extra
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }

        span = trace.get_current_span()
        if span and span.is_recording():
            ctx = span.get_span_context()
            if ctx.is_valid:
                log_data["trace_id"] = format(ctx.trace_id, "032x")
                log_data["span_id"] = format(ctx.span_id, "016x")

        log_data.update(_extra_fields(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ColoredLogFormatter(logging.Formatter):
    """Human readable formatter: ``[COMPONENT] message {fields}``."""

    _LEVEL_COLORS = {
        logging.DEBUG: LIGHT_BLUE,
        logging.INFO: CYAN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
    }

    def __init__(self, truncate_at: int = 200):
        super().__init__()
        self.truncate_at = truncate_at

    def format(self, record: logging.LogRecord) -> str:
        color = self._LEVEL_COLORS.get(record.levelno, RESET)
        component = record.name.removeprefix(f"{LOGGER_NAMESPACE}.")
        component_color = GREEN if record.levelno < logging.WARNING else MAGENTA

        output = (
            f"{component_color}[{component.upper()}]{RESET} "
            f"{color}{record.getMessage()}{RESET}"
        )

        fields = _extra_fields(record)
        if fields:
            fields_str = str(fields)
            if len(fields_str) > self.truncate_at:
                fields_str = fields_str[: self.truncate_at] + "..."
            output += f" {LIGHT_BLUE}{fields_str}{RESET}"

        if record.exc_info:
            output += "\n" + self.formatException(record.exc_info)

        return output


def _make_formatter(config: LogConfig) -> logging.Formatter:
    if config.format == LogFormat.COLORED:
        return ColoredLogFormatter(truncate_at=config.truncate_at)
    return StructuredLogFormatter()


class UDFLogger:
    """Structured logger for one component.

    Wraps Python logging with:
    - Automatic trace context injection
    - Keyword arguments as structured fields

    Records propagate to the ``jinja_udf`` namespace logger, which owns
    the handler installed by configure_logging().
    """

    def __init__(self, name: str):
        """Initialize logger.

        Args:
            name: Component name
        """
        self._logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        """Log message with extra fields.

        Args:
            level: Log level
            message: Log message
            **kwargs: Additional fields to include
        """
        _ensure_configured()
        self._logger.log(level, message, extra=kwargs)

    def is_enabled_for(self, level: int) -> bool:
        """Check whether a record at ``level`` would be emitted."""
        _ensure_configured()
        return self._logger.isEnabledFor(level)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        _ensure_configured()
        self._logger.exception(message, extra=kwargs)


# Logger cache
_loggers: dict[str, UDFLogger] = {}
_config: LogConfig | None = None
_handler: logging.Handler | None = None


def configure_logging(config: LogConfig) -> None:
    """Install the handler and level for every jinja-udf logger.

    Args:
        config: Logger configuration
    """
    global _config, _handler  # noqa: PLW0603
    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    if _handler is not None:
        namespace_logger.removeHandler(_handler)

    _handler = logging.StreamHandler(config.output or sys.stderr)
    _handler.setFormatter(_make_formatter(config))
    namespace_logger.addHandler(_handler)
    namespace_logger.setLevel(_LEVELS.get(config.level, logging.INFO))
    _config = config


def get_log_config() -> LogConfig:
    """Return the active logging configuration."""
    _ensure_configured()
    assert _config is not None
    return _config


def _ensure_configured() -> None:
    if _config is None:
        configure_logging(LogConfig())


def get_logger(name: str) -> UDFLogger:
    """Get or create a structured logger.

    Args:
        name: Component name

    Returns:
        UDFLogger instance
    """
    if name not in _loggers:
        _loggers[name] = UDFLogger(name)
    return _loggers[name]


def reset_loggers() -> None:
    """Reset logger cache and configuration (for testing)."""
    global _loggers, _config, _handler  # noqa: PLW0603
    if _handler is not None:
        logging.getLogger(LOGGER_NAMESPACE).removeHandler(_handler)
    _loggers = {}
    _config = None
    _handler = None

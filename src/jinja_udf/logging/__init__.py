"""jinja-udf logging - Structured logging for binding and rendering."""

from .colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    RED,
    RESET,
    YELLOW,
)
from .logger import (
    ColoredLogFormatter,
    LogConfig,
    StructuredLogFormatter,
    UDFLogger,
    configure_logging,
    get_log_config,
    get_logger,
    reset_loggers,
)

__all__ = [
    # Logger classes
    "UDFLogger",
    "LogConfig",
    "StructuredLogFormatter",
    "ColoredLogFormatter",
    "get_logger",
    "get_log_config",
    "configure_logging",
    "reset_loggers",
    # Colors
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]

"""Shared enumerations for jinja-udf."""

from enum import Enum


class LogLevel(str, Enum):
    """Log verbosity level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Log output format."""

    COLORED = "colored"
    JSON = "json"


class LogicalType(str, Enum):
    """Query engine logical type of an argument expression."""

    VARCHAR = "VARCHAR"
    JSON = "JSON"
    BOOLEAN = "BOOLEAN"
    BIGINT = "BIGINT"
    DOUBLE = "DOUBLE"
    LIST = "LIST"
    SQLNULL = "NULL"
    ANY = "ANY"


class ArgumentName(str, Enum):
    """Recognized optional argument aliases."""

    AUTOESCAPE = "autoescape"
    TEMPLATE_PATH = "template_path"
    AUTOESCAPE_EXTENSIONS = "autoescape_extensions"
    UNKNOWN = "unknown"

    @classmethod
    def from_alias(cls, alias: str) -> "ArgumentName":
        """Look up an alias, falling back to UNKNOWN.

        Args:
            alias: Argument alias as written in the call

        Returns:
            Matching ArgumentName
        """
        try:
            return cls(alias)
        except ValueError:
            return cls.UNKNOWN


class CallShape(str, Enum):
    """Invocation shape of a bound render call."""

    NO_CONTEXT = "no_context"  # template_render(expression)
    WITH_CONTEXT = "with_context"  # template_render(expression, context)


class ResultTag(str, Enum):
    """Tag of a rendering service result."""

    OK = "ok"
    ERR = "err"

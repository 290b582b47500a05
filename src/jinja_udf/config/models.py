"""jinja-udf configuration data models."""

from dataclasses import dataclass, field

from jinja_udf.types import LogFormat, LogLevel


@dataclass
class FunctionConfig:
    """SQL function names registered on a connection."""

    name: str = "template_render"  # (expression, context)
    no_context_name: str = "template_render_plain"  # (expression)


@dataclass
class RenderDefaults:
    """Default values for the optional render arguments."""

    autoescape: bool = True
    template_path: str = ""
    autoescape_extensions: list[str] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    truncate_at: int = 200


@dataclass
class UDFConfig:
    """Root configuration."""

    function: FunctionConfig = field(default_factory=FunctionConfig)
    defaults: RenderDefaults = field(default_factory=RenderDefaults)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

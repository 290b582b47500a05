"""jinja-udf configuration."""

from .loader import (
    ConfigLoader,
    apply_logging_config,
    get_config_loader,
    load_config,
    resolve_env_vars,
)
from .models import FunctionConfig, LoggingConfig, RenderDefaults, UDFConfig

__all__ = [
    # Models
    "UDFConfig",
    "FunctionConfig",
    "RenderDefaults",
    "LoggingConfig",
    # Loader
    "ConfigLoader",
    "get_config_loader",
    "load_config",
    "apply_logging_config",
    "resolve_env_vars",
]

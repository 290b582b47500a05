"""jinja-udf configuration loader."""

import os
import re
import typing
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from jinja_udf.errors import create_error
from jinja_udf.logging import LogConfig, configure_logging, get_logger
from jinja_udf.types import LogFormat, LogLevel, ValidationIssue, ValidationResult

from .models import UDFConfig

CONFIG_PATH_ENV = "JINJA_UDF_CONFIG_PATH"

_VALID_SECTIONS = {
    "function": {"name", "no_context_name"},
    "defaults": {"autoescape", "template_path", "autoescape_extensions"},
    "logging": {"level", "format", "truncate_at"},
}

logger = get_logger("config")


def resolve_env_vars(value: str) -> str:
    """Resolve environment variable references in string.

    Supports:
    - ${VAR} - Required, error if not set
    - ${VAR:-default} - With default value
    - ${VAR:?error message} - Required with custom error

    Args:
        value: String with potential env var references

    Returns:
        String with env vars resolved

    Raises:
        UDFError: If required var not set
    """
    pattern = r"\$\{([^}:]+)(?::([?-])([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        operator = match.group(2)  # '-' or '?' or None
        operand = match.group(3)  # default value or error message

        env_value = os.environ.get(var_name)

        if env_value is not None:
            return env_value

        if operator == "-":
            return operand or ""
        elif operator == "?":
            error_msg = operand or f"Required environment variable {var_name} not set"
            raise create_error("CONFIG_INVALID", detail=error_msg)
        else:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Required environment variable {var_name} not set",
            )

    return re.sub(pattern, replacer, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    """Recursively resolve env vars in data structure.

    Args:
        data: Data structure (dict, list, str, etc.)

    Returns:
        Data with env vars resolved
    """
    if isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return resolve_env_vars(data)
    else:
        return data


class ConfigLoader:
    """Load and validate jinja-udf configuration."""

    def __init__(self) -> None:
        self._config: UDFConfig | None = None
        self._config_path: Path | None = None

    def load(self, path: str | Path | None = None, use_defaults: bool = True) -> UDFConfig:
        """Load configuration from file.

        Resolution order if path not specified:
        1. JINJA_UDF_CONFIG_PATH environment variable
        2. ./jinja-udf.yaml
        3. ~/.jinja-udf/config.yaml
        4. If use_defaults=True and no file found, use default configuration

        Args:
            path: Optional path to config file
            use_defaults: If True, use default config when no file found

        Returns:
            Loaded UDFConfig instance

        Raises:
            UDFError: If file not found (when use_defaults=False) or invalid
        """
        if path is None:
            path = self._resolve_config_path()

        config_path = Path(path)

        if not config_path.exists():
            if use_defaults:
                logger.info("No config file found, using default configuration")
                return self.load_defaults()
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Configuration file not found: {config_path}",
            )

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Invalid YAML in config file: {e}",
            ) from e

        if not isinstance(data, dict):
            raise create_error(
                "CONFIG_INVALID",
                detail="Configuration root must be a mapping",
            )

        data = _resolve_env_vars_recursive(data)

        return self.load_from_dict(data, config_path)

    def load_defaults(self) -> UDFConfig:
        """Load default configuration without a file.

        Returns:
            UDFConfig with default values
        """
        return self.load_from_dict({})

    def load_from_dict(self, data: dict[str, Any], config_path: Path | None = None) -> UDFConfig:
        """Load configuration from dictionary.

        Args:
            data: Configuration dictionary
            config_path: Optional path to config file (for tracking)

        Returns:
            Loaded UDFConfig instance

        Raises:
            UDFError: If configuration is invalid
        """
        validation = self.validate(data)
        if not validation.valid:
            error_messages = [f"- {issue.message}" for issue in validation.errors]
            raise create_error(
                "CONFIG_INVALID",
                detail="Configuration validation failed:\n" + "\n".join(error_messages),
            )
        for issue in validation.warnings:
            logger.warning(issue.message, path=issue.path)

        try:
            config = self._convert_field(UDFConfig, data)
        except (TypeError, ValueError) as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Failed to parse configuration: {e}",
            ) from e

        self._config = config
        self._config_path = config_path

        logger.debug(
            "Configuration loaded",
            config_path=str(config_path) if config_path else None,
        )

        return config

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate config data without loading.

        Args:
            data: Configuration dictionary

        Returns:
            ValidationResult with errors and warnings
        """
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        for key, value in data.items():
            if key not in _VALID_SECTIONS:
                warnings.append(
                    ValidationIssue(
                        path=key,
                        message=f"Unknown configuration key: {key}",
                        severity="warning",
                    )
                )
                continue
            if not isinstance(value, dict):
                errors.append(ValidationIssue(path=key, message=f"{key} must be a dictionary"))
                continue
            for sub_key in value:
                if sub_key not in _VALID_SECTIONS[key]:
                    warnings.append(
                        ValidationIssue(
                            path=f"{key}.{sub_key}",
                            message=f"Unknown configuration key: {key}.{sub_key}",
                            severity="warning",
                        )
                    )

        function = data.get("function")
        if isinstance(function, dict):
            for name_key in ("name", "no_context_name"):
                if name_key in function:
                    name = function[name_key]
                    if not isinstance(name, str) or not name.isidentifier():
                        errors.append(
                            ValidationIssue(
                                path=f"function.{name_key}",
                                message=f"{name_key} must be a valid SQL identifier",
                            )
                        )

        defaults = data.get("defaults")
        if isinstance(defaults, dict):
            if "autoescape" in defaults and not isinstance(defaults["autoescape"], bool):
                errors.append(
                    ValidationIssue(
                        path="defaults.autoescape",
                        message="autoescape must be a boolean",
                    )
                )
            if "template_path" in defaults and not isinstance(defaults["template_path"], str):
                errors.append(
                    ValidationIssue(
                        path="defaults.template_path",
                        message="template_path must be a string",
                    )
                )
            if "autoescape_extensions" in defaults:
                extensions = defaults["autoescape_extensions"]
                if not isinstance(extensions, list) or not all(
                    isinstance(ext, str) for ext in extensions
                ):
                    errors.append(
                        ValidationIssue(
                            path="defaults.autoescape_extensions",
                            message="autoescape_extensions must be a list of strings",
                        )
                    )

        logging_section = data.get("logging")
        if isinstance(logging_section, dict):
            if "level" in logging_section and logging_section["level"] not in {
                level.value for level in LogLevel
            }:
                errors.append(
                    ValidationIssue(
                        path="logging.level",
                        message=f"level must be one of {', '.join(l.value for l in LogLevel)}",
                    )
                )
            if "format" in logging_section and logging_section["format"] not in {
                fmt.value for fmt in LogFormat
            }:
                errors.append(
                    ValidationIssue(
                        path="logging.format",
                        message=f"format must be one of {', '.join(f.value for f in LogFormat)}",
                    )
                )
            truncate_at = logging_section.get("truncate_at", 1)
            if not isinstance(truncate_at, int) or isinstance(truncate_at, bool) or truncate_at <= 0:
                errors.append(
                    ValidationIssue(
                        path="logging.truncate_at",
                        message="truncate_at must be a positive integer",
                    )
                )

        return ValidationResult(valid=True, errors=errors, warnings=warnings)

    def get(self) -> UDFConfig:
        """Get current configuration.

        Returns:
            Current UDFConfig instance

        Raises:
            UDFError: If configuration not loaded
        """
        if self._config is None:
            raise create_error("CONFIG_INVALID", detail="Configuration not loaded")
        return self._config

    def _resolve_config_path(self) -> Path:
        """Resolve config file path using resolution order.

        Returns:
            Path to config file (may not exist)
        """
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            return Path(env_path)

        local_path = Path("jinja-udf.yaml")
        if local_path.exists():
            return local_path

        home_path = Path.home() / ".jinja-udf" / "config.yaml"
        if home_path.exists():
            return home_path

        return local_path

    def _convert_field(self, field_type: Any, value: Any) -> Any:
        """Convert field value to appropriate type.

        Args:
            field_type: Expected field type
            value: Value to convert

        Returns:
            Converted value
        """
        if value is None:
            return None

        origin = typing.get_origin(field_type)

        if origin is list:
            if not isinstance(value, list):
                return value
            args = typing.get_args(field_type)
            if args:
                return [self._convert_field(args[0], item) for item in value]
            return value

        if hasattr(field_type, "__dataclass_fields__"):
            if isinstance(value, dict):
                kwargs = {
                    f.name: self._convert_field(f.type, value[f.name])
                    for f in fields(field_type)
                    if f.name in value
                }
                return field_type(**kwargs)
            return value

        if isinstance(field_type, type) and issubclass(field_type, LogLevel | LogFormat):
            return field_type(value)

        return value


# Convenience singleton
_default_loader: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    """Get default config loader singleton.

    Returns:
        Default ConfigLoader instance
    """
    global _default_loader  # noqa: PLW0603
    if _default_loader is None:
        _default_loader = ConfigLoader()
    return _default_loader


def load_config(path: str | Path | None = None) -> UDFConfig:
    """Convenience function to load config.

    Args:
        path: Optional path to config file

    Returns:
        Loaded UDFConfig instance
    """
    return get_config_loader().load(path)


def apply_logging_config(config: UDFConfig) -> None:
    """Configure all jinja-udf loggers from a loaded configuration.

    Args:
        config: Loaded configuration
    """
    configure_logging(
        LogConfig(
            level=config.logging.level,
            format=config.logging.format,
            truncate_at=config.logging.truncate_at,
        )
    )

"""jinja-udf error handling - Structured errors with context."""

from .errors import (
    ArityError,
    BindError,
    EmptyArgumentsError,
    ErrorCategory,
    ErrorTemplate,
    InvalidListElementError,
    NonConstantArgumentError,
    RenderError,
    UDFError,
    UnknownArgumentError,
    UnresolvedParameterError,
    WrongArgumentTypeError,
)
from .factory import ErrorFactory, create_error, get_error_factory
from .registry import ErrorRegistry

__all__ = [
    # Core error types
    "UDFError",
    "ErrorCategory",
    "ErrorTemplate",
    # Bind errors
    "BindError",
    "EmptyArgumentsError",
    "NonConstantArgumentError",
    "UnresolvedParameterError",
    "WrongArgumentTypeError",
    "InvalidListElementError",
    "UnknownArgumentError",
    # Execution errors
    "ArityError",
    "RenderError",
    # Registry and factory
    "ErrorRegistry",
    "ErrorFactory",
    # Convenience functions
    "get_error_factory",
    "create_error",
]

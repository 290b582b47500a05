"""Shared types for jinja-udf.

Import from here rather than submodules:
    from jinja_udf.types import CallShape, LogicalType, ValidationResult
"""

from .enums import (
    ArgumentName,
    CallShape,
    LogFormat,
    LogicalType,
    LogLevel,
    ResultTag,
)
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "LogLevel",
    "LogFormat",
    "LogicalType",
    "ArgumentName",
    "CallShape",
    "ResultTag",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]

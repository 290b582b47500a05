"""jinja-udf error types."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error source categories."""

    BIND = "BIND"  # Raised while planning the call
    EXECUTION = "EXECUTION"  # Raised while rendering a batch
    CONFIG = "CONFIG"
    SYSTEM = "SYSTEM"


@dataclass
class UDFError(Exception):
    """Structured error with context. Base exception for all jinja-udf errors."""

    # Identity
    code: str  # e.g., "UNKNOWN_ARGUMENT"
    category: ErrorCategory

    # Messages
    message: str  # Human-readable summary
    detail: str | None = None  # Extended explanation
    suggestion: str | None = None  # Actionable fix

    # Context
    retryable: bool = False
    function_name: str | None = None  # SQL function the error belongs to
    argument_index: int | None = None  # Offending argument position
    row_index: int | None = None  # Offending row within the batch

    # Error chain
    cause: "UDFError | None" = None

    # Metadata
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Set Exception message."""
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging and diagnostics.

        Returns:
            Dictionary representation of the error
        """
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "detail": self.detail,
            "suggestion": self.suggestion,
            "retryable": self.retryable,
            "function_name": self.function_name,
            "argument_index": self.argument_index,
            "row_index": self.row_index,
            "timestamp": self.timestamp.isoformat(),
            "cause": self.cause.to_dict() if self.cause else None,
        }

    def with_context(
        self,
        function_name: str | None = None,
        argument_index: int | None = None,
        row_index: int | None = None,
    ) -> "UDFError":
        """Return copy with additional context.

        The copy keeps the concrete exception class.

        Args:
            function_name: Optional SQL function name
            argument_index: Optional argument position
            row_index: Optional row position

        Returns:
            New error instance with updated context
        """
        return replace(
            self,
            function_name=function_name or self.function_name,
            argument_index=self.argument_index if argument_index is None else argument_index,
            row_index=self.row_index if row_index is None else row_index,
        )


class BindError(UDFError):
    """Raised at plan time when the call cannot be bound."""


class EmptyArgumentsError(BindError):
    """The call has no arguments at all."""


class NonConstantArgumentError(BindError):
    """A configuration argument depends on row data."""


class UnresolvedParameterError(BindError):
    """A configuration argument is a prepared-statement parameter without a value."""


class WrongArgumentTypeError(BindError):
    """A recognized argument carries a value of the wrong type."""


class InvalidListElementError(BindError):
    """An element of a list argument has the wrong type."""


class UnknownArgumentError(BindError):
    """An argument alias is not one of the recognized names."""


class ArityError(UDFError):
    """The data arity of a bound call is neither 1 nor 2."""


class RenderError(UDFError):
    """The rendering service failed for a row; the whole batch fails."""


@dataclass
class ErrorTemplate:
    """Template for creating errors."""

    code: str
    category: ErrorCategory
    message_template: str  # "Unknown argument '{alias}'"
    detail_template: str | None = None
    suggestion_template: str | None = None
    default_retryable: bool = False
    error_class: type[UDFError] = UDFError

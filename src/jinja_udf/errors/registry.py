"""Error registry for creating errors from templates."""

from typing import Any

from .errors import (
    ArityError,
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


class ErrorRegistry:
    """Registry of error templates. Creates errors from templates + context."""

    def __init__(self) -> None:
        """Initialize error registry with built-in templates."""
        self._templates: dict[str, ErrorTemplate] = {}
        self._load_builtin_templates()

    def get_template(self, code: str) -> ErrorTemplate | None:
        """Get template by error code.

        Args:
            code: Error code to look up

        Returns:
            ErrorTemplate if found, None otherwise
        """
        return self._templates.get(code)

    def list_codes(self) -> list[str]:
        """List all registered error codes."""
        return list(self._templates.keys())

    def register(self, template: ErrorTemplate) -> None:
        """Register (or replace) an error template.

        Args:
            template: Template to register under its code
        """
        self._templates[template.code] = template

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: UDFError | None = None,
    ) -> UDFError:
        """Create error instance from template + context.

        Args:
            code: Error code
            context: Context variables for template interpolation
            cause: Optional cause error

        Returns:
            Instance of the template's error class

        Raises:
            ValueError: If error code not found
        """
        template = self.get_template(code)
        if not template:
            msg = f"Unknown error code: {code}"
            raise ValueError(msg)

        context = context or {}

        message = self._interpolate(template.message_template, context)
        detail = self._interpolate(template.detail_template, context)
        suggestion = self._interpolate(template.suggestion_template, context)

        if message is None:
            message = f"Error {code}"

        return template.error_class(
            code=template.code,
            category=template.category,
            message=message,
            detail=detail,
            suggestion=suggestion,
            retryable=template.default_retryable,
            function_name=context.get("function_name"),
            argument_index=context.get("argument_index"),
            row_index=context.get("row_index"),
            cause=cause,
        )

    def _interpolate(
        self,
        template: str | None,
        context: dict[str, Any],
    ) -> str | None:
        """Safe string interpolation.

        Args:
            template: Template string with {var} placeholders
            context: Context variables

        Returns:
            Interpolated string or None if template is None
        """
        if template is None:
            return None

        try:
            return template.format(**context)
        except KeyError:
            # Missing context variable - return template as-is
            return template

    def _load_builtin_templates(self) -> None:
        """Load hardcoded built-in templates."""
        # BIND Errors
        self._templates["EMPTY_ARGUMENTS"] = ErrorTemplate(
            code="EMPTY_ARGUMENTS",
            category=ErrorCategory.BIND,
            message_template="{function_name} takes at least one argument",
            detail_template="The template expression argument is required",
            suggestion_template="Call {function_name}(expression [, context])",
            error_class=EmptyArgumentsError,
        )

        self._templates["UNRESOLVED_PARAMETER"] = ErrorTemplate(
            code="UNRESOLVED_PARAMETER",
            category=ErrorCategory.BIND,
            message_template="{function_name}: parameter for argument {argument_index} is not resolved",
            detail_template="Configuration arguments cannot be prepared statement parameters",
            suggestion_template="Inline the value as a literal",
            error_class=UnresolvedParameterError,
        )

        self._templates["NON_CONSTANT_ARGUMENT"] = ErrorTemplate(
            code="NON_CONSTANT_ARGUMENT",
            category=ErrorCategory.BIND,
            message_template="{function_name}: arguments must be constant",
            detail_template="Argument {argument_index} depends on row data",
            suggestion_template="Escaping and template path options must be literals",
            error_class=NonConstantArgumentError,
        )

        self._templates["WRONG_ARGUMENT_TYPE"] = ErrorTemplate(
            code="WRONG_ARGUMENT_TYPE",
            category=ErrorCategory.BIND,
            message_template="{function_name}: '{argument}' argument must be a {expected} it is {actual}",
            suggestion_template="Pass a {expected} literal for '{argument}'",
            error_class=WrongArgumentTypeError,
        )

        self._templates["INVALID_LIST_ELEMENT"] = ErrorTemplate(
            code="INVALID_LIST_ELEMENT",
            category=ErrorCategory.BIND,
            message_template=(
                "{function_name}: '{argument}' child must be a string "
                "it is {element_type} value is {element_value}"
            ),
            suggestion_template="Use a list of strings such as ['.html', '.xml']",
            error_class=InvalidListElementError,
        )

        self._templates["UNKNOWN_ARGUMENT"] = ErrorTemplate(
            code="UNKNOWN_ARGUMENT",
            category=ErrorCategory.BIND,
            message_template="{function_name}: Unknown argument '{alias}'",
            detail_template="Recognized arguments are: {recognized}",
            suggestion_template="Check the argument name",
            error_class=UnknownArgumentError,
        )

        # EXECUTION Errors
        self._templates["ARITY_MISMATCH"] = ErrorTemplate(
            code="ARITY_MISMATCH",
            category=ErrorCategory.EXECUTION,
            message_template="Invalid number of arguments to {function_name}",
            detail_template="Expected 1 or 2 data columns, got {data_arity}",
            error_class=ArityError,
        )

        self._templates["RENDER_FAILED"] = ErrorTemplate(
            code="RENDER_FAILED",
            category=ErrorCategory.EXECUTION,
            message_template="Error rendering template: {message}",
            detail_template="Row {row_index} of the batch failed to render",
            suggestion_template="Check template syntax, variable names and the JSON context",
            error_class=RenderError,
        )

        # SYSTEM Errors
        self._templates["RESULT_ALREADY_CONSUMED"] = ErrorTemplate(
            code="RESULT_ALREADY_CONSUMED",
            category=ErrorCategory.SYSTEM,
            message_template="Render result payload was already taken",
        )

        self._templates["RESULT_ALREADY_RELEASED"] = ErrorTemplate(
            code="RESULT_ALREADY_RELEASED",
            category=ErrorCategory.SYSTEM,
            message_template="Render result was already released",
        )

        # CONFIG Errors
        self._templates["CONFIG_INVALID"] = ErrorTemplate(
            code="CONFIG_INVALID",
            category=ErrorCategory.CONFIG,
            message_template="Invalid configuration",
            detail_template="{detail}",
            suggestion_template="Check the configuration file and fix errors",
        )

"""Bind-time configuration of template_render calls.

At plan time the first argument is always the template expression
column. Every later argument is either a second data column (the JSON
context) or a constant configuration option passed under an alias::

    template_render(body, ctx, autoescape := false, template_path := 'tpl/**/*')

bind() folds the aliased constants into an immutable RenderConfig.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Any

from jinja_udf.errors import UDFError, create_error
from jinja_udf.expressions import ArgumentExpression, constant, infer_logical_type
from jinja_udf.logging import get_logger
from jinja_udf.types import ArgumentName, CallShape, LogicalType

DEFAULT_FUNCTION_NAME = "template_render"

logger = get_logger("binder")


@dataclass(frozen=True)
class RenderConfig:
    """Resolved configuration of one bound call.

    Read-only after construction; safe to share across rows, batches and
    threads.
    """

    template_path: str = ""  # "" = render the expression inline
    autoescape: bool = True
    autoescape_extensions: tuple[str, ...] = ()
    optional_arg_count: int = 0  # Trailing arguments that are configuration

    def copy(self) -> "RenderConfig":
        """Return an equal, independent configuration."""
        return replace(self)


@dataclass(frozen=True)
class BoundRenderCall:
    """A RenderConfig together with the call shape resolved from it."""

    config: RenderConfig
    shape: CallShape
    function_name: str = DEFAULT_FUNCTION_NAME


# A validator checks the argument type, folds the constant and returns
# the value stored in RenderConfig.
Validator = Callable[[ArgumentExpression, str, int], Any]


def _wrong_type(
    argument: ArgumentName,
    expected: str,
    arg: ArgumentExpression,
    function_name: str,
    index: int,
) -> UDFError:
    return create_error(
        "WRONG_ARGUMENT_TYPE",
        function_name=function_name,
        argument_index=index,
        argument=argument.value,
        expected=expected,
        actual=arg.logical_type.value,
    )


def _validate_autoescape(arg: ArgumentExpression, function_name: str, index: int) -> bool:
    if arg.logical_type is not LogicalType.BOOLEAN:
        raise _wrong_type(ArgumentName.AUTOESCAPE, "BOOLEAN", arg, function_name, index)
    value = arg.evaluate(function_name, index)
    return True if value is None else bool(value)


def _validate_template_path(arg: ArgumentExpression, function_name: str, index: int) -> str:
    if arg.logical_type is not LogicalType.VARCHAR:
        raise _wrong_type(ArgumentName.TEMPLATE_PATH, "VARCHAR", arg, function_name, index)
    value = arg.evaluate(function_name, index)
    return "" if value is None else str(value)


def _validate_autoescape_extensions(
    arg: ArgumentExpression, function_name: str, index: int
) -> tuple[str, ...]:
    if arg.logical_type is not LogicalType.LIST:
        raise _wrong_type(
            ArgumentName.AUTOESCAPE_EXTENSIONS, "list of strings", arg, function_name, index
        )

    extensions: list[str] = []
    for item in arg.evaluate(function_name, index) or ():
        if not isinstance(item, str):
            raise create_error(
                "INVALID_LIST_ELEMENT",
                function_name=function_name,
                argument_index=index,
                argument=ArgumentName.AUTOESCAPE_EXTENSIONS.value,
                element_type=infer_logical_type(item).value,
                element_value="NULL" if item is None else str(item),
            )
        extensions.append(item)
    return tuple(extensions)


# ArgumentName -> (RenderConfig field, validator)
_VALIDATORS: dict[ArgumentName, tuple[str, Validator]] = {
    ArgumentName.AUTOESCAPE: ("autoescape", _validate_autoescape),
    ArgumentName.TEMPLATE_PATH: ("template_path", _validate_template_path),
    ArgumentName.AUTOESCAPE_EXTENSIONS: (
        "autoescape_extensions",
        _validate_autoescape_extensions,
    ),
}

RECOGNIZED_ARGUMENTS = tuple(name.value for name in _VALIDATORS)


def bind(
    arguments: Sequence[ArgumentExpression],
    function_name: str = DEFAULT_FUNCTION_NAME,
) -> RenderConfig:
    """Fold the constant configuration arguments of a call.

    Args:
        arguments: All call arguments; index 0 is the template expression
        function_name: Function name used in error messages

    Returns:
        RenderConfig for the call

    Raises:
        EmptyArgumentsError: If there are no arguments
        UnresolvedParameterError: If an argument after the first is a parameter
        NonConstantArgumentError: If an argument after the first is not constant
        WrongArgumentTypeError: If a recognized argument has the wrong type
        InvalidListElementError: If autoescape_extensions holds a non-string
        UnknownArgumentError: If an alias is not recognized
    """
    if not arguments:
        raise create_error("EMPTY_ARGUMENTS", function_name=function_name)

    settings: dict[str, Any] = {}
    optional_arg_count = 0

    for index in range(1, len(arguments)):
        arg = arguments[index]
        if arg.has_parameter:
            raise create_error(
                "UNRESOLVED_PARAMETER", function_name=function_name, argument_index=index
            )
        if not arg.foldable:
            raise create_error(
                "NON_CONSTANT_ARGUMENT", function_name=function_name, argument_index=index
            )
        if not arg.alias:
            continue

        entry = _VALIDATORS.get(ArgumentName.from_alias(arg.alias))
        if entry is None:
            raise create_error(
                "UNKNOWN_ARGUMENT",
                function_name=function_name,
                argument_index=index,
                alias=arg.alias,
                recognized=", ".join(RECOGNIZED_ARGUMENTS),
            )

        # Counted before validation: the slot is configuration either way.
        optional_arg_count += 1
        field_name, validator = entry
        settings[field_name] = validator(arg, function_name, index)

    config = RenderConfig(optional_arg_count=optional_arg_count, **settings)
    logger.debug(
        "Bound render call",
        function_name=function_name,
        arity=len(arguments),
        optional_arg_count=config.optional_arg_count,
        autoescape=config.autoescape,
        template_path=config.template_path,
    )
    return config


def resolve_call_shape(data_arity: int, function_name: str = DEFAULT_FUNCTION_NAME) -> CallShape:
    """Map the number of data columns to a call shape.

    Args:
        data_arity: Argument count minus optional_arg_count
        function_name: Function name used in error messages

    Returns:
        CallShape for the call

    Raises:
        ArityError: If data_arity is neither 1 nor 2
    """
    if data_arity == 2:
        return CallShape.WITH_CONTEXT
    if data_arity == 1:
        return CallShape.NO_CONTEXT
    raise create_error("ARITY_MISMATCH", function_name=function_name, data_arity=data_arity)


def bind_call(
    arguments: Sequence[ArgumentExpression],
    function_name: str = DEFAULT_FUNCTION_NAME,
) -> BoundRenderCall:
    """Bind a call and resolve its shape once.

    Args:
        arguments: All call arguments; index 0 is the template expression
        function_name: Function name used in error messages

    Returns:
        BoundRenderCall with config and shape
    """
    config = bind(arguments, function_name)
    shape = resolve_call_shape(len(arguments) - config.optional_arg_count, function_name)
    return BoundRenderCall(config=config, shape=shape, function_name=function_name)


def option_arguments(
    autoescape: bool = True,
    template_path: str = "",
    autoescape_extensions: Sequence[str] = (),
) -> list[ArgumentExpression]:
    """Build the aliased constant arguments for the three optional settings.

    A bare string for autoescape_extensions stays a VARCHAR constant so
    the binder rejects it instead of splitting it into characters.
    """
    extensions: Any = autoescape_extensions
    if not isinstance(extensions, str):
        extensions = list(extensions)
    return [
        constant(autoescape, alias=ArgumentName.AUTOESCAPE.value),
        constant(template_path, alias=ArgumentName.TEMPLATE_PATH.value),
        constant(extensions, alias=ArgumentName.AUTOESCAPE_EXTENSIONS.value),
    ]

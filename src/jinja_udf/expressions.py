"""Planner-side argument expressions.

The query engine hands the binder one expression per call argument.
Only the properties the binder inspects are modelled: the alias the
argument was passed under, its logical type, whether it folds to a
constant, and whether it still holds an unresolved prepared-statement
parameter.
"""

from dataclasses import dataclass
from typing import Any

from jinja_udf.errors import create_error
from jinja_udf.types import LogicalType


def infer_logical_type(value: Any) -> LogicalType:
    """Infer the logical type of a Python constant.

    Args:
        value: Constant value

    Returns:
        LogicalType the engine would assign to the literal
    """
    # bool before int: bool is a subclass of int
    if value is None:
        return LogicalType.SQLNULL
    if isinstance(value, bool):
        return LogicalType.BOOLEAN
    if isinstance(value, int):
        return LogicalType.BIGINT
    if isinstance(value, float):
        return LogicalType.DOUBLE
    if isinstance(value, str):
        return LogicalType.VARCHAR
    if isinstance(value, list | tuple):
        return LogicalType.LIST
    if isinstance(value, dict):
        return LogicalType.JSON
    return LogicalType.ANY


@dataclass(frozen=True)
class ArgumentExpression:
    """One argument of a template_render call as seen by the binder."""

    logical_type: LogicalType
    alias: str = ""  # "" when passed positionally
    value: Any = None  # Folded value, meaningful only when foldable
    foldable: bool = True
    has_parameter: bool = False
    name: str = ""  # Column name for row-varying arguments

    def evaluate(self, function_name: str = "template_render", argument_index: int = 0) -> Any:
        """Evaluate the expression as a constant.

        Args:
            function_name: Function the argument belongs to (for errors)
            argument_index: Position of the argument (for errors)

        Returns:
            The folded value

        Raises:
            UnresolvedParameterError: If a parameter has no value yet
            NonConstantArgumentError: If the expression depends on row data
        """
        if self.has_parameter:
            raise create_error(
                "UNRESOLVED_PARAMETER",
                function_name=function_name,
                argument_index=argument_index,
            )
        if not self.foldable:
            raise create_error(
                "NON_CONSTANT_ARGUMENT",
                function_name=function_name,
                argument_index=argument_index,
            )
        return self.value


def constant(
    value: Any,
    alias: str = "",
    logical_type: LogicalType | None = None,
) -> ArgumentExpression:
    """Build a literal argument.

    Args:
        value: Literal value
        alias: Name the argument was passed under (``name := value``)
        logical_type: Explicit type, inferred from value when omitted

    Returns:
        Foldable ArgumentExpression
    """
    return ArgumentExpression(
        logical_type=logical_type or infer_logical_type(value),
        alias=alias,
        value=value,
    )


def column(
    name: str,
    logical_type: LogicalType = LogicalType.VARCHAR,
    alias: str = "",
) -> ArgumentExpression:
    """Build a row-varying column reference."""
    return ArgumentExpression(
        logical_type=logical_type,
        alias=alias,
        foldable=False,
        name=name,
    )


def parameter(alias: str = "", logical_type: LogicalType = LogicalType.ANY) -> ArgumentExpression:
    """Build an unresolved prepared-statement parameter (``$1``, ``?``)."""
    return ArgumentExpression(
        logical_type=logical_type,
        alias=alias,
        foldable=False,
        has_parameter=True,
    )

"""Tests for planner-side argument expressions."""

import pytest

from jinja_udf.errors import NonConstantArgumentError, UnresolvedParameterError
from jinja_udf.expressions import column, constant, infer_logical_type, parameter
from jinja_udf.types import LogicalType


@pytest.mark.unit
class TestInferLogicalType:
    """Tests for infer_logical_type."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, LogicalType.SQLNULL),
            (True, LogicalType.BOOLEAN),
            (False, LogicalType.BOOLEAN),
            (0, LogicalType.BIGINT),
            (1.5, LogicalType.DOUBLE),
            ("text", LogicalType.VARCHAR),
            ([".html"], LogicalType.LIST),
            ((".html",), LogicalType.LIST),
            ({"a": 1}, LogicalType.JSON),
            (object(), LogicalType.ANY),
        ],
    )
    def test_infers_type(self, value, expected):
        """Test literal types map to engine logical types."""
        assert infer_logical_type(value) == expected


@pytest.mark.unit
class TestArgumentExpression:
    """Tests for ArgumentExpression constructors and evaluate()."""

    def test_constant_evaluates_to_value(self):
        """Test a constant folds to its value."""
        arg = constant(False, alias="autoescape")
        assert arg.foldable is True
        assert arg.alias == "autoescape"
        assert arg.logical_type == LogicalType.BOOLEAN
        assert arg.evaluate() is False

    def test_constant_explicit_type(self):
        """Test an explicit logical type overrides inference."""
        arg = constant("{}", logical_type=LogicalType.JSON)
        assert arg.logical_type == LogicalType.JSON

    def test_column_is_not_foldable(self):
        """Test a column cannot be evaluated as a constant."""
        arg = column("flag", LogicalType.BOOLEAN)
        with pytest.raises(NonConstantArgumentError) as exc_info:
            arg.evaluate("render_tpl", 2)
        assert exc_info.value.function_name == "render_tpl"
        assert exc_info.value.argument_index == 2

    def test_parameter_is_unresolved(self):
        """Test a parameter cannot be evaluated."""
        arg = parameter(alias="template_path")
        assert arg.has_parameter is True
        with pytest.raises(UnresolvedParameterError):
            arg.evaluate()

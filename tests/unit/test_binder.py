"""Tests for bind-time configuration of template_render calls."""

import pytest

from jinja_udf.binder import (
    RECOGNIZED_ARGUMENTS,
    BoundRenderCall,
    RenderConfig,
    bind,
    bind_call,
    option_arguments,
    resolve_call_shape,
)
from jinja_udf.errors import (
    ArityError,
    BindError,
    EmptyArgumentsError,
    ErrorCategory,
    InvalidListElementError,
    NonConstantArgumentError,
    UnknownArgumentError,
    UnresolvedParameterError,
    WrongArgumentTypeError,
)
from jinja_udf.expressions import column, constant, parameter
from jinja_udf.types import CallShape, LogicalType


def body():
    return column("body")


def ctx():
    return constant('{"name": "World"}', logical_type=LogicalType.JSON)


@pytest.mark.unit
class TestBindDefaults:
    """Tests for calls without configuration arguments."""

    def test_expression_only(self):
        """Test a single expression column binds to defaults."""
        config = bind([body()])
        assert config == RenderConfig()
        assert config.template_path == ""
        assert config.autoescape is True
        assert config.autoescape_extensions == ()
        assert config.optional_arg_count == 0

    def test_positional_context_is_not_configuration(self):
        """Test the unaliased context column does not count as an option."""
        config = bind([body(), constant('{"name": "World"}', logical_type=LogicalType.JSON)])
        assert config.optional_arg_count == 0

    def test_first_argument_is_never_inspected(self):
        """Test a non-constant or parameter expression is accepted at index 0."""
        assert bind([parameter()]) == RenderConfig()
        assert bind([column("body", alias="autoescape")]) == RenderConfig()


@pytest.mark.unit
class TestBindOptions:
    """Tests for aliased configuration arguments."""

    def test_autoescape_false(self):
        """Test autoescape := false."""
        config = bind([body(), ctx(), constant(False, alias="autoescape")])
        assert config.autoescape is False
        assert config.optional_arg_count == 1

    def test_template_path(self):
        """Test template_path := 'templates/**/*.html'."""
        config = bind([body(), constant("templates/**/*.html", alias="template_path")])
        assert config.template_path == "templates/**/*.html"
        assert config.optional_arg_count == 1

    def test_autoescape_extensions(self):
        """Test autoescape_extensions := ['.html', '.xml']."""
        config = bind([body(), constant([".html", ".xml"], alias="autoescape_extensions")])
        assert config.autoescape_extensions == (".html", ".xml")

    def test_empty_extension_list(self):
        """Test an empty list is a valid value."""
        config = bind([body(), constant([], alias="autoescape_extensions")])
        assert config.autoescape_extensions == ()
        assert config.optional_arg_count == 1

    def test_all_options(self):
        """Test every option together."""
        config = bind(
            [
                body(),
                ctx(),
                constant(False, alias="autoescape"),
                constant("tpl", alias="template_path"),
                constant([".html"], alias="autoescape_extensions"),
            ]
        )
        assert config == RenderConfig(
            template_path="tpl",
            autoescape=False,
            autoescape_extensions=(".html",),
            optional_arg_count=3,
        )

    def test_null_option_keeps_default(self):
        """Test a typed NULL literal leaves the field at its default."""
        config = bind(
            [
                body(),
                constant(None, alias="autoescape", logical_type=LogicalType.BOOLEAN),
                constant(None, alias="template_path", logical_type=LogicalType.VARCHAR),
            ]
        )
        assert config.autoescape is True
        assert config.template_path == ""
        assert config.optional_arg_count == 2

    def test_option_arguments_helper(self):
        """Test option_arguments builds three recognized aliased constants."""
        options = option_arguments(False, "tpl", [".html"])
        assert [option.alias for option in options] == list(RECOGNIZED_ARGUMENTS)
        config = bind([body(), *options])
        assert config == RenderConfig("tpl", False, (".html",), 3)


@pytest.mark.unit
class TestBindErrors:
    """Tests for bind-time failures."""

    def test_empty_arguments(self):
        """Test zero arguments is rejected."""
        with pytest.raises(EmptyArgumentsError) as exc_info:
            bind([])
        assert exc_info.value.code == "EMPTY_ARGUMENTS"
        assert exc_info.value.category == ErrorCategory.BIND
        assert "template_render takes at least one argument" in str(exc_info.value)

    def test_non_constant_argument(self):
        """Test a row-varying option is rejected."""
        with pytest.raises(NonConstantArgumentError) as exc_info:
            bind([body(), column("flag", LogicalType.BOOLEAN, alias="autoescape")])
        assert str(exc_info.value) == "template_render: arguments must be constant"
        assert exc_info.value.argument_index == 1

    def test_non_constant_positional_argument(self):
        """Test a row-varying context column is rejected at bind time."""
        with pytest.raises(NonConstantArgumentError):
            bind([body(), column("ctx", LogicalType.JSON)])

    def test_unresolved_parameter(self):
        """Test a prepared-statement parameter is rejected."""
        with pytest.raises(UnresolvedParameterError) as exc_info:
            bind([body(), parameter(alias="template_path")])
        assert exc_info.value.code == "UNRESOLVED_PARAMETER"
        assert exc_info.value.argument_index == 1

    def test_parameter_checked_before_foldability(self):
        """Test the parameter error wins over the constant error."""
        with pytest.raises(UnresolvedParameterError):
            bind([body(), parameter()])

    def test_autoescape_wrong_type(self):
        """Test autoescape must be a BOOLEAN."""
        with pytest.raises(WrongArgumentTypeError) as exc_info:
            bind([body(), constant("yes", alias="autoescape")])
        assert str(exc_info.value) == (
            "template_render: 'autoescape' argument must be a BOOLEAN it is VARCHAR"
        )

    def test_template_path_wrong_type(self):
        """Test template_path must be a VARCHAR."""
        with pytest.raises(WrongArgumentTypeError) as exc_info:
            bind([body(), constant(42, alias="template_path")])
        assert "'template_path' argument must be a VARCHAR it is BIGINT" in str(exc_info.value)

    def test_extensions_wrong_type(self):
        """Test autoescape_extensions must be a list."""
        with pytest.raises(WrongArgumentTypeError) as exc_info:
            bind([body(), constant(".html", alias="autoescape_extensions")])
        assert "must be a list of strings it is VARCHAR" in str(exc_info.value)

    def test_extensions_bare_string_helper(self):
        """Test option_arguments keeps a bare string as one VARCHAR constant."""
        options = option_arguments(autoescape_extensions="html")
        assert options[2].value == "html"
        with pytest.raises(WrongArgumentTypeError) as exc_info:
            bind([body(), *options])
        assert "must be a list of strings it is VARCHAR" in str(exc_info.value)

    def test_extensions_non_string_element(self):
        """Test every list element must be a string."""
        with pytest.raises(InvalidListElementError) as exc_info:
            bind([body(), constant([".html", 7], alias="autoescape_extensions")])
        assert str(exc_info.value) == (
            "template_render: 'autoescape_extensions' child must be a string "
            "it is BIGINT value is 7"
        )

    def test_extensions_null_element(self):
        """Test a NULL list element is rejected."""
        with pytest.raises(InvalidListElementError) as exc_info:
            bind([body(), constant([None], alias="autoescape_extensions")])
        assert "it is NULL value is NULL" in str(exc_info.value)

    def test_unknown_argument(self):
        """Test an unrecognized alias is rejected."""
        with pytest.raises(UnknownArgumentError) as exc_info:
            bind([body(), constant(True, alias="strict")])
        error = exc_info.value
        assert str(error) == "template_render: Unknown argument 'strict'"
        assert "autoescape, template_path, autoescape_extensions" in error.detail

    def test_reserved_unknown_alias_is_rejected(self):
        """Test the alias 'unknown' is not a valid option."""
        with pytest.raises(UnknownArgumentError):
            bind([body(), constant(True, alias="unknown")])

    def test_function_name_in_messages(self):
        """Test errors name the function being bound."""
        with pytest.raises(BindError) as exc_info:
            bind([body(), constant(1, alias="autoescape")], function_name="render_tpl")
        assert str(exc_info.value).startswith("render_tpl:")
        assert exc_info.value.function_name == "render_tpl"

    def test_bind_errors_are_not_retryable(self):
        """Test bind errors are permanent."""
        with pytest.raises(BindError) as exc_info:
            bind([])
        assert exc_info.value.retryable is False


@pytest.mark.unit
class TestOptionalArgCount:
    """Tests for optional_arg_count bookkeeping."""

    def test_counts_only_aliased_arguments(self):
        """Test positional constants are not counted."""
        config = bind(
            [
                body(),
                constant("{}", logical_type=LogicalType.JSON),
                constant(False, alias="autoescape"),
            ]
        )
        assert config.optional_arg_count == 1

    def test_repeated_alias_counts_twice(self):
        """Test each aliased slot counts, last value wins."""
        config = bind(
            [
                body(),
                constant(False, alias="autoescape"),
                constant(True, alias="autoescape"),
            ]
        )
        assert config.autoescape is True
        assert config.optional_arg_count == 2


@pytest.mark.unit
class TestRenderConfig:
    """Tests for RenderConfig."""

    def test_copy_is_equal(self):
        """Test copy() returns an equal configuration."""
        config = RenderConfig("tpl", False, (".html",), 3)
        duplicate = config.copy()
        assert duplicate == config
        assert duplicate is not config

    def test_different_configs_are_unequal(self):
        """Test equality covers every field."""
        assert RenderConfig(autoescape=False) != RenderConfig()
        assert RenderConfig(template_path="a") != RenderConfig(template_path="b")
        assert RenderConfig(autoescape_extensions=(".a",)) != RenderConfig()
        assert RenderConfig(optional_arg_count=1) != RenderConfig()

    def test_is_immutable(self):
        """Test fields cannot be reassigned."""
        config = RenderConfig()
        with pytest.raises(AttributeError):
            config.autoescape = False  # type: ignore[misc]


@pytest.mark.unit
class TestCallShape:
    """Tests for call shape resolution."""

    def test_one_data_column(self):
        """Test one data column means no context."""
        assert resolve_call_shape(1) == CallShape.NO_CONTEXT

    def test_two_data_columns(self):
        """Test two data columns means with context."""
        assert resolve_call_shape(2) == CallShape.WITH_CONTEXT

    @pytest.mark.parametrize("data_arity", [0, 3, -1])
    def test_other_arity(self, data_arity):
        """Test any other data arity is an arity error."""
        with pytest.raises(ArityError) as exc_info:
            resolve_call_shape(data_arity)
        assert str(exc_info.value) == "Invalid number of arguments to template_render"
        assert str(data_arity) in exc_info.value.detail

    def test_bind_call_resolves_shape(self):
        """Test bind_call subtracts the optional arguments."""
        call = bind_call([body(), *option_arguments()])
        assert isinstance(call, BoundRenderCall)
        assert call.shape == CallShape.NO_CONTEXT
        assert call.config.optional_arg_count == 3

    def test_bind_call_with_context(self):
        """Test bind_call with a context literal."""
        call = bind_call(
            [
                body(),
                constant("{}", logical_type=LogicalType.JSON),
                constant(False, alias="autoescape"),
            ],
            function_name="render_tpl",
        )
        assert call.shape == CallShape.WITH_CONTEXT
        assert call.function_name == "render_tpl"

    def test_bind_call_too_many_positional(self):
        """Test three positional arguments fail shape resolution."""
        with pytest.raises(ArityError):
            bind_call([body(), constant("{}"), constant("extra")])

"""DuckDB registration of template_render.

Two scalar functions are registered per connection, one per call shape::

    SELECT template_render('Hello, {{ name }}!', '{"name": "World"}');
    SELECT template_render_plain('static text');

Both are Arrow-vectorized, volatile and handle nulls themselves. The
optional arguments (autoescape, template_path, autoescape_extensions)
are bound once at registration time.
"""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, overload

import duckdb
import pyarrow as pa

from jinja_udf.binder import BoundRenderCall, bind, option_arguments, resolve_call_shape
from jinja_udf.config import UDFConfig
from jinja_udf.expressions import ArgumentExpression, column
from jinja_udf.logging import get_logger
from jinja_udf.renderer import TemplateRenderer
from jinja_udf.template import RenderingService
from jinja_udf.types import CallShape, LogicalType

logger = get_logger("udf")


class ConstantColumn(Sequence[Any]):
    """A column holding the same value in every row."""

    def __init__(self, value: Any, length: int):
        self.value = value
        self.length = length

    def __len__(self) -> int:
        return self.length

    @overload
    def __getitem__(self, index: int) -> Any: ...

    @overload
    def __getitem__(self, index: slice) -> list[Any]: ...

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return [self.value] * len(range(*index.indices(self.length)))
        if not -self.length <= index < self.length:
            raise IndexError("ConstantColumn index out of range")
        return self.value

    def __iter__(self) -> Iterator[Any]:
        for _ in range(self.length):
            yield self.value


@dataclass(frozen=True)
class RegisteredFunction:
    """One SQL function created on a connection."""

    name: str
    call: BoundRenderCall
    renderer: TemplateRenderer


def make_arrow_udf(
    renderer: TemplateRenderer,
    options: Sequence[ArgumentExpression],
    shape: CallShape,
) -> Callable[..., pa.Array]:
    """Wrap a renderer as a DuckDB Arrow UDF.

    DuckDB passes only the data columns; the constant configuration
    arguments are appended so the renderer sees the full argument list.
    DuckDB infers the arity from the signature, so each call shape gets
    a function with explicit parameters.

    Args:
        renderer: Renderer of the bound call
        options: Constant configuration arguments of the call
        shape: Call shape deciding the parameter list

    Returns:
        Function taking and returning Arrow arrays
    """
    option_values = [option.evaluate(renderer.function_name) for option in options]

    def render_arrays(*arrays: pa.Array | pa.ChunkedArray) -> pa.Array:
        row_count = len(arrays[0])
        columns: list[Sequence[Any]] = [array.to_pylist() for array in arrays]
        columns.extend(ConstantColumn(value, row_count) for value in option_values)
        return pa.array(renderer.render_batch(columns, row_count), type=pa.string())

    if shape is CallShape.WITH_CONTEXT:

        def template_render_udf(expression, context):
            return render_arrays(expression, context)

        return template_render_udf

    def template_render_plain_udf(expression):
        return render_arrays(expression)

    return template_render_plain_udf


def registered_functions(connection: duckdb.DuckDBPyConnection) -> set[str]:
    """Names of the scalar functions known to a connection."""
    rows = connection.execute(
        "SELECT DISTINCT function_name FROM duckdb_functions() WHERE function_type = 'scalar'"
    ).fetchall()
    return {row[0] for row in rows}


def register_template_render(
    connection: duckdb.DuckDBPyConnection,
    config: UDFConfig | None = None,
    *,
    service: RenderingService | None = None,
    autoescape: bool | None = None,
    template_path: str | None = None,
    autoescape_extensions: Sequence[str] | None = None,
) -> list[RegisteredFunction]:
    """Register both call shapes of template_render on a connection.

    Keyword options override the defaults from config. Names that already
    exist on the connection are skipped.

    Args:
        connection: DuckDB connection
        config: Configuration (defaults to UDFConfig())
        service: Rendering service (defaults to the shared Jinja service)
        autoescape: Escape interpolated values
        template_path: Directory or glob to load templates from
        autoescape_extensions: Name suffixes that enable escaping for loaded templates

    Returns:
        The functions created by this call

    Raises:
        BindError: If an option has the wrong type
    """
    config = config or UDFConfig()
    defaults = config.defaults
    options = option_arguments(
        defaults.autoescape if autoescape is None else autoescape,
        defaults.template_path if template_path is None else template_path,
        defaults.autoescape_extensions if autoescape_extensions is None else autoescape_extensions,
    )

    shapes: dict[str, list[ArgumentExpression]] = {
        config.function.name: [
            column("expression"),
            column("context", LogicalType.JSON),
        ],
        config.function.no_context_name: [column("expression")],
    }

    existing = registered_functions(connection)
    registered: list[RegisteredFunction] = []

    for name, data_arguments in shapes.items():
        # The context column is row data handed over by DuckDB; only the
        # expression slot and the options go through the binder.
        render_config = bind([data_arguments[0], *options], name)
        call = BoundRenderCall(
            config=render_config,
            shape=resolve_call_shape(len(data_arguments), name),
            function_name=name,
        )

        if name in existing:
            logger.warning("Function already exists, skipping registration", function_name=name)
            continue

        renderer = TemplateRenderer(call.config, service, name)
        connection.create_function(
            name,
            make_arrow_udf(renderer, options, call.shape),
            ["VARCHAR"] * len(data_arguments),
            "VARCHAR",
            type="arrow",
            null_handling="special",
            side_effects=True,
        )
        existing.add(name)
        registered.append(RegisteredFunction(name=name, call=call, renderer=renderer))

        logger.info(
            "Registered function",
            function_name=name,
            shape=call.shape.value,
            autoescape=call.config.autoescape,
            template_path=call.config.template_path,
        )

    return registered


def unregister_template_render(
    connection: duckdb.DuckDBPyConnection,
    config: UDFConfig | None = None,
) -> list[str]:
    """Remove both call shapes from a connection.

    Args:
        connection: DuckDB connection
        config: Configuration naming the functions (defaults to UDFConfig())

    Returns:
        Names that were removed
    """
    config = config or UDFConfig()
    existing = registered_functions(connection)
    removed: list[str] = []
    for name in (config.function.name, config.function.no_context_name):
        if name in existing:
            connection.remove_function(name)
            removed.append(name)
    return removed


def connect(
    database: str = ":memory:",
    config: UDFConfig | None = None,
    **options: Any,
) -> duckdb.DuckDBPyConnection:
    """Open a DuckDB connection with template_render registered.

    Args:
        database: Database path
        config: Configuration (defaults to UDFConfig())
        **options: Keyword options for register_template_render

    Returns:
        Open connection
    """
    connection = duckdb.connect(database)
    register_template_render(connection, config, **options)
    return connection

"""Row-wise execution of bound template_render calls."""

from collections.abc import Iterator, Sequence
from typing import Any

from jinja_udf.binder import DEFAULT_FUNCTION_NAME, RenderConfig, resolve_call_shape
from jinja_udf.errors import create_error
from jinja_udf.logging import get_logger
from jinja_udf.template import (
    EMPTY_CONTEXT,
    RenderingService,
    RenderRequest,
    get_rendering_service,
)
from jinja_udf.types import CallShape

logger = get_logger("renderer")

Column = Sequence[Any]


def _requests_no_context(
    input_columns: Sequence[Column], row_count: int
) -> Iterator[tuple[int, RenderRequest | None]]:
    expressions = input_columns[0]
    for row in range(row_count):
        if any(column[row] is None for column in input_columns):
            yield row, None
        else:
            yield row, RenderRequest(expressions[row], EMPTY_CONTEXT)


def _requests_with_context(
    input_columns: Sequence[Column], row_count: int
) -> Iterator[tuple[int, RenderRequest | None]]:
    expressions, contexts = input_columns[0], input_columns[1]
    for row in range(row_count):
        if any(column[row] is None for column in input_columns):
            yield row, None
        else:
            yield row, RenderRequest(expressions[row], contexts[row])


_REQUEST_BUILDERS = {
    CallShape.NO_CONTEXT: _requests_no_context,
    CallShape.WITH_CONTEXT: _requests_with_context,
}


class TemplateRenderer:
    """Render batches for one bound call.

    Input columns are the full argument list of the call: the expression
    column, the optional context column, then one column per constant
    configuration argument. A row with a null in any column produces a
    null output without calling the rendering service.
    """

    def __init__(
        self,
        config: RenderConfig,
        service: RenderingService | None = None,
        function_name: str = DEFAULT_FUNCTION_NAME,
    ):
        """Initialize renderer.

        Args:
            config: Bound configuration
            service: Rendering service (defaults to the shared Jinja service)
            function_name: Function name used in error messages
        """
        self.config = config
        self.service = service or get_rendering_service()
        self.function_name = function_name
        self._shapes: dict[int, CallShape] = {}

    def shape_for(self, column_count: int) -> CallShape:
        """Resolve (once per column count) the call shape.

        Raises:
            ArityError: If the data arity is neither 1 nor 2
        """
        shape = self._shapes.get(column_count)
        if shape is None:
            shape = resolve_call_shape(
                column_count - self.config.optional_arg_count, self.function_name
            )
            self._shapes[column_count] = shape
        return shape

    def render_batch(self, input_columns: Sequence[Column], row_count: int) -> list[str | None]:
        """Render every row of a batch.

        Rows are rendered strictly in order. The first failing row aborts
        the batch; nothing rendered before it is returned.

        Args:
            input_columns: Argument columns of the batch
            row_count: Number of rows in the batch

        Returns:
            One rendered string (or None for null rows) per row

        Raises:
            ArityError: If the column count does not fit the bound call
            RenderError: If any row fails to render
        """
        shape = self.shape_for(len(input_columns))
        build_requests = _REQUEST_BUILDERS[shape]

        output: list[str | None] = [None] * row_count
        for row, request in build_requests(input_columns, row_count):
            if request is not None:
                output[row] = self._render_row(request, row)

        logger.debug(
            "Rendered batch",
            function_name=self.function_name,
            shape=shape.value,
            row_count=row_count,
        )
        return output

    def render_row(self, request: RenderRequest) -> str:
        """Render a single request outside of a batch."""
        return self._render_row(request, 0)

    def _render_row(self, request: RenderRequest, row: int) -> str:
        config = self.config
        with self.service.rendering(
            request,
            config.template_path,
            config.autoescape,
            config.autoescape_extensions,
        ) as result:
            succeeded = result.is_ok
            payload = result.take()

        if succeeded:
            return payload

        logger.error(
            "Template rendering failed",
            function_name=self.function_name,
            row_index=row,
            error=payload,
        )
        raise create_error(
            "RENDER_FAILED",
            function_name=self.function_name,
            row_index=row,
            message=payload,
        )


def render_batch(
    config: RenderConfig,
    input_columns: Sequence[Column],
    row_count: int,
    service: RenderingService | None = None,
    function_name: str = DEFAULT_FUNCTION_NAME,
) -> list[str | None]:
    """Render one batch of a bound call.

    Args:
        config: Bound configuration
        input_columns: Argument columns of the batch
        row_count: Number of rows in the batch
        service: Rendering service (defaults to the shared Jinja service)
        function_name: Function name used in error messages

    Returns:
        Rendered output column
    """
    return TemplateRenderer(config, service, function_name).render_batch(input_columns, row_count)

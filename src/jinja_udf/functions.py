"""Python call surface of template_render."""

import json
from collections.abc import Mapping, Sequence
from typing import Any

from jinja_udf.binder import bind_call, option_arguments
from jinja_udf.expressions import constant
from jinja_udf.renderer import TemplateRenderer
from jinja_udf.template import RenderingService
from jinja_udf.types import LogicalType


def _context_json(context: str | Mapping[str, Any]) -> str:
    if isinstance(context, str):
        return context
    return json.dumps(context)


def template_render(
    expression: str | None,
    context: str | Mapping[str, Any] | None = None,
    *,
    autoescape: bool = True,
    template_path: str = "",
    autoescape_extensions: Sequence[str] = (),
    service: RenderingService | None = None,
) -> str | None:
    """Render one template the way the SQL function renders one row.

    Example:
        >>> template_render("Hello, {{ name }}!", {"name": "World"}, autoescape=False)
        'Hello, World!'

    Args:
        expression: Template source, or template name when template_path is set
        context: JSON object text or mapping; omitted means no context column
        autoescape: Escape interpolated values
        template_path: Directory or glob to load templates from
        autoescape_extensions: Name suffixes that enable escaping for loaded templates
        service: Rendering service (defaults to the shared Jinja service)

    Returns:
        Rendered text, or None for a null expression

    Raises:
        BindError: If an option has the wrong type
        RenderError: If rendering fails
    """
    data_arguments = [constant(expression, logical_type=LogicalType.VARCHAR)]
    if context is not None:
        data_arguments.append(constant(_context_json(context), logical_type=LogicalType.JSON))

    options = option_arguments(autoescape, template_path, autoescape_extensions)
    call = bind_call([*data_arguments, *options])

    columns = [[argument.value] for argument in (*data_arguments, *options)]
    return TemplateRenderer(call.config, service).render_batch(columns, 1)[0]

"""jinja-udf - Jinja2 template rendering as a vectorized DuckDB scalar function.

Usage:
    import jinja_udf

    con = jinja_udf.connect()
    con.sql("SELECT template_render('Hello, {{ name }}!', '{\"name\": \"World\"}')")
"""

from jinja_udf.binder import BoundRenderCall, RenderConfig, bind, bind_call
from jinja_udf.functions import template_render
from jinja_udf.renderer import TemplateRenderer, render_batch
from jinja_udf.udf import connect, register_template_render, unregister_template_render

__version__ = "0.1.0"
__all__ = [
    "__version__",
    "RenderConfig",
    "BoundRenderCall",
    "bind",
    "bind_call",
    "TemplateRenderer",
    "render_batch",
    "template_render",
    "register_template_render",
    "unregister_template_render",
    "connect",
]

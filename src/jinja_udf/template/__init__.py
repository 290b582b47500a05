"""Rendering service for template_render."""

from .context import parse_context
from .engine import (
    ContextEnvironment,
    JinjaRenderingService,
    RenderingService,
    format_error,
    get_rendering_service,
)
from .filters import FILTERS
from .loader import GlobFileSystemLoader, make_loader, split_template_path
from .types import EMPTY_CONTEXT, RenderRequest, RenderResult

__all__ = [
    "ContextEnvironment",
    "RenderingService",
    "JinjaRenderingService",
    "get_rendering_service",
    "RenderRequest",
    "RenderResult",
    "EMPTY_CONTEXT",
    "FILTERS",
    "GlobFileSystemLoader",
    "make_loader",
    "split_template_path",
    "parse_context",
    "format_error",
]

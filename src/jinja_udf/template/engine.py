"""Rendering service boundary and its Jinja2 implementation."""

import json
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from .context import parse_context
from .filters import FILTERS
from .loader import make_loader
from .types import RenderRequest, RenderResult


def format_error(prefix: str, error: BaseException) -> str:
    """Format an exception and its causes, one per line.

    E.g.::

        Template render error: 'name' is undefined
        Caused by: ...

    Args:
        prefix: Leading label
        error: Exception to describe

    Returns:
        Multi-line error message
    """
    messages = [f"{prefix}: {error}"]
    seen = {id(error)}
    cause = error.__cause__ or error.__context__
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        messages.append(f"Caused by: {cause}")
        cause = cause.__cause__ or cause.__context__
    return "\n".join(messages)


class ContextEnvironment(Environment):
    """Environment resolving ``a.b`` on mappings by key first.

    Context values are plain dicts parsed from JSON, so ``order.items``
    must name the ``items`` key, not ``dict.items``.
    """

    def getattr(self, obj: Any, attribute: str) -> Any:
        if isinstance(obj, Mapping):
            try:
                return obj[attribute]
            except (KeyError, TypeError):
                pass
        return super().getattr(obj, attribute)


class RenderingService(ABC):
    """Renders one template per call and owns the results it hands out.

    Every result returned by render() is outstanding until it is passed
    back to release(). rendering() wraps both in a scope that releases
    exactly once on every exit path.
    """

    def __init__(self) -> None:
        self._outstanding = 0
        self._lock = threading.Lock()

    @abstractmethod
    def _render(
        self,
        expression: str,
        context_json: str,
        template_path: str,
        autoescape: bool,
        autoescape_extensions: Sequence[str],
    ) -> RenderResult:
        """Produce the tagged result for one row."""

    def render(
        self,
        expression: str,
        context_json: str,
        template_path: str = "",
        autoescape: bool = True,
        autoescape_extensions: Sequence[str] = (),
    ) -> RenderResult:
        """Render one template.

        Args:
            expression: Template source, or template name when template_path is set
            context_json: JSON object with the template variables
            template_path: Directory or glob to load templates from ("" = inline)
            autoescape: Escape interpolated values
            autoescape_extensions: Name suffixes that enable escaping for loaded templates

        Returns:
            RenderResult owned by the caller until released
        """
        result = self._render(
            expression, context_json, template_path, autoescape, autoescape_extensions
        )
        with self._lock:
            self._outstanding += 1
        return result

    def release(self, result: RenderResult) -> None:
        """Hand a result back to the service.

        Raises:
            UDFError(RESULT_ALREADY_RELEASED): On a second release
        """
        result._mark_released()
        with self._lock:
            self._outstanding -= 1

    @property
    def outstanding(self) -> int:
        """Number of results rendered but not yet released."""
        return self._outstanding

    @contextmanager
    def rendering(
        self,
        request: RenderRequest,
        template_path: str = "",
        autoescape: bool = True,
        autoescape_extensions: Sequence[str] = (),
    ) -> Iterator[RenderResult]:
        """Render a request and release the result when the block exits."""
        result = self.render(
            request.expression,
            request.context_json,
            template_path,
            autoescape,
            autoescape_extensions,
        )
        try:
            yield result
        finally:
            self.release(result)


class JinjaRenderingService(RenderingService):
    """Jinja2-backed rendering service.

    Supports:
    - Inline templates: the expression is the template source
    - Loaded templates: the expression names a template under template_path
    - Strict undefined variables: referencing a missing key is an error
    - Extra filters: json_encode, split, linebreaksbr, as_str
    """

    def __init__(self, filters: dict[str, Any] | None = None):
        """Initialize rendering service.

        Args:
            filters: Additional filters, merged over the built-in extras
        """
        super().__init__()
        self._filters = {**FILTERS, **(filters or {})}
        self._environments: dict[tuple[str, bool, tuple[str, ...]], ContextEnvironment] = {}
        self._environments_lock = threading.Lock()

    def _render(
        self,
        expression: str,
        context_json: str,
        template_path: str,
        autoescape: bool,
        autoescape_extensions: Sequence[str],
    ) -> RenderResult:
        try:
            context = parse_context(context_json)
        except json.JSONDecodeError as e:
            return RenderResult.err(f"Invalid JSON: {e}")

        environment = self.environment(template_path, autoescape, autoescape_extensions)

        template: Template
        if template_path:
            try:
                template = environment.get_template(expression)
            except TemplateError as e:
                return RenderResult.err(format_error("Template loading error", e))
        else:
            try:
                template = environment.from_string(expression)
            except TemplateError as e:
                return RenderResult.err(format_error("Template render error", e))

        try:
            return RenderResult.ok(template.render(context))
        except Exception as e:
            # Filters and expressions can raise anything; all of it is a row error.
            return RenderResult.err(format_error("Template render error", e))

    def environment(
        self,
        template_path: str = "",
        autoescape: bool = True,
        autoescape_extensions: Sequence[str] = (),
    ) -> ContextEnvironment:
        """Get (or build and cache) the environment for a configuration.

        Args:
            template_path: Directory or glob ("" = inline templates)
            autoescape: Escape interpolated values
            autoescape_extensions: Name suffixes that enable escaping for loaded templates

        Returns:
            Configured Jinja2 Environment
        """
        extensions = tuple(autoescape_extensions) if template_path else ()
        key = (template_path, autoescape, extensions)
        with self._environments_lock:
            environment = self._environments.get(key)
            if environment is None:
                environment = self._build_environment(template_path, autoescape, extensions)
                self._environments[key] = environment
            return environment

    def _build_environment(
        self,
        template_path: str,
        autoescape: bool,
        extensions: tuple[str, ...],
    ) -> ContextEnvironment:
        if template_path:
            environment = ContextEnvironment(
                loader=make_loader(template_path),
                autoescape=self._select_autoescape(autoescape, extensions),
                undefined=StrictUndefined,
                keep_trailing_newline=True,
            )
        else:
            environment = ContextEnvironment(
                autoescape=autoescape,
                undefined=StrictUndefined,
                keep_trailing_newline=True,
            )
        environment.filters.update(self._filters)
        return environment

    @staticmethod
    def _select_autoescape(autoescape: bool, extensions: tuple[str, ...]) -> Any:
        """Escaping policy for loaded templates.

        Escaping is on only when autoescape is set AND the template name
        ends with one of the extensions.
        """
        if not autoescape or not extensions:
            return False

        def by_suffix(template_name: str | None) -> bool:
            return template_name is not None and template_name.endswith(extensions)

        return by_suffix


# Convenience singleton
_default_service: RenderingService | None = None


def get_rendering_service() -> RenderingService:
    """Get default rendering service singleton.

    Returns:
        Default JinjaRenderingService instance
    """
    global _default_service  # noqa: PLW0603
    if _default_service is None:
        _default_service = JinjaRenderingService()
    return _default_service

"""Rendering service type definitions."""

from dataclasses import dataclass

from jinja_udf.errors import create_error
from jinja_udf.types import ResultTag

EMPTY_CONTEXT = "{}"


@dataclass(frozen=True, slots=True)
class RenderRequest:
    """Input of one row."""

    expression: str  # Template source, or template name when a path is set
    context_json: str = EMPTY_CONTEXT


class RenderResult:
    """Tagged result of one render call: rendered text or error message.

    The payload can be taken exactly once. The result itself must be
    handed back to the service that produced it through
    ``RenderingService.release`` exactly once, whichever tag it carries.
    """

    __slots__ = ("tag", "_payload", "_taken", "_released")

    def __init__(self, tag: ResultTag, payload: str):
        self.tag = tag
        self._payload: str | None = payload
        self._taken = False
        self._released = False

    @classmethod
    def ok(cls, rendered: str) -> "RenderResult":
        return cls(ResultTag.OK, rendered)

    @classmethod
    def err(cls, message: str) -> "RenderResult":
        return cls(ResultTag.ERR, message)

    @property
    def is_ok(self) -> bool:
        return self.tag is ResultTag.OK

    @property
    def released(self) -> bool:
        return self._released

    def take(self) -> str:
        """Move the payload out of the result.

        Returns:
            Rendered text for OK, error message for ERR

        Raises:
            UDFError(RESULT_ALREADY_CONSUMED): If taken before or released
        """
        payload = self._payload
        if self._taken or self._released or payload is None:
            raise create_error("RESULT_ALREADY_CONSUMED")
        self._payload = None
        self._taken = True
        return payload

    def _mark_released(self) -> None:
        if self._released:
            raise create_error("RESULT_ALREADY_RELEASED")
        self._payload = None
        self._released = True

    def __repr__(self) -> str:
        state = "released" if self._released else "taken" if self._taken else "owned"
        return f"RenderResult(tag={self.tag.value}, {state})"

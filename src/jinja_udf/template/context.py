"""Template context parsing."""

import json
from typing import Any


def parse_context(context_json: str) -> dict[str, Any]:
    """Parse a row's JSON context into template variables.

    The top-level keys of a JSON object become template variables. Any
    other JSON value (array, string, number, null) yields an empty
    context.

    Args:
        context_json: JSON text

    Returns:
        Template variables

    Raises:
        json.JSONDecodeError: If context_json is not valid JSON
    """
    value = json.loads(context_json)
    if isinstance(value, dict):
        return value
    return {}

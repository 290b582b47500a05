"""Extra template filters.

Jinja2 already ships most filters a template author expects. These add
JSON encoding, string splitting, line breaks and JSON-style scalars.
"""

import json
import re
from typing import Any


def filter_json_encode(value: Any, pretty: bool = False) -> str:
    """Serialize value to JSON string.

    Args:
        value: Value to serialize
        pretty: Indent the output

    Returns:
        JSON string representation
    """
    return json.dumps(value, indent=2 if pretty else None, ensure_ascii=False)


def filter_split(value: str, pat: str) -> list[str]:
    """Split a string on a literal separator."""
    return value.split(pat)


def filter_linebreaksbr(value: str) -> str:
    """Replace line breaks with ``<br>``."""
    return re.sub(r"\r\n|\n", "<br>", value)


def filter_as_str(value: Any) -> str:
    """Convert any value to its string form.

    JSON-style rendering for booleans and null so that ``true`` in the
    context prints as ``true``, not ``True``.
    """
    if isinstance(value, bool) or value is None:
        return json.dumps(value)
    return str(value)


# Registry of extra filters
FILTERS: dict[str, Any] = {
    "json_encode": filter_json_encode,
    "split": filter_split,
    "linebreaksbr": filter_linebreaksbr,
    "as_str": filter_as_str,
}

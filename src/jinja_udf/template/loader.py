"""Template loading from a directory or glob.

A template path is either a directory (``templates``) or a glob
(``templates/**/*.html``). Templates are named relative to the static
directory prefix of the glob, and only names matching the glob's
pattern part can be loaded.
"""

import re
from collections.abc import Callable
from pathlib import PurePosixPath

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

_GLOB_CHARS = re.compile(r"[*?\[]")


def split_template_path(template_path: str) -> tuple[str, str | None]:
    """Split a template path into search directory and name pattern.

    E.g., "templates/**/*.html" -> ("templates", "**/*.html")

    Args:
        template_path: Directory or glob

    Returns:
        (search directory, pattern or None when the path has no glob)
    """
    parts = PurePosixPath(template_path.replace("\\", "/")).parts
    for index, part in enumerate(parts):
        if _GLOB_CHARS.search(part):
            directory = str(PurePosixPath(*parts[:index])) if index else "."
            return directory, "/".join(parts[index:])
    return template_path, None


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a glob over ``/``-separated names.

    ``**/`` matches zero or more directories, ``*`` and ``?`` never cross
    a ``/``.

    Args:
        pattern: Glob pattern

    Returns:
        Compiled regular expression matching whole names
    """
    regex = ""
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            regex += "(?:.*/)?"
            i += 3
        elif pattern.startswith("**", i):
            regex += ".*"
            i += 2
        elif pattern[i] == "*":
            regex += "[^/]*"
            i += 1
        elif pattern[i] == "?":
            regex += "[^/]"
            i += 1
        elif pattern[i] == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                regex += re.escape(pattern[i])
                i += 1
            else:
                body = pattern[i + 1 : end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                regex += f"[{body}]"
                i = end + 1
        else:
            regex += re.escape(pattern[i])
            i += 1
    return re.compile(regex + r"\Z")


class GlobFileSystemLoader(FileSystemLoader):
    """FileSystemLoader restricted to names matching a glob pattern."""

    def __init__(self, searchpath: str, pattern: str | None = None):
        super().__init__(searchpath)
        self.pattern = pattern
        self._regex = glob_to_regex(pattern) if pattern else None

    def matches(self, name: str) -> bool:
        return self._regex is None or self._regex.match(name) is not None

    def get_source(
        self, environment: Environment, template: str
    ) -> tuple[str, str, Callable[[], bool]]:
        if not self.matches(template):
            raise TemplateNotFound(template)
        return super().get_source(environment, template)

    def list_templates(self) -> list[str]:
        return [name for name in super().list_templates() if self.matches(name)]


def make_loader(template_path: str) -> GlobFileSystemLoader:
    """Build the loader for a template path."""
    directory, pattern = split_template_path(template_path)
    return GlobFileSystemLoader(directory, pattern)

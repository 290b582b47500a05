"""ANSI color codes for terminal output.

Usage:
    from jinja_udf.logging.colors import GREEN, RED, RESET

    print(f"{GREEN}Registered{RESET}")
"""

RESET = "\033[0m"

# Status
GREEN = "\033[38;5;82m"  # Success - bright green
RED = "\033[38;5;196m"  # Failure - bright red
YELLOW = "\033[38;5;226m"  # Warnings - bright yellow

# Information
LIGHT_BLUE = "\033[38;5;153m"  # Structured fields - light blue
CYAN = "\033[38;5;51m"  # Info - cyan
MAGENTA = "\033[38;5;201m"  # Component tag - magenta

__all__ = [
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]

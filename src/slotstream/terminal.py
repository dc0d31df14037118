"""Terminal color utilities for stream error messages.

Provides ANSI color codes with automatic TTY detection and NO_COLOR support.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

# ANSI color codes
_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "bright_red": "\033[91m",
    "bright_blue": "\033[94m",
}

ColorName = Literal["reset", "bold", "dim", "cyan", "green", "bright_red", "bright_blue"]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    """Check if terminal supports colors and user allows them.

    Respects:
        - NO_COLOR environment variable (https://no-color.org/)
        - FORCE_COLOR environment variable (overrides NO_COLOR)
        - sys.stdout.isatty() for TTY detection
    """
    if os.environ.get("FORCE_COLOR"):
        return True

    if os.environ.get("NO_COLOR"):
        return False

    return sys.stdout.isatty()


# Cache the color decision
_USE_COLORS = _should_use_colors()


def colorize(text: str, *colors: ColorName) -> str:
    """Apply ANSI color codes to text.

    Returns plain text when colors are disabled or no color is given.
    """
    if not _USE_COLORS or not colors:
        return text

    prefix = "".join(_COLORS.get(color, "") for color in colors)
    if not prefix:
        return text

    return f"{prefix}{text}{_COLORS['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI color codes from text.

    Example:
        >>> strip_colors("\033[91mError\033[0m")
        'Error'
    """
    return _ANSI_ESCAPE.sub("", text)


# Semantic color helpers for error messages
def error_code(text: str) -> str:
    """Color text as an error code (bright red + bold)."""
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    """Color text as a slot or boundary location (cyan)."""
    return colorize(text, "cyan")


def hint(text: str) -> str:
    """Color text as a hint/suggestion (green)."""
    return colorize(text, "green")


def dim_text(text: str) -> str:
    """Color text as dimmed/secondary (dim)."""
    return colorize(text, "dim")


def docs_url(text: str) -> str:
    """Color text as a documentation URL (bright_blue)."""
    return colorize(text, "bright_blue")


def format_error_header(code: str | None, message: str) -> str:
    """Format error header with optional code.

    Example:
        >>> format_error_header("S-RUN-001", "Deferred value failed")
        '\033[91m\033[1mS-RUN-001:\033[0m Deferred value failed'
    """
    if code:
        return f"{error_code(code)}: {message}"
    return message

"""Terminal color helpers for component error diagnostics.

ANSI colors with TTY detection. Honors NO_COLOR (https://no-color.org/)
and FORCE_COLOR, with FORCE_COLOR taking precedence.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "magenta": "\033[35m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_blue": "\033[94m",
}

ColorName = Literal[
    "reset", "bold", "dim", "cyan", "green", "magenta",
    "bright_red", "bright_green", "bright_blue",
]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    """Whether diagnostics are colorized in this process."""
    return _USE_COLORS


def colorize(text: str, *colors: ColorName) -> str:
    """Wrap ``text`` in ANSI codes when colors are enabled.

    Example:
        >>> colorize("Card", "magenta")
        '\\033[35mCard\\033[0m'  # colors on
        'Card'                   # colors off
    """
    if not _USE_COLORS or not colors:
        return text
    prefix = "".join(_COLORS.get(color, "") for color in colors)
    if not prefix:
        return text
    return f"{prefix}{text}{_COLORS['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI escape sequences from ``text``."""
    return _ANSI_ESCAPE.sub("", text)


def error_code(text: str) -> str:
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    """Color a template route or file location."""
    return colorize(text, "cyan")


def component(text: str) -> str:
    """Color a component class or tag name."""
    return colorize(text, "magenta")


def hint(text: str) -> str:
    return colorize(text, "green")


def suggestion(text: str) -> str:
    """Color a 'Did you mean?' candidate."""
    return colorize(text, "bright_green", "bold")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def docs_url(text: str) -> str:
    return colorize(text, "bright_blue")


def format_error_header(code: str | None, message: str) -> str:
    """Prefix ``message`` with a colored error code when one is given.

    Example:
        >>> format_error_header("KM-SLT-001", "Slot 'header' not declared")
        '\\033[91m\\033[1mKM-SLT-001\\033[0m: Slot 'header' not declared'
    """
    if code:
        return f"{error_code(code)}: {message}"
    return message

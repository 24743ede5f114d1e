"""ANSI colouring for view error diagnostics.

Colour is applied only when stdout is a TTY, unless overridden by the
``NO_COLOR`` / ``FORCE_COLOR`` environment variables. The decision is made
once at import time.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_CODES = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
}

ColorName = Literal["reset", "bold", "dim", "green", "yellow", "cyan", "bright_red"]

_ANSI_RE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    # FORCE_COLOR beats NO_COLOR (https://no-color.org/)
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    """Whether diagnostics are currently coloured."""
    return _USE_COLORS


def colorize(text: str, *colors: ColorName) -> str:
    """Wrap ``text`` in the given ANSI codes, or return it unchanged.

    Example:
        >>> colorize("V-REF-001", "bright_red", "bold")  # colours on
        '\\033[91m\\033[1mV-REF-001\\033[0m'
    """
    if not _USE_COLORS or not colors:
        return text
    prefix = "".join(_CODES.get(color, "") for color in colors)
    if not prefix:
        return text
    return f"{prefix}{text}{_CODES['reset']}"


def strip_colors(text: str) -> str:
    """Remove every ANSI escape sequence from ``text``."""
    return _ANSI_RE.sub("", text)


def error_code(text: str) -> str:
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    return colorize(text, "cyan")


def line_number(text: str) -> str:
    return colorize(text, "yellow")


def error_line(text: str) -> str:
    return colorize(text, "bright_red")


def hint(text: str) -> str:
    return colorize(text, "green")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def format_error_header(code: str | None, message: str) -> str:
    """``"V-RUN-001: message"`` with the code highlighted, or just the message."""
    if code:
        return f"{error_code(code)}: {message}"
    return message


def format_source_line(lineno: int, content: str, is_error: bool = False) -> str:
    """Format one snippet line as ``>NNN | content``.

    The offending line gets a ``>`` marker and is highlighted; context lines
    are dimmed.
    """
    marker = ">" if is_error else " "
    number = line_number(f"{marker}{lineno:>3}")
    body = error_line(content) if is_error else dim_text(content)
    return f"{number} | {body}"

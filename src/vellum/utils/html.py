"""HTML escaping for placeholder output.

Only used when an Environment is created with ``autoescape=True``; the
default is to insert placeholder values verbatim.
"""

from __future__ import annotations

from typing import Any

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)


class Markup(str):
    """A string that is already safe for HTML output.

    Markup values pass through ``html_escape`` untouched, so views can hand
    pre-rendered HTML to a placeholder without double escaping.

    Example:
        >>> html_escape(Markup("<b>ok</b>"))
        '<b>ok</b>'
    """

    __slots__ = ()

    def __html__(self) -> str:
        return self

    def __repr__(self) -> str:
        return f"Markup({super().__repr__()})"


def html_escape(value: Any) -> str:
    """Escape ``value`` for HTML text and attribute context.

    Single pass via ``str.translate()``. Objects exposing ``__html__``
    (Markup and friends) are trusted and returned as their HTML form.
    ``None`` renders as an empty string.
    """
    if value is None:
        return ""
    if hasattr(value, "__html__"):
        return str(value.__html__())
    return str(value).translate(_ESCAPE_TABLE)

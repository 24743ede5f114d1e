"""Internal helpers shared across Vellum packages."""

from vellum.utils.html import Markup, html_escape

__all__ = ["Markup", "html_escape"]

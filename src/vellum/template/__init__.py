"""Vellum template execution: fragment translation, render scope and runtime helpers."""

from vellum.template.codegen import CodeBuilder, GeneratedCode, translate
from vellum.template.core import Fragment
from vellum.template.helpers import STATIC_NAMESPACE, empty, isset, pairs, to_text, values
from vellum.template.scope import Record, RenderScope, expose

__all__ = [
    "STATIC_NAMESPACE",
    "CodeBuilder",
    "Fragment",
    "GeneratedCode",
    "Record",
    "RenderScope",
    "empty",
    "expose",
    "isset",
    "pairs",
    "to_text",
    "translate",
    "values",
]

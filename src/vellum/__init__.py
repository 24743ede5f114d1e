"""Vellum: a view compiler and renderer built on code islands.

Views are markup with a small directive language. Vellum rewrites the
directives into ``<?py ... ?>`` code islands, caches the compiled fragment,
and executes it against the parameters of each render call.

Quickstart:
    >>> from vellum import Environment
    >>> env = Environment("views/", "cache/")
    >>> env.render("hello", {"name": "Max"})    # views/hello.html: Hello {{ name }}
    'Hello Max'

Directives:
    ```
    {{ expr }}                      placeholder
    ## note ##                      comment
    @if c / @elseif c / @else / @endif
    @for v in items / @for k, v in items / @break / @continue / @endfor
    @isset e / @endisset, @empty e / @endempty
    @php ... @endphp                raw Python (also @py ... @endpy)
    @view name, @style name, @script name
    ```

Architecture:
View Source → Compiler (ordered regex passes) → Fragment text → cache
→ translate (islands → Python) → exec() → captured string

Caching:
A compiled view is written once to ``<cache>/<name>.compiled.pyhtml`` and
served from there until ``Environment.clear_cache()``. Source edits are not
detected.

"""

from vellum.environment import (
    Environment,
    ErrorCode,
    FileSystemLoader,
    IncludeDepthError,
    SourceSnippet,
    ViewError,
    ViewNotFoundError,
    ViewResolver,
    ViewRuntimeError,
    ViewStorageError,
    ViewSyntaxError,
    build_source_snippet,
)
from vellum.cache_store import CacheStore
from vellum.compiler import DIRECTIVE_RULES, Compiler, DirectiveRule, compile_source
from vellum.render_context import RenderContext, get_render_context, render_context
from vellum.template import Fragment, Record, RenderScope
from vellum.utils.html import Markup, html_escape

__version__ = "0.1.0"

__all__ = [
    "DIRECTIVE_RULES",
    "CacheStore",
    "Compiler",
    "DirectiveRule",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "Fragment",
    "IncludeDepthError",
    "Markup",
    "Record",
    "RenderContext",
    "RenderScope",
    "SourceSnippet",
    "ViewError",
    "ViewNotFoundError",
    "ViewResolver",
    "ViewRuntimeError",
    "ViewStorageError",
    "ViewSyntaxError",
    "__version__",
    "build_source_snippet",
    "compile_source",
    "get_render_context",
    "html_escape",
    "render_context",
]

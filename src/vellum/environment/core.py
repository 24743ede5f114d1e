"""Vellum Environment: the public entry point for rendering views.

An Environment owns two directories: the views root, holding the markup and
native fragments, and the cache root, holding compiled fragments. Rendering
resolves a view name to a fragment, binds the call's parameters into a fresh
RenderScope, executes the fragment and returns the captured string.

Example:
    >>> env = Environment("views/")
    >>> env.render("home", {"name": "Max"})
    'Hello Max'
    >>> env.render("home", name="Max")
    'Hello Max'
    >>> env.clear_cache()
    1

Inclusion:
``@view name`` renders ``name`` through the same Environment with a copy of
the including view's parameters. Depth is tracked in a ContextVar
(see ``vellum.render_context``) and capped by ``max_include_depth``.

"""

from __future__ import annotations

from dataclasses import KW_ONLY, dataclass, field
from pathlib import Path
from typing import Any

from vellum.cache_store import CacheStore
from vellum.compiler.core import Compiler
from vellum.environment.loaders import FileSystemLoader
from vellum.environment.resolver import ViewResolver
from vellum.render_context import (
    get_render_context,
    render_context,
    reset_render_context,
    set_render_context,
)
from vellum.template.core import Fragment
from vellum.template.scope import RenderScope
from vellum.utils.constants import DEFAULT_MAX_INCLUDE_DEPTH


@dataclass
class Environment:
    """Renders views from ``views_dir`` through a cache in ``compiled_views_dir``.

    Attributes:
        views_dir: Source root. View ``a.b`` lives at ``a/b.pyhtml`` or ``a/b.html``.
        compiled_views_dir: Cache root (defaults to ``<views_dir>/.compiled``).
        autoescape: HTML-escape placeholder output.
        strict: Reject unbalanced or unknown directives at compile time.
        max_include_depth: Deepest ``@view`` nesting allowed.
        encoding: Encoding for view sources and cache entries.

    Thread-Safety:
        Rendering keeps all state local to the call. Concurrent first
        renders of one view may both compile it; each write is atomic and
        the bytes are identical.
    """

    views_dir: str | Path
    compiled_views_dir: str | Path | None = None
    _: KW_ONLY
    autoescape: bool = False
    strict: bool = False
    max_include_depth: int = DEFAULT_MAX_INCLUDE_DEPTH
    encoding: str = "utf-8"

    _loader: FileSystemLoader = field(init=False, repr=False)
    _cache: CacheStore = field(init=False, repr=False)
    _compiler: Compiler = field(init=False, repr=False)
    _resolver: ViewResolver = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.views_dir = Path(self.views_dir)
        if self.compiled_views_dir is None:
            self.compiled_views_dir = self.views_dir / ".compiled"
        self.compiled_views_dir = Path(self.compiled_views_dir)
        if self.max_include_depth < 0:
            raise ValueError(f"max_include_depth must be >= 0, got {self.max_include_depth}")

        self._loader = FileSystemLoader(self.views_dir, encoding=self.encoding)
        self._cache = CacheStore(self.compiled_views_dir, encoding=self.encoding)
        self._compiler = Compiler(strict=self.strict)
        self._resolver = ViewResolver(self._loader, self._cache, self._compiler)

    def render(self, view_name: str, parameters: dict[str, Any] | None = None, /, **kwargs: Any) -> str:
        """Render ``view_name`` and return the output.

        Args:
            view_name: Dot-delimited view reference.
            parameters: Bindings for the view. Keyword arguments are merged
                over them.

        Raises:
            ViewNotFoundError: Invalid name or missing view.
            ViewSyntaxError: The fragment cannot be translated (or strict
                compile failed).
            ViewRuntimeError: Fragment code raised.
            IncludeDepthError: Inclusion nested deeper than max_include_depth.
            ViewStorageError: Source or cache I/O failed.
        """
        params = {**(parameters or {}), **kwargs}

        parent = get_render_context()
        if parent is not None:
            parent.check_include_depth(view_name)

        path = self._resolver.resolve(view_name)
        fragment = Fragment.from_path(path, view_name, encoding=self.encoding)
        scope = RenderScope.bind(params)

        def include(name: str) -> str:
            return self.render(name, dict(scope.parameters))

        if parent is None:
            with render_context(
                view_name=view_name,
                filename=fragment.filename,
                max_include_depth=self.max_include_depth,
            ):
                return fragment.execute(scope, include=include, autoescape=self.autoescape)

        token = set_render_context(parent.child_context(view_name, fragment.filename))
        try:
            return fragment.execute(scope, include=include, autoescape=self.autoescape)
        finally:
            reset_render_context(token)

    def compile(self, source: str, name: str | None = None) -> str:
        """Compile view markup to fragment text without touching the cache."""
        return self._compiler.compile(source, name=name)

    def resolve(self, view_name: str) -> Path:
        """Path of the fragment ``render(view_name)`` would execute."""
        return self._resolver.resolve(view_name)

    def clear_cache(self) -> int:
        """Delete every compiled fragment and return how many were removed."""
        return self._cache.clear()

    def list_views(self) -> list[str]:
        """Names of every view under ``views_dir``."""
        return self._loader.list_views()

    def cache_info(self) -> dict[str, Any]:
        """Cache statistics.

        Returns:
            Dict with file_count, total_bytes and views (cached view names).

        Example:
            >>> env.render("home", name="Max")
            >>> env.cache_info()
            {'file_count': 1, 'total_bytes': 31, 'views': ['home']}
        """
        stats = self._cache.stats()
        return {**stats, "views": self._cache.list_views()}

"""View resolution: view name → path of an executable fragment.

Resolution order for ``resolve("layouts.header")``:

1. validate the name
2. ``<cache>/layouts.header.compiled.pyhtml`` exists → return it, no questions asked
3. ``<views>/layouts/header.pyhtml`` exists → native fragment, return it as is
4. ``<views>/layouts/header.html`` exists → compile, persist to the cache, return the entry
5. otherwise → ViewNotFoundError listing every probed path

There is no staleness check. Editing a view after its first compile has no
effect until the cache is cleared.

"""

from __future__ import annotations

import logging
from pathlib import Path

from vellum.cache_store import CacheStore
from vellum.compiler.core import Compiler
from vellum.environment.exceptions import ViewNotFoundError
from vellum.environment.loaders import FileSystemLoader, validate_view_name
from vellum.utils.constants import NATIVE_EXTENSION

logger = logging.getLogger(__name__)


class ViewResolver:
    """Decide whether a view is served from cache, used as is, or compiled.

    Attributes:
        loader: Source lookup below the views root.
        cache: Store for compiled fragments.
        compiler: Compiler applied to markup views on a cache miss.
    """

    __slots__ = ("cache", "compiler", "loader")

    def __init__(self, loader: FileSystemLoader, cache: CacheStore, compiler: Compiler):
        self.loader = loader
        self.cache = cache
        self.compiler = compiler

    def resolve(self, name: str) -> Path:
        """Path of the fragment to execute for ``name``.

        Raises:
            ViewNotFoundError: Invalid name, or no source under any extension.
            ViewStorageError: Source unreadable or cache unwritable.
            ViewSyntaxError: Strict-mode compile failure.
        """
        validate_view_name(name)

        cached = self.cache.lookup(name)
        if cached is not None:
            logger.debug(f"Cache hit for view '{name}': {cached}")
            return cached

        located = self.loader.locate(name)
        if located is None:
            searched = [self.cache.path_for(name), *self.loader.candidates(name)]
            raise ViewNotFoundError(
                f"View '{name}' not found. Searched: {', '.join(str(p) for p in searched)}",
                view_name=name,
                searched=searched,
            )

        path, extension = located
        if extension == NATIVE_EXTENSION:
            logger.debug(f"Using native fragment for view '{name}': {path}")
            return path

        logger.debug(f"Compiling view '{name}' from {path}")
        fragment = self.compiler.compile(self.loader.get_source(path), name=name)
        return self.cache.store(name, fragment)

    def __repr__(self) -> str:
        return f"<ViewResolver views={self.loader.root} cache={self.cache.directory}>"

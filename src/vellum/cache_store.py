"""Compiled-fragment cache for Vellum.

One flat directory of ``<view name>.compiled.pyhtml`` files. The view name
keeps its dots (``layouts.header.compiled.pyhtml``), so no subdirectories are
ever created below the cache root.

Presence of an entry is the only validity test: an entry written once is
served until ``clear()`` removes it, however the source changes afterwards.

Atomic Writes:
Entries are written to a temporary file in the cache root and moved into
place with ``os.replace``, so a concurrent reader sees either no entry or a
complete one.

Example:
    >>> store = CacheStore(".vellum_cache")
    >>> store.store("home", "<h1><?py _echo(title) ?></h1>")
    PosixPath('.vellum_cache/home.compiled.pyhtml')
    >>> store.lookup("home")
    PosixPath('.vellum_cache/home.compiled.pyhtml')
    >>> store.clear()
    1

"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from vellum.environment.exceptions import ErrorCode, ViewStorageError
from vellum.utils.constants import COMPILED_SUFFIX

logger = logging.getLogger(__name__)


class CacheStore:
    """Flat directory of compiled fragments, keyed by view name."""

    __slots__ = ("_directory", "_encoding")

    def __init__(self, directory: str | Path, encoding: str = "utf-8"):
        self._directory = Path(directory)
        self._encoding = encoding

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, name: str) -> Path:
        """Cache path for ``name`` (whether or not it exists)."""
        return self._directory / f"{name}{COMPILED_SUFFIX}"

    def lookup(self, name: str) -> Path | None:
        """Path of the cached fragment for ``name``, or None on a miss."""
        path = self.path_for(name)
        if path.is_file():
            return path
        return None

    def store(self, name: str, fragment: str) -> Path:
        """Persist ``fragment`` as the cache entry for ``name``.

        Raises:
            ViewStorageError: If the cache root cannot be created or written.
        """
        path = self.path_for(name)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory, prefix=f".{name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding=self._encoding, newline="") as f:
                    f.write(fragment)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise ViewStorageError(
                f"Unable to write compiled view '{name}' to {path}: {e}",
                path=path,
                code=ErrorCode.STORAGE_WRITE,
            ) from e

        logger.debug(f"Stored compiled view '{name}' at {path}")
        return path

    def entries(self) -> list[Path]:
        """All cache entries, sorted. A missing cache root holds none.

        Raises:
            ViewStorageError: If the cache root exists but cannot be listed.
        """
        if not self._directory.exists():
            return []
        try:
            return sorted(
                path
                for path in self._directory.iterdir()
                if path.name.endswith(COMPILED_SUFFIX) and path.is_file()
            )
        except OSError as e:
            raise ViewStorageError(
                f"Unable to list cache directory {self._directory}: {e}",
                path=self._directory,
                code=ErrorCode.STORAGE_READ,
            ) from e

    def list_views(self) -> list[str]:
        """Names of the views that currently have a cache entry."""
        return [path.name[: -len(COMPILED_SUFFIX)] for path in self.entries()]

    def clear(self) -> int:
        """Delete every cache entry and return how many were removed.

        Files without the compiled suffix are left in place.

        Raises:
            ViewStorageError: If the root cannot be listed or an entry cannot
                be deleted.
        """
        removed = 0
        for path in self.entries():
            try:
                path.unlink()
            except FileNotFoundError:
                # Removed concurrently; the goal is already met
                continue
            except OSError as e:
                raise ViewStorageError(
                    f"Unable to delete cache entry {path}: {e}",
                    path=path,
                    code=ErrorCode.STORAGE_DELETE,
                ) from e
            removed += 1

        logger.debug(f"Cleared {removed} compiled view(s) from {self._directory}")
        return removed

    def stats(self) -> dict[str, int]:
        """Entry count and total size in bytes.

        Returns:
            Dict with file_count and total_bytes.
        """
        entries = self.entries()
        total = 0
        for path in entries:
            try:
                total += path.stat().st_size
            except OSError:
                # Entry vanished between listing and stat
                continue
        return {"file_count": len(entries), "total_bytes": total}

    def __repr__(self) -> str:
        return f"<CacheStore {self._directory}>"

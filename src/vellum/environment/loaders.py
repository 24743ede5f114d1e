"""View source loading for Vellum.

A view name is a dot-delimited reference (``layouts.header``). Each segment
becomes one path component under the source root, and the loader probes the
known extensions in order:

    ```
    layouts.header  →  <root>/layouts/header.pyhtml   (native fragment)
                    →  <root>/layouts/header.html     (markup, compiled)
    ```

Names are validated before touching the filesystem, so ``..``, absolute
paths and separators can never escape the source root.

"""

from __future__ import annotations

from pathlib import Path

from vellum.environment.exceptions import ErrorCode, ViewNotFoundError, ViewStorageError
from vellum.utils.constants import COMPILED_SUFFIX, SOURCE_EXTENSIONS, VIEW_NAME_RE


def validate_view_name(name: str) -> str:
    """Return ``name`` unchanged if it is a well-formed view name.

    Raises:
        ViewNotFoundError: With code INVALID_VIEW_NAME for anything else.
    """
    if not isinstance(name, str) or not VIEW_NAME_RE.fullmatch(name):
        raise ViewNotFoundError(
            f"Invalid view name {name!r}: expected dot-separated segments of "
            "letters, digits, '_' or '-'",
            view_name=name if isinstance(name, str) else None,
            code=ErrorCode.INVALID_VIEW_NAME,
        )
    return name


def view_name_to_path(name: str) -> Path:
    """Relative path (without extension) for a validated view name."""
    return Path(*name.split("."))


class FileSystemLoader:
    """Locate view sources below a single root directory.

    Attributes:
        root: Source root.
        extensions: Extensions probed in order; the first existing file wins.

    Example:
            >>> loader = FileSystemLoader("views/")
            >>> loader.locate("layouts.header")
            (PosixPath('views/layouts/header.html'), '.html')

    """

    __slots__ = ("_encoding", "_extensions", "_root")

    def __init__(
        self,
        root: str | Path,
        extensions: tuple[str, ...] = SOURCE_EXTENSIONS,
        encoding: str = "utf-8",
    ):
        self._root = Path(root)
        self._extensions = extensions
        self._encoding = encoding

    @property
    def root(self) -> Path:
        return self._root

    @property
    def extensions(self) -> tuple[str, ...]:
        return self._extensions

    def candidates(self, name: str) -> list[Path]:
        """Every path probed for ``name``, in probe order."""
        base = self._root / view_name_to_path(validate_view_name(name))
        return [base.with_name(base.name + ext) for ext in self._extensions]

    def locate(self, name: str) -> tuple[Path, str] | None:
        """First existing source for ``name`` as ``(path, extension)``."""
        for ext, path in zip(self._extensions, self.candidates(name), strict=True):
            if path.is_file():
                return path, ext
        return None

    def get_source(self, path: Path) -> str:
        """Read a located source file.

        Raises:
            ViewStorageError: If the file cannot be read.
        """
        try:
            return path.read_text(self._encoding)
        except OSError as e:
            raise ViewStorageError(
                f"Unable to read view source {path}: {e}",
                path=path,
                code=ErrorCode.STORAGE_READ,
            ) from e

    def list_views(self) -> list[str]:
        """All view names available under the root, sorted."""
        if not self._root.is_dir():
            return []
        names = set()
        for ext in self._extensions:
            for path in self._root.rglob(f"*{ext}"):
                if path.name.endswith(COMPILED_SUFFIX) or not path.is_file():
                    continue
                relative = path.relative_to(self._root)
                stem = relative.name[: -len(ext)]
                name = ".".join((*relative.parts[:-1], stem))
                if VIEW_NAME_RE.fullmatch(name):
                    names.add(name)
        return sorted(names)

    def __repr__(self) -> str:
        return f"<FileSystemLoader {self._root}>"

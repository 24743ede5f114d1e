"""Vellum Fragment: the executor that runs compiled views.

A Fragment wraps fragment text (``<?py ... ?>`` islands in markup), its
translated Python source, and the code object compiled from it. Executing
the fragment runs that code once against a fresh namespace built from a
RenderScope and captures everything it writes.

Architecture:
    ```
    Fragment
    ├── _source: str           # Fragment text (for error snippets)
    ├── _generated: GeneratedCode  # Python source + line map
    ├── _code: code object     # compile(..., "exec")
    └── _name, _filename       # For error messages and tracebacks
    ```

StringBuilder Pattern:
Generated code writes through ``_write = buf.append`` and the result is a
single ``''.join(buf)``. Nothing is returned on failure; capture is
all-or-nothing.

Error Enhancement:
Vellum errors raised inside the fragment (for example from a nested
``_include``) propagate unchanged. Any other exception becomes a
ViewRuntimeError carrying the view name, the fragment line, a source snippet
and the inclusion stack:
    ```
    Runtime Error: NameError: name 'usr' is not defined
      Location: profile:3
    ```

"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from vellum.environment.exceptions import (
    ErrorCode,
    ViewError,
    ViewRuntimeError,
    ViewStorageError,
    ViewSyntaxError,
    build_source_snippet,
)
from vellum.render_context import get_render_context
from vellum.template.codegen import GeneratedCode, translate
from vellum.template.helpers import STATIC_NAMESPACE, to_text
from vellum.template.scope import RenderScope
from vellum.utils.html import html_escape


class Fragment:
    """Executable form of one view.

    Fragments are immutable after construction; ``execute()`` keeps all of
    its state (buffer, namespace) local to the call.

    Attributes:
        name: View name (for error messages)
        filename: Path the fragment was loaded from, if any

    Example:
            >>> fragment = Fragment("Hello, <?py _echo(name) ?>!", name="greeting")
            >>> fragment.execute(RenderScope.bind({"name": "World"}))
            'Hello, World!'

    """

    __slots__ = ("_code", "_filename", "_generated", "_name", "_source")

    def __init__(self, source: str, name: str, filename: str | None = None):
        self._source = source
        self._name = name
        self._filename = filename or f"<fragment {name}>"
        self._generated: GeneratedCode = translate(source, name=name)
        try:
            self._code = compile(self._generated.source, self._filename, "exec")
        except SyntaxError as e:
            lineno = self._generated.fragment_line(e.lineno or 0) or None
            raise ViewSyntaxError(
                e.msg,
                lineno=lineno,
                name=name,
                source=source,
                code=ErrorCode.FRAGMENT_SYNTAX,
            ) from e

    @classmethod
    def from_path(cls, path: Path, name: str, encoding: str = "utf-8") -> Fragment:
        """Load and prepare the fragment stored at ``path``.

        Raises:
            ViewStorageError: If the file cannot be read.
        """
        try:
            source = path.read_text(encoding)
        except OSError as e:
            raise ViewStorageError(
                f"Unable to read fragment for view '{name}': {path}",
                path=path,
                code=ErrorCode.STORAGE_READ,
            ) from e
        return cls(source, name, filename=str(path))

    @property
    def name(self) -> str:
        return self._name

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def source(self) -> str:
        """Fragment text."""
        return self._source

    @property
    def python_source(self) -> str:
        """Generated Python code (useful when debugging directive output)."""
        return self._generated.source

    def execute(
        self,
        scope: RenderScope,
        *,
        include: Callable[[str], str] | None = None,
        autoescape: bool = False,
    ) -> str:
        """Run the fragment against ``scope`` and return the captured output.

        Args:
            scope: Bindings visible to the fragment.
            include: Called with a view name by ``@view``/``@style``/``@script``;
                returns the rendered sub-view. Inclusion fails without it.
            autoescape: HTML-escape placeholder output.

        Raises:
            ViewRuntimeError: If fragment code raises.
        """
        buf: list[str] = []
        _write = buf.append

        if autoescape:

            def _echo(value: Any) -> None:
                _write(html_escape(value))

        else:

            def _echo(value: Any) -> None:
                _write(to_text(value))

        def _include(view_name: str) -> None:
            if include is None:
                raise RuntimeError(f"View '{self._name}' cannot include '{view_name}' here")
            render_ctx = get_render_context()
            if render_ctx is not None:
                render_ctx.line = self._caller_line(sys._getframe(1))
            _write(include(view_name))

        namespace: dict[str, Any] = {
            **scope.bindings,
            **STATIC_NAMESPACE,
            "_write": _write,
            "_echo": _echo,
            "_include": _include,
        }

        try:
            exec(self._code, namespace)
        except ViewError:
            raise
        except Exception as e:
            raise self._enhance_error(e) from e
        return "".join(buf)

    def _caller_line(self, frame: Any) -> int:
        if frame.f_code.co_filename != self._filename:
            return 0
        return self._generated.fragment_line(frame.f_lineno)

    def _error_line(self, error: BaseException) -> int:
        """Fragment line of the innermost traceback entry inside this fragment."""
        lineno = 0
        tb = error.__traceback__
        while tb is not None:
            if tb.tb_frame.f_code.co_filename == self._filename:
                lineno = self._generated.fragment_line(tb.tb_lineno)
            tb = tb.tb_next
        return lineno

    def _enhance_error(self, error: Exception) -> ViewRuntimeError:
        """Convert an exception from fragment code into a ViewRuntimeError."""
        lineno = self._error_line(error)
        detail = str(error).strip() or "(no details available)"
        message = f"{type(error).__name__}: {detail}"

        snippet = build_source_snippet(self._source, lineno) if lineno else None

        suggestion = None
        if isinstance(error, NameError) and getattr(error, "name", None):
            suggestion = (
                f"Pass '{error.name}' to render(), or guard it with '@isset {error.name}'"
            )
        elif isinstance(error, (KeyError, AttributeError)):
            suggestion = "Check the parameter's shape, or guard the lookup with '@isset'"

        render_ctx = get_render_context()
        stack = list(render_ctx.view_stack) if render_ctx is not None else []

        return ViewRuntimeError(
            message,
            view_name=self._name,
            lineno=lineno or None,
            suggestion=suggestion,
            source_snippet=snippet,
            view_stack=stack,
        )

    def __repr__(self) -> str:
        return f"<Fragment {self._name}>"

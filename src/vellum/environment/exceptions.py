"""Exceptions for the Vellum view system.

Exception Hierarchy:
ViewError (base)
├── ViewNotFoundError        # Name is invalid or resolves to no source
├── ViewStorageError         # Source or cache file cannot be read, written or removed
├── ViewSyntaxError          # Strict-mode directive issue or untranslatable fragment
└── ViewRuntimeError         # Fragment code raised while executing
    └── IncludeDepthError    # Inclusion chain exceeded max_include_depth

The compiler itself never raises in its default (permissive) mode. The
resolver and cache fail fast; nothing is retried.

Example:
    ```
    V-RUN-001: NameError: name 'usr' is not defined
      Location: profile:3
       |
      2 | <h1>
    > 3 | <?py _echo(usr.name) ?>
      4 | </h1>
       |
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from vellum.environment import terminal


class ErrorCode(Enum):
    """Searchable error codes, formatted ``V-{CATEGORY}-{NUMBER}``.

    Categories: REF (view references), STO (file storage),
    SYN (syntax), RUN (execution).
    """

    VIEW_NOT_FOUND = "V-REF-001"
    INVALID_VIEW_NAME = "V-REF-002"

    STORAGE_READ = "V-STO-001"
    STORAGE_WRITE = "V-STO-002"
    STORAGE_DELETE = "V-STO-003"

    UNBALANCED_DIRECTIVE = "V-SYN-001"
    UNKNOWN_DIRECTIVE = "V-SYN-002"
    FRAGMENT_SYNTAX = "V-SYN-003"

    RUNTIME_ERROR = "V-RUN-001"
    INCLUDE_DEPTH = "V-RUN-002"

    @property
    def category(self) -> str:
        """Error category (``reference``, ``storage``, ``syntax``, ``runtime``)."""
        prefix = self.value.split("-")[1]
        return {
            "REF": "reference",
            "STO": "storage",
            "SYN": "syntax",
            "RUN": "runtime",
        }.get(prefix, "unknown")


def format_view_stack(stack: list[tuple[str, int]] | None) -> str:
    """Format the inclusion chain leading to an error.

    Example:
        >>> print(format_view_stack([("page", 4), ("layouts.header", 2)]))
        View stack:
          • page:4
          • layouts.header:2
    """
    if not stack:
        return ""
    lines = [terminal.dim_text("View stack:")]
    for view_name, line_num in stack:
        lines.append(f"  • {terminal.location(f'{view_name}:{line_num}')}")
    return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Lines of fragment source surrounding an error.

    Attributes:
        lines: ``(line_number, content)`` pairs around the error.
        error_line: 1-based line where the error occurred.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int

    def format(self) -> str:
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(source: str, error_line: int, *, context_lines: int = 2) -> SourceSnippet:
    """Build a SourceSnippet of ``context_lines`` either side of ``error_line``."""
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line)


class ViewError(Exception):
    """Base exception for all Vellum errors.

    Attributes:
        code: Optional ErrorCode identifying the failure.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Render the error as a short terminal diagnostic without traceback noise."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class ViewNotFoundError(ViewError):
    """The view name is malformed or no source exists for it.

    Attributes:
        view_name: The requested name.
        searched: Candidate paths that were probed, in probe order.
    """

    code: ErrorCode | None = ErrorCode.VIEW_NOT_FOUND

    def __init__(
        self,
        message: str,
        *,
        view_name: str | None = None,
        searched: list[Path] | None = None,
        code: ErrorCode | None = None,
    ):
        self.view_name = view_name
        self.searched = searched or []
        if code is not None:
            self.code = code
        super().__init__(message)


class ViewStorageError(ViewError):
    """A view file or the cache directory could not be read, written or cleaned.

    Attributes:
        path: File or directory the failed operation targeted.
    """

    code: ErrorCode | None = ErrorCode.STORAGE_WRITE

    def __init__(self, message: str, *, path: Path | None = None, code: ErrorCode | None = None):
        self.path = path
        if code is not None:
            self.code = code
        super().__init__(message)


class ViewSyntaxError(ViewError):
    """A directive or fragment cannot be turned into executable code.

    Raised by the compiler only in strict mode, and by the executor when a
    fragment has an unterminated block, a stray ``end``, or Python code that
    does not compile.
    """

    code: ErrorCode | None = ErrorCode.FRAGMENT_SYNTAX

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        source: str | None = None,
        *,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.source = source
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        location = self.name or "<view>"
        if self.lineno:
            location += f":{self.lineno}"
        header = f"Syntax Error: {self.message}\n  --> {location}"

        if self.source and self.lineno:
            lines = self.source.splitlines()
            if 0 < self.lineno <= len(lines):
                return header + f"\n   |\n{self.lineno:>3} | {lines[self.lineno - 1]}"
        return header


class ViewRuntimeError(ViewError):
    """Fragment code failed while executing.

    The original exception is chained as ``__cause__``.

    Attributes:
        message: Error description.
        view_name: View whose fragment was executing.
        lineno: Fragment line of the failing statement, when known.
        suggestion: Actionable hint.
        source_snippet: Fragment lines around ``lineno``.
        view_stack: ``(view_name, line)`` pairs of the including views.
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        view_name: str | None = None,
        lineno: int | None = None,
        suggestion: str | None = None,
        source_snippet: SourceSnippet | None = None,
        view_stack: list[tuple[str, int]] | None = None,
    ):
        self.message = message
        self.view_name = view_name
        self.lineno = lineno
        self.suggestion = suggestion
        self.source_snippet = source_snippet
        self.view_stack = view_stack or []
        super().__init__(self._format_message())

    def _location(self) -> str:
        loc = self.view_name or "<view>"
        if self.lineno:
            loc += f":{self.lineno}"
        return loc

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]
        if self.view_name or self.lineno:
            parts.append(f"  Location: {terminal.location(self._location())}")
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if self.view_stack:
            parts.append("")
            parts.append(format_view_stack(self.view_stack))
        if self.suggestion:
            parts.append(f"\n  {terminal.hint('Suggestion:')} {self.suggestion}")
        return "\n".join(parts)

    def format_compact(self) -> str:
        parts = [
            terminal.format_error_header(self.code.value if self.code else None, self.message),
            f"  Location: {terminal.location(self._location())}",
        ]
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if self.view_stack:
            parts.append("")
            parts.append(format_view_stack(self.view_stack))
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)


class IncludeDepthError(ViewRuntimeError):
    """The inclusion chain grew past ``max_include_depth``.

    Almost always a view that includes itself, directly or through others.
    """

    code: ErrorCode | None = ErrorCode.INCLUDE_DEPTH

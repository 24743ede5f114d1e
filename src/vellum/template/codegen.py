"""Fragment → Python source translation.

A fragment is literal markup interleaved with ``<?py ... ?>`` islands.
``translate`` walks it once, left to right:

- literal text becomes ``_write('...')``
- an island ending in ``:`` opens an indented block
- an island starting with ``elif``/``else``/``except``/``finally`` closes the
  current block and opens its continuation
- an ``end`` island closes the innermost block
- anything else is emitted as statements at the current indentation

Every generated line remembers the fragment line it came from, so runtime
errors can point back at the fragment rather than at generated code.

Example:
    ```
    <?py if x: ?>YES<?py else: ?>NO<?py end ?>
    ```
    becomes
    ```python
    if x:
        _write('YES')
    else:
        _write('NO')
    ```

"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass

from vellum.environment.exceptions import ErrorCode, ViewSyntaxError
from vellum.utils.constants import BLOCK_END, CONTINUATION_KEYWORDS, ISLAND_RE


@dataclass(frozen=True, slots=True)
class GeneratedCode:
    """Python source for one fragment.

    Attributes:
        source: Module-level Python code.
        line_map: ``line_map[n - 1]`` is the fragment line of generated line ``n``.
    """

    source: str
    line_map: tuple[int, ...]

    def fragment_line(self, python_line: int) -> int:
        """Map a generated-code line number back to the fragment (0 if unknown)."""
        if 0 < python_line <= len(self.line_map):
            return self.line_map[python_line - 1]
        return 0


@dataclass(slots=True)
class _OpenBlock:
    opened_at: int
    has_body: bool = False


class CodeBuilder:
    """Accumulate indented Python lines together with their fragment origin."""

    INDENT_STEP = 4

    __slots__ = ("_blocks", "_line_map", "_lines", "indent_level")

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._line_map: list[int] = []
        self._blocks: list[_OpenBlock] = []
        self.indent_level = 0

    @property
    def open_blocks(self) -> tuple[int, ...]:
        """Fragment lines of blocks that are still open, outermost first."""
        return tuple(block.opened_at for block in self._blocks)

    def add_line(self, line: str, fragment_line: int) -> None:
        self._lines.append(" " * self.indent_level + line)
        self._line_map.append(fragment_line)
        # Comments alone would leave a suite empty
        if self._blocks and not line.lstrip().startswith("#"):
            self._blocks[-1].has_body = True

    def open_block(self, header: str, fragment_line: int) -> None:
        self.add_line(header, fragment_line)
        self._blocks.append(_OpenBlock(fragment_line))
        self.indent_level += self.INDENT_STEP

    def close_block(self, fragment_line: int) -> None:
        if not self._blocks[-1].has_body:
            self.add_line("pass", fragment_line)
        self._blocks.pop()
        self.indent_level -= self.INDENT_STEP

    def build(self) -> GeneratedCode:
        return GeneratedCode(source="\n".join(self._lines) + "\n", line_map=tuple(self._line_map))


def _island_lines(code: str) -> list[tuple[int, str]]:
    """Split island code into ``(line offset, text)`` pairs.

    The first line may share the line of ``<?py``; the remaining lines are
    dedented together so raw blocks keep their relative indentation.
    """
    first, *rest = code.split("\n")
    lines = [(0, first.strip())]
    if rest:
        dedented = textwrap.dedent("\n".join(rest)).split("\n")
        lines.extend((offset, text.rstrip()) for offset, text in enumerate(dedented, start=1))
    return [(offset, text) for offset, text in lines if text]


def _leading_keyword(text: str) -> str:
    head = text.split(None, 1)[0] if text else ""
    return head.rstrip(":")


def translate(fragment: str, name: str | None = None) -> GeneratedCode:
    """Translate fragment text into Python source.

    Raises:
        ViewSyntaxError: For an ``end`` or continuation with no open block,
            or a block still open at the end of the fragment.
    """
    builder = CodeBuilder()
    lineno = 1
    position = 0

    def fail(message: str, line: int) -> ViewSyntaxError:
        return ViewSyntaxError(
            message,
            lineno=line,
            name=name,
            source=fragment,
            code=ErrorCode.UNBALANCED_DIRECTIVE,
        )

    for match in ISLAND_RE.finditer(fragment):
        literal = fragment[position : match.start()]
        if literal:
            builder.add_line(f"_write({literal!r})", lineno)
            lineno += literal.count("\n")

        entries = _island_lines(match.group(1))
        if entries:
            first_offset, first_text = entries[0]
            if len(entries) == 1 and first_text == BLOCK_END:
                if not builder.open_blocks:
                    raise fail("'end' without an open block", lineno)
                builder.close_block(lineno)
                entries = []
            elif _leading_keyword(first_text) in CONTINUATION_KEYWORDS:
                if not builder.open_blocks:
                    raise fail(f"'{first_text}' without an open block", lineno + first_offset)
                builder.close_block(lineno + first_offset)

            for index, (offset, text) in enumerate(entries):
                is_last = index == len(entries) - 1
                if is_last and text.endswith(":") and not text.lstrip().startswith("#"):
                    builder.open_block(text, lineno + offset)
                else:
                    builder.add_line(text, lineno + offset)

        lineno += match.group(0).count("\n")
        position = match.end()

    tail = fragment[position:]
    if tail:
        builder.add_line(f"_write({tail!r})", lineno)

    if builder.open_blocks:
        opened_at = builder.open_blocks[-1]
        raise fail(f"block opened at line {opened_at} is never closed", opened_at)

    return builder.build()

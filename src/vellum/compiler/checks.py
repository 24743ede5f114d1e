"""Strict-mode directive checks.

The rewrite rules match each directive on its own, so a misspelled keyword
or an ``@if`` closed by ``@endfor`` compiles silently and only fails (or
misbehaves) when the fragment runs. ``find_directive_issues`` walks the
source line by line with a block stack and reports those problems up front.

Only ``Environment(strict=True)`` runs these checks; the default compiler
stays permissive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from difflib import get_close_matches

from vellum.environment.exceptions import ErrorCode, ViewSyntaxError

_DIRECTIVE_LINE_RE = re.compile(r"^[ \t]*@(?P<word>[A-Za-z]+)\b(?P<rest>[^\r\n]*)$")
_COMMENT_RE = re.compile(r"##[^#]+##")
_RAW_OPEN_RE = re.compile(r"(?<!\w)@(?P<kw>php|py)\b")

_OPENERS = {"if": "endif", "for": "endfor", "isset": "endisset", "empty": "endempty"}
_CLOSERS = {closer: opener for opener, closer in _OPENERS.items()}
_ARGUMENT_REQUIRED = frozenset({"if", "elseif", "for", "isset", "empty", "view", "style", "script"})
_LOOP_CONTROL = frozenset({"break", "continue"})

KNOWN_DIRECTIVES: frozenset[str] = frozenset(
    {*_OPENERS, *_CLOSERS, *_ARGUMENT_REQUIRED, *_LOOP_CONTROL, "else", "php", "py"}
)

_FOR_RE = re.compile(r"^\s*(?:[A-Za-z_]\w*\s*,\s*[A-Za-z_]\w*|[^\s,]+)\s+in\s+\S")
_VIEW_ARG_RE = re.compile(r"^\s+[\w.-]+\s*$")


@dataclass(frozen=True, slots=True)
class DirectiveIssue:
    """A problem found in view source.

    Attributes:
        lineno: 1-based source line.
        message: Human readable description.
        code: ErrorCode classifying the issue.
    """

    lineno: int
    message: str
    code: ErrorCode


def _blank_comments(source: str) -> str:
    # Keep newlines so line numbers stay aligned with the original source
    return _COMMENT_RE.sub(lambda m: "\n" * m.group(0).count("\n"), source)


def find_directive_issues(source: str) -> list[DirectiveIssue]:
    """Return every structural directive problem in ``source``, in the order found.

    Problems on directive lines come first (top to bottom), followed by blocks
    left open at the end of the source.
    """
    issues: list[DirectiveIssue] = []
    stack: list[tuple[str, int]] = []
    raw_keyword: str | None = None

    def unbalanced(lineno: int, message: str) -> None:
        issues.append(DirectiveIssue(lineno, message, ErrorCode.UNBALANCED_DIRECTIVE))

    for lineno, line in enumerate(_blank_comments(source).splitlines(), start=1):
        if raw_keyword is not None:
            if f"@end{raw_keyword}" in line:
                raw_keyword = None
            continue

        raw = _RAW_OPEN_RE.search(line)
        if raw and f"@end{raw.group('kw')}" not in line[raw.end() :]:
            raw_keyword = raw.group("kw")
            continue

        match = _DIRECTIVE_LINE_RE.match(line)
        if match is None:
            continue
        word, rest = match.group("word"), match.group("rest")

        if word not in KNOWN_DIRECTIVES:
            close = get_close_matches(word, sorted(KNOWN_DIRECTIVES), n=1, cutoff=0.75)
            if close:
                issues.append(
                    DirectiveIssue(
                        lineno,
                        f"Unknown directive '@{word}'. Did you mean '@{close[0]}'?",
                        ErrorCode.UNKNOWN_DIRECTIVE,
                    )
                )
            continue

        if word in _ARGUMENT_REQUIRED and not rest.strip():
            unbalanced(lineno, f"'@{word}' requires an argument")
            continue
        if word not in _ARGUMENT_REQUIRED and word not in ("php", "py") and rest.strip():
            unbalanced(lineno, f"'@{word}' takes no argument")
            continue
        if word == "for" and not _FOR_RE.match(rest):
            unbalanced(lineno, f"Malformed loop '@for{rest}'; expected '@for item in items'")
            continue
        if word in ("view", "style", "script") and not _VIEW_ARG_RE.match(rest):
            unbalanced(lineno, f"'@{word}' expects a single view name")
            continue

        if word in _OPENERS:
            stack.append((word, lineno))
        elif word in ("elseif", "else"):
            if not stack or stack[-1][0] != "if":
                unbalanced(lineno, f"'@{word}' outside of an '@if' block")
        elif word in _CLOSERS:
            expected = _CLOSERS[word]
            if not stack:
                unbalanced(lineno, f"'@{word}' without an open '@{expected}'")
            elif stack[-1][0] != expected:
                opener, opened_at = stack[-1]
                unbalanced(
                    lineno,
                    f"'@{word}' closes '@{opener}' opened at line {opened_at}; "
                    f"expected '@{_OPENERS[opener]}'",
                )
            else:
                stack.pop()
        elif word in _LOOP_CONTROL and not any(opener == "for" for opener, _ in stack):
            unbalanced(lineno, f"'@{word}' outside of an '@for' loop")

    for opener, opened_at in stack:
        unbalanced(opened_at, f"'@{opener}' is never closed with '@{_OPENERS[opener]}'")
    if raw_keyword is not None:
        unbalanced(source.count("\n") + 1, f"'@{raw_keyword}' block is never closed")

    return issues


def check_directives(source: str, name: str | None = None) -> None:
    """Raise ViewSyntaxError for the first issue found in ``source``."""
    issues = find_directive_issues(source)
    if issues:
        first = issues[0]
        raise ViewSyntaxError(first.message, lineno=first.lineno, name=name, source=source, code=first.code)

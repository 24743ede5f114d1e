"""Directive rules: the fixed, ordered rewrite catalog used by the Compiler.

Each rule recognises one directive occurrence with a regular expression and
rewrites it into a code island (``<?py ... ?>``). Rules are applied one after
another over the whole text, in catalog order:

1. comments        ``##text##``
2. placeholders    ``{{ expr }}``
3. conditionals    ``@if`` / ``@elseif`` / ``@else`` / ``@endif``
4. loops           ``@for`` / ``@break`` / ``@continue`` / ``@endfor``
5. guards          ``@isset`` / ``@endisset`` / ``@empty`` / ``@endempty``
6. raw code        ``@php ... @endphp`` (or ``@py ... @endpy``)
7. inclusion       ``@view`` / ``@style`` / ``@script``

Island Protection:
    Every rule pattern is an alternation whose first branch matches a complete
    island. Islands produced by an earlier rule are matched first and returned
    unchanged, so ``## {{ secret }} ##`` stays a comment and never leaks an
    ``_echo`` call.

Line Directives:
    Conditionals, loops and guards must be the only content on their line
    (indentation allowed). The whole line is replaced by an island that
    carries the line's newline inside it (``<?py if x:\\n?>``): nothing is
    rendered for the directive line, and the fragment keeps the source's
    line numbering. Inclusion directives keep their indentation and newline
    so the included output sits where the directive was.

Anything that does not match is left as literal text.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

_ISLAND = r"(?P<island><\?py(?s:.*?)\?>)"

# A directive line: optional indentation, the directive, trailing blanks, newline.
# An island ending in "\n?>" has taken over the end of a source line, so the
# text after it starts a line. Islands closed with " ?>" are inline.
_AFTER_LINE_ISLAND = r"(?<=\n\?>)"
_LINE_START = rf"(?:^|{_AFTER_LINE_ISLAND})[ \t]*"
_LINE_END = r"[ \t]*(?P<eol>\r?\n|\Z)"

# Rest-of-line argument that ends on a non-blank character
_ARG = r"[^\r\n]*\S"


@dataclass(frozen=True, slots=True)
class DirectiveRule:
    """One pattern → rewrite pair.

    Attributes:
        name: Directive this rule recognises (``if``, ``for-pairs``, ...).
        directive: Directive class it belongs to (``conditional``, ``loop``, ...).
        pattern: Compiled alternation of the island guard and the directive.
        rewrite: Builds the replacement island from a directive match.
    """

    name: str
    directive: str
    pattern: re.Pattern[str]
    rewrite: Callable[[re.Match[str]], str]

    def apply(self, text: str) -> str:
        """Rewrite every occurrence of this directive outside existing islands."""
        return self.pattern.sub(self._replace, text)

    def _replace(self, match: re.Match[str]) -> str:
        if match.group("island") is not None:
            return match.group(0)
        return self.rewrite(match)


def _rule(
    name: str,
    directive: str,
    body: str,
    rewrite: Callable[[re.Match[str]], str],
    flags: int = 0,
) -> DirectiveRule:
    pattern = re.compile(f"{_ISLAND}|{body}", flags)
    return DirectiveRule(name=name, directive=directive, pattern=pattern, rewrite=rewrite)


def _line_rule(
    name: str,
    directive: str,
    body: str,
    code: str | Callable[[re.Match[str]], str],
) -> DirectiveRule:
    """Rule for a directive that owns its whole line.

    ``code`` is the island's Python, or a function building it from the match.
    """
    build = code if callable(code) else (lambda match: code)

    def rewrite(match: re.Match[str]) -> str:
        return _island(build(match), match.group("eol"))

    return _rule(name, directive, f"{_LINE_START}{body}{_LINE_END}", rewrite, re.MULTILINE)


def _island(code: str, eol: str = "") -> str:
    if eol:
        return f"<?py {code}{eol}?>"
    return f"<?py {code} ?>"


# -- rewriters ---------------------------------------------------------------


def _rewrite_comment(match: re.Match[str]) -> str:
    text = match.group("comment").strip().replace("?>", "? >")
    lines = [f"# {line.strip()}".rstrip() for line in text.splitlines()] or ["#"]
    return _island("\n".join(lines))


def _rewrite_placeholder(match: re.Match[str]) -> str:
    expr = match.group("expr").strip()
    if not expr:
        return match.group(0)
    return _island(f"_echo({expr})")


def _rewrite_raw(match: re.Match[str]) -> str:
    code = match.group("code")
    if not code.strip():
        return ""
    return _island(code, match.group("eol") or "")


def _rewrite_inclusion(match: re.Match[str]) -> str:
    call = _island(f"_include({match.group('view')!r})")
    kind = match.group("kind")
    if kind != "view":
        call = f"<{kind}>{call}</{kind}>"
    return match.group("indent") + call


# -- catalog -----------------------------------------------------------------

COMMENT_RULES: tuple[DirectiveRule, ...] = (
    _rule("comment", "comment", r"##(?P<comment>[^#]+)##", _rewrite_comment),
)

PLACEHOLDER_RULES: tuple[DirectiveRule, ...] = (
    _rule(
        "placeholder",
        "placeholder",
        r"\{\{(?P<expr>(?:(?!<\?py)(?:[^}]|\}(?!\})))+)\}\}",
        _rewrite_placeholder,
    ),
)

CONDITIONAL_RULES: tuple[DirectiveRule, ...] = (
    _line_rule(
        "if",
        "conditional",
        rf"@if\b[ \t]*(?P<cond>{_ARG})",
        lambda m: f"if {m.group('cond')}:",
    ),
    _line_rule(
        "elseif",
        "conditional",
        rf"@elseif\b[ \t]*(?P<cond>{_ARG})",
        lambda m: f"elif {m.group('cond')}:",
    ),
    _line_rule("else", "conditional", r"@else", "else:"),
    _line_rule("endif", "conditional", r"@endif", "end"),
)

LOOP_RULES: tuple[DirectiveRule, ...] = (
    _line_rule(
        "for-pairs",
        "loop",
        rf"@for\b[ \t]*(?P<key>[A-Za-z_]\w*)[ \t]*,[ \t]*(?P<value>[A-Za-z_]\w*)"
        rf"[ \t]+in[ \t]+(?P<items>{_ARG})",
        lambda m: f"for {m.group('key')}, {m.group('value')} in _pairs({m.group('items')}):",
    ),
    _line_rule(
        "for",
        "loop",
        rf"@for\b[ \t]*(?P<value>[^\s,]+)[ \t]+in[ \t]+(?P<items>{_ARG})",
        lambda m: f"for {m.group('value')} in _values({m.group('items')}):",
    ),
    _line_rule("break", "loop", r"@break", "break"),
    _line_rule("continue", "loop", r"@continue", "continue"),
    _line_rule("endfor", "loop", r"@endfor", "end"),
)

GUARD_RULES: tuple[DirectiveRule, ...] = (
    _line_rule(
        "isset",
        "guard",
        rf"@isset\b[ \t]*(?P<expr>{_ARG})",
        lambda m: f"if _isset(lambda: {m.group('expr')}):",
    ),
    _line_rule("endisset", "guard", r"@endisset", "end"),
    _line_rule(
        "empty",
        "guard",
        rf"@empty\b[ \t]*(?P<expr>{_ARG})",
        lambda m: f"if _empty(lambda: {m.group('expr')}):",
    ),
    _line_rule("endempty", "guard", r"@endempty", "end"),
)

RAW_RULES: tuple[DirectiveRule, ...] = (
    # The body may not contain an island: a raw block wrapped around already
    # compiled directives is left untouched rather than producing nested islands.
    _rule(
        "raw",
        "raw",
        r"(?<!\w)@(?P<kw>php|py)\b(?P<code>(?:(?!<\?py).)*?)@end(?P=kw)\b(?:[ \t]*(?P<eol>\r?\n))?",
        _rewrite_raw,
        re.DOTALL,
    ),
)

INCLUSION_RULES: tuple[DirectiveRule, ...] = (
    _rule(
        "inclusion",
        "inclusion",
        rf"(?:^|{_AFTER_LINE_ISLAND})(?P<indent>[ \t]*)@(?P<kind>view|style|script)"
        r"[ \t]+(?P<view>[\w.-]+)[ \t]*(?=\r?$)",
        _rewrite_inclusion,
        re.MULTILINE,
    ),
)

DIRECTIVE_RULES: tuple[DirectiveRule, ...] = (
    *COMMENT_RULES,
    *PLACEHOLDER_RULES,
    *CONDITIONAL_RULES,
    *LOOP_RULES,
    *GUARD_RULES,
    *RAW_RULES,
    *INCLUSION_RULES,
)

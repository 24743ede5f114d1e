"""Vellum Compiler: turns view markup into an executable fragment.

The Compiler applies the directive rule catalog to the full text of a view,
one rule at a time and always in the same order. The result is a *fragment*:
the original markup with directives replaced by ``<?py ... ?>`` code islands.

Design Principles:
1. **Pure**: text in, text out; no I/O, no environment state
2. **Total**: unmatched directive syntax stays literal text, so the default
   compiler never raises
3. **Deterministic**: the same source always yields the same fragment
4. **Idempotent on plain text**: markup without directives (including an
   already compiled fragment) comes back unchanged

Example:
    >>> from vellum.compiler import Compiler
    >>> Compiler().compile("@if user\\nHi {{ user.name }}\\n@endif\\n")
    '<?py if user:\\n?>Hi <?py _echo(user.name) ?>\\n<?py end\\n?>'

"""

from __future__ import annotations

from collections.abc import Sequence

from vellum.compiler.checks import check_directives
from vellum.compiler.rules import DIRECTIVE_RULES, DirectiveRule


class Compiler:
    """Apply directive rules, in order, to view source.

    Attributes:
        rules: The ordered rule catalog (defaults to ``DIRECTIVE_RULES``).
        strict: When True, ``compile()`` first validates directive structure
            and raises ViewSyntaxError instead of passing mistakes through.

    """

    __slots__ = ("_rules", "_strict")

    def __init__(self, rules: Sequence[DirectiveRule] = DIRECTIVE_RULES, *, strict: bool = False):
        self._rules = tuple(rules)
        self._strict = strict

    @property
    def rules(self) -> tuple[DirectiveRule, ...]:
        return self._rules

    @property
    def strict(self) -> bool:
        return self._strict

    def compile(self, source: str, name: str | None = None) -> str:
        """Compile view source into fragment text.

        Args:
            source: Raw view markup.
            name: View name, used only in strict-mode error messages.

        Returns:
            Fragment text with every recognised directive rewritten.

        Raises:
            ViewSyntaxError: Only in strict mode, for unbalanced or
                misspelled directives.
        """
        if self._strict:
            check_directives(source, name=name)

        fragment = source
        for rule in self._rules:
            fragment = rule.apply(fragment)
        return fragment

    def __repr__(self) -> str:
        mode = "strict" if self._strict else "permissive"
        return f"<Compiler {len(self._rules)} rules, {mode}>"


_DEFAULT_COMPILER = Compiler()


def compile_source(source: str) -> str:
    """Compile ``source`` with the default (permissive) rule catalog."""
    return _DEFAULT_COMPILER.compile(source)

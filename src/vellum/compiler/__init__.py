"""Vellum compiler: directive rules and the pass pipeline that applies them."""

from vellum.compiler.checks import DirectiveIssue, check_directives, find_directive_issues
from vellum.compiler.core import Compiler, compile_source
from vellum.compiler.rules import DIRECTIVE_RULES, DirectiveRule

__all__ = [
    "DIRECTIVE_RULES",
    "Compiler",
    "DirectiveIssue",
    "DirectiveRule",
    "check_directives",
    "compile_source",
    "find_directive_issues",
]

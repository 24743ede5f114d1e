"""Property-based tests for the directive compiler.

Uses hypothesis to verify invariants that must hold for *all* inputs:

- Text without directive syntax compiles to itself
- Compilation is deterministic
- A compiled view is a fixed point of the compiler
- Compilation keeps the source's line count
- Directive words after an inline island stay literal
- The permissive compiler never raises
- Well-formed views always translate and run
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from vellum import Fragment, RenderScope, ViewSyntaxError, compile_source
from vellum.compiler import find_directive_issues
from vellum.template import translate

from .strategies import (
    arbitrary_view_source,
    directive_noise,
    plain_text,
    safe_identifier,
    scalar_value,
    view_source,
)


class TestCompilerProperties:
    """Property-based compiler invariants."""

    @given(source=plain_text)
    @settings(max_examples=200)
    def test_plain_text_is_unchanged(self, source: str) -> None:
        assert compile_source(source) == source

    @given(source=arbitrary_view_source)
    @settings(max_examples=200)
    def test_deterministic(self, source: str) -> None:
        assert compile_source(source) == compile_source(source)

    @given(source=st.one_of(arbitrary_view_source, directive_noise))
    @settings(max_examples=300)
    def test_permissive_compile_never_raises(self, source: str) -> None:
        result = compile_source(source)
        assert isinstance(result, str)

    @given(source=view_source)
    @settings(max_examples=200)
    def test_compiled_view_is_fixed_point(self, source: str) -> None:
        once = compile_source(source)
        assert compile_source(once) == once

    @given(source=view_source)
    @settings(max_examples=200)
    def test_line_count_preserved(self, source: str) -> None:
        assert compile_source(source).count("\n") == source.count("\n")

    @given(prefix=plain_text.filter(lambda s: "\n" not in s), name=safe_identifier)
    @settings(max_examples=100)
    def test_directive_after_placeholder_stays_literal(self, prefix: str, name: str) -> None:
        source = f"{prefix}{{{{ {name} }}}} @else\n"
        assert compile_source(source).endswith(" ?> @else\n")

    @given(source=view_source)
    @settings(max_examples=200)
    def test_well_formed_views_pass_strict_checks(self, source: str) -> None:
        assert find_directive_issues(source) == []


class TestExecutionProperties:
    """Compiled, well-formed views always run."""

    @given(source=view_source, value=scalar_value)
    @settings(max_examples=150)
    def test_well_formed_views_render(self, source: str, value: object) -> None:
        params = {name: value for name in ("x", "y", "name", "item", "count", "title", "user", "data", "flag", "value")}
        params["items"] = [value, value]
        fragment = Fragment(compile_source(source), name="prop")
        assert isinstance(fragment.execute(RenderScope.bind(params)), str)

    @given(name=safe_identifier, value=scalar_value)
    @settings(max_examples=150)
    def test_placeholder_renders_value(self, name: str, value: object) -> None:
        fragment = Fragment(compile_source(f"[{{{{ {name} }}}}]"), name="prop")
        expected = "" if value is None else str(value)
        assert fragment.execute(RenderScope.bind({name: value})) == f"[{expected}]"

    @given(source=plain_text)
    @settings(max_examples=200)
    def test_plain_text_renders_verbatim(self, source: str) -> None:
        fragment = Fragment(compile_source(source), name="prop")
        assert fragment.execute(RenderScope.bind()) == source

    @given(source=arbitrary_view_source)
    @settings(max_examples=200)
    def test_translate_fails_only_with_syntax_error(self, source: str) -> None:
        try:
            translate(compile_source(source))
        except ViewSyntaxError:
            pass  # Unbalanced blocks in random input

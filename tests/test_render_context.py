"""Tests for the ContextVar-held render context."""

from __future__ import annotations

import threading

import pytest

from vellum import IncludeDepthError
from vellum.render_context import (
    RenderContext,
    get_render_context,
    render_context,
    reset_render_context,
    set_render_context,
)


class TestRenderContext:
    def test_no_context_by_default(self) -> None:
        assert get_render_context() is None

    def test_context_manager_installs_and_restores(self) -> None:
        with render_context(view_name="page", max_include_depth=7) as ctx:
            assert get_render_context() is ctx
            assert ctx.view_name == "page"
            assert ctx.max_include_depth == 7
        assert get_render_context() is None

    def test_restored_after_exception(self) -> None:
        with pytest.raises(RuntimeError), render_context(view_name="page"):
            raise RuntimeError("boom")
        assert get_render_context() is None

    def test_child_context(self) -> None:
        parent = RenderContext(view_name="page", line=4, include_depth=1)
        child = parent.child_context("header", "views/header.html")
        assert child.include_depth == 2
        assert child.view_stack == [("page", 4)]
        assert child.filename == "views/header.html"
        assert child.line == 0
        assert parent.view_stack == []

    def test_set_and_reset(self) -> None:
        ctx = RenderContext(view_name="x")
        token = set_render_context(ctx)
        assert get_render_context() is ctx
        reset_render_context(token)
        assert get_render_context() is None

    def test_depth_check(self) -> None:
        RenderContext(include_depth=1, max_include_depth=2).check_include_depth("ok")
        ctx = RenderContext(view_name="a", line=3, include_depth=2, max_include_depth=2)
        with pytest.raises(IncludeDepthError) as exc_info:
            ctx.check_include_depth("b")
        assert exc_info.value.view_name == "a"
        assert exc_info.value.lineno == 3
        assert "'b'" in exc_info.value.message

    def test_isolated_per_thread(self) -> None:
        seen = []

        def worker() -> None:
            seen.append(get_render_context())

        with render_context(view_name="main"):
            thread = threading.Thread(target=worker)
            thread.start()
            thread.join()
        assert seen == [None]

"""Render benchmarks: cached views executed through Environment.render().

Every benchmark renders once before timing, so the compile and cache write
are excluded and each timed call is lookup + read + translate + exec.

Run with: pytest benchmarks/test_benchmark_render.py --benchmark-only -v
"""

from __future__ import annotations

import pytest
from pytest_benchmark.fixture import BenchmarkFixture

from vellum import Fragment, RenderScope, compile_source

LIST_VIEW = """\
<ul>
@for item in items
  <li>{{ item.name }}</li>
@endfor
</ul>
"""

PROFILE_VIEW = """\
<h1>{{ user.name }}</h1>
@for post in user.posts
<article><h2>{{ post.title }}</h2><p>{{ post.content }}</p></article>
@endfor
"""


@pytest.mark.benchmark(group="render:hello")
def test_render_hello(benchmark: BenchmarkFixture, views_env, small_params) -> None:
    env = views_env({"hello": "Hello, {{ name }}!"})
    env.render("hello", small_params)
    result = benchmark(env.render, "hello", small_params)
    assert result == "Hello, World!"


@pytest.mark.benchmark(group="render:list:small")
def test_render_small_list(benchmark: BenchmarkFixture, views_env, small_params) -> None:
    env = views_env({"list": LIST_VIEW})
    env.render("list", small_params)
    result = benchmark(env.render, "list", small_params)
    assert result.count("<li>") == 10


@pytest.mark.benchmark(group="render:list:large")
def test_render_large_list(benchmark: BenchmarkFixture, views_env, large_params) -> None:
    env = views_env({"list": LIST_VIEW})
    env.render("list", large_params)
    result = benchmark(env.render, "list", large_params)
    assert result.count("<li>") == 1000


@pytest.mark.benchmark(group="render:autoescape")
def test_render_autoescape(benchmark: BenchmarkFixture, views_env, large_params) -> None:
    env = views_env({"profile": PROFILE_VIEW})
    env.autoescape = True
    env.render("profile", large_params)
    benchmark(env.render, "profile", large_params)


@pytest.mark.benchmark(group="render:include")
def test_render_nested_includes(benchmark: BenchmarkFixture, views_env, small_params) -> None:
    views = {f"level{i}": f"<div>\n@view level{i + 1}\n</div>" for i in range(10)}
    views["level10"] = "{{ name }}"
    env = views_env(views)
    env.render("level0", small_params)
    result = benchmark(env.render, "level0", small_params)
    assert "World" in result


@pytest.mark.benchmark(group="render:execute-only")
def test_execute_prebuilt_fragment(benchmark: BenchmarkFixture, large_params) -> None:
    """Fragment.execute() alone, no file I/O or translation."""
    fragment = Fragment(compile_source(LIST_VIEW), name="list")
    scope = RenderScope.bind(large_params)
    result = benchmark(fragment.execute, scope)
    assert result.count("<li>") == 1000

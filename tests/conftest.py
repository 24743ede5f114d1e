"""Pytest configuration and fixtures for Vellum tests."""

from pathlib import Path

import pytest

from vellum import Environment
from vellum.environment import terminal


@pytest.fixture(autouse=True)
def _plain_diagnostics(monkeypatch):
    """Keep error messages free of ANSI codes regardless of FORCE_COLOR."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


@pytest.fixture
def views_dir(tmp_path: Path) -> Path:
    """Empty views root."""
    path = tmp_path / "views"
    path.mkdir()
    return path


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Cache root (not created; the store creates it on first write)."""
    return tmp_path / "cache"


@pytest.fixture
def write_view(views_dir: Path):
    """Write a view source below the views root and return its path.

    ``write_view("layouts.header", "<h1>")`` creates ``layouts/header.html``.
    """

    def _write(name: str, source: str, extension: str = ".html") -> Path:
        path = views_dir.joinpath(*name.split("."))
        path = path.with_name(path.name + extension)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def env(views_dir: Path, cache_dir: Path) -> Environment:
    """Create a basic Vellum Environment over temporary roots."""
    return Environment(views_dir, cache_dir)


@pytest.fixture
def env_autoescape(views_dir: Path, cache_dir: Path) -> Environment:
    """Create a Vellum Environment with autoescape enabled."""
    return Environment(views_dir, cache_dir, autoescape=True)


@pytest.fixture
def env_strict(views_dir: Path, cache_dir: Path) -> Environment:
    """Create a Vellum Environment that rejects malformed directives."""
    return Environment(views_dir, cache_dir, strict=True)


def assert_contains(rendered: str, *expected_parts: str) -> None:
    """Assert rendered output contains all expected parts.

    Args:
        rendered: The actual rendering result.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in rendered, (
            f"Rendered output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {rendered!r}"
        )

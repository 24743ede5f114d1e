from __future__ import annotations

import importlib.metadata as importlib_metadata
import json
import os
import platform
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from vellum import Environment

BASE_DIR = Path(__file__).resolve().parent
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"


def _version(dist: str) -> str:
    try:
        return importlib_metadata.version(dist)
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable,
        },
        "os": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "cpu": {
            "processor": platform.processor(),
            "count": os.cpu_count(),
        },
        "vellum": _version("vellum"),
    }


@pytest.fixture(scope="session")
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture
def views_env(tmp_path: Path) -> Callable[[dict[str, str]], Environment]:
    """Build an Environment over freshly written view sources."""

    def _make(views: dict[str, str]) -> Environment:
        views_dir = tmp_path / "views"
        for name, source in views.items():
            path = views_dir.joinpath(*name.split("."))
            path = path.with_name(path.name + ".html")
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(source, encoding="utf-8")
        return Environment(views_dir, tmp_path / "compiled")

    return _make


@pytest.fixture(scope="session")
def small_params() -> dict[str, object]:
    return {"name": "World", "items": [{"name": f"item{i}"} for i in range(10)]}


@pytest.fixture(scope="session")
def large_params() -> dict[str, object]:
    return {
        "user": {
            "name": "Ada",
            "posts": [{"title": f"Post {i}", "content": "x" * 200} for i in range(50)],
        },
        "items": [{"name": f"item{i}"} for i in range(1000)],
    }

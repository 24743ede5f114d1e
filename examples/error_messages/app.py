"""Error messages -- what a failing render reports.

A typo three views deep (``page`` → ``layout`` → ``nav``) surfaces as a
ViewRuntimeError naming the failing view and line, with a source snippet,
the chain of including views and a hint. A view that includes itself is
stopped by the include depth guard.

Run:
    python app.py
"""

from pathlib import Path
from tempfile import TemporaryDirectory

from vellum import Environment, IncludeDepthError, ViewNotFoundError, ViewRuntimeError
from vellum.environment.terminal import strip_colors

views_dir = Path(__file__).parent / "views"
tmpdir = TemporaryDirectory(prefix="vellum-errors-")
env = Environment(views_dir, Path(tmpdir.name), max_include_depth=10)

try:
    env.render("page", title="Home", username="ada")
except ViewRuntimeError as e:
    runtime_error = e
    runtime_report = strip_colors(e.format_compact())

try:
    env.render("loop")
except IncludeDepthError as e:
    depth_error = e

try:
    env.render("layouts/../secrets")
except ViewNotFoundError as e:
    name_error = e


def main() -> None:
    print(runtime_error.format_compact())
    print()
    print(depth_error.format_compact())
    print()
    print(name_error.format_compact())


if __name__ == "__main__":
    main()

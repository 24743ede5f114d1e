"""Hello World -- the simplest vellum example.

Render a single markup view with one parameter. The compiled fragment is
written to a temporary cache directory on first render; the directory is
removed when the module is discarded.

Run:
    python app.py
"""

from pathlib import Path
from tempfile import TemporaryDirectory

from vellum import Environment

views_dir = Path(__file__).parent / "views"
tmpdir = TemporaryDirectory(prefix="vellum-hello-")
cache_dir = Path(tmpdir.name)
env = Environment(views_dir, cache_dir)

# Render with parameters
output = env.render("hello", name="World")


def main() -> None:
    print(output, end="")
    print()

    # Multiple renders reuse the cached fragment
    for name in ["Vellum", "Python", "Max"]:
        print(env.render("hello", {"name": name}), end="")


if __name__ == "__main__":
    main()

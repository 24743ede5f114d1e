"""Compiled-view caching -- compile once, serve until cleared.

The first render of a markup view compiles it and writes
``<cache>/<name>.compiled.pyhtml``. Later renders execute that file
directly and never look at the source again, so an edited view keeps its
old output until ``clear_cache()`` runs.

The example copies its views into a scratch directory so it can edit them.

Run:
    python app.py
"""

import shutil
from pathlib import Path
from tempfile import TemporaryDirectory

from vellum import Environment

tmpdir = TemporaryDirectory(prefix="vellum-caching-")
workdir = Path(tmpdir.name)
views_dir = workdir / "views"
shutil.copytree(Path(__file__).parent / "views", views_dir)
env = Environment(views_dir, workdir / "compiled")

# First render compiles and stores the fragment
first_output = env.render("banner", message="Sale starts Monday")
cached_fragment = env.resolve("banner").read_text(encoding="utf-8")
info_after_first = env.cache_info()

# Edit the source: the cached fragment still wins
(views_dir / "banner.html").write_text('<p class="banner">{{ message }}!</p>\n', encoding="utf-8")
stale_output = env.render("banner", message="Sale starts Monday")

# Clearing the cache picks up the edit on the next render
cleared = env.clear_cache()
fresh_output = env.render("banner", message="Sale starts Monday")


def main() -> None:
    print("=== Compiled fragment ===")
    print(cached_fragment)
    print("=== Renders ===")
    print(first_output, end="")
    print(stale_output, end="")
    print(f"(cleared {cleared} cache entr{'y' if cleared == 1 else 'ies'})")
    print(fresh_output, end="")


if __name__ == "__main__":
    main()

"""File-based views -- layouts, partials and directives together.

Renders a page that pulls in a stylesheet view, a header layout and a
navigation partial. Included views receive a copy of the page's parameters,
so the header can use ``nav`` without the page passing it explicitly.

Run:
    python app.py
"""

from pathlib import Path
from tempfile import TemporaryDirectory

from vellum import Environment

views_dir = Path(__file__).parent / "views"
tmpdir = TemporaryDirectory(prefix="vellum-site-")
env = Environment(views_dir, Path(tmpdir.name))

nav = {"Home": "/", "About": "/about"}
users = [
    {"name": "Ada", "email": "ada@example.org", "active": True},
    {"name": "Linus", "active": False},
]

home_output = env.render("home", title="Team", nav=nav, users=users, notices=[])
empty_output = env.render("home", title="Team", nav=nav, users=[], notices=["maintenance"])
nav_output = env.render("partials.nav", nav=nav)


def main() -> None:
    print("=== Home Page ===")
    print(home_output)
    print("=== Empty team ===")
    print(empty_output)
    print("=== Available views ===")
    print(", ".join(env.list_views()))


if __name__ == "__main__":
    main()

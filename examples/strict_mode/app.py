"""Strict mode -- catch directive mistakes at compile time.

By default the compiler is permissive: a misspelled directive stays literal
text and a missing ``@endif`` only fails once the fragment runs. With
``strict=True`` the environment checks directive structure first and
reports the offending line.

Run:
    python app.py
"""

from pathlib import Path
from tempfile import TemporaryDirectory

from vellum import Environment, ViewSyntaxError

views_dir = Path(__file__).parent / "views"

tmpdir = TemporaryDirectory(prefix="vellum-strict-")
strict_env = Environment(views_dir, Path(tmpdir.name) / "strict", strict=True)
loose_env = Environment(views_dir, Path(tmpdir.name) / "loose")

errors: dict[str, ViewSyntaxError] = {}
for name in ("orders", "typo"):
    try:
        strict_env.render(name, orders=[], featured=True)
    except ViewSyntaxError as e:
        errors[name] = e

# Permissive mode: the typo is rendered as text, the mismatch fails at translation
loose_typo_output = loose_env.render("typo", featured=True)
try:
    loose_env.render("orders", orders=[])
except ViewSyntaxError as e:
    loose_orders_error = e


def main() -> None:
    for name, error in errors.items():
        print(f"=== strict: {name} ===")
        print(error)
        print()
    print("=== permissive: typo ===")
    print(loose_typo_output)


if __name__ == "__main__":
    main()

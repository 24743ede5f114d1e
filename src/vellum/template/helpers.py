"""Runtime helpers injected into every fragment namespace.

Compiled directives call these by their underscored names: ``@isset`` becomes
``_isset(lambda: expr)``, ``@for v in items`` becomes ``_values(items)`` and
``@for k, v in items`` becomes ``_pairs(items)``.
All of them are pure functions with no environment state.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from vellum.utils.html import Markup

# Lookups that mean "this value does not exist" rather than "this code is broken"
_MISSING = (NameError, LookupError, AttributeError)


def isset(thunk: Callable[[], Any]) -> bool:
    """True when the expression evaluates without a lookup error and is not None.

    The expression arrives wrapped in a lambda so undefined names, missing
    keys and missing attributes can be caught here instead of failing the
    render.
    """
    try:
        return thunk() is not None
    except _MISSING:
        return False


def empty(thunk: Callable[[], Any]) -> bool:
    """True when the expression is undefined or falsy."""
    try:
        value = thunk()
    except _MISSING:
        return True
    return not value


def pairs(collection: Any) -> Iterable[tuple[Any, Any]]:
    """Key/value pairs for ``@for key, value in collection``.

    Mappings yield ``items()``; any other iterable yields ``(index, item)``.
    """
    if isinstance(collection, Mapping):
        return collection.items()
    return enumerate(collection)


def values(collection: Any) -> Iterable[Any]:
    """Items for ``@for value in collection``: a mapping's values, else the iterable."""
    if isinstance(collection, Mapping):
        return collection.values()
    return collection


def to_text(value: Any) -> str:
    """Stringify a placeholder value. ``None`` renders as nothing."""
    if value is None:
        return ""
    return str(value)


# Shared, read-only base for every fragment namespace.
STATIC_NAMESPACE: dict[str, Any] = {
    "_isset": isset,
    "_empty": empty,
    "_pairs": pairs,
    "_values": values,
    "Markup": Markup,
}

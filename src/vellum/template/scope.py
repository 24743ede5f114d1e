"""Render scope: the explicit name → value bindings of one render call.

Parameters are never pushed into ambient or global state. Each call builds a
fresh RenderScope, the executor copies its bindings into a new namespace,
and both are dropped when the call returns.

Plain dicts are exposed as ``Record`` so views can use attribute syntax on
dictionary data, the way the ``@for u in users`` / ``{{ u.name }}`` idiom
expects:

    >>> scope = RenderScope.bind({"users": [{"name": "A"}]})
    >>> scope.bindings["users"][0].name
    'A'
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class Record(dict):
    """A dict whose keys are also readable as attributes.

    Real dict attributes win: ``record.items`` is the method, use
    ``record["items"]`` for a key of that name.
    """

    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"record has no key or attribute {name!r}") from None


def expose(value: Any) -> Any:
    """Recursively wrap dicts (inside lists and tuples too) as Records."""
    if isinstance(value, Record):
        return value
    if isinstance(value, dict):
        return Record({key: expose(item) for key, item in value.items()})
    if isinstance(value, list):
        return [expose(item) for item in value]
    if isinstance(value, tuple) and not hasattr(value, "_fields"):
        return tuple(expose(item) for item in value)
    return value


@dataclass(slots=True)
class RenderScope:
    """Bindings visible to one executing fragment.

    Attributes:
        parameters: The caller's parameters, as given. Included views
            receive a copy of these.
        bindings: The names the fragment actually sees.
    """

    parameters: dict[str, Any] = field(default_factory=dict)
    bindings: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def bind(cls, parameters: Mapping[str, Any] | None = None) -> RenderScope:
        """Build a fresh scope from ``parameters``.

        Raises:
            TypeError: If a parameter name is not a string.
        """
        params = dict(parameters or {})
        for key in params:
            if not isinstance(key, str):
                raise TypeError(f"Render parameter names must be strings, got {key!r}")
        return cls(parameters=params, bindings={key: expose(value) for key, value in params.items()})

    def __contains__(self, name: object) -> bool:
        return name in self.bindings

"""Vellum RenderContext: per-render state kept out of the render scope.

Inclusion depth and the chain of including views are tracked in a
ContextVar rather than in the parameters handed to a fragment, so views
never see (or clobber) bookkeeping keys.

Benefits:
    - Clean render scope (no internal key pollution)
    - Depth guard against self-inclusion (``outer`` includes ``outer``)
    - Include chain available for error messages
    - Isolated per thread / async task via ContextVar

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field

from vellum.utils.constants import DEFAULT_MAX_INCLUDE_DEPTH


@dataclass
class RenderContext:
    """State for one top-level render and its nested inclusions.

    Attributes:
        view_name: View currently executing
        filename: Fragment path of that view
        line: Fragment line of the most recent inclusion (set by ``_include``)
        include_depth: Number of inclusions between the top-level view and this one
        max_include_depth: Deepest inclusion allowed
        view_stack: ``(view_name, line)`` of every including view, outermost first
    """

    view_name: str | None = None
    filename: str | None = None
    line: int = 0
    include_depth: int = 0
    max_include_depth: int = DEFAULT_MAX_INCLUDE_DEPTH
    view_stack: list[tuple[str, int]] = field(default_factory=list)

    def check_include_depth(self, view_name: str) -> None:
        """Refuse to include ``view_name`` once the depth limit is reached.

        Raises:
            IncludeDepthError: If include_depth >= max_include_depth
        """
        if self.include_depth >= self.max_include_depth:
            from vellum.environment.exceptions import IncludeDepthError

            raise IncludeDepthError(
                f"Maximum include depth exceeded ({self.max_include_depth}) "
                f"when including '{view_name}'",
                view_name=self.view_name,
                lineno=self.line or None,
                suggestion="Check for circular inclusion: A → B → A",
                view_stack=self.view_stack,
            )

    def child_context(self, view_name: str, filename: str | None = None) -> RenderContext:
        """Context for a view included from this one, one level deeper."""
        stack = self.view_stack.copy()
        if self.view_name:
            stack.append((self.view_name, self.line))
        return RenderContext(
            view_name=view_name,
            filename=filename,
            line=0,
            include_depth=self.include_depth + 1,
            max_include_depth=self.max_include_depth,
            view_stack=stack,
        )


_render_context: ContextVar[RenderContext | None] = ContextVar("vellum_render_context", default=None)


def get_render_context() -> RenderContext | None:
    """Current RenderContext, or None outside of a render call."""
    return _render_context.get()


@contextmanager
def render_context(
    view_name: str | None = None,
    filename: str | None = None,
    max_include_depth: int = DEFAULT_MAX_INCLUDE_DEPTH,
) -> Iterator[RenderContext]:
    """Install a fresh top-level RenderContext for the duration of the block.

    Example:
        with render_context(view_name="page") as ctx:
            html = fragment.execute(scope, include=...)
    """
    ctx = RenderContext(view_name=view_name, filename=filename, max_include_depth=max_include_depth)
    token = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)


def set_render_context(ctx: RenderContext) -> Token[RenderContext | None]:
    """Install ``ctx`` and return the token that restores the previous one."""
    return _render_context.set(ctx)


def reset_render_context(token: Token[RenderContext | None]) -> None:
    _render_context.reset(token)

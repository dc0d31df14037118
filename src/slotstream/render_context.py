"""Per-render state for slotstream, isolated in a ContextVar.

Each render invocation owns one RenderContext, created when the render is
called. Nested out-of-order boundaries share their parent's context (they
are part of the same flat slot scope) and only bump ``boundary_depth``
while their skeleton is built.

The ContextVar is only set around stretches of a render that never yield a
chunk: skeleton construction and in-order awaits. Deferred values started
there inherit the context, so they can read it with
``get_render_context()``; the consumer iterating the stream never sees it.

Thread Safety:
    ContextVars are per-thread and per-task. Concurrent requests never see
    each other's counters.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from itertools import count

_render_ids = count(1)


@dataclass
class RenderContext:
    """Diagnostics for one render invocation.

    Attributes:
        render_id: Process-unique id, included in log records
        boundary_depth: Depth of the out-of-order boundary being built
        max_boundary_depth: Deepest boundary seen so far
        slots_allocated: Placeholders emitted in the skeleton
        fills_emitted: Fill-in chunks emitted so far
        slot_depths: Boundary depth that owns each flat slot index
    """

    render_id: int = field(default_factory=lambda: next(_render_ids))
    boundary_depth: int = 0
    max_boundary_depth: int = 0
    slots_allocated: int = 0
    fills_emitted: int = 0
    slot_depths: dict[int, int] = field(default_factory=dict)

    # Caller-supplied metadata (request ids, user context, ...)
    _meta: dict[str, object] = field(default_factory=dict)

    def get_meta(self, key: str, default: object = None) -> object:
        """Get caller metadata.

        Deferred values read it to learn which request they render for::

            async def greeting() -> str:
                ctx = get_render_context()
                return f"Hello, {ctx.get_meta('user')}"
        """
        return self._meta.get(key, default)

    def set_meta(self, key: str, value: object) -> None:
        """Set caller metadata, inherited by renders started inside ``render_context()``."""
        self._meta[key] = value

    @contextmanager
    def boundary(self) -> Iterator[int]:
        """Enter a nested boundary, yielding its depth."""
        self.boundary_depth += 1
        self.max_boundary_depth = max(self.max_boundary_depth, self.boundary_depth)
        try:
            yield self.boundary_depth
        finally:
            self.boundary_depth -= 1


# Module-level ContextVar
_render_context: ContextVar[RenderContext | None] = ContextVar(
    "slotstream_render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Get current render context (None if not in render)."""
    return _render_context.get()


def new_render_context() -> RenderContext:
    """Create the context for a top-level render.

    Metadata of the active context, if any, is copied so renders started
    inside ``render_context()`` see what the caller set.
    """
    parent = _render_context.get()
    return RenderContext(_meta=parent._meta.copy() if parent is not None else {})


@contextmanager
def render_context(ctx: RenderContext | None = None) -> Iterator[RenderContext]:
    """Make ``ctx`` (or a new context) current for the duration of the block.

    The block must not span a ``yield`` of an async generator: the variable
    is set in whichever context drives the generator at that moment.

    Example:
        with render_context() as ctx:
            ctx.set_meta("user", "ada")
            stream = render_out_of_order(page)
    """
    if ctx is None:
        ctx = new_render_context()
    token: Token[RenderContext | None] = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)

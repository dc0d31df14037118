"""Out-of-order renderer: skeleton first, fill-ins in completion order.

Rendering happens in two phases that form one continuous chunk stream:

1. **Skeleton**: the whole tree is walked synchronously. Literal and
   immediate text is copied, every deferred value gets the next slot index
   and a placeholder, and nested nodes are inlined with their slots rebased
   into the parent's flat index space. The result is yielded as a single
   chunk before anything is awaited.
2. **Fill-ins**: all deferred values of the tree, nested ones included,
   are drained through ``in_resolved_order``; each settled value yields one
   fill-in chunk for its flat slot. The closing container comes last.

Slot numbering for a tree with a nested node::

    outer:  A{d0} <nested: B{d0} C{d1}> D{d1}
    flat:   A slot_0, B slot_1, C slot_2, D slot_3
    nested host forwards slot_1 -> its slot_0, slot_2 -> its slot_1

"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator, Awaitable
from contextlib import aclosing
from typing import Any, TypeAlias, assert_never

from slotstream.config import DEFAULT_CONFIG, StreamConfig
from slotstream.exceptions import DeferredValueFailure
from slotstream.nodes import Deferred, Immediate, Nested, Spliced, Streamable, streamable
from slotstream.render import markup
from slotstream.render_context import RenderContext, new_render_context, render_context
from slotstream.sequencer import in_resolved_order, mark_retrieved

logger = logging.getLogger(__name__)

Pending: TypeAlias = list[tuple[Awaitable[Any], int]]

# (task, slot index local to the boundary, depth of the owning boundary)
_Scheduled: TypeAlias = list[tuple[asyncio.Future[Any], int, int]]


async def _join(chunks: AsyncIterable[str]) -> markup.Rendered:
    iterator = aiter(chunks)
    try:
        return markup.Rendered("".join([chunk async for chunk in iterator]))
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


def _schedule(
    awaitable: Awaitable[Any],
    slot: int,
    scheduled: _Scheduled,
    render_ctx: RenderContext,
) -> None:
    future = asyncio.ensure_future(awaitable)
    future.add_done_callback(mark_retrieved)
    scheduled.append((future, slot, render_ctx.boundary_depth))


def _build_boundary(
    node: Streamable,
    config: StreamConfig,
    out: list[str],
    scheduled: _Scheduled,
    render_ctx: RenderContext,
) -> int:
    """Append one boundary's container opening and skeleton to ``out``.

    Deferred values are scheduled immediately and appended to ``scheduled``
    under slot indices local to this boundary (starting at 0).

    Returns:
        Number of slots this boundary allocated, nested ones included
    """
    out.append(markup.open_container(config))
    out.append(markup.open_skeleton(config))

    slot = 0
    for chunk in node.chunks():
        match chunk:
            case str():
                out.append(chunk)
            case Immediate(text=text, safe=safe):
                out.append(markup.to_text(text, config, safe=safe))
            case Deferred(awaitable=awaitable):
                out.append(markup.placeholder(slot, config))
                _schedule(awaitable, slot, scheduled, render_ctx)
                slot += 1
            case Spliced(chunks=chunks):
                out.append(markup.placeholder(slot, config))
                _schedule(_join(chunks), slot, scheduled, render_ctx)
                slot += 1
            case Nested(node=child):
                child_scheduled: _Scheduled = []
                with render_ctx.boundary():
                    child_slots = _build_boundary(child, config, out, child_scheduled, render_ctx)
                # The child's fill-ins are emitted by the top-level boundary.
                for internal in range(child_slots):
                    out.append(markup.forward(slot + internal, internal, config))
                out.append(markup.close_container(config))
                scheduled.extend(
                    (future, slot + internal, depth) for future, internal, depth in child_scheduled
                )
                slot += child_slots
            case _:
                assert_never(chunk)

    out.append(markup.close_skeleton(config))
    logger.debug(
        "Render %d: boundary opened at depth %d with %d slot(s)",
        render_ctx.render_id,
        render_ctx.boundary_depth,
        slot,
    )
    return slot


def build_skeleton(
    node: Streamable,
    config: StreamConfig = DEFAULT_CONFIG,
    render_ctx: RenderContext | None = None,
) -> tuple[str, Pending]:
    """Build the skeleton text and the flat pending set for ``node``.

    The returned skeleton leaves the top-level container open; the caller
    closes it after the fill-ins. Must run inside an event loop because
    deferred values are scheduled as tasks, which inherit ``render_ctx``
    as their current render context.
    """
    render_ctx = render_ctx or new_render_context()
    out: list[str] = []
    scheduled: _Scheduled = []
    with render_context(render_ctx):
        _build_boundary(node, config, out, scheduled, render_ctx)

    render_ctx.slots_allocated += len(scheduled)
    render_ctx.slot_depths.update((slot, depth) for _, slot, depth in scheduled)
    return "".join(out), [(future, slot) for future, slot, _ in scheduled]


async def stream_boundary(
    node: Streamable,
    config: StreamConfig,
    render_ctx: RenderContext,
) -> AsyncIterator[str]:
    """Out-of-order chunk stream for ``node``, reporting into ``render_ctx``."""
    skeleton, pending = build_skeleton(node, config, render_ctx)
    logger.debug(
        "Render %d: skeleton ready with %d slot(s)",
        render_ctx.render_id,
        len(pending),
    )
    yield skeleton

    try:
        async with aclosing(in_resolved_order(pending)) as settled:
            async for value, index in settled:
                render_ctx.fills_emitted += 1
                logger.debug(
                    "Render %d: fill-in for %s",
                    render_ctx.render_id,
                    config.slot_name(index),
                )
                yield markup.fill_in(index, markup.to_text(value, config), config)
    except DeferredValueFailure as e:
        slot_name = config.slot_name(e.slot) if e.slot is not None else None
        logger.warning(
            "Render %d: deferred value for %s failed after %d fill-in(s)",
            render_ctx.render_id,
            slot_name,
            render_ctx.fills_emitted,
        )
        raise DeferredValueFailure(
            e.cause,
            slot=e.slot,
            slot_name=slot_name,
            boundary_depth=render_ctx.slot_depths.get(e.slot, render_ctx.boundary_depth),
        ) from e.cause

    yield markup.close_container(config)


def render_out_of_order(
    node: Streamable,
    config: StreamConfig | None = None,
) -> AsyncIterator[str]:
    """Render ``node`` as a skeleton chunk followed by fill-ins.

    Each call is an independent render with its own RenderContext.

    Yields:
        The full skeleton, then one fill-in per deferred value in the
        order values settle, then the closing container

    Raises:
        DeferredValueFailure: When a deferred value raises; every chunk
            yielded before it remains valid and is never retracted

    Example:
        >>> async for chunk in render_out_of_order(page):
        ...     await send(chunk)
    """
    return stream_boundary(node, config or DEFAULT_CONFIG, new_render_context())


def stream_out_of_order(literals: Any, *interpolations: Any) -> AsyncIterator[str]:
    """Build a Streamable and render it out of order with the default config.

    Accepts ``(literals, *interpolations)`` or a single t-string.
    """
    return render_out_of_order(streamable(literals, *interpolations))

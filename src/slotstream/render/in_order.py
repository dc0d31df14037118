"""In-order renderer: every chunk in declaration order.

Each deferred value is awaited where it appears, so total latency is the
sum of the top-level deferred latencies. Nested nodes are rendered out of
order and spliced in whole, which is how an in-order page hosts a
streaming section::

    stream_in_order(t"<body>{streamable(t'<h2>{title()}</h2>')}</body>")

An already-rendered stream is spliced the same way::

    stream_in_order(t"<body>{stream_out_of_order(t'<h2>{title()}</h2>')}</body>")

"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator
from contextlib import aclosing
from typing import Any, assert_never

from slotstream.config import DEFAULT_CONFIG, StreamConfig
from slotstream.exceptions import DeferredValueFailure
from slotstream.nodes import Deferred, Immediate, Nested, Spliced, Streamable, streamable
from slotstream.render import markup
from slotstream.render.out_of_order import stream_boundary
from slotstream.render_context import RenderContext, new_render_context, render_context

logger = logging.getLogger(__name__)


async def _splice(chunks: AsyncIterable[str]) -> AsyncIterator[str]:
    iterator = aiter(chunks)
    try:
        async for chunk in iterator:
            yield chunk
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


async def _ordered(
    node: Streamable,
    config: StreamConfig,
    render_ctx: RenderContext,
) -> AsyncIterator[str]:
    for position, chunk in enumerate(node.chunks()):
        match chunk:
            case str():
                yield chunk
            case Immediate(text=text, safe=safe):
                yield markup.to_text(text, config, safe=safe)
            case Deferred(awaitable=awaitable):
                try:
                    with render_context(render_ctx):
                        value = await awaitable
                except asyncio.CancelledError as e:
                    task = asyncio.current_task()
                    if task is not None and task.cancelling():
                        raise
                    # Cancelled by its owner, not by our consumer.
                    raise _failure(e, position, render_ctx) from e
                except Exception as e:
                    raise _failure(e, position, render_ctx) from e
                yield markup.to_text(value, config)
            case Nested(node=child):
                with render_ctx.boundary():
                    async with aclosing(stream_boundary(child, config, render_ctx)) as chunks:
                        async for nested_chunk in chunks:
                            yield nested_chunk
            case Spliced(chunks=spliced):
                async with aclosing(_splice(spliced)) as chunks:
                    async for spliced_chunk in chunks:
                        yield spliced_chunk
            case _:
                assert_never(chunk)


def _failure(error: BaseException, position: int, render_ctx: RenderContext) -> DeferredValueFailure:
    logger.warning(
        "Render %d: deferred value at position %d failed",
        render_ctx.render_id,
        position // 2,
    )
    return DeferredValueFailure(error, boundary_depth=render_ctx.boundary_depth)


def render_in_order(
    node: Streamable,
    config: StreamConfig | None = None,
) -> AsyncIterator[str]:
    """Render ``node`` strictly in declaration order.

    Nested sections render out of order inside this render's context, one
    boundary deeper.

    Raises:
        DeferredValueFailure: When an awaited value raises or is cancelled
            by its owner; chunks already yielded remain valid
    """
    return _ordered(node, config or DEFAULT_CONFIG, new_render_context())


def stream_in_order(literals: Any, *interpolations: Any) -> AsyncIterator[str]:
    """Render a template invocation eagerly, in declaration order.

    Accepts ``(literals, *interpolations)`` or a single t-string. Structural
    errors are raised here, before any chunk exists.

    Example:
        >>> async for chunk in stream_in_order(["<p>", "</p>"], fetch_text()):
        ...     await send(chunk)
    """
    return render_in_order(streamable(literals, *interpolations))

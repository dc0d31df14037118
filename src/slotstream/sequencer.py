"""Resolution-order sequencing of pending values.

Every pending awaitable is scheduled once and reports completion onto a
single queue. The consumer pops that queue, so values come out in the order
they actually settled, not the order they were declared::

    async for text, slot in in_resolved_order([(slow(), 0), (fast(), 1)]):
        ...  # (fast result, 1) first, then (slow result, 0)

The sequence is one-shot: awaitables cannot be awaited twice.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Iterable
from functools import partial
from typing import Any, TypeAlias

from slotstream.exceptions import DeferredValueFailure

logger = logging.getLogger(__name__)

Settled: TypeAlias = tuple[asyncio.Future[Any], int]


def mark_retrieved(future: asyncio.Future[Any]) -> None:
    """Done-callback that marks a failed future's exception as retrieved.

    Attach it where the future is created; the consumer may stop reading
    before the value settles.
    """
    if not future.cancelled():
        future.exception()


def _on_settled(queue: asyncio.Queue[Settled], index: int, future: asyncio.Future[Any]) -> None:
    mark_retrieved(future)
    queue.put_nowait((future, index))


async def in_resolved_order(
    pending: Iterable[tuple[Awaitable[Any], int]],
) -> AsyncIterator[tuple[Any, int]]:
    """Yield ``(value, index)`` pairs in completion order.

    Coroutines are wrapped in tasks immediately when iteration starts, so
    they all run concurrently. Values settling in the same loop iteration
    are reported in the order the event loop runs their callbacks.

    If the consumer stops early, no further values are reported and
    in-flight tasks are left running.

    Args:
        pending: ``(awaitable, index)`` pairs; indices are passed through

    Raises:
        DeferredValueFailure: When a value raises or is cancelled, with
            ``slot`` set to its index. Already-yielded pairs stay valid.
    """
    settled: asyncio.Queue[Settled] = asyncio.Queue()
    remaining = 0
    for awaitable, index in pending:
        future = asyncio.ensure_future(awaitable)
        future.add_done_callback(partial(_on_settled, settled, index))
        remaining += 1

    while remaining:
        future, index = await settled.get()
        remaining -= 1

        if future.cancelled():
            raise DeferredValueFailure(asyncio.CancelledError("deferred value was cancelled"), slot=index)
        error = future.exception()
        if error is not None:
            raise DeferredValueFailure(error, slot=index) from error

        yield future.result(), index

    logger.debug("Sequencer drained")

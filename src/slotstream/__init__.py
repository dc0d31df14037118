"""slotstream: out-of-order HTML streaming for asyncio.

Flush a page skeleton immediately and fill in slow parts as they finish,
in the order they actually finish, without blocking on the slowest one.

Quickstart:
    >>> from slotstream import streamable, stream_in_order
    >>> async def title() -> str:
    ...     await asyncio.sleep(2)
    ...     return "Hello, World!"
    >>> page = stream_in_order(t"<body>{streamable(t'<h2>{title()}</h2>')}</body>")
    >>> async for chunk in page:
    ...     await send(chunk)

Architecture:
Template invocation → Streamable tree → Renderer → text chunks → bytes

1. **Streamable**: literals plus interpolations, each ``Immediate``,
   ``Deferred``, ``Nested`` or ``Spliced`` (``slotstream.nodes``)
2. **Out-of-order renderer**: one skeleton chunk with ``<slot>``
   placeholders, then one fill-in per deferred value as it settles
3. **In-order renderer**: declaration order, awaiting values in place
4. **Transport**: chunked ``text/html`` responses for any ASGI server

Nested Streamables are flattened into their enclosing boundary: their
placeholders are renumbered into the parent's slot space and bridged with
forwarding slots, so a single fill-in phase serves the whole tree.

Errors:
Structural problems (``StructuralArityError``,
``UnsupportedInterpolationError``) raise before any output. A failing
deferred value ends the stream with ``DeferredValueFailure`` after the
chunks already produced.

"""

from slotstream.config import DEFAULT_CONFIG, StreamConfig
from slotstream.exceptions import (
    DeferredValueFailure,
    ErrorCode,
    StreamError,
    StructuralArityError,
    UnsupportedInterpolationError,
)
from slotstream.interleave import interleave
from slotstream.nodes import (
    Deferred,
    Immediate,
    Interpolation,
    Nested,
    Spliced,
    Streamable,
    coerce_interpolation,
    streamable,
)
from slotstream.render import (
    build_skeleton,
    render_in_order,
    render_out_of_order,
    stream_in_order,
    stream_out_of_order,
)
from slotstream.render_context import RenderContext, get_render_context, render_context
from slotstream.sequencer import in_resolved_order
from slotstream.transport import (
    RequestHandler,
    StreamingPageHandler,
    create_app,
    encode_chunks,
    streaming_response,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "Deferred",
    "DeferredValueFailure",
    "ErrorCode",
    "Immediate",
    "Interpolation",
    "Nested",
    "RenderContext",
    "RequestHandler",
    "Spliced",
    "StreamConfig",
    "StreamError",
    "Streamable",
    "StreamingPageHandler",
    "StructuralArityError",
    "UnsupportedInterpolationError",
    "build_skeleton",
    "coerce_interpolation",
    "create_app",
    "encode_chunks",
    "get_render_context",
    "in_resolved_order",
    "interleave",
    "render_context",
    "render_in_order",
    "render_out_of_order",
    "stream_in_order",
    "stream_out_of_order",
    "streamable",
]

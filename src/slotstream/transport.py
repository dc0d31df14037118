"""Output adapter and request handling for serving streams over HTTP.

The renderers produce text chunks; this module turns them into an
incrementally flushed byte body and routes requests to page handlers.

Example:
    >>> async def render_page():
    ...     return stream_in_order(t"<body>{streamable(t'<h2>{title()}</h2>')}</body>")
    >>> app = create_app(StreamingPageHandler("/", render_page))

Run with any ASGI server (``uvicorn app:app``). Each chunk is sent as soon
as it is produced; a failed render closes the body early, so clients see a
document that never reaches its closing container.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable, Mapping
from typing import Protocol, TypeAlias, runtime_checkable

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response, StreamingResponse
from starlette.routing import Route

from slotstream.config import DEFAULT_CONFIG, StreamConfig
from slotstream.exceptions import DeferredValueFailure
from slotstream.nodes import Streamable
from slotstream.render.out_of_order import render_out_of_order

logger = logging.getLogger(__name__)

ChunkSource: TypeAlias = AsyncIterable[str]
PageRenderer: TypeAlias = Callable[[], ChunkSource | Awaitable[ChunkSource]]


async def encode_chunks(chunks: ChunkSource, encoding: str = "utf-8") -> AsyncIterator[bytes]:
    """Encode each non-empty text chunk as it arrives.

    Raises:
        Exception: Whatever the chunk source raised; no bytes follow the
            failure. Failures other than ``DeferredValueFailure`` are logged
            here
    """
    iterator = aiter(chunks)
    try:
        async for chunk in iterator:
            if chunk:
                yield chunk.encode(encoding)
    except DeferredValueFailure:
        # Already logged by the renderer with its slot.
        raise
    except Exception:
        logger.warning("Chunk stream aborted; closing response body early", exc_info=True)
        raise
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


def streaming_response(
    chunks: ChunkSource,
    *,
    status_code: int = 200,
    headers: Mapping[str, str] | None = None,
    config: StreamConfig | None = None,
) -> StreamingResponse:
    """Wrap a chunk stream in a chunked ``text/html`` streaming response."""
    config = config or DEFAULT_CONFIG
    response_headers = {"Transfer-Encoding": "chunked"}
    if headers:
        response_headers.update(headers)
    return StreamingResponse(
        encode_chunks(chunks, config.encoding),
        status_code=status_code,
        headers=response_headers,
        media_type=f"text/html; charset={config.encoding}",
    )


@runtime_checkable
class RequestHandler(Protocol):
    """What the serving layer calls to let a handler take a request."""

    def matches(self, path: str) -> bool: ...

    async def handle(self, request: Request) -> Response: ...


class StreamingPageHandler:
    """Serve a rendered page at one exact path.

    ``render`` is called once per request and may return a Streamable
    (rendered out of order), any async iterable of text chunks, or an
    awaitable of either.
    """

    def __init__(self, path: str, render: PageRenderer, config: StreamConfig | None = None):
        self.path = path
        self.render = render
        self.config = config or DEFAULT_CONFIG

    def matches(self, path: str) -> bool:
        return path == self.path

    async def handle(self, request: Request) -> Response:
        source = self.render()
        if isinstance(source, Awaitable):
            source = await source
        if isinstance(source, Streamable):
            source = render_out_of_order(source, self.config)
        logger.debug("Streaming %s %s", request.method, request.url.path)
        return streaming_response(source, config=self.config)

    def __repr__(self) -> str:
        return f"StreamingPageHandler(path={self.path!r})"


def create_app(*handlers: RequestHandler, debug: bool = False) -> Starlette:
    """Build an ASGI app dispatching each GET to the first matching handler.

    Requests no handler matches get ``404 Not Found``.
    """

    async def dispatch(request: Request) -> Response:
        path = request.url.path
        for handler in handlers:
            if handler.matches(path):
                return await handler.handle(request)
        return PlainTextResponse("Not Found", status_code=404)

    return Starlette(
        debug=debug,
        routes=[Route("/{path:path}", dispatch, methods=["GET"])],
    )

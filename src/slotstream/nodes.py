"""Composite node model for slotstream.

A ``Streamable`` captures one template invocation: its literal fragments and
the values interpolated between them. Every interpolation is exactly one of:

- ``Immediate``: text that is available now
- ``Deferred``: an awaitable that resolves to text later
- ``Nested``: another Streamable, rendered inside this one
- ``Spliced``: an already-rendered chunk stream, such as the result of
  ``stream_out_of_order(...)``

Nodes are immutable once built and are only ever traversed by renderers.
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from slotstream.exceptions import UnsupportedInterpolationError
from slotstream.interleave import check_arity, interleave
from slotstream.tstring import is_template, split_template


@dataclass(frozen=True, slots=True)
class Immediate:
    """Already-available text.

    ``safe`` marks text that came from an ``__html__`` object and must not
    be escaped again when autoescaping is enabled.
    """

    text: str
    safe: bool = False


@dataclass(frozen=True, slots=True, eq=False)
class Deferred:
    """Text that becomes available when ``awaitable`` resolves.

    Awaited at most once by a renderer. Coroutines start running when the
    out-of-order skeleton is emitted, or when the in-order renderer reaches
    them.
    """

    awaitable: Awaitable[Any]


@dataclass(frozen=True, slots=True)
class Nested:
    """A sub-tree rendered inside its parent's boundary."""

    node: Streamable


@dataclass(frozen=True, slots=True, eq=False)
class Spliced:
    """Chunks from another renderer, passed through verbatim.

    The in-order renderer yields them in place. The out-of-order renderer
    gives the stream one slot and fills it with the joined text once the
    stream ends.
    """

    chunks: AsyncIterable[str]


Interpolation: TypeAlias = Immediate | Deferred | Nested | Spliced


@dataclass(frozen=True, slots=True)
class Streamable:
    """Literal fragments plus the interpolations between them.

    Rendering it with ``async for`` streams it out of order with the default
    config; use ``render_out_of_order`` or ``render_in_order`` for control.

    Raises:
        StructuralArityError: If ``len(literals) != len(interpolations) + 1``
    """

    literals: tuple[str, ...]
    interpolations: tuple[Interpolation, ...]

    def __post_init__(self) -> None:
        check_arity(len(self.literals), len(self.interpolations))

    def chunks(self) -> list[str | Interpolation]:
        """Literals and interpolations interleaved in declaration order."""
        return interleave(self.literals, self.interpolations)

    @property
    def deferred_count(self) -> int:
        """Number of slots this node occupies in an enclosing flat scope."""
        count = 0
        for item in self.interpolations:
            match item:
                case Deferred() | Spliced():
                    count += 1
                case Nested(node=node):
                    count += node.deferred_count
        return count

    def __aiter__(self) -> AsyncIterator[str]:
        from slotstream.render.out_of_order import render_out_of_order

        return render_out_of_order(self)


def coerce_interpolation(value: Any, position: int | None = None) -> Interpolation:
    """Classify a raw interpolated value into the Interpolation union.

    Args:
        value: str, ``__html__`` object, awaitable, Streamable, t-string,
            async iterable of chunks, or an Interpolation variant
            (returned unchanged)
        position: Interpolation index, used in error messages

    Raises:
        UnsupportedInterpolationError: For None and any other type
    """
    match value:
        case Immediate() | Deferred() | Nested() | Spliced():
            return value
        case Streamable():
            return Nested(value)
        case _ if hasattr(value, "__html__"):
            return Immediate(value.__html__(), safe=True)
        case str():
            return Immediate(value)
        case _ if inspect.isawaitable(value):
            return Deferred(value)
        case AsyncIterable():
            return Spliced(value)
        case _ if is_template(value):
            return Nested(streamable(value))
    raise UnsupportedInterpolationError(value, position)


def streamable(literals: Sequence[str] | Any, *interpolations: Any) -> Streamable:
    """Build a Streamable from literals and raw values, or from a t-string.

    Example:
        >>> streamable(["<h2>", "</h2>"], fetch_title())
        >>> streamable(t"<h2>{fetch_title()}</h2>")
    """
    if is_template(literals):
        if interpolations:
            raise TypeError("streamable() takes no extra interpolations with a template string")
        literals, interpolations = split_template(literals)
    if isinstance(literals, str):
        raise TypeError("streamable() expects a sequence of literal strings, not a str")

    literal_tuple = tuple(literals)
    check_arity(len(literal_tuple), len(interpolations))
    return Streamable(
        literals=literal_tuple,
        interpolations=tuple(
            coerce_interpolation(value, position) for position, value in enumerate(interpolations)
        ),
    )

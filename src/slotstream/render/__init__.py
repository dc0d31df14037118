"""Renderers turning a Streamable into a lazy stream of text chunks.

- ``render_out_of_order``: skeleton first, fill-ins as values settle
- ``render_in_order``: declaration order, awaiting each value in place

"""

from slotstream.render.in_order import render_in_order, stream_in_order
from slotstream.render.out_of_order import build_skeleton, render_out_of_order, stream_out_of_order

__all__ = [
    "build_skeleton",
    "render_in_order",
    "render_out_of_order",
    "stream_in_order",
    "stream_out_of_order",
]

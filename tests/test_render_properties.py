"""Property-based tests for slot flattening across arbitrary nesting."""

from __future__ import annotations

import asyncio
import re

from hypothesis import given, settings

from slotstream import Streamable, render_out_of_order, streamable

from .helpers import collect
from .strategies import count_deferred, tree_shape

_FILL = re.compile(r'<div slot="slot_(\d+)">v(\d+)</div>')
_PLACEHOLDER = re.compile(r'<slot name="slot_(\d+)"></slot>')
_FORWARD = re.compile(r'<slot name="slot_(\d+)" slot="slot_(\d+)"></slot>')


async def _value(label: int, delay_steps: int) -> str:
    for _ in range(delay_steps):
        await asyncio.sleep(0)
    return f"v{label}"


def _build(shape: tuple, labels: list[int]) -> Streamable:
    """Turn a shape into a Streamable, labelling deferred leaves in declaration order."""
    values = []
    for child in shape:
        if child == "immediate":
            values.append("i")
        elif child == "deferred":
            label = len(labels)
            labels.append(label)
            # Later declarations settle sooner, so completion order differs from slot order.
            values.append(_value(label, 50 - label % 50))
        else:
            values.append(_build(child, labels))
    return streamable(["|"] * (len(values) + 1), *values)


async def _render(shape: tuple) -> tuple[list[str], int]:
    labels: list[int] = []
    node = _build(shape, labels)
    return await collect(render_out_of_order(node)), len(labels)


@settings(max_examples=60, deadline=None)
@given(tree_shape)
def test_every_slot_filled_exactly_once(shape: tuple) -> None:
    chunks, total = asyncio.run(_render(shape))

    assert total == count_deferred(shape)
    assert len(chunks) == total + 2
    assert chunks[-1] == "</div>"

    fills = [_FILL.fullmatch(chunk) for chunk in chunks[1:-1]]
    assert all(fills)
    slots = sorted(int(m.group(1)) for m in fills if m)
    assert slots == list(range(total))


@settings(max_examples=60, deadline=None)
@given(tree_shape)
def test_fill_slot_matches_declaration_position(shape: tuple) -> None:
    """Slots are allocated in declaration order, so leaf N always fills slot_N."""
    chunks, _ = asyncio.run(_render(shape))
    for chunk in chunks[1:-1]:
        match = _FILL.fullmatch(chunk)
        assert match is not None
        assert match.group(1) == match.group(2)


@settings(max_examples=60, deadline=None)
@given(tree_shape)
def test_skeleton_has_no_resolved_text(shape: tuple) -> None:
    chunks, total = asyncio.run(_render(shape))
    skeleton = chunks[0]

    assert "v" not in skeleton.replace("div", "")
    # Each nested boundary forwards every slot it owns; the top level owns them all.
    placeholders = _PLACEHOLDER.findall(skeleton)
    assert len(placeholders) == total
    for external, internal in _FORWARD.findall(skeleton):
        assert int(external) >= int(internal)

"""Markup formatters for out-of-order boundaries.

One boundary renders as a host element holding a declarative shadow root.
The skeleton lives in the shadow root; fill-ins arrive later as light-DOM
children of the host and are projected into the matching ``<slot>``::

    <div><template shadowrootmode="open">
      <h2><slot name="slot_0"></slot></h2>
    </template>
    <div slot="slot_0">Hello, World!</div>
    </div>

A nested boundary sits inside its parent's shadow root. Its fill-ins are
emitted by the top-level boundary, so the nested host carries one
forwarding slot per internal slot: ``<slot name="slot_3" slot="slot_0">``
receives the parent's ``slot_3`` fill-in and projects it into the nested
``slot_0``.
"""

from __future__ import annotations

import html
from typing import Any

from slotstream.config import StreamConfig


class Rendered(str):
    """Output of another renderer; already markup, so never escaped."""

    __slots__ = ()

    def __html__(self) -> str:
        return str(self)


def to_text(value: Any, config: StreamConfig, *, safe: bool = False) -> str:
    """Convert an interpolated or resolved value to output text.

    ``__html__`` objects and ``safe`` text are never escaped. Other values
    are escaped only when ``config.autoescape`` is enabled.
    """
    if hasattr(value, "__html__"):
        return value.__html__()
    text = value if isinstance(value, str) else str(value)
    if config.autoescape and not safe:
        return html.escape(text)
    return text


def open_container(config: StreamConfig) -> str:
    return f"<{config.host_tag}>"


def close_container(config: StreamConfig) -> str:
    return f"</{config.host_tag}>"


def open_skeleton(config: StreamConfig) -> str:
    return f'<template shadowrootmode="{config.shadow_root_mode}">'


def close_skeleton(config: StreamConfig) -> str:
    return "</template>"


def placeholder(index: int, config: StreamConfig) -> str:
    """Empty slot reserving a position in the skeleton."""
    return f'<slot name="{config.slot_name(index)}"></slot>'


def forward(external: int, internal: int, config: StreamConfig) -> str:
    """Bridge the parent's slot ``external`` to a nested boundary's slot ``internal``."""
    return (
        f'<slot name="{config.slot_name(external)}" '
        f'slot="{config.slot_name(internal)}"></slot>'
    )


def fill_in(index: int, text: str, config: StreamConfig) -> str:
    """Light-DOM child carrying resolved text for slot ``index``."""
    return f'<{config.host_tag} slot="{config.slot_name(index)}">{text}</{config.host_tag}>'

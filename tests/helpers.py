"""Shared helpers for slotstream tests: value factories and expected markup."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable
from typing import Any


async def collect(chunks: AsyncIterable[Any]) -> list[Any]:
    """Drain an async iterable into a list."""
    return [chunk async for chunk in chunks]


async def resolve_after(value: str, delay: float) -> str:
    """Coroutine returning ``value`` after ``delay`` seconds."""
    await asyncio.sleep(delay)
    return value


async def fail_after(error: BaseException, delay: float) -> str:
    """Coroutine raising ``error`` after ``delay`` seconds."""
    await asyncio.sleep(delay)
    raise error


def skeleton(body: str) -> str:
    """Top-level skeleton chunk around ``body`` with the default config."""
    return f'<div><template shadowrootmode="open">{body}</template>'


def nested(body: str, forwards: str = "") -> str:
    """Inline nested boundary with its forwarding slots."""
    return f'<div><template shadowrootmode="open">{body}</template>{forwards}</div>'


def slot(index: int) -> str:
    return f'<slot name="slot_{index}"></slot>'


def forward(external: int, internal: int) -> str:
    return f'<slot name="slot_{external}" slot="slot_{internal}"></slot>'


def fill(index: int, text: str) -> str:
    return f'<div slot="slot_{index}">{text}</div>'


CLOSE = "</div>"

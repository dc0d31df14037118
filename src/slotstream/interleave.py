"""Zip literal fragments with interpolations into one flat sequence."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from slotstream.exceptions import StructuralArityError

T = TypeVar("T")


def check_arity(literal_count: int, interpolation_count: int) -> None:
    """Raise StructuralArityError unless there is one more literal than interpolations."""
    if literal_count != interpolation_count + 1:
        raise StructuralArityError(literal_count, interpolation_count)


def interleave(literals: Sequence[str], interpolations: Sequence[T]) -> list[str | T]:
    """Interleave literals and interpolations, ending with the final literal.

    Element ``2i`` is ``literals[i]`` and element ``2i + 1`` is
    ``interpolations[i]``.

    Example:
        >>> interleave(["<a>", "<b>", "<c>"], ["X", "Y"])
        ['<a>', 'X', '<b>', 'Y', '<c>']

    Raises:
        StructuralArityError: If ``len(literals) != len(interpolations) + 1``
    """
    check_arity(len(literals), len(interpolations))

    result: list[str | T] = []
    for literal, interpolation in zip(literals, interpolations, strict=False):
        result.append(literal)
        result.append(interpolation)
    result.append(literals[-1])
    return result

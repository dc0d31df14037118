"""Tests for the Streamable model, interpolation coercion, and t-string input."""

from __future__ import annotations

from collections.abc import AsyncIterator, Generator
from types import SimpleNamespace
from typing import Any

import pytest

from slotstream import (
    Deferred,
    Immediate,
    Nested,
    Spliced,
    Streamable,
    StructuralArityError,
    UnsupportedInterpolationError,
    coerce_interpolation,
    streamable,
)
from slotstream.exceptions import ErrorCode


class Later:
    """Minimal awaitable that is not a coroutine (no 'never awaited' warnings)."""

    def __init__(self, value: str) -> None:
        self.value = value

    def __await__(self) -> Generator[Any, None, str]:
        if False:
            yield
        return self.value


class NoChunks:
    """Async iterable that yields nothing."""

    def __aiter__(self) -> NoChunks:
        return self

    async def __anext__(self) -> str:
        raise StopAsyncIteration


class HtmlLike:
    def __html__(self) -> str:
        return "<b>safe</b>"


def template(strings: list[str], *values: Any) -> SimpleNamespace:
    """t-string stand-in with the PEP 750 attributes the surface reads."""
    return SimpleNamespace(
        strings=tuple(strings),
        interpolations=tuple(
            SimpleNamespace(value=value, conversion=None, format_spec="") for value in values
        ),
    )


class TestStreamableConstruction:
    def test_direct_construction(self) -> None:
        node = Streamable(literals=("a", "b"), interpolations=(Immediate("x"),))
        assert node.chunks() == ["a", Immediate("x"), "b"]

    def test_arity_checked_at_construction(self) -> None:
        with pytest.raises(StructuralArityError):
            Streamable(literals=("a",), interpolations=(Immediate("x"),))

    def test_streamable_helper_arity(self) -> None:
        with pytest.raises(StructuralArityError):
            streamable(["a", "b", "c"], "x")

    def test_streamable_rejects_bare_string(self) -> None:
        with pytest.raises(TypeError, match="not a str"):
            streamable("<p>")

    def test_node_is_immutable(self) -> None:
        node = streamable(["a"])
        with pytest.raises(AttributeError):
            node.literals = ("b",)  # type: ignore[misc]

    def test_deferred_count_includes_nested(self) -> None:
        inner = streamable(["", "", ""], Later("a"), Later("b"))
        outer = streamable(["", "", "", ""], Later("c"), inner, "text")
        assert inner.deferred_count == 2
        assert outer.deferred_count == 3

    def test_spliced_stream_counts_as_one_slot(self) -> None:
        node = Streamable(
            literals=("", "", ""),
            interpolations=(Spliced(NoChunks()), Deferred(Later("x"))),
        )
        assert node.deferred_count == 2


class TestCoercion:
    def test_str_becomes_immediate(self) -> None:
        assert coerce_interpolation("hi") == Immediate("hi")

    def test_html_object_is_safe_immediate(self) -> None:
        assert coerce_interpolation(HtmlLike()) == Immediate("<b>safe</b>", safe=True)

    def test_awaitable_becomes_deferred(self) -> None:
        value = Later("x")
        result = coerce_interpolation(value)
        assert isinstance(result, Deferred)
        assert result.awaitable is value

    def test_streamable_becomes_nested(self) -> None:
        inner = streamable(["x"])
        assert coerce_interpolation(inner) == Nested(inner)

    def test_async_iterable_becomes_spliced(self) -> None:
        async def chunks() -> AsyncIterator[str]:
            yield "<p>"

        stream = chunks()
        result = coerce_interpolation(stream)
        assert isinstance(result, Spliced)
        assert result.chunks is stream

    def test_variants_pass_through(self) -> None:
        deferred = Deferred(Later("x"))
        assert coerce_interpolation(deferred) is deferred

    @pytest.mark.parametrize("value", [None, 42, 3.5, b"bytes", ["list"]])
    def test_unsupported_values(self, value: Any) -> None:
        with pytest.raises(UnsupportedInterpolationError) as exc_info:
            coerce_interpolation(value, position=3)
        assert "position 3" in str(exc_info.value)
        assert exc_info.value.code is ErrorCode.UNSUPPORTED_INTERPOLATION

    def test_unsupported_error_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            streamable(["a", "b"], None)


class TestTemplateStrings:
    def test_template_input(self) -> None:
        node = streamable(template(["<h2>", "</h2>"], "Title"))
        assert node.literals == ("<h2>", "</h2>")
        assert node.interpolations == (Immediate("Title"),)

    def test_nested_template_becomes_nested_node(self) -> None:
        inner = template(["<li>", "</li>"], "one")
        node = streamable(template(["<ul>", "</ul>"], inner))
        (interpolation,) = node.interpolations
        assert isinstance(interpolation, Nested)
        assert interpolation.node.literals == ("<li>", "</li>")

    def test_conversion_and_format_spec_applied(self) -> None:
        tmpl = SimpleNamespace(
            strings=("", " ", ""),
            interpolations=(
                SimpleNamespace(value="x", conversion="r", format_spec=""),
                SimpleNamespace(value=3.14159, conversion=None, format_spec=".2f"),
            ),
        )
        node = streamable(tmpl)
        assert node.interpolations == (Immediate("'x'"), Immediate("3.14"))

    def test_awaitables_keep_identity(self) -> None:
        value = Later("x")
        node = streamable(template(["", ""], value))
        (interpolation,) = node.interpolations
        assert isinstance(interpolation, Deferred)
        assert interpolation.awaitable is value

    def test_template_with_extra_interpolations_rejected(self) -> None:
        with pytest.raises(TypeError):
            streamable(template(["a"]), "extra")

"""Template string support (PEP 750).

Lets Python 3.14+ t-strings act as the template invocation surface::

    page = streamable(t"<h2>{title()}</h2><p>{year}</p>")

Any object with ``strings`` and ``interpolations`` attributes is accepted,
so older interpreters (and tests) can pass structurally compatible objects.
"""

from __future__ import annotations

import inspect
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TemplateProtocol(Protocol):
    strings: tuple[str, ...]
    interpolations: tuple[Any, ...]


_CONVERSIONS = {"r": repr, "s": str, "a": ascii}


def is_template(value: object) -> bool:
    """True if value structurally matches a t-string Template."""
    return not isinstance(value, (str, bytes)) and isinstance(value, TemplateProtocol)


def _interpolation_value(interpolation: Any) -> Any:
    value = interpolation.value
    conversion = getattr(interpolation, "conversion", None)
    format_spec = getattr(interpolation, "format_spec", "") or ""

    # Awaitables and nested templates are rendered later; conversions and format specs only
    # make sense for values that are already available.
    if inspect.isawaitable(value) or hasattr(value, "interpolations"):
        return value
    if conversion:
        value = _CONVERSIONS[conversion](value)
    if format_spec:
        value = format(value, format_spec)
    return value


def split_template(template: TemplateProtocol) -> tuple[tuple[str, ...], tuple[Any, ...]]:
    """Split a t-string into its literal strings and interpolated values.

    Example:
        >>> name = "World"
        >>> split_template(t"Hello {name}!")
        (('Hello ', '!'), ('World',))
    """
    if not isinstance(template, TemplateProtocol):
        raise TypeError("Expected a string.templatelib.Template or compatible object")

    strings = tuple(template.strings)
    values = tuple(_interpolation_value(item) for item in template.interpolations)
    return strings, values

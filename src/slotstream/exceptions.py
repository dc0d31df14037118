"""Exceptions for slotstream.

Exception Hierarchy:
StreamError (base)
├── StructuralArityError           # Literal/interpolation count mismatch
├── UnsupportedInterpolationError  # Value fits no interpolation variant
└── DeferredValueFailure           # A deferred value raised while streaming

Errors raised before the skeleton is emitted (structural errors) abort the
render with no output. ``DeferredValueFailure`` ends a stream whose prefix
has already been flushed; that prefix is never retracted, so consumers must
treat the whole render as failed.

Example:
    ```
    S-RUN-001: Deferred value for slot_2 failed: ConnectionError: timed out
      Boundary depth: 1
      Hint: Handle the failure inside the awaitable and return fallback text
      Docs: https://slotstream.readthedocs.io/en/latest/errors/#s-run-001
    ```

"""

from __future__ import annotations

from enum import Enum

from slotstream import terminal

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

_DOCS_BASE = "https://slotstream.readthedocs.io/en/latest/errors"


class ErrorCode(Enum):
    """Searchable error codes for slotstream errors.

    Format: S-{CATEGORY}-{NUMBER}
    Categories: STR (structure), RUN (runtime)
    """

    # Structural errors (S-STR-xxx)
    ARITY_MISMATCH = "S-STR-001"
    UNSUPPORTED_INTERPOLATION = "S-STR-002"

    # Runtime errors (S-RUN-xxx)
    DEFERRED_FAILURE = "S-RUN-001"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        anchor = self.value.lower()
        return f"{_DOCS_BASE}/#{anchor}"

    @property
    def category(self) -> str:
        """Error category ('structure' or 'runtime')."""
        prefix = self.value.split("-")[1]
        return {
            "STR": "structure",
            "RUN": "runtime",
        }.get(prefix, "unknown")


class StreamError(Exception):
    """Base exception for all slotstream errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None
    suggestion: str | None = None

    def format_compact(self) -> str:
        """Format error as a structured, human-readable summary.

        Format::

            S-STR-001: Expected 3 literals for 2 interpolations, got 2
              Hint: Templates always have one more literal than interpolations
              Docs: https://slotstream.readthedocs.io/en/latest/errors/#s-str-001
        """
        parts = [
            terminal.format_error_header(
                self.code.value if self.code else None,
                str(self),
            )
        ]
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        if self.code:
            parts.append(f"  {terminal.dim_text('Docs:')} {terminal.docs_url(self.code.docs_url)}")
        return "\n".join(parts)


class StructuralArityError(StreamError, ValueError):
    """Literal and interpolation counts do not line up.

    A template with N interpolations always has exactly N + 1 literal
    fragments. Raised synchronously at node construction or skeleton
    emission, before any output exists.
    """

    code: ErrorCode | None = ErrorCode.ARITY_MISMATCH

    def __init__(self, literal_count: int, interpolation_count: int):
        self.literal_count = literal_count
        self.interpolation_count = interpolation_count
        self.suggestion = "Templates always have one more literal than interpolations"
        super().__init__(
            f"Expected one more literal than interpolations: "
            f"got {literal_count} literal(s) for {interpolation_count} interpolation(s)"
        )


class UnsupportedInterpolationError(StreamError, TypeError):
    """An interpolated value is not text, an awaitable, or a Streamable."""

    code: ErrorCode | None = ErrorCode.UNSUPPORTED_INTERPOLATION

    def __init__(self, value: object, position: int | None = None):
        self.value = value
        self.position = position
        self.suggestion = (
            "Interpolate a str, an awaitable resolving to str, or a Streamable; "
            "convert other values with str() first"
        )
        where = f" at position {position}" if position is not None else ""
        super().__init__(
            f"Unsupported interpolation{where}: {type(value).__name__} value {value!r:.80}"
        )


class DeferredValueFailure(StreamError):
    """A deferred value raised instead of resolving to text.

    Terminates the chunk stream after everything already emitted. The
    original exception is available as ``__cause__`` and ``cause``.

    Attributes:
        slot: Flattened slot index the value would have filled, or None for
            in-order rendering where values have no slot.
        slot_name: Rendered placeholder name (e.g. ``slot_2``), if any.
        boundary_depth: Nesting depth of the failing render boundary.
        cause: The exception raised by the awaitable.
    """

    code: ErrorCode | None = ErrorCode.DEFERRED_FAILURE

    def __init__(
        self,
        cause: BaseException,
        *,
        slot: int | None = None,
        slot_name: str | None = None,
        boundary_depth: int = 0,
    ):
        self.cause = cause
        self.slot = slot
        self.slot_name = slot_name
        self.boundary_depth = boundary_depth
        self.suggestion = "Handle the failure inside the awaitable and return fallback text"
        super().__init__(self._format_message())

    def _format_message(self, *, color: bool = False) -> str:
        target = "Deferred value"
        if self.slot_name is not None:
            where = terminal.location(self.slot_name) if color else self.slot_name
            target = f"Deferred value for {where}"
        detail = str(self.cause).strip()
        error_type = type(self.cause).__name__
        reason = f"{error_type}: {detail}" if detail else error_type
        return f"{target} failed: {reason}"

    def format_compact(self) -> str:
        """Format deferred failure with its boundary location."""
        parts = [
            terminal.format_error_header(
                self.code.value if self.code else None,
                self._format_message(color=True),
            ),
            f"  Boundary depth: {self.boundary_depth}",
        ]
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        if self.code:
            parts.append(f"  {terminal.dim_text('Docs:')} {terminal.docs_url(self.code.docs_url)}")
        return "\n".join(parts)

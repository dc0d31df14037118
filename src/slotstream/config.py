"""Render configuration for slotstream.

All options are plain keyword fields on an immutable dataclass, so one
config can be shared by every request without locking.

Example:
    >>> from slotstream import StreamConfig, render_out_of_order
    >>> config = StreamConfig(slot_prefix="s", autoescape=True)
    >>> chunks = render_out_of_order(page, config)

"""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass

_SHADOW_ROOT_MODES = frozenset({"open", "closed"})

# Slot names and host tags end up inside attribute values and tag names.
_NAME_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_-]*")


@dataclass(frozen=True, slots=True)
class StreamConfig:
    """Markup and encoding options for one or more renders.

    Attributes:
        slot_prefix: Prefix for placeholder names (``slot_0``, ``slot_1``, ...)
        host_tag: Element used for boundary containers and fill-ins
        shadow_root_mode: ``shadowrootmode`` of the skeleton template
        autoescape: HTML-escape immediate and resolved text without ``__html__``
        encoding: Byte encoding used by the transport adapter
    """

    slot_prefix: str = "slot_"
    host_tag: str = "div"
    shadow_root_mode: str = "open"
    autoescape: bool = False
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not _NAME_PATTERN.fullmatch(self.slot_prefix):
            raise ValueError(
                f"slot_prefix must start with a letter and contain only "
                f"letters, digits, '_' or '-': {self.slot_prefix!r}"
            )
        if not _NAME_PATTERN.fullmatch(self.host_tag):
            raise ValueError(f"host_tag is not a valid element name: {self.host_tag!r}")
        if self.shadow_root_mode not in _SHADOW_ROOT_MODES:
            raise ValueError(
                f"shadow_root_mode must be one of {sorted(_SHADOW_ROOT_MODES)}, "
                f"got {self.shadow_root_mode!r}"
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {self.encoding!r}") from e

    def slot_name(self, index: int) -> str:
        """Placeholder name for a slot index."""
        return f"{self.slot_prefix}{index}"


DEFAULT_CONFIG = StreamConfig()

"""Tests for StreamConfig validation and slot naming."""

from __future__ import annotations

import dataclasses

import pytest

from slotstream import DEFAULT_CONFIG, StreamConfig


class TestStreamConfig:
    def test_defaults(self) -> None:
        assert DEFAULT_CONFIG == StreamConfig()
        assert DEFAULT_CONFIG.slot_name(3) == "slot_3"
        assert DEFAULT_CONFIG.host_tag == "div"
        assert DEFAULT_CONFIG.shadow_root_mode == "open"
        assert DEFAULT_CONFIG.autoescape is False

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.slot_prefix = "x"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"slot_prefix": ""},
            {"slot_prefix": "1slot"},
            {"slot_prefix": 'a"b'},
            {"host_tag": "div><script"},
            {"shadow_root_mode": "half-open"},
            {"encoding": "no-such-codec"},
        ],
    )
    def test_invalid_values(self, kwargs: dict[str, str]) -> None:
        with pytest.raises(ValueError):
            StreamConfig(**kwargs)

    def test_custom_prefix(self) -> None:
        assert StreamConfig(slot_prefix="part-").slot_name(0) == "part-0"

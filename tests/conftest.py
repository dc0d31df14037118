"""Pytest configuration and fixtures for slotstream tests."""

import asyncio

import pytest

from slotstream import StreamConfig


@pytest.fixture
def config() -> StreamConfig:
    """Default markup configuration."""
    return StreamConfig()


@pytest.fixture
def config_autoescape() -> StreamConfig:
    """Configuration with autoescaping enabled."""
    return StreamConfig(autoescape=True)


@pytest.fixture
def make_future():
    """Factory for futures the test settles by hand, in any order."""

    def factory() -> asyncio.Future[str]:
        return asyncio.get_running_loop().create_future()

    return factory

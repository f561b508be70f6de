"""Pytest configuration and shared fixtures for settled tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

import settled

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def reset_config() -> Generator[None]:
    """Run a test without any leftover runtime configuration."""
    settled.reset()
    yield
    settled.reset()


@pytest.fixture
def cancelled_token() -> settled.CancelToken:
    """A token that was signaled before anything awaited it."""
    return settled.CancelToken.cancelled_token('already cancelled')

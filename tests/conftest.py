"""Shared fixtures."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from queuespine.queue.advanced import AdvancedQueue
from queuespine.testing import ManualClock

START = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def clock() -> ManualClock:
    """Clock frozen at START until advanced."""
    return ManualClock(START)


@pytest.fixture
def queue(clock: ManualClock) -> AdvancedQueue:
    """Default queue driven by the manual clock."""
    return AdvancedQueue(clock=clock)

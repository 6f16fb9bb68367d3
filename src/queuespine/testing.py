"""Test helpers.

Example:
    >>> from datetime import datetime, UTC
    >>> from queuespine.testing import ManualClock
    >>> clock = ManualClock(datetime(2024, 1, 1, tzinfo=UTC))
    >>> clock.advance(1.5).isoformat()
    '2024-01-01T00:00:01.500000+00:00'
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


class ManualClock:
    """Clock that only moves when told to.

    Pass an instance as ``clock=`` to ``AdvancedQueue`` to drive delays and
    retries without sleeping.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> datetime:
        """Move forward by ``seconds`` and return the new time."""
        self._now += timedelta(seconds=seconds)
        return self._now

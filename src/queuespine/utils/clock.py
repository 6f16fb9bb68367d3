"""Clock helpers.

The queue engine never calls ``datetime.now`` directly; it takes a clock
callable so tests can drive time explicitly.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

Clock = Callable[[], datetime]

# Latest representable aware timestamp
MAX_TIME = datetime.max.replace(tzinfo=UTC)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def add_seconds(when: datetime, seconds: float) -> datetime:
    """Return ``when`` plus ``seconds``, clamped to ``MAX_TIME``.

    Example:
        >>> from datetime import datetime, UTC
        >>> from queuespine.utils.clock import MAX_TIME, add_seconds
        >>> add_seconds(datetime(2024, 1, 1, tzinfo=UTC), 1e15) == MAX_TIME
        True
    """
    try:
        return when + timedelta(seconds=seconds)
    except OverflowError:
        return MAX_TIME


__all__ = ["MAX_TIME", "Clock", "add_seconds", "utc_now"]

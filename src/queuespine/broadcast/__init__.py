"""Broadcast channel implementations.

Example:
    >>> from queuespine.broadcast import create_broadcast_channel
    >>> channel = create_broadcast_channel(None)
    >>> channel.subscribe(print)()  # no-op unsubscribe
"""

from __future__ import annotations

import logging

from queuespine.broadcast.memory import MemoryBroadcastChannel, NullBroadcastChannel
from queuespine.core.exceptions import BroadcastError
from queuespine.protocols.broadcast import BroadcastChannel

logger = logging.getLogger(__name__)


def create_broadcast_channel(
    name: str | None,
    log: logging.Logger | None = None,
) -> BroadcastChannel:
    """Open a channel, degrading to a no-op channel when unavailable.

    Args:
        name: Channel name. None or empty disables broadcasting.
        log: Logger for warnings (default: module logger).
    """
    log = log or logger
    if not name:
        log.warning("No broadcast channel name given; broadcasting is disabled")
        return NullBroadcastChannel()
    try:
        return MemoryBroadcastChannel(name, log=log)
    except BroadcastError as e:
        log.warning(f"Failed to create broadcast channel {name!r}: {e}")
        return NullBroadcastChannel()


__all__ = [
    "MemoryBroadcastChannel",
    "NullBroadcastChannel",
    "create_broadcast_channel",
]

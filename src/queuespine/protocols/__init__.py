"""Protocol definitions - all extension points."""

from queuespine.protocols.broadcast import BroadcastChannel, MessageHandler, Unsubscribe
from queuespine.protocols.storage import StorageDriver

__all__ = [
    # Storage
    "StorageDriver",
    # Broadcast
    "BroadcastChannel",
    "MessageHandler",
    "Unsubscribe",
]

"""Core configuration and exceptions."""

from queuespine.core.config import Settings, get_settings
from queuespine.core.exceptions import (
    BroadcastError,
    ConfigurationError,
    QueueSpineError,
    SnapshotError,
    StorageError,
)

__all__ = [
    "BroadcastError",
    "ConfigurationError",
    "QueueSpineError",
    "Settings",
    "SnapshotError",
    "StorageError",
    "get_settings",
]

"""Data models."""

from queuespine.models.base import QueueSpineModel
from queuespine.models.message import MessageStatus, QueueMessage
from queuespine.models.options import QueueOptions
from queuespine.models.snapshot import QueueSnapshot

__all__ = [
    "MessageStatus",
    "QueueMessage",
    "QueueOptions",
    "QueueSnapshot",
    "QueueSpineModel",
]

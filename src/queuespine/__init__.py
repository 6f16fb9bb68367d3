"""QueueSpine - in-process message queue.

Priority ordering, delayed delivery, retries with dead-lettering,
idempotent enqueue, snapshot persistence and in-process topic broadcast.

Example:
    >>> from queuespine import AdvancedQueue
    >>> queue = AdvancedQueue()
    >>> msg = queue.enqueue("hello", priority=5)
    >>> queue.dequeue().id == msg.id
    True
"""

from queuespine.broadcast import (
    MemoryBroadcastChannel,
    NullBroadcastChannel,
    create_broadcast_channel,
)
from queuespine.core.config import Settings, get_settings
from queuespine.core.exceptions import (
    BroadcastError,
    ConfigurationError,
    QueueSpineError,
    SnapshotError,
    StorageError,
)
from queuespine.core.persistence import SnapshotPersistence
from queuespine.models import MessageStatus, QueueMessage, QueueOptions, QueueSnapshot
from queuespine.protocols import BroadcastChannel, StorageDriver
from queuespine.queue import AdvancedQueue, SimpleQueue, TopicQueue
from queuespine.storage import (
    FileStorageDriver,
    MemoryStorageDriver,
    SQLiteStorageDriver,
    StorageOptions,
    create_storage_driver,
)
from queuespine.utils import generate_id

__version__ = "0.1.0"

__all__ = [
    # Queues
    "AdvancedQueue",
    "SimpleQueue",
    "TopicQueue",
    # Models
    "MessageStatus",
    "QueueMessage",
    "QueueOptions",
    "QueueSnapshot",
    # Persistence
    "FileStorageDriver",
    "MemoryStorageDriver",
    "SQLiteStorageDriver",
    "SnapshotPersistence",
    "StorageDriver",
    "StorageOptions",
    "create_storage_driver",
    # Broadcast
    "BroadcastChannel",
    "MemoryBroadcastChannel",
    "NullBroadcastChannel",
    "create_broadcast_channel",
    # Config / errors
    "BroadcastError",
    "ConfigurationError",
    "QueueSpineError",
    "Settings",
    "SnapshotError",
    "StorageError",
    "get_settings",
    "generate_id",
    "__version__",
]

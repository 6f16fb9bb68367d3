"""Storage driver implementations.

Quick Start:
    from queuespine.storage import create_storage_driver

    driver = create_storage_driver("memory")        # volatile
    driver = create_storage_driver("localstorage")  # JSON files
    driver = create_storage_driver("indexeddb")     # SQLite
"""

from queuespine.storage.factory import (
    StorageOptions,
    available_selectors,
    create_storage_driver,
    detect_driver_type,
)
from queuespine.storage.file import FileStorageDriver
from queuespine.storage.memory import MemoryStorageDriver
from queuespine.storage.sqlite import SQLiteStorageDriver

__all__ = [
    "FileStorageDriver",
    "MemoryStorageDriver",
    "SQLiteStorageDriver",
    "StorageOptions",
    "available_selectors",
    "create_storage_driver",
    "detect_driver_type",
]

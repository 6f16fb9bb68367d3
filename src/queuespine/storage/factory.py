"""
Storage Factory - pick a storage driver from a selector string.

Usage:
    from queuespine.storage import create_storage_driver

    # Volatile (default)
    driver = create_storage_driver("memory")

    # JSON files in a directory
    driver = create_storage_driver("localstorage", StorageOptions(data_dir="./data"))

    # Transactional SQLite database
    driver = create_storage_driver("indexeddb", StorageOptions(data_dir="./data"))

Unrecognized selectors fall back to the volatile memory driver. A durable
driver that cannot be set up in this environment also degrades to memory,
with a logged warning, instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from queuespine.core.exceptions import QueueSpineError
from queuespine.protocols.storage import StorageDriver
from queuespine.storage.file import DEFAULT_PREFIX, FileStorageDriver
from queuespine.storage.memory import MemoryStorageDriver
from queuespine.storage.sqlite import DEFAULT_TABLE, SQLiteStorageDriver

logger = logging.getLogger(__name__)

DriverType = Literal["memory", "file", "sqlite"]

# Selector aliases -> driver type
SELECTORS: dict[str, DriverType] = {
    "memory": "memory",
    "localstorage": "file",
    "file": "file",
    "indexeddb": "sqlite",
    "sqlite": "sqlite",
}


@dataclass
class StorageOptions:
    """
    Storage driver configuration.

    Attributes:
        data_dir: Base directory for durable drivers
        prefix: Filename prefix for the file driver
        db_name: SQLite database filename (inside data_dir)
        table_name: SQLite table holding key/value rows
    """

    data_dir: str | Path = "./data"
    prefix: str = DEFAULT_PREFIX
    db_name: str = "queuespine.db"
    table_name: str = DEFAULT_TABLE

    @classmethod
    def for_testing(cls, data_dir: str | Path) -> StorageOptions:
        """Test settings: isolated directory."""
        return cls(data_dir=data_dir, prefix="test-", db_name="test.db")


def detect_driver_type(selector: str | None) -> DriverType | None:
    """Resolve a selector string to a driver type, or None if unrecognized.

    Example:
        >>> from queuespine.storage.factory import detect_driver_type
        >>> detect_driver_type("IndexedDB")
        'sqlite'
        >>> detect_driver_type("redis") is None
        True
    """
    if not selector:
        return None
    return SELECTORS.get(selector.strip().lower())


def create_storage_driver(
    selector: str | None = "memory",
    options: StorageOptions | None = None,
    *,
    log: logging.Logger | None = None,
) -> StorageDriver:
    """
    Create a storage driver from a selector.

    Args:
        selector: "memory", "localstorage"/"file" or "indexeddb"/"sqlite"
            (case-insensitive). Anything else selects memory.
        options: StorageOptions for durable drivers
        log: Logger for degradation warnings (default: module logger)

    Returns:
        A storage driver. Never raises for unavailable backends.

    Examples:
        >>> from queuespine.storage.factory import create_storage_driver
        >>> type(create_storage_driver("memory")).__name__
        'MemoryStorageDriver'
        >>> type(create_storage_driver("no-such-driver")).__name__
        'MemoryStorageDriver'
    """
    log = log or logger
    options = options or StorageOptions()
    driver_type = detect_driver_type(selector)

    if driver_type is None:
        if selector and selector.strip().lower() != "memory":
            log.warning(f"Unknown storage driver {selector!r}; using memory storage")
        return MemoryStorageDriver()

    if driver_type == "memory":
        return MemoryStorageDriver()

    data_dir = Path(options.data_dir)
    try:
        if driver_type == "file":
            return FileStorageDriver(data_dir, prefix=options.prefix)
        driver = SQLiteStorageDriver(data_dir / options.db_name, table_name=options.table_name)
        driver.connect()
        return driver
    except QueueSpineError as e:
        log.warning(f"Storage driver {selector!r} is unavailable ({e}); using memory storage")
        return MemoryStorageDriver()


def available_selectors() -> list[str]:
    """List accepted selector strings.

    Example:
        >>> from queuespine.storage.factory import available_selectors
        >>> "indexeddb" in available_selectors()
        True
    """
    return sorted(SELECTORS)

"""Custom exceptions.

QueueSpine uses a small hierarchy of exceptions. Expected absence (an
unknown message id, an empty queue) is never an exception: operations
return ``False`` or ``None`` instead.

Example:
    >>> from queuespine.core.exceptions import QueueSpineError, StorageError
    >>> isinstance(StorageError("disk full"), QueueSpineError)
    True
"""

from __future__ import annotations


class QueueSpineError(Exception):
    """Base exception for QueueSpine.

    Example:
        >>> from queuespine.core.exceptions import QueueSpineError
        >>> str(QueueSpineError("something went wrong"))
        'something went wrong'
    """


class StorageError(QueueSpineError):
    """A storage driver operation failed.

    Drivers raise this; the persistence adapter catches, logs and swallows it.

    Example:
        >>> from queuespine.core.exceptions import StorageError
        >>> raise StorageError("database is locked")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        StorageError: database is locked
    """


class SnapshotError(QueueSpineError):
    """A persisted snapshot could not be decoded."""


class ConfigurationError(QueueSpineError):
    """Configuration is invalid.

    Example:
        >>> from queuespine.core.exceptions import ConfigurationError
        >>> raise ConfigurationError("missing storage_dir")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ConfigurationError: missing storage_dir
    """


class BroadcastError(QueueSpineError):
    """A broadcast channel operation failed."""

"""Queue configuration options.

Example:
    >>> from queuespine.models.options import QueueOptions
    >>> opts = QueueOptions()
    >>> opts.max_retries
    3
    >>> opts.retry_delay
    1.0
    >>> QueueOptions(max_retries=5).max_retries
    5
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import Field

from queuespine.models.base import QueueSpineModel

if TYPE_CHECKING:
    from queuespine.core.config import Settings

# One year
MAX_RETRY_DELAY = 365 * 24 * 60 * 60.0


class QueueOptions(QueueSpineModel):
    """Options for an AdvancedQueue.

    All durations are in seconds.
    """

    max_retries: int = Field(default=3, ge=0, description="Failures before dead-lettering")
    retry_delay: float = Field(
        default=1.0, ge=0, le=MAX_RETRY_DELAY, description="Delay before a failed message retries"
    )
    persistence_enabled: bool = Field(default=False)
    persistence_driver: str = Field(default="memory", description="memory, localstorage or indexeddb")
    persistence_interval: float = Field(default=5.0, gt=0)
    dead_letter_enabled: bool = Field(default=True)
    auto_check_delayed: bool = Field(default=False)
    delayed_check_interval: float = Field(default=0.1, gt=0)
    queue_id: str | None = Field(default=None, description="Fixed id so a snapshot can be reloaded")
    storage_dir: Path | None = Field(default=None, description="Directory for durable drivers")

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: object) -> QueueOptions:
        """Build options from environment-backed settings.

        Example:
            >>> from queuespine.core.config import get_settings
            >>> from queuespine.models.options import QueueOptions
            >>> opts = QueueOptions.from_settings(get_settings(max_retries=7))
            >>> opts.max_retries
            7
        """
        values: dict[str, object] = {
            "max_retries": settings.max_retries,
            "persistence_enabled": settings.persistence_enabled,
            "dead_letter_enabled": settings.dead_letter_enabled,
            "auto_check_delayed": settings.auto_check_delayed,
            "retry_delay": settings.retry_delay,
            "persistence_driver": settings.storage_driver,
            "persistence_interval": settings.persistence_interval,
            "delayed_check_interval": settings.delayed_check_interval,
            "storage_dir": settings.storage_dir,
        }
        values.update(overrides)
        return cls(**values)

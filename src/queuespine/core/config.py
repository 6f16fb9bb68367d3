"""QueueSpine configuration.

Application settings loaded from environment variables with QUEUESPINE_ prefix.

Example:
    >>> from queuespine.core.config import get_settings
    >>> settings = get_settings(log_level="DEBUG")
    >>> settings.log_level
    'DEBUG'
    >>> settings.storage_driver
    'memory'
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from queuespine.models.options import MAX_RETRY_DELAY


class Settings(BaseSettings):
    """Application settings.

    Loads from environment variables with QUEUESPINE_ prefix.

    Example:
        >>> from queuespine.core.config import Settings
        >>> s = Settings(storage_driver="indexeddb")
        >>> s.storage_driver
        'indexeddb'
        >>> s.max_retries
        3
    """

    model_config = SettingsConfigDict(
        env_prefix="QUEUESPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    storage_driver: str = Field(default="memory", description="Storage driver selector")
    storage_dir: Path = Field(default=Path("./data"), description="Directory for durable drivers")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Queue defaults (seconds)
    max_retries: int = Field(default=3, ge=0)
    retry_delay: float = Field(default=1.0, ge=0.0, le=MAX_RETRY_DELAY)
    persistence_enabled: bool = Field(default=False)
    dead_letter_enabled: bool = Field(default=True)
    auto_check_delayed: bool = Field(default=False)
    persistence_interval: float = Field(default=5.0, gt=0.0)
    delayed_check_interval: float = Field(default=0.1, gt=0.0)


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides.

    Example:
        >>> from queuespine.core.config import get_settings
        >>> s = get_settings(retry_delay=0.5)
        >>> s.retry_delay
        0.5
    """
    return Settings(**overrides)

"""Base models and shared types.

This module provides the foundational model configuration used throughout
QueueSpine.

Example:
    >>> from queuespine.models.base import QueueSpineModel
    >>> class Point(QueueSpineModel):
    ...     x_pos: int
    >>> Point(x_pos=1).model_dump(by_alias=True)
    {'xPos': 1}
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class QueueSpineModel(BaseModel):
    """Base model with standard configuration.

    Field names are snake_case in Python and camelCase on the wire, so
    persisted snapshots keep the ``{messages, delayedMessages, ...}`` layout.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
        alias_generator=to_camel,
    )

"""Utility helpers."""

from queuespine.utils.clock import Clock, utc_now
from queuespine.utils.ids import generate_id
from queuespine.utils.ordering import delay_key, priority_key, sort_messages

__all__ = [
    "Clock",
    "delay_key",
    "generate_id",
    "priority_key",
    "sort_messages",
    "utc_now",
]

"""Message identifier generation.

Identifiers combine a base-36 millisecond timestamp with a random suffix.
They are unique enough within one process's lifetime but are not
cryptographically strong and must not be used as secrets.

Example:
    >>> from datetime import datetime, UTC
    >>> from queuespine.utils.ids import generate_id
    >>> msg_id = generate_id(datetime(2024, 1, 1, tzinfo=UTC))
    >>> msg_id.count("-")
    1
    >>> len(msg_id.split("-")[1])
    8
"""

from __future__ import annotations

import random
import string
from datetime import datetime

from queuespine.utils.clock import utc_now

_ALPHABET = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 8


def to_base36(value: int) -> str:
    """Encode a non-negative integer in base 36.

    Example:
        >>> from queuespine.utils.ids import to_base36
        >>> to_base36(35)
        'z'
        >>> to_base36(36)
        '10'
    """
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_id(now: datetime | None = None) -> str:
    """Generate a time-prefixed message identifier.

    Args:
        now: Timestamp for the prefix (default: current UTC time).

    Returns:
        ``"<base36 ms timestamp>-<8 random base36 chars>"``
    """
    now = now or utc_now()
    millis = int(now.timestamp() * 1000)
    suffix = "".join(random.choices(_ALPHABET, k=SUFFIX_LENGTH))
    return f"{to_base36(millis)}-{suffix}"


__all__ = ["generate_id", "to_base36"]

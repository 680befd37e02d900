# File: utils/dt_utils.py
"""Date and time utilities for Star Hunt.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Snapshot timestamps are integer epoch milliseconds so that they compare
directly with the values written by the phone app on the other side of a sync.

Functions:
    - dt_now_utc: Get current datetime in UTC
    - dt_now_ms: Get current time as epoch milliseconds
    - dt_to_ms: Convert a datetime to epoch milliseconds
    - is_epoch_ms: Check whether a raw JSON value is a usable timestamp
    - coerce_epoch_ms: Normalize a raw JSON timestamp to int, or None
    - hours_to_ms: Convert a configured hour count to milliseconds
"""

from __future__ import annotations

from datetime import UTC, datetime
import logging
import math
from typing import Any

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# Local copy to avoid importing const.py from a pure module
_MS_PER_HOUR = 60 * 60 * 1000


def dt_now_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def dt_to_ms(dt_obj: datetime) -> int:
    """Convert a datetime to epoch milliseconds.

    Naive datetimes are treated as UTC.

    Examples:
        dt_to_ms(datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)) → 1000
    """
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return int(dt_obj.timestamp() * 1000)


def dt_now_ms() -> int:
    """Return the current time as epoch milliseconds."""
    return dt_to_ms(dt_now_utc())


def is_epoch_ms(value: Any) -> bool:
    """Return True if value can be used as a timestamp.

    bool is rejected even though it is an int subclass; NaN and infinities
    are rejected because they never compare usefully.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def coerce_epoch_ms(value: Any) -> int | None:
    """Normalize a raw JSON timestamp to an int, or None if unusable."""
    if not is_epoch_ms(value):
        if value is not None:
            _LOGGER.debug("Ignoring non-numeric timestamp: %r", value)
        return None
    return int(value)


def hours_to_ms(hours: float) -> int:
    """Convert hours to milliseconds.

    Examples:
        hours_to_ms(24) → 86400000
        hours_to_ms(0.5) → 1800000
    """
    return int(hours * _MS_PER_HOUR)

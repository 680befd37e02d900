# File: utils/math_utils.py
"""Math utilities for Star Hunt.

Pure Python math functions with ZERO Home Assistant dependencies.

Points in a snapshot are whole numbers. Imported data may carry floats or
strings, so everything numeric goes through coerce_int before use.

Functions:
    - coerce_int: Convert a raw JSON value to int, or a default
    - calculate_shortfall: Points still needed to afford a cost
"""

from __future__ import annotations

import logging
import math
from typing import Any

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)


def coerce_int(value: Any, default: int) -> int:
    """Convert a raw JSON value to int.

    Accepts ints, finite floats (truncated) and numeric strings. bool, None,
    NaN and anything else fall back to default.

    Examples:
        coerce_int(5, 0) → 5
        coerce_int(7.9, 0) → 7
        coerce_int("12", 0) → 12
        coerce_int(True, 0) → 0
        coerce_int("abc", 3) → 3
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            _LOGGER.debug("Non-numeric string %r, using %s", value, default)
            return default
    return default


def calculate_shortfall(balance: int, cost: int) -> int:
    """Return how many more points are needed to pay cost (0 if affordable).

    Examples:
        calculate_shortfall(10, 20) → 10
        calculate_shortfall(30, 20) → 0
    """
    return max(0, cost - balance)

# File: utils/__init__.py
"""Pure Python utilities for Star Hunt.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Epoch-millisecond timestamps and conversions
    - math_utils: Integer coercion, shortfall arithmetic
    - snapshot_utils: Copy-on-write lookups and replacements inside a snapshot

Usage:
    from . import dt_utils
    from .math_utils import coerce_int
"""

from . import dt_utils, math_utils, snapshot_utils

__all__ = ["dt_utils", "math_utils", "snapshot_utils"]

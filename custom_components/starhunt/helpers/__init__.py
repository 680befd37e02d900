# File: helpers/__init__.py
"""Helper functions for Star Hunt that sit next to Home Assistant.

NOTE: Functions that need the `hass` object or HA registry types belong here,
NOT in utils/.

Submodules:
    - device_helpers: DeviceInfo construction
    - flow_helpers: Config/options flow schemas and validators
    - sync_helpers: Snapshot transfer encoding and decoding

Usage:
    from .helpers import sync_helpers as sh
    from .helpers.device_helpers import create_child_device_info
"""

from . import device_helpers, flow_helpers, sync_helpers

__all__ = [
    "device_helpers",
    "flow_helpers",
    "sync_helpers",
]

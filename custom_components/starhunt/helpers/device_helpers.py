# File: helpers/device_helpers.py
"""Device registry helper functions for Star Hunt.

Functions that construct DeviceInfo objects for Home Assistant's device registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo

from .. import const

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


def create_child_device_info(
    child_id: str,
    child_name: str,
    config_entry: ConfigEntry,
) -> DeviceInfo:
    """Create device info for a child profile.

    Args:
        child_id: Id of the child inside the snapshot
        child_name: Display name of the child
        config_entry: Config entry for this integration instance

    Returns:
        DeviceInfo dict for the child device
    """
    return DeviceInfo(
        identifiers={(const.DOMAIN, f"{config_entry.entry_id}_{child_id}")},
        name=f"{child_name} ({config_entry.title})",
        manufacturer=const.STARHUNT_TITLE,
        model="Child Profile",
        entry_type=DeviceEntryType.SERVICE,
    )

"""Diagnostics support for Star Hunt integration.

The entry diagnostics return the stored household snapshot with the parent PIN
redacted; the device diagnostics return one child's record.
"""

from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceEntry

from . import const
from .coordinator import StarHuntDataCoordinator

TO_REDACT = {const.DATA_SETTINGS_PARENT_PIN, const.CONF_PARENT_PIN}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: StarHuntDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    return {
        "entry": {
            "data": async_redact_data(dict(entry.data), TO_REDACT),
            "options": dict(entry.options),
        },
        "storage": async_redact_data(coordinator.store.data or {}, TO_REDACT),
    }


async def async_get_device_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry, device: DeviceEntry
) -> dict[str, Any]:
    """Return diagnostics for a child device."""
    coordinator: StarHuntDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    prefix = f"{entry.entry_id}_"
    child_id = None
    for domain, identifier in device.identifiers:
        if domain == const.DOMAIN and identifier.startswith(prefix):
            child_id = identifier[len(prefix) :]
            break

    if not child_id:
        return {"error": "Could not determine child_id from device identifiers"}

    child = coordinator.get_child(child_id)
    if child is None:
        return {"error": f"Child data not found for child_id: {child_id}"}

    return {
        "child_id": child_id,
        "child_data": child,
    }

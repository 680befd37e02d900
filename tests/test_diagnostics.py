"""Tests for Star Hunt diagnostics.

Entry diagnostics return the stored snapshot with the parent PIN redacted;
device diagnostics return one child's record.
"""

# pylint: disable=redefined-outer-name  # Pytest fixtures shadow names
# pylint: disable=unused-argument  # Some fixtures needed for setup only

from unittest.mock import MagicMock

from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceEntry
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.starhunt import const
from custom_components.starhunt.diagnostics import (
    async_get_config_entry_diagnostics,
    async_get_device_diagnostics,
)
from tests.helpers import CHILD_ID

REDACTED = "**REDACTED**"


def _device(*identifiers: tuple[str, str]) -> DeviceEntry:
    device = MagicMock(spec=DeviceEntry)
    device.identifiers = set(identifiers)
    return device


async def test_config_entry_diagnostics(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Storage and entry data are returned with the PIN redacted."""
    result = await async_get_config_entry_diagnostics(hass, init_integration)

    assert result["entry"]["data"][const.CONF_PARENT_PIN] == REDACTED
    assert result["entry"]["options"] == dict(init_integration.options)
    storage = result["storage"]
    assert storage[const.DATA_SETTINGS][const.DATA_SETTINGS_PARENT_PIN] == REDACTED
    assert [c[const.DATA_CHILD_NAME] for c in storage[const.DATA_CHILDREN]] == [
        "Emma",
        "Noah",
    ]


async def test_config_entry_diagnostics_keeps_live_pin(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Redaction works on a copy; the household keeps its PIN."""
    await async_get_config_entry_diagnostics(hass, init_integration)

    coordinator = hass.data[const.DOMAIN][init_integration.entry_id][const.COORDINATOR]
    assert (
        coordinator.snapshot[const.DATA_SETTINGS][const.DATA_SETTINGS_PARENT_PIN]
        == "1234"
    )


async def test_device_diagnostics_returns_child(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """The child is found from the device identifier."""
    device = _device((const.DOMAIN, f"{init_integration.entry_id}_{CHILD_ID}"))

    result = await async_get_device_diagnostics(hass, init_integration, device)

    assert result["child_id"] == CHILD_ID
    assert result["child_data"][const.DATA_CHILD_NAME] == "Emma"


async def test_device_diagnostics_unknown_identifier(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Foreign identifiers produce an error entry."""
    device = _device(("other_domain", "whatever"))

    result = await async_get_device_diagnostics(hass, init_integration, device)

    assert "error" in result


async def test_device_diagnostics_removed_child(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """A device whose child no longer exists produces an error entry."""
    device = _device((const.DOMAIN, f"{init_integration.entry_id}_gone"))

    result = await async_get_device_diagnostics(hass, init_integration, device)

    assert result == {"error": "Child data not found for child_id: gone"}

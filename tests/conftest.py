"""Shared fixtures for Star Hunt tests."""

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.starhunt import const, data_builders as db
from custom_components.starhunt.coordinator import StarHuntDataCoordinator
from custom_components.starhunt.helpers import flow_helpers as fh
from tests.helpers import (
    CHILD_ID,
    PARENT_PIN,
    SECOND_CHILD_ID,
    make_app_data,
    make_child,
)

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.STARHUNT_TITLE,
        data={
            const.CONF_LANGUAGE: const.LANGUAGE_EN,
            const.CONF_PARENT_PIN: PARENT_PIN,
        },
        options=fh.default_options(const.LANGUAGE_EN),
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
def mock_storage_data() -> dict[str, Any]:
    """Return a stored household with two children."""
    emma = make_child(
        CHILD_ID,
        "Emma",
        10,
        tasks=db.default_tasks(const.LANGUAGE_EN),
        rewards=db.default_rewards(const.LANGUAGE_EN),
        enable24hReset=True,
    )
    noah = make_child(
        SECOND_CHILD_ID,
        "Noah",
        50,
        tasks=db.default_tasks(const.LANGUAGE_EN),
        rewards=db.default_rewards(const.LANGUAGE_EN),
        enable24hReset=True,
    )
    return make_app_data(emma, noah, parentPin=PARENT_PIN)


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> AsyncGenerator[MockConfigEntry, None]:
    """Set up the Star Hunt integration for testing with mocked storage."""
    mock_config_entry.add_to_hass(hass)

    # Mock the Store's async_load to return our test data
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    yield mock_config_entry

    # Stop the refresh timer before the test harness checks for lingering ones.
    await hass.config_entries.async_unload(mock_config_entry.entry_id)
    await hass.async_block_till_done()


@pytest.fixture
def coordinator(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> StarHuntDataCoordinator:
    """Return the coordinator of the loaded entry."""
    return hass.data[const.DOMAIN][init_integration.entry_id][const.COORDINATOR]

"""Tests for Star Hunt services."""

# pylint: disable=redefined-outer-name  # Pytest fixtures shadow names
# pylint: disable=unused-argument  # init_integration needed for setup only

import pytest
import voluptuous as vol
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.starhunt import const
from custom_components.starhunt.coordinator import StarHuntDataCoordinator
from custom_components.starhunt.helpers import sync_helpers as sh
from custom_components.starhunt.services import ALL_SERVICES
from tests.helpers import CHILD_ID, PARENT_PIN, SECOND_CHILD_ID


async def test_services_registered(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Every service is available once the entry is loaded."""
    for service in ALL_SERVICES:
        assert hass.services.has_service(const.DOMAIN, service)


async def test_complete_task_by_names(
    hass: HomeAssistant, coordinator: StarHuntDataCoordinator
) -> None:
    """Child and task can be addressed by name, case-insensitively."""
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_COMPLETE_TASK,
        {const.FIELD_CHILD_NAME: "emma", const.FIELD_TASK_NAME: "brush your teeth"},
        blocking=True,
    )

    child = coordinator.get_child(CHILD_ID)
    assert child[const.DATA_CHILD_POINTS] == 12
    assert child[const.DATA_CHILD_TASKS][1][const.DATA_TASK_COMPLETED] is True


async def test_complete_task_by_ids(
    hass: HomeAssistant, coordinator: StarHuntDataCoordinator
) -> None:
    """Ids work as well as names."""
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_COMPLETE_TASK,
        {const.FIELD_CHILD_ID: SECOND_CHILD_ID, const.FIELD_TASK_ID: "3"},
        blocking=True,
    )

    assert coordinator.get_child(SECOND_CHILD_ID)[const.DATA_CHILD_POINTS] == 53


async def test_complete_task_requires_child(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """A call without a child target fails schema validation."""
    with pytest.raises((vol.Invalid, ServiceValidationError)):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_COMPLETE_TASK,
            {const.FIELD_TASK_ID: "1"},
            blocking=True,
        )


async def test_unknown_child_name(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Unknown children are reported."""
    with pytest.raises(HomeAssistantError) as err:
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_COMPLETE_TASK,
            {const.FIELD_CHILD_NAME: "Nobody", const.FIELD_TASK_ID: "1"},
            blocking=True,
        )
    assert err.value.translation_key == const.REASON_CHILD_NOT_FOUND


async def test_purchase_reward_insufficient_points(
    hass: HomeAssistant, coordinator: StarHuntDataCoordinator
) -> None:
    """A purchase the child cannot afford raises and changes nothing."""
    with pytest.raises(HomeAssistantError) as err:
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_PURCHASE_REWARD,
            {const.FIELD_CHILD_ID: CHILD_ID, const.FIELD_REWARD_ID: "1"},
            blocking=True,
        )

    assert err.value.translation_key == const.REASON_INSUFFICIENT_POINTS
    assert coordinator.get_child(CHILD_ID)[const.DATA_CHILD_POINTS] == 10


async def test_parent_service_wrong_pin(
    hass: HomeAssistant, coordinator: StarHuntDataCoordinator
) -> None:
    """Parent services reject a wrong PIN."""
    with pytest.raises(ServiceValidationError):
        await hass.services.async_call(
            const.DOMAIN,
            const.SERVICE_ADJUST_POINTS,
            {const.FIELD_CHILD_ID: CHILD_ID, const.FIELD_POINTS: 5, const.FIELD_PIN: "9999"},
            blocking=True,
        )

    assert coordinator.get_child(CHILD_ID)[const.DATA_CHILD_POINTS] == 10


async def test_add_task_and_remove_by_name(
    hass: HomeAssistant, coordinator: StarHuntDataCoordinator
) -> None:
    """A task added through the service can be removed by its name."""
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_ADD_TASK,
        {
            const.FIELD_CHILD_ID: CHILD_ID,
            const.FIELD_NAME: "Feed the cåt",
            const.FIELD_ICON: "🐱",
            const.FIELD_POINTS: 4,
            const.FIELD_PIN: PARENT_PIN,
        },
        blocking=True,
    )
    tasks = coordinator.get_child(CHILD_ID)[const.DATA_CHILD_TASKS]
    assert tasks[-1][const.DATA_TASK_NAME] == "Feed the cåt"

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_REMOVE_TASK,
        {
            const.FIELD_CHILD_ID: CHILD_ID,
            const.FIELD_TASK_NAME: "Feed the cåt",
            const.FIELD_PIN: PARENT_PIN,
        },
        blocking=True,
    )
    assert len(coordinator.get_child(CHILD_ID)[const.DATA_CHILD_TASKS]) == 3


async def test_reset_task_service(
    hass: HomeAssistant, coordinator: StarHuntDataCoordinator
) -> None:
    """A parent can make a completed task available again."""
    coordinator.complete_task(CHILD_ID, "1")

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_RESET_TASK,
        {const.FIELD_CHILD_ID: CHILD_ID, const.FIELD_TASK_ID: "1", const.FIELD_PIN: PARENT_PIN},
        blocking=True,
    )

    task = coordinator.get_child(CHILD_ID)[const.DATA_CHILD_TASKS][0]
    assert task[const.DATA_TASK_COMPLETED] is False
    assert coordinator.get_child(CHILD_ID)[const.DATA_CHILD_POINTS] == 15


async def test_update_settings_service(
    hass: HomeAssistant, coordinator: StarHuntDataCoordinator
) -> None:
    """Household flags are changed through the service."""
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_UPDATE_SETTINGS,
        {const.FIELD_PIN: PARENT_PIN, const.FIELD_ENABLE_24H_RESET: False},
        blocking=True,
    )

    assert (
        coordinator.snapshot[const.DATA_SETTINGS][const.DATA_SETTINGS_ENABLE_24H_RESET]
        is False
    )
    for child in coordinator.snapshot[const.DATA_CHILDREN]:
        assert child[const.DATA_CHILD_ENABLE_24H_RESET] is False


async def test_export_snapshot_response(
    hass: HomeAssistant, coordinator: StarHuntDataCoordinator
) -> None:
    """The export service returns the payload and channel report."""
    response = await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_EXPORT_SNAPSHOT,
        {},
        blocking=True,
        return_response=True,
    )

    assert sh.decode_payload(response[const.EXPORT_PAYLOAD]) == coordinator.snapshot
    assert set(response[const.EXPORT_CHANNELS]) == set(const.SYNC_CHANNEL_LIMITS)


async def test_import_snapshot_service(
    hass: HomeAssistant, coordinator: StarHuntDataCoordinator
) -> None:
    """Importing our own export doubles the points (merge sums)."""
    payload = coordinator.export_snapshot()[const.EXPORT_URL_PARAM]

    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_IMPORT_SNAPSHOT,
        {const.FIELD_PAYLOAD: payload, const.FIELD_PIN: PARENT_PIN},
        blocking=True,
    )

    assert coordinator.get_child(CHILD_ID)[const.DATA_CHILD_POINTS] == 20
    assert coordinator.get_child(SECOND_CHILD_ID)[const.DATA_CHILD_POINTS] == 100
    assert len(coordinator.children_data) == 2

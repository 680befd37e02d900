"""Tests for the Star Hunt coordinator."""

# pylint: disable=redefined-outer-name  # Pytest fixtures shadow names
# pylint: disable=protected-access  # Tests drive the reset tick directly

from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.starhunt import const
from custom_components.starhunt.coordinator import StarHuntDataCoordinator
from custom_components.starhunt.helpers import sync_helpers as sh
from tests.helpers import (
    CHILD_ID,
    HOUR_MS,
    NOW_MS,
    PARENT_PIN,
    SECOND_CHILD_ID,
    make_app_data,
    make_child,
)


def _task(coordinator: StarHuntDataCoordinator, child_id: str, task_id: str) -> dict:
    child = coordinator.get_child(child_id)
    assert child is not None
    return next(
        t for t in child[const.DATA_CHILD_TASKS] if t[const.DATA_TASK_ID] == task_id
    )


# ------------------------------------------------------------------------------
# Setup
# ------------------------------------------------------------------------------


async def test_setup_loads_storage(coordinator: StarHuntDataCoordinator) -> None:
    """Stored children are available after setup."""
    assert [c[const.DATA_CHILD_NAME] for c in coordinator.children_data] == [
        "Emma",
        "Noah",
    ]
    assert coordinator.get_child(CHILD_ID)[const.DATA_CHILD_POINTS] == 10


@pytest.mark.parametrize(
    "mock_storage_data",
    [
        {
            "children": [{"name": "Legacy", "points": -4}],
            "tasks": [{"id": 1, "name": "Dishes", "icon": "🍽", "points": 3}],
            "settings": {"parentPin": "12"},
        }
    ],
)
async def test_setup_sanitizes_legacy_storage(
    coordinator: StarHuntDataCoordinator,
) -> None:
    """Legacy root lists move onto the child; bad values are repaired."""
    (child,) = coordinator.children_data

    assert child[const.DATA_CHILD_ID]
    assert child[const.DATA_CHILD_POINTS] == 0
    assert child[const.DATA_CHILD_TASKS][0][const.DATA_TASK_ID] == "1"
    assert child[const.DATA_CHILD_TASKS][0][const.DATA_TASK_COMPLETED] is False
    assert set(coordinator.snapshot) == {const.DATA_CHILDREN, const.DATA_SETTINGS}
    assert (
        coordinator.snapshot[const.DATA_SETTINGS][const.DATA_SETTINGS_PARENT_PIN]
        == const.DEFAULT_PARENT_PIN
    )
    assert coordinator.store.data is coordinator.snapshot


@pytest.mark.parametrize("mock_storage_data", [None])
async def test_setup_without_storage_uses_configured_pin(
    coordinator: StarHuntDataCoordinator,
) -> None:
    """A fresh installation starts empty with the PIN from the config entry."""
    assert coordinator.children_data == []
    assert coordinator.snapshot[const.DATA_SETTINGS][
        const.DATA_SETTINGS_PARENT_PIN
    ] == PARENT_PIN


async def test_options_drive_coordinator(
    coordinator: StarHuntDataCoordinator,
) -> None:
    """Bonus and reset settings come from the entry options."""
    assert coordinator.bonus_points == const.DEFAULT_BONUS_POINTS
    assert coordinator.bonus_task_target == const.DEFAULT_BONUS_TASK_TARGET
    assert coordinator.reset_window_ms == 24 * HOUR_MS
    assert coordinator.language == const.LANGUAGE_EN


# ------------------------------------------------------------------------------
# Child actions
# ------------------------------------------------------------------------------


async def test_complete_task(coordinator: StarHuntDataCoordinator) -> None:
    """Points are added and the task is stamped with the completion time."""
    result = coordinator.complete_task(CHILD_ID, "1", now=NOW_MS)

    assert result.success
    assert coordinator.get_child(CHILD_ID)[const.DATA_CHILD_POINTS] == 15
    task = _task(coordinator, CHILD_ID, "1")
    assert task[const.DATA_TASK_COMPLETED] is True
    assert task[const.DATA_TASK_COMPLETED_AT] == NOW_MS
    assert coordinator.store.data is coordinator.snapshot


async def test_complete_task_twice_is_noop(
    coordinator: StarHuntDataCoordinator,
) -> None:
    """A second completion changes nothing."""
    coordinator.complete_task(CHILD_ID, "1", now=NOW_MS)
    before = coordinator.snapshot

    result = coordinator.complete_task(CHILD_ID, "1", now=NOW_MS + 1)

    assert result.reason == const.REASON_TASK_ALREADY_COMPLETED
    assert coordinator.snapshot is before


async def test_third_completion_awards_bonus(
    coordinator: StarHuntDataCoordinator,
) -> None:
    """Three completions inside the window give the configured bonus once."""
    coordinator.complete_task(CHILD_ID, "1", now=NOW_MS)
    coordinator.complete_task(CHILD_ID, "2", now=NOW_MS + 1)
    result = coordinator.complete_task(CHILD_ID, "3", now=NOW_MS + 2)

    assert result.bonus_awarded == const.DEFAULT_BONUS_POINTS
    # 10 + 5 + 2 + 3 + bonus
    assert coordinator.get_child(CHILD_ID)[const.DATA_CHILD_POINTS] == 25
    assert (
        coordinator.get_child(CHILD_ID)[const.DATA_CHILD_BONUS_LAST_AWARDED_AT]
        == NOW_MS + 2
    )


async def test_purchase_reward(coordinator: StarHuntDataCoordinator) -> None:
    """Noah can afford the ice cream."""
    coordinator.purchase_reward(SECOND_CHILD_ID, "1", now=NOW_MS)

    child = coordinator.get_child(SECOND_CHILD_ID)
    assert child[const.DATA_CHILD_POINTS] == 20
    assert child[const.DATA_CHILD_ACTIVITIES][-1][const.DATA_ACTIVITY_POINTS] == -30


async def test_purchase_reward_insufficient_points(
    coordinator: StarHuntDataCoordinator,
) -> None:
    """Emma is 20 points short; nothing changes."""
    before = coordinator.snapshot

    with pytest.raises(HomeAssistantError) as err:
        coordinator.purchase_reward(CHILD_ID, "1", now=NOW_MS)

    assert err.value.translation_key == const.REASON_INSUFFICIENT_POINTS
    assert err.value.translation_placeholders == {"shortfall": "20"}
    assert coordinator.snapshot is before


async def test_purchase_requires_pin_when_enabled(
    coordinator: StarHuntDataCoordinator,
) -> None:
    """The household can require the parent PIN for purchases."""
    coordinator.update_settings(pin=PARENT_PIN, require_pin_for_purchase=True)

    with pytest.raises(ServiceValidationError):
        coordinator.purchase_reward(SECOND_CHILD_ID, "1", now=NOW_MS)

    coordinator.purchase_reward(SECOND_CHILD_ID, "1", pin=PARENT_PIN, now=NOW_MS)
    assert coordinator.get_child(SECOND_CHILD_ID)[const.DATA_CHILD_POINTS] == 20


# ------------------------------------------------------------------------------
# Parent actions
# ------------------------------------------------------------------------------


async def test_wrong_pin_rejected(coordinator: StarHuntDataCoordinator) -> None:
    """Parent actions need the household PIN."""
    with pytest.raises(ServiceValidationError) as err:
        coordinator.adjust_points(CHILD_ID, 5, pin="0000")

    assert err.value.translation_key == const.TRANS_KEY_ERROR_WRONG_PIN
    assert coordinator.get_child(CHILD_ID)[const.DATA_CHILD_POINTS] == 10


async def test_adjust_points(coordinator: StarHuntDataCoordinator) -> None:
    """Points go up and down but never below zero."""
    coordinator.adjust_points(CHILD_ID, 7, pin=PARENT_PIN)
    coordinator.adjust_points(CHILD_ID, -17, pin=PARENT_PIN)
    assert coordinator.get_child(CHILD_ID)[const.DATA_CHILD_POINTS] == 0

    with pytest.raises(HomeAssistantError):
        coordinator.adjust_points(CHILD_ID, -1, pin=PARENT_PIN)


async def test_adjust_points_zero_is_invalid(
    coordinator: StarHuntDataCoordinator,
) -> None:
    """A zero adjustment is rejected as invalid input."""
    with pytest.raises(ServiceValidationError) as err:
        coordinator.adjust_points(CHILD_ID, 0, pin=PARENT_PIN)
    assert err.value.translation_key == const.REASON_INVALID_POINTS


async def test_add_and_remove_child(coordinator: StarHuntDataCoordinator) -> None:
    """A new child gets the default sets; the last child cannot be removed."""
    result = coordinator.add_child("Mia", "👶", pin=PARENT_PIN)
    new_id = result.created_id
    assert len(coordinator.get_child(new_id)[const.DATA_CHILD_TASKS]) == 3

    coordinator.remove_child(new_id, pin=PARENT_PIN)
    coordinator.remove_child(SECOND_CHILD_ID, pin=PARENT_PIN)

    with pytest.raises(ServiceValidationError) as err:
        coordinator.remove_child(CHILD_ID, pin=PARENT_PIN)
    assert err.value.translation_key == const.TRANS_KEY_ERROR_MUST_HAVE_ONE_CHILD
    assert [c[const.DATA_CHILD_ID] for c in coordinator.children_data] == [CHILD_ID]


async def test_add_task_validation_error(
    coordinator: StarHuntDataCoordinator,
) -> None:
    """Validation failures surface the field's translation key."""
    with pytest.raises(ServiceValidationError) as err:
        coordinator.add_task(CHILD_ID, "Dishes", "🍽", 500, pin=PARENT_PIN)
    assert err.value.translation_key == const.TRANS_KEY_ERROR_POINTS_RANGE


async def test_update_pin(coordinator: StarHuntDataCoordinator) -> None:
    """After a PIN change only the new PIN works."""
    coordinator.update_pin("2468", "2468", pin=PARENT_PIN)

    with pytest.raises(ServiceValidationError):
        coordinator.reset_all_tasks(CHILD_ID, pin=PARENT_PIN)
    coordinator.reset_all_tasks(CHILD_ID, pin="2468")


async def test_reset_all_data(coordinator: StarHuntDataCoordinator) -> None:
    """The household is wiped and the configured PIN restored."""
    coordinator.update_pin("2468", "2468", pin=PARENT_PIN)

    coordinator.reset_all_data(pin="2468")

    assert coordinator.children_data == []
    assert (
        coordinator.snapshot[const.DATA_SETTINGS][const.DATA_SETTINGS_PARENT_PIN]
        == PARENT_PIN
    )


# ------------------------------------------------------------------------------
# Auto-reset
# ------------------------------------------------------------------------------


async def test_auto_reset_after_window(coordinator: StarHuntDataCoordinator) -> None:
    """A completed task becomes available once the window has passed."""
    coordinator.complete_task(CHILD_ID, "1", now=NOW_MS)

    assert coordinator._run_auto_reset(NOW_MS + 24 * HOUR_MS - 1) is False
    assert _task(coordinator, CHILD_ID, "1")[const.DATA_TASK_COMPLETED] is True

    assert coordinator._run_auto_reset(NOW_MS + 24 * HOUR_MS) is True
    task = _task(coordinator, CHILD_ID, "1")
    assert task[const.DATA_TASK_COMPLETED] is False
    assert const.DATA_TASK_COMPLETED_AT not in task
    # Points are kept.
    assert coordinator.get_child(CHILD_ID)[const.DATA_CHILD_POINTS] == 15


async def test_immediate_reset_on_next_refresh(
    hass: HomeAssistant, coordinator: StarHuntDataCoordinator
) -> None:
    """With the window disabled the next refresh reverts the task."""
    coordinator.set_child_reset_mode(CHILD_ID, False, pin=PARENT_PIN)
    coordinator.complete_task(CHILD_ID, "1", now=NOW_MS)

    with patch(
        "custom_components.starhunt.coordinator.dt_now_ms",
        return_value=NOW_MS + 1,
    ):
        await coordinator.async_refresh()
        await hass.async_block_till_done()

    assert _task(coordinator, CHILD_ID, "1")[const.DATA_TASK_COMPLETED] is False
    assert _task(coordinator, SECOND_CHILD_ID, "1")[const.DATA_TASK_COMPLETED] is False


# ------------------------------------------------------------------------------
# Device sync
# ------------------------------------------------------------------------------


async def test_export_snapshot(coordinator: StarHuntDataCoordinator) -> None:
    """The export decodes back to the current snapshot."""
    export = coordinator.export_snapshot()

    assert sh.decode_payload(export[const.EXPORT_PAYLOAD]) == coordinator.snapshot
    assert export[const.EXPORT_SIZE_BYTES] == sh.payload_size_bytes(
        export[const.EXPORT_PAYLOAD]
    )
    assert export[const.EXPORT_CHANNELS][const.SYNC_CHANNEL_EMAIL] is True


async def test_import_snapshot_merges(coordinator: StarHuntDataCoordinator) -> None:
    """Points are summed and unknown children are added."""
    remote: dict[str, Any] = make_app_data(
        make_child(CHILD_ID, "Emma", 5),
        make_child("c9", "Ola", 3),
        parentPin="9999",
    )

    coordinator.import_snapshot(sh.encode_payload(remote), pin=PARENT_PIN)

    assert coordinator.get_child(CHILD_ID)[const.DATA_CHILD_POINTS] == 15
    assert coordinator.get_child("c9")[const.DATA_CHILD_NAME] == "Ola"
    assert (
        coordinator.snapshot[const.DATA_SETTINGS][const.DATA_SETTINGS_PARENT_PIN]
        == PARENT_PIN
    )


@pytest.mark.parametrize(
    "payload",
    [
        pytest.param("definitely not json", id="not_json"),
        pytest.param("[" * 100000 + "]" * 100000, id="deeply_nested"),
    ],
)
async def test_import_invalid_payload(
    coordinator: StarHuntDataCoordinator, payload: str
) -> None:
    """Undecodable text is rejected without touching the household."""
    before = coordinator.snapshot

    with pytest.raises(ServiceValidationError) as err:
        coordinator.import_snapshot(payload, pin=PARENT_PIN)

    assert err.value.translation_key == const.TRANS_KEY_ERROR_INVALID_PAYLOAD
    assert coordinator.snapshot is before


async def test_import_requires_pin(coordinator: StarHuntDataCoordinator) -> None:
    """A wrong PIN blocks the merge."""
    before = coordinator.snapshot
    payload = sh.encode_payload(make_app_data(make_child("c9", "Ola", 3)))

    with pytest.raises(ServiceValidationError) as err:
        coordinator.import_snapshot(payload, pin="0000")

    assert err.value.translation_key == const.TRANS_KEY_ERROR_WRONG_PIN
    assert coordinator.snapshot is before


async def test_unload_saves(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Unloading removes the entry data and services."""
    assert await hass.config_entries.async_unload(init_integration.entry_id)
    await hass.async_block_till_done()

    assert init_integration.entry_id not in hass.data[const.DOMAIN]
    assert not hass.services.has_service(const.DOMAIN, const.SERVICE_COMPLETE_TASK)

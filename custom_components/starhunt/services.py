# File: services.py
"""Defines custom services for the Star Hunt integration.

These services allow direct actions through scripts, automations and
dashboards: children complete tasks and buy rewards, parents administer the
household with the 4-digit PIN, and snapshots are exchanged with other
devices.

Children are addressed by child_id or child_name; tasks and rewards by id or
name within that child.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const
from .coordinator import StarHuntDataCoordinator

# --- Service Schemas ---
_CHILD_TARGET = {
    vol.Optional(const.FIELD_CHILD_ID): cv.string,
    vol.Optional(const.FIELD_CHILD_NAME): cv.string,
}
_TASK_TARGET = {
    vol.Optional(const.FIELD_TASK_ID): cv.string,
    vol.Optional(const.FIELD_TASK_NAME): cv.string,
}
_REWARD_TARGET = {
    vol.Optional(const.FIELD_REWARD_ID): cv.string,
    vol.Optional(const.FIELD_REWARD_NAME): cv.string,
}
_PIN = {vol.Required(const.FIELD_PIN): cv.string}


def _child_schema(extra: dict[Any, Any]) -> vol.All:
    """Schema for services acting on one child."""
    return vol.All(
        vol.Schema({**_CHILD_TARGET, **extra}),
        cv.has_at_least_one_key(const.FIELD_CHILD_ID, const.FIELD_CHILD_NAME),
    )


COMPLETE_TASK_SCHEMA = _child_schema(_TASK_TARGET)

PURCHASE_REWARD_SCHEMA = _child_schema(
    {**_REWARD_TARGET, vol.Optional(const.FIELD_PIN): cv.string}
)

ADJUST_POINTS_SCHEMA = _child_schema(
    {**_PIN, vol.Required(const.FIELD_POINTS): vol.Coerce(int)}
)

ADD_CHILD_SCHEMA = vol.Schema(
    {
        **_PIN,
        vol.Required(const.FIELD_NAME): cv.string,
        vol.Optional(const.FIELD_AVATAR, default=const.DEFAULT_CHILD_AVATAR): cv.string,
    }
)

REMOVE_CHILD_SCHEMA = _child_schema(_PIN)

ADD_TASK_SCHEMA = _child_schema(
    {
        **_PIN,
        vol.Required(const.FIELD_NAME): cv.string,
        vol.Optional(const.FIELD_ICON, default=const.DEFAULT_ITEM_ICON): cv.string,
        vol.Optional(const.FIELD_POINTS, default=const.DEFAULT_TASK_POINTS): vol.Coerce(
            int
        ),
    }
)

REMOVE_TASK_SCHEMA = _child_schema({**_PIN, **_TASK_TARGET})

ADD_REWARD_SCHEMA = _child_schema(
    {
        **_PIN,
        vol.Required(const.FIELD_NAME): cv.string,
        vol.Optional(const.FIELD_ICON, default=const.DEFAULT_ITEM_ICON): cv.string,
        vol.Optional(const.FIELD_COST, default=const.DEFAULT_REWARD_COST): vol.Coerce(
            int
        ),
    }
)

REMOVE_REWARD_SCHEMA = _child_schema({**_PIN, **_REWARD_TARGET})

RESET_TASK_SCHEMA = _child_schema({**_PIN, **_TASK_TARGET})

RESET_TASKS_SCHEMA = _child_schema(_PIN)

RESET_REWARD_SCHEMA = _child_schema({**_PIN, **_REWARD_TARGET})

RESET_REWARDS_SCHEMA = _child_schema(_PIN)

UPDATE_PIN_SCHEMA = vol.Schema(
    {
        **_PIN,
        vol.Required(const.FIELD_NEW_PIN): cv.string,
        vol.Required(const.FIELD_CONFIRM_PIN): cv.string,
    }
)

UPDATE_SETTINGS_SCHEMA = vol.Schema(
    {
        **_PIN,
        vol.Optional(const.FIELD_REQUIRE_PIN_FOR_PURCHASE): cv.boolean,
        vol.Optional(const.FIELD_ENABLE_24H_RESET): cv.boolean,
    }
)

SET_CHILD_RESET_MODE_SCHEMA = _child_schema(
    {**_PIN, vol.Required(const.FIELD_ENABLE_24H_RESET): cv.boolean}
)

RESET_ALL_DATA_SCHEMA = vol.Schema(_PIN)

IMPORT_SNAPSHOT_SCHEMA = vol.Schema(
    {**_PIN, vol.Required(const.FIELD_PAYLOAD): cv.string}
)

EXPORT_SNAPSHOT_SCHEMA = vol.Schema({})


def _get_coordinator(hass: HomeAssistant) -> StarHuntDataCoordinator:
    """Return the coordinator of the (single) loaded entry."""
    for entry_data in hass.data.get(const.DOMAIN, {}).values():
        return entry_data[const.COORDINATOR]
    const.LOGGER.warning("WARNING: No Star Hunt entry is loaded")
    raise HomeAssistantError("No Star Hunt entry is loaded")


def _resolve_child(coordinator: StarHuntDataCoordinator, call: ServiceCall) -> str:
    return coordinator.resolve_child_id(
        call.data.get(const.FIELD_CHILD_ID), call.data.get(const.FIELD_CHILD_NAME)
    )


def _resolve_task(
    coordinator: StarHuntDataCoordinator, child_id: str, call: ServiceCall
) -> str:
    return coordinator.resolve_item_id(
        child_id,
        const.DATA_CHILD_TASKS,
        call.data.get(const.FIELD_TASK_ID),
        call.data.get(const.FIELD_TASK_NAME),
    )


def _resolve_reward(
    coordinator: StarHuntDataCoordinator, child_id: str, call: ServiceCall
) -> str:
    return coordinator.resolve_item_id(
        child_id,
        const.DATA_CHILD_REWARDS,
        call.data.get(const.FIELD_REWARD_ID),
        call.data.get(const.FIELD_REWARD_NAME),
    )


def async_setup_services(hass: HomeAssistant) -> None:
    """Register Star Hunt services."""
    if hass.services.has_service(const.DOMAIN, const.SERVICE_COMPLETE_TASK):
        return

    # --- Child actions ---

    async def handle_complete_task(call: ServiceCall) -> None:
        """Handle a child completing a task."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        task_id = _resolve_task(coordinator, child_id, call)
        result = coordinator.complete_task(child_id, task_id)
        if result.reason == const.REASON_TASK_ALREADY_COMPLETED:
            const.LOGGER.debug(
                "DEBUG: Task '%s' already completed for child '%s'", task_id, child_id
            )
            return
        const.LOGGER.info(
            "INFO: Task '%s' completed by child '%s' (bonus: %s)",
            task_id,
            child_id,
            result.bonus_awarded,
        )

    async def handle_purchase_reward(call: ServiceCall) -> None:
        """Handle a child buying a reward."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        reward_id = _resolve_reward(coordinator, child_id, call)
        coordinator.purchase_reward(
            child_id, reward_id, pin=call.data.get(const.FIELD_PIN)
        )
        const.LOGGER.info(
            "INFO: Reward '%s' purchased by child '%s'", reward_id, child_id
        )

    # --- Parent actions ---

    async def handle_adjust_points(call: ServiceCall) -> None:
        """Handle a manual point adjustment."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        coordinator.adjust_points(
            child_id, call.data[const.FIELD_POINTS], pin=call.data[const.FIELD_PIN]
        )

    async def handle_add_child(call: ServiceCall) -> None:
        """Handle adding a child."""
        coordinator = _get_coordinator(hass)
        result = coordinator.add_child(
            call.data[const.FIELD_NAME],
            call.data[const.FIELD_AVATAR],
            pin=call.data[const.FIELD_PIN],
        )
        const.LOGGER.info("INFO: Added child '%s'", result.created_id)

    async def handle_remove_child(call: ServiceCall) -> None:
        """Handle removing a child."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        coordinator.remove_child(child_id, pin=call.data[const.FIELD_PIN])
        const.LOGGER.info("INFO: Removed child '%s'", child_id)

    async def handle_add_task(call: ServiceCall) -> None:
        """Handle adding a task to a child."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        coordinator.add_task(
            child_id,
            call.data[const.FIELD_NAME],
            call.data[const.FIELD_ICON],
            call.data[const.FIELD_POINTS],
            pin=call.data[const.FIELD_PIN],
        )

    async def handle_remove_task(call: ServiceCall) -> None:
        """Handle removing a task from a child."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        task_id = _resolve_task(coordinator, child_id, call)
        coordinator.remove_task(child_id, task_id, pin=call.data[const.FIELD_PIN])

    async def handle_add_reward(call: ServiceCall) -> None:
        """Handle adding a reward to a child."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        coordinator.add_reward(
            child_id,
            call.data[const.FIELD_NAME],
            call.data[const.FIELD_ICON],
            call.data[const.FIELD_COST],
            pin=call.data[const.FIELD_PIN],
        )

    async def handle_remove_reward(call: ServiceCall) -> None:
        """Handle removing a reward from a child."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        reward_id = _resolve_reward(coordinator, child_id, call)
        coordinator.remove_reward(child_id, reward_id, pin=call.data[const.FIELD_PIN])

    async def handle_reset_task(call: ServiceCall) -> None:
        """Handle resetting one task."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        task_id = _resolve_task(coordinator, child_id, call)
        coordinator.reset_task(child_id, task_id, pin=call.data[const.FIELD_PIN])

    async def handle_reset_tasks(call: ServiceCall) -> None:
        """Handle resetting all tasks of a child."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        coordinator.reset_all_tasks(child_id, pin=call.data[const.FIELD_PIN])

    async def handle_reset_reward(call: ServiceCall) -> None:
        """Handle resetting one reward."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        reward_id = _resolve_reward(coordinator, child_id, call)
        coordinator.reset_reward(child_id, reward_id, pin=call.data[const.FIELD_PIN])

    async def handle_reset_rewards(call: ServiceCall) -> None:
        """Handle resetting all rewards of a child."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        coordinator.reset_all_rewards(child_id, pin=call.data[const.FIELD_PIN])

    async def handle_update_pin(call: ServiceCall) -> None:
        """Handle changing the parent PIN."""
        coordinator = _get_coordinator(hass)
        coordinator.update_pin(
            call.data[const.FIELD_NEW_PIN],
            call.data[const.FIELD_CONFIRM_PIN],
            pin=call.data[const.FIELD_PIN],
        )

    async def handle_update_settings(call: ServiceCall) -> None:
        """Handle changing household settings."""
        coordinator = _get_coordinator(hass)
        coordinator.update_settings(
            pin=call.data[const.FIELD_PIN],
            require_pin_for_purchase=call.data.get(
                const.FIELD_REQUIRE_PIN_FOR_PURCHASE
            ),
            enable_24h_reset=call.data.get(const.FIELD_ENABLE_24H_RESET),
        )

    async def handle_set_child_reset_mode(call: ServiceCall) -> None:
        """Handle switching a child's reset mode."""
        coordinator = _get_coordinator(hass)
        child_id = _resolve_child(coordinator, call)
        coordinator.set_child_reset_mode(
            child_id,
            call.data[const.FIELD_ENABLE_24H_RESET],
            pin=call.data[const.FIELD_PIN],
        )

    async def handle_reset_all_data(call: ServiceCall) -> None:
        """Handle wiping the household."""
        coordinator = _get_coordinator(hass)
        coordinator.reset_all_data(pin=call.data[const.FIELD_PIN])

    # --- Device sync ---

    async def handle_import_snapshot(call: ServiceCall) -> None:
        """Handle merging a snapshot from another device."""
        coordinator = _get_coordinator(hass)
        coordinator.import_snapshot(
            call.data[const.FIELD_PAYLOAD], pin=call.data[const.FIELD_PIN]
        )

    async def handle_export_snapshot(call: ServiceCall) -> ServiceResponse:
        """Handle encoding the household for another device."""
        coordinator = _get_coordinator(hass)
        return dict(coordinator.export_snapshot())

    # --- Register Services ---
    services: list[tuple[str, Any, Any]] = [
        (const.SERVICE_COMPLETE_TASK, handle_complete_task, COMPLETE_TASK_SCHEMA),
        (const.SERVICE_PURCHASE_REWARD, handle_purchase_reward, PURCHASE_REWARD_SCHEMA),
        (const.SERVICE_ADJUST_POINTS, handle_adjust_points, ADJUST_POINTS_SCHEMA),
        (const.SERVICE_ADD_CHILD, handle_add_child, ADD_CHILD_SCHEMA),
        (const.SERVICE_REMOVE_CHILD, handle_remove_child, REMOVE_CHILD_SCHEMA),
        (const.SERVICE_ADD_TASK, handle_add_task, ADD_TASK_SCHEMA),
        (const.SERVICE_REMOVE_TASK, handle_remove_task, REMOVE_TASK_SCHEMA),
        (const.SERVICE_ADD_REWARD, handle_add_reward, ADD_REWARD_SCHEMA),
        (const.SERVICE_REMOVE_REWARD, handle_remove_reward, REMOVE_REWARD_SCHEMA),
        (const.SERVICE_RESET_TASK, handle_reset_task, RESET_TASK_SCHEMA),
        (const.SERVICE_RESET_TASKS, handle_reset_tasks, RESET_TASKS_SCHEMA),
        (const.SERVICE_RESET_REWARD, handle_reset_reward, RESET_REWARD_SCHEMA),
        (const.SERVICE_RESET_REWARDS, handle_reset_rewards, RESET_REWARDS_SCHEMA),
        (const.SERVICE_UPDATE_PIN, handle_update_pin, UPDATE_PIN_SCHEMA),
        (const.SERVICE_UPDATE_SETTINGS, handle_update_settings, UPDATE_SETTINGS_SCHEMA),
        (
            const.SERVICE_SET_CHILD_RESET_MODE,
            handle_set_child_reset_mode,
            SET_CHILD_RESET_MODE_SCHEMA,
        ),
        (const.SERVICE_RESET_ALL_DATA, handle_reset_all_data, RESET_ALL_DATA_SCHEMA),
        (const.SERVICE_IMPORT_SNAPSHOT, handle_import_snapshot, IMPORT_SNAPSHOT_SCHEMA),
    ]
    for service, handler, schema in services:
        hass.services.async_register(const.DOMAIN, service, handler, schema=schema)

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_EXPORT_SNAPSHOT,
        handle_export_snapshot,
        schema=EXPORT_SNAPSHOT_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )

    const.LOGGER.info("INFO: Star Hunt services have been registered successfully")


ALL_SERVICES = [
    const.SERVICE_COMPLETE_TASK,
    const.SERVICE_PURCHASE_REWARD,
    const.SERVICE_ADJUST_POINTS,
    const.SERVICE_ADD_CHILD,
    const.SERVICE_REMOVE_CHILD,
    const.SERVICE_ADD_TASK,
    const.SERVICE_REMOVE_TASK,
    const.SERVICE_ADD_REWARD,
    const.SERVICE_REMOVE_REWARD,
    const.SERVICE_RESET_TASK,
    const.SERVICE_RESET_TASKS,
    const.SERVICE_RESET_REWARD,
    const.SERVICE_RESET_REWARDS,
    const.SERVICE_UPDATE_PIN,
    const.SERVICE_UPDATE_SETTINGS,
    const.SERVICE_SET_CHILD_RESET_MODE,
    const.SERVICE_RESET_ALL_DATA,
    const.SERVICE_IMPORT_SNAPSHOT,
    const.SERVICE_EXPORT_SNAPSHOT,
]


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister Star Hunt services when unloading the integration."""
    for service in ALL_SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: Star Hunt services have been unregistered")

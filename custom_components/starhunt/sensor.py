# File: sensor.py
"""Sensors for the Star Hunt integration.

One points sensor per child. The state is the child's current balance; the
attributes carry what a dashboard card needs to render the child's page
(task/reward progress, recent activity, reset mode).

Children added later through services get their sensor on the next
coordinator update; sensors of removed children report unavailable.
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .coordinator import StarHuntDataCoordinator
from .engines import ActivityEngine, ResetEngine
from .entity import StarHuntCoordinatorEntity
from .helpers.device_helpers import create_child_device_info


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for Star Hunt integration."""
    coordinator: StarHuntDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    known_ids: set[str] = set()

    @callback
    def _async_add_new_children() -> None:
        entities = []
        for child in coordinator.children_data:
            child_id = child[const.DATA_CHILD_ID]
            if child_id in known_ids:
                continue
            known_ids.add(child_id)
            entities.append(
                ChildPointsSensor(
                    coordinator, entry, child_id, child[const.DATA_CHILD_NAME]
                )
            )
        if entities:
            const.LOGGER.debug("DEBUG: Adding %s child points sensor(s)", len(entities))
            async_add_entities(entities)

    _async_add_new_children()
    entry.async_on_unload(coordinator.async_add_listener(_async_add_new_children))


class ChildPointsSensor(StarHuntCoordinatorEntity, SensorEntity):
    """Sensor for a child's points balance."""

    _attr_has_entity_name = True
    _attr_translation_key = const.TRANS_KEY_SENSOR_CHILD_POINTS
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_icon = const.DEFAULT_POINTS_ICON

    def __init__(
        self,
        coordinator: StarHuntDataCoordinator,
        entry: ConfigEntry,
        child_id: str,
        child_name: str,
    ) -> None:
        """Initialize the sensor.

        Args:
            coordinator: StarHuntDataCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            child_id: Unique identifier for the child.
            child_name: Display name of the child (used for the device).
        """
        super().__init__(coordinator)
        self._child_id = child_id
        self._attr_unique_id = (
            f"{entry.entry_id}_{child_id}{const.SENSOR_UID_SUFFIX_CHILD_POINTS}"
        )
        self._attr_device_info = create_child_device_info(child_id, child_name, entry)

    @property
    def _child(self) -> dict[str, Any] | None:
        return self.coordinator.get_child(self._child_id)  # type: ignore[return-value]

    @property
    def available(self) -> bool:
        """Unavailable once the child has been removed."""
        return super().available and self._child is not None

    @property
    def native_value(self) -> int | None:
        """Return the child's points."""
        child = self._child
        if child is None:
            return None
        return child.get(const.DATA_CHILD_POINTS, const.DEFAULT_ZERO)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose task, reward and activity details for dashboards."""
        child = self._child
        if child is None:
            return {}

        tasks = child.get(const.DATA_CHILD_TASKS, [])
        rewards = child.get(const.DATA_CHILD_REWARDS, [])
        settings = self.coordinator.snapshot.get(const.DATA_SETTINGS, {})
        reset_mode = (
            const.RESET_MODE_WINDOW
            if ResetEngine.is_window_enabled(child, settings)
            else const.RESET_MODE_IMMEDIATE
        )
        return {
            const.ATTR_CHILD_NAME: child.get(const.DATA_CHILD_NAME),
            const.ATTR_AVATAR: child.get(const.DATA_CHILD_AVATAR),
            const.ATTR_TASKS_COMPLETED: sum(
                1 for t in tasks if t.get(const.DATA_TASK_COMPLETED)
            ),
            const.ATTR_TASKS_TOTAL: len(tasks),
            const.ATTR_REWARDS_PURCHASED: sum(
                1 for r in rewards if r.get(const.DATA_REWARD_PURCHASED)
            ),
            const.ATTR_RECENT_ACTIVITIES: ActivityEngine.recent_activities(child),
            const.ATTR_BONUS_LAST_AWARDED_AT: child.get(
                const.DATA_CHILD_BONUS_LAST_AWARDED_AT
            ),
            const.ATTR_RESET_MODE: reset_mode,
        }

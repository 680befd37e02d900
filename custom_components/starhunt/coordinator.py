# File: coordinator.py
"""Coordinator for the Star Hunt integration.

Holds the household snapshot as the single source of truth and routes every
change through the pure engines:

- Periodic refresh (sub-second) runs the auto-reset of expired tasks/rewards
- Task completion and reward purchase for children
- Parent-mode administration (PIN protected)
- Snapshot import (merge) and export for device-to-device transfer

Engines return a new snapshot; the coordinator swaps it in, persists it and
notifies entities. Engine rejections are raised as Home Assistant errors.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import const, data_builders as db
from .engines import (
    ActionResult,
    ActivityEngine,
    HouseholdEngine,
    MergeEngine,
    ResetEngine,
)
from .helpers import sync_helpers as sh
from .migration import sanitize_app_data
from .utils.dt_utils import dt_now_ms, hours_to_ms
from .utils.snapshot_utils import find_child

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .store import StarHuntStore
    from .type_defs import AppData, ChildData, ExportResponse

# Reasons that mean "the caller sent something that does not exist or is not
# allowed right now" rather than malformed input.
_PRECONDITION_REASONS = frozenset(
    {
        const.REASON_CHILD_NOT_FOUND,
        const.REASON_TASK_NOT_FOUND,
        const.REASON_REWARD_NOT_FOUND,
        const.REASON_REWARD_ALREADY_PURCHASED,
        const.REASON_INSUFFICIENT_POINTS,
    }
)


class StarHuntDataCoordinator(DataUpdateCoordinator["AppData"]):
    """Coordinator for Star Hunt integration.

    Every public mutator accepts an optional ``now`` (epoch ms) so tests can
    pin the clock; production callers leave it unset.
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: StarHuntStore,
    ) -> None:
        """Initialize the StarHuntDataCoordinator."""
        scan_interval_ms = config_entry.options.get(
            const.CONF_SCAN_INTERVAL_MS, const.DEFAULT_SCAN_INTERVAL_MS
        )
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(milliseconds=scan_interval_ms),
            always_update=False,
        )
        self.store = store
        self._data: AppData = db.default_app_data()

    # -------------------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------------------

    @property
    def language(self) -> str:
        """Language for default tasks and rewards."""
        return self.config_entry.options.get(
            const.CONF_LANGUAGE,
            self.config_entry.data.get(const.CONF_LANGUAGE, const.DEFAULT_LANGUAGE),
        )

    @property
    def reset_window_ms(self) -> int:
        """Reset threshold for children using the reset window."""
        return hours_to_ms(
            self.config_entry.options.get(
                const.CONF_RESET_WINDOW_HOURS, const.DEFAULT_RESET_WINDOW_HOURS
            )
        )

    @property
    def bonus_points(self) -> int:
        """Points granted when the completion bonus triggers."""
        return int(
            self.config_entry.options.get(
                const.CONF_BONUS_POINTS, const.DEFAULT_BONUS_POINTS
            )
        )

    @property
    def bonus_task_target(self) -> int:
        """Completions needed within the bonus window."""
        return int(
            self.config_entry.options.get(
                const.CONF_BONUS_TASK_TARGET, const.DEFAULT_BONUS_TASK_TARGET
            )
        )

    # -------------------------------------------------------------------------------------
    # Data Accessors
    # -------------------------------------------------------------------------------------

    @property
    def snapshot(self) -> AppData:
        """Return the current household snapshot (treat as read-only)."""
        return self._data

    @property
    def children_data(self) -> list[ChildData]:
        """Return the list of children."""
        return self._data[const.DATA_CHILDREN]

    def get_child(self, child_id: str) -> ChildData | None:
        """Return a child by id, or None."""
        return find_child(self._data, child_id)  # type: ignore[return-value]

    def resolve_child_id(
        self, child_id: str | None = None, child_name: str | None = None
    ) -> str:
        """Return the id of the child named by id or (case-insensitive) name.

        Raises:
            ServiceValidationError: Neither id nor name given.
            HomeAssistantError: No such child.
        """
        if not child_id and not child_name:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_MISSING_TARGET,
            )
        for child in self.children_data:
            if child_id and child[const.DATA_CHILD_ID] == child_id:
                return child_id
            if (
                not child_id
                and child_name
                and child[const.DATA_CHILD_NAME].casefold() == child_name.casefold()
            ):
                return child[const.DATA_CHILD_ID]
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.REASON_CHILD_NOT_FOUND,
        )

    def resolve_item_id(
        self,
        child_id: str,
        list_key: str,
        item_id: str | None = None,
        item_name: str | None = None,
    ) -> str:
        """Return the id of a child's task/reward named by id or name.

        Unknown ids are passed through so the engine reports them.
        """
        if item_id:
            return item_id
        if not item_name:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_MISSING_TARGET,
            )
        child = self.get_child(child_id) or {}
        for item in child.get(list_key, []):
            if item[const.DATA_TASK_NAME].casefold() == item_name.casefold():
                return item[const.DATA_TASK_ID]
        reason = (
            const.REASON_TASK_NOT_FOUND
            if list_key == const.DATA_CHILD_TASKS
            else const.REASON_REWARD_NOT_FOUND
        )
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=reason,
        )

    # -------------------------------------------------------------------------------------
    # Periodic + First Refresh
    # -------------------------------------------------------------------------------------

    async def async_config_entry_first_refresh(self) -> None:
        """Load from storage, sanitize, then run the first reset tick."""
        raw = self.store.data
        if raw is None:
            const.LOGGER.info("INFO: Creating a new household")
            data = db.default_app_data(
                self.config_entry.data.get(const.CONF_PARENT_PIN)
            )
        else:
            data = sanitize_app_data(raw, self.language)
        data = db.translate_default_items(data, self.language)

        self._data = data
        if data != raw:
            self._persist()
        await super().async_config_entry_first_refresh()

    async def _async_update_data(self) -> AppData:
        """Periodic update: revert tasks/rewards whose reset time has passed."""
        self._run_auto_reset(dt_now_ms())
        return self._data

    def _run_auto_reset(self, now: int) -> bool:
        """Apply auto-reset at now; return True if anything was reverted."""
        new_data = ResetEngine.auto_reset(
            self._data, now, window_ms=self.reset_window_ms
        )
        if new_data is self._data:
            return False
        const.LOGGER.debug("DEBUG: Auto-reset reverted expired tasks/rewards")
        self._data = new_data
        self._persist()
        return True

    # -------------------------------------------------------------------------------------
    # Result Handling
    # -------------------------------------------------------------------------------------

    def _apply(self, result: ActionResult) -> ActionResult:
        """Adopt a successful result or raise for a rejected one."""
        if not result.success:
            self._raise_for(result)
        if result.data is not self._data:
            self._data = result.data
            self._persist()
            self.async_set_updated_data(self._data)
        return result

    @staticmethod
    def _raise_for(result: ActionResult) -> None:
        """Translate an engine rejection into a Home Assistant exception."""
        if result.reason == const.REASON_VALIDATION_FAILED:
            translation_key = next(iter(result.errors.values()))
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=translation_key,
            )
        if result.reason == const.REASON_INVALID_POINTS:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.REASON_INVALID_POINTS,
            )
        if result.reason == const.REASON_INSUFFICIENT_POINTS:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.REASON_INSUFFICIENT_POINTS,
                translation_placeholders={"shortfall": str(result.shortfall)},
            )
        if result.reason in _PRECONDITION_REASONS:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=result.reason,
            )
        raise HomeAssistantError(f"Action rejected: {result.reason}")

    def _require_pin(self, pin: Any) -> None:
        if not HouseholdEngine.verify_pin(self._data, pin):
            const.LOGGER.warning("WARNING: Rejected parent action with wrong PIN")
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_WRONG_PIN,
            )

    # -------------------------------------------------------------------------------------
    # Child Actions
    # -------------------------------------------------------------------------------------

    def complete_task(
        self, child_id: str, task_id: str, *, now: int | None = None
    ) -> ActionResult:
        """Mark a task completed for a child and award points (and bonus)."""
        now = dt_now_ms() if now is None else now
        result = self._apply(
            ActivityEngine.complete_task(
                self._data,
                child_id,
                task_id,
                now,
                bonus_points=self.bonus_points,
                bonus_task_target=self.bonus_task_target,
            )
        )
        if result.bonus_awarded:
            const.LOGGER.info(
                "INFO: Child '%s' earned a %s point bonus", child_id, result.bonus_awarded
            )
        return result

    def purchase_reward(
        self,
        child_id: str,
        reward_id: str,
        *,
        pin: str | None = None,
        now: int | None = None,
    ) -> ActionResult:
        """Buy a reward; the PIN is required only when the household asks for it."""
        if self._data[const.DATA_SETTINGS].get(
            const.DATA_SETTINGS_REQUIRE_PIN_FOR_PURCHASE
        ):
            self._require_pin(pin)
        now = dt_now_ms() if now is None else now
        return self._apply(
            ActivityEngine.purchase_reward(self._data, child_id, reward_id, now)
        )

    # -------------------------------------------------------------------------------------
    # Parent Actions (PIN protected)
    # -------------------------------------------------------------------------------------

    def adjust_points(self, child_id: str, delta: int, *, pin: str) -> ActionResult:
        """Add or deduct points by hand."""
        self._require_pin(pin)
        return self._apply(ActivityEngine.adjust_points(self._data, child_id, delta))

    def add_child(self, name: str, avatar: str, *, pin: str) -> ActionResult:
        """Add a child with the default tasks and rewards."""
        self._require_pin(pin)
        return self._apply(
            HouseholdEngine.add_child(self._data, name, avatar, self.language)
        )

    def remove_child(self, child_id: str, *, pin: str) -> ActionResult:
        """Remove a child; the last remaining child cannot be removed."""
        self._require_pin(pin)
        if self.get_child(child_id) is not None and len(self.children_data) <= 1:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_MUST_HAVE_ONE_CHILD,
            )
        return self._apply(HouseholdEngine.remove_child(self._data, child_id))

    def add_task(
        self, child_id: str, name: str, icon: str, points: int, *, pin: str
    ) -> ActionResult:
        """Add a task to a child."""
        self._require_pin(pin)
        return self._apply(
            HouseholdEngine.add_task(self._data, child_id, name, icon, points)
        )

    def remove_task(self, child_id: str, task_id: str, *, pin: str) -> ActionResult:
        """Remove a task from a child."""
        self._require_pin(pin)
        return self._apply(HouseholdEngine.remove_task(self._data, child_id, task_id))

    def add_reward(
        self, child_id: str, name: str, icon: str, cost: int, *, pin: str
    ) -> ActionResult:
        """Add a reward to a child."""
        self._require_pin(pin)
        return self._apply(
            HouseholdEngine.add_reward(self._data, child_id, name, icon, cost)
        )

    def remove_reward(
        self, child_id: str, reward_id: str, *, pin: str
    ) -> ActionResult:
        """Remove a reward from a child."""
        self._require_pin(pin)
        return self._apply(
            HouseholdEngine.remove_reward(self._data, child_id, reward_id)
        )

    def reset_task(self, child_id: str, task_id: str, *, pin: str) -> ActionResult:
        """Make one task available again."""
        self._require_pin(pin)
        return self._apply(ResetEngine.reset_task(self._data, child_id, task_id))

    def reset_all_tasks(self, child_id: str, *, pin: str) -> ActionResult:
        """Make all of a child's tasks available again."""
        self._require_pin(pin)
        return self._apply(ResetEngine.reset_all_tasks(self._data, child_id))

    def reset_reward(
        self, child_id: str, reward_id: str, *, pin: str
    ) -> ActionResult:
        """Make one reward available again."""
        self._require_pin(pin)
        return self._apply(ResetEngine.reset_reward(self._data, child_id, reward_id))

    def reset_all_rewards(self, child_id: str, *, pin: str) -> ActionResult:
        """Make all of a child's rewards available again."""
        self._require_pin(pin)
        return self._apply(ResetEngine.reset_all_rewards(self._data, child_id))

    def update_pin(self, new_pin: str, confirm_pin: str, *, pin: str) -> ActionResult:
        """Change the household PIN."""
        self._require_pin(pin)
        result = self._apply(HouseholdEngine.update_pin(self._data, new_pin, confirm_pin))
        const.LOGGER.info("INFO: Parent PIN changed")
        return result

    def update_settings(
        self,
        *,
        pin: str,
        require_pin_for_purchase: bool | None = None,
        enable_24h_reset: bool | None = None,
    ) -> ActionResult:
        """Change household flags."""
        self._require_pin(pin)
        return self._apply(
            HouseholdEngine.update_settings(
                self._data,
                require_pin_for_purchase=require_pin_for_purchase,
                enable_24h_reset=enable_24h_reset,
            )
        )

    def set_child_reset_mode(
        self, child_id: str, enable_24h_reset: bool, *, pin: str
    ) -> ActionResult:
        """Switch one child between the reset window and immediate reset."""
        self._require_pin(pin)
        return self._apply(
            HouseholdEngine.set_child_reset_mode(self._data, child_id, enable_24h_reset)
        )

    def reset_all_data(self, *, pin: str) -> None:
        """Wipe the household and start over with the configured PIN."""
        self._require_pin(pin)
        const.LOGGER.warning("WARNING: Resetting all Star Hunt data")
        self._data = db.default_app_data(
            self.config_entry.data.get(const.CONF_PARENT_PIN)
        )
        self._persist()
        self.async_set_updated_data(self._data)

    # -------------------------------------------------------------------------------------
    # Device Sync
    # -------------------------------------------------------------------------------------

    def import_snapshot(self, payload: str, *, pin: str) -> None:
        """Merge a snapshot received from another device into the local one."""
        self._require_pin(pin)
        raw = sh.decode_payload(payload)
        if raw is None:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_PAYLOAD,
            )
        remote = sanitize_app_data(raw, self.language)
        merged = MergeEngine.merge(self._data, remote)
        const.LOGGER.info(
            "INFO: Imported snapshot with %s children (now %s)",
            len(remote[const.DATA_CHILDREN]),
            len(merged[const.DATA_CHILDREN]),
        )
        self._data = merged
        self._persist()
        self.async_set_updated_data(self._data)

    def export_snapshot(self) -> ExportResponse:
        """Encode the current snapshot for transfer to another device."""
        payload = sh.encode_payload(self._data)
        size = sh.payload_size_bytes(payload)
        return {
            const.EXPORT_PAYLOAD: payload,
            const.EXPORT_URL_PARAM: sh.encode_url_param(self._data),
            const.EXPORT_SIZE_BYTES: size,
            const.EXPORT_CHANNELS: sh.channel_report(size),
        }  # type: ignore[return-value]

    # -------------------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------------------

    def _persist(self) -> None:
        """Save to persistent storage."""
        self.store.set_data(self._data)  # type: ignore[arg-type]
        self.hass.add_job(self.store.async_save)

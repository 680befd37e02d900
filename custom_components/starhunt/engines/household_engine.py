"""Household Engine - Pure logic for parent-mode administration.

This engine provides stateless, pure Python functions for:
- Adding and removing children
- Adding and removing a child's tasks and rewards
- Household settings (PIN, purchase PIN requirement, reset policy)
- Per-child reset mode

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Field validation lives in data_builders; a failed validation comes back as
ActionResult(reason=validation_failed, errors={field: translation_key}).
PIN verification for admin calls happens in the coordinator, before any of
these are called.
"""

from __future__ import annotations

import hmac
from typing import TYPE_CHECKING, Any

from .. import const
from .. import data_builders as db
from ..utils.snapshot_utils import find_child, find_item, replace_child
from .action_result import ActionResult

if TYPE_CHECKING:
    from ..type_defs import AppData


class HouseholdEngine:
    """Pure logic engine for household administration."""

    # =========================================================================
    # PIN
    # =========================================================================

    @staticmethod
    def verify_pin(data: AppData, pin: Any) -> bool:
        """Return True if pin equals the household PIN."""
        expected = data.get(const.DATA_SETTINGS, {}).get(
            const.DATA_SETTINGS_PARENT_PIN, const.DEFAULT_PARENT_PIN
        )
        if not isinstance(pin, str) or not isinstance(expected, str):
            return False
        return hmac.compare_digest(pin.encode(), expected.encode())

    @staticmethod
    def update_pin(data: AppData, new_pin: Any, confirm_pin: Any) -> ActionResult:
        """Replace the household PIN (4 digits, confirmed)."""
        errors = db.validate_pin_data(new_pin, confirm_pin)
        if errors:
            return ActionResult.rejected(
                data, const.REASON_VALIDATION_FAILED, errors=errors
            )
        settings = {
            **data.get(const.DATA_SETTINGS, {}),
            const.DATA_SETTINGS_PARENT_PIN: new_pin,
        }
        return ActionResult(data={**data, const.DATA_SETTINGS: settings})

    # =========================================================================
    # SETTINGS
    # =========================================================================

    @staticmethod
    def update_settings(
        data: AppData,
        *,
        require_pin_for_purchase: bool | None = None,
        enable_24h_reset: bool | None = None,
    ) -> ActionResult:
        """Update household flags; None leaves a flag unchanged.

        The reset policy is applied to every child as well, replacing earlier
        per-child overrides. set_child_reset_mode can override it again.
        """
        settings = dict(data.get(const.DATA_SETTINGS, {}))
        children = data.get(const.DATA_CHILDREN, [])
        if require_pin_for_purchase is not None:
            settings[const.DATA_SETTINGS_REQUIRE_PIN_FOR_PURCHASE] = bool(
                require_pin_for_purchase
            )
        if enable_24h_reset is not None:
            enabled = bool(enable_24h_reset)
            settings[const.DATA_SETTINGS_ENABLE_24H_RESET] = enabled
            children = [
                child
                if child.get(const.DATA_CHILD_ENABLE_24H_RESET) is enabled
                else {**child, const.DATA_CHILD_ENABLE_24H_RESET: enabled}
                for child in children
            ]
        if settings == data.get(const.DATA_SETTINGS, {}) and all(
            new is old
            for new, old in zip(children, data.get(const.DATA_CHILDREN, []))
        ):
            return ActionResult(data=data)
        return ActionResult(
            data={**data, const.DATA_SETTINGS: settings, const.DATA_CHILDREN: children}
        )

    @staticmethod
    def set_child_reset_mode(
        data: AppData, child_id: str, enable_24h_reset: bool
    ) -> ActionResult:
        """Override the reset policy for one child."""
        child = find_child(data, child_id)
        if child is None:
            return ActionResult.rejected(data, const.REASON_CHILD_NOT_FOUND)
        if child.get(const.DATA_CHILD_ENABLE_24H_RESET) is bool(enable_24h_reset):
            return ActionResult(data=data)
        new_child = {**child, const.DATA_CHILD_ENABLE_24H_RESET: bool(enable_24h_reset)}
        return ActionResult(data=replace_child(data, child_id, new_child))

    # =========================================================================
    # CHILDREN
    # =========================================================================

    @staticmethod
    def add_child(
        data: AppData, name: Any, avatar: Any, language: str | None
    ) -> ActionResult:
        """Append a new child with the language default tasks and rewards.

        The new child inherits the household reset policy.
        """
        errors = db.validate_child_data(name, avatar)
        if errors:
            return ActionResult.rejected(
                data, const.REASON_VALIDATION_FAILED, errors=errors
            )
        child = db.build_child(name, avatar, language)
        child[const.DATA_CHILD_ENABLE_24H_RESET] = (  # type: ignore[typeddict-item]
            data.get(const.DATA_SETTINGS, {}).get(const.DATA_SETTINGS_ENABLE_24H_RESET)
            is not False
        )
        children = [*data.get(const.DATA_CHILDREN, []), child]
        return ActionResult(
            data={**data, const.DATA_CHILDREN: children},
            created_id=child[const.DATA_CHILD_ID],
        )

    @staticmethod
    def remove_child(data: AppData, child_id: str) -> ActionResult:
        """Remove a child and everything it owns.

        Refusing to remove the last child is a coordinator concern.
        """
        if find_child(data, child_id) is None:
            return ActionResult.rejected(data, const.REASON_CHILD_NOT_FOUND)
        children = [
            child
            for child in data.get(const.DATA_CHILDREN, [])
            if child.get(const.DATA_CHILD_ID) != child_id
        ]
        return ActionResult(data={**data, const.DATA_CHILDREN: children})

    # =========================================================================
    # TASKS / REWARDS
    # =========================================================================

    @staticmethod
    def add_task(
        data: AppData, child_id: str, name: Any, icon: Any, points: Any
    ) -> ActionResult:
        """Append a new task to a child."""
        errors = db.validate_task_data(name, icon, points)
        if errors:
            return ActionResult.rejected(
                data, const.REASON_VALIDATION_FAILED, errors=errors
            )
        return HouseholdEngine._append_item(
            data, child_id, const.DATA_CHILD_TASKS, db.build_task(name, icon, points)
        )

    @staticmethod
    def add_reward(
        data: AppData, child_id: str, name: Any, icon: Any, cost: Any
    ) -> ActionResult:
        """Append a new reward to a child."""
        errors = db.validate_reward_data(name, icon, cost)
        if errors:
            return ActionResult.rejected(
                data, const.REASON_VALIDATION_FAILED, errors=errors
            )
        return HouseholdEngine._append_item(
            data, child_id, const.DATA_CHILD_REWARDS, db.build_reward(name, icon, cost)
        )

    @staticmethod
    def remove_task(data: AppData, child_id: str, task_id: str) -> ActionResult:
        """Delete a task from a child. Activity history is kept."""
        return HouseholdEngine._remove_item(
            data, child_id, task_id, const.DATA_CHILD_TASKS, const.REASON_TASK_NOT_FOUND
        )

    @staticmethod
    def remove_reward(data: AppData, child_id: str, reward_id: str) -> ActionResult:
        """Delete a reward from a child. Activity history is kept."""
        return HouseholdEngine._remove_item(
            data,
            child_id,
            reward_id,
            const.DATA_CHILD_REWARDS,
            const.REASON_REWARD_NOT_FOUND,
        )

    @staticmethod
    def _append_item(
        data: AppData, child_id: str, list_key: str, item: dict[str, Any]
    ) -> ActionResult:
        child = find_child(data, child_id)
        if child is None:
            return ActionResult.rejected(data, const.REASON_CHILD_NOT_FOUND)
        new_child = {**child, list_key: [*child.get(list_key, []), item]}
        return ActionResult(
            data=replace_child(data, child_id, new_child),
            created_id=item[const.DATA_TASK_ID],
        )

    @staticmethod
    def _remove_item(
        data: AppData,
        child_id: str,
        item_id: str,
        list_key: str,
        not_found_reason: str,
    ) -> ActionResult:
        child = find_child(data, child_id)
        if child is None:
            return ActionResult.rejected(data, const.REASON_CHILD_NOT_FOUND)
        items = child.get(list_key, [])
        if find_item(items, item_id) is None:
            return ActionResult.rejected(data, not_found_reason)
        new_child = {
            **child,
            list_key: [i for i in items if i.get(const.DATA_TASK_ID) != item_id],
        }
        return ActionResult(data=replace_child(data, child_id, new_child))

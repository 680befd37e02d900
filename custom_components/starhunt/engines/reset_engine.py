"""Reset Engine - Pure logic for reverting completed tasks and purchased rewards.

This engine provides stateless, pure Python functions for:
- Resolving each child's reset window (24 h window or immediate)
- Time-based auto-reset of completed tasks / purchased rewards
- Manual resets from parent mode (one item or all items of a child)

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data and never
mutate it. The coordinator polls auto_reset on a short interval; the engine
itself owns no timers.

completedAt / purchasedAt are the only source of truth for expiry. An item
marked done without a timestamp (older data) never expires on its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import is_epoch_ms
from ..utils.snapshot_utils import find_child, find_item, replace_child, replace_item, without_key
from .action_result import ActionResult

if TYPE_CHECKING:
    from ..type_defs import AppData, ChildData, SettingsData


class ResetEngine:
    """Pure logic engine for task/reward resets.

    All methods are static - no instance state. This enables easy unit testing
    without any Home Assistant mocking.
    """

    # =========================================================================
    # THRESHOLDS
    # =========================================================================

    @staticmethod
    def is_window_enabled(
        child: ChildData | dict[str, Any], settings: SettingsData | dict[str, Any]
    ) -> bool:
        """Return True if the child uses the long reset window.

        A boolean enable24hReset on the child wins; otherwise the global
        setting applies, where anything other than an explicit False enables it.
        """
        child_flag = child.get(const.DATA_CHILD_ENABLE_24H_RESET)
        if isinstance(child_flag, bool):
            return child_flag
        return settings.get(const.DATA_SETTINGS_ENABLE_24H_RESET) is not False

    @staticmethod
    def resolve_reset_window(
        child: ChildData | dict[str, Any],
        settings: SettingsData | dict[str, Any],
        window_ms: int = const.RESET_WINDOW_MS,
        immediate_ms: int = const.RESET_IMMEDIATE_MS,
    ) -> int:
        """Return the effective reset threshold for a child in milliseconds."""
        if ResetEngine.is_window_enabled(child, settings):
            return window_ms
        return immediate_ms

    @staticmethod
    def is_expired(stamp: Any, now: int, threshold_ms: int) -> bool:
        """Return True if an item stamped at stamp should reset at now.

        Missing or non-numeric stamps never expire.
        """
        if not is_epoch_ms(stamp):
            return False
        return now - stamp >= threshold_ms

    # =========================================================================
    # AUTO RESET
    # =========================================================================

    @staticmethod
    def auto_reset(
        data: AppData,
        now: int,
        *,
        window_ms: int = const.RESET_WINDOW_MS,
        immediate_ms: int = const.RESET_IMMEDIATE_MS,
    ) -> AppData:
        """Revert every completed task / purchased reward whose time is up.

        Args:
            data: Current snapshot (not modified)
            now: Current time in epoch milliseconds
            window_ms: Threshold for children using the reset window
            immediate_ms: Threshold for children with the window disabled

        Returns:
            The same data object when nothing expired, otherwise a new snapshot
            in which only the affected children (and their lists) are new.
        """
        settings = data.get(const.DATA_SETTINGS) or {}
        children: list[ChildData] = []
        changed = False

        for child in data.get(const.DATA_CHILDREN, []):
            threshold = ResetEngine.resolve_reset_window(
                child, settings, window_ms, immediate_ms
            )
            tasks, tasks_changed = ResetEngine._expire_items(
                child.get(const.DATA_CHILD_TASKS, []),
                const.DATA_TASK_COMPLETED,
                const.DATA_TASK_COMPLETED_AT,
                now,
                threshold,
            )
            rewards, rewards_changed = ResetEngine._expire_items(
                child.get(const.DATA_CHILD_REWARDS, []),
                const.DATA_REWARD_PURCHASED,
                const.DATA_REWARD_PURCHASED_AT,
                now,
                threshold,
            )
            if tasks_changed or rewards_changed:
                changed = True
                child = {
                    **child,
                    const.DATA_CHILD_TASKS: tasks,
                    const.DATA_CHILD_REWARDS: rewards,
                }
            children.append(child)

        if not changed:
            return data
        return {**data, const.DATA_CHILDREN: children}

    @staticmethod
    def _expire_items(
        items: list[Any],
        flag_key: str,
        stamp_key: str,
        now: int,
        threshold_ms: int,
    ) -> tuple[list[Any], bool]:
        """Return (items, changed) with expired entries cleared."""
        result: list[Any] = []
        changed = False
        for item in items:
            if item.get(flag_key) is True and ResetEngine.is_expired(
                item.get(stamp_key), now, threshold_ms
            ):
                item = ResetEngine._cleared(item, flag_key, stamp_key)
                changed = True
            result.append(item)
        return (result if changed else items), changed

    @staticmethod
    def _cleared(item: dict[str, Any], flag_key: str, stamp_key: str) -> dict[str, Any]:
        """Return a copy of item with the flag off and the stamp removed."""
        cleared = without_key(item, stamp_key)
        cleared[flag_key] = False
        return cleared

    # =========================================================================
    # MANUAL RESETS (parent mode)
    # =========================================================================

    @staticmethod
    def reset_task(data: AppData, child_id: str, task_id: str) -> ActionResult:
        """Mark one task as not completed, regardless of its timestamp."""
        return ResetEngine._reset_one(
            data,
            child_id,
            task_id,
            const.DATA_CHILD_TASKS,
            const.DATA_TASK_COMPLETED,
            const.DATA_TASK_COMPLETED_AT,
            const.REASON_TASK_NOT_FOUND,
            const.REASON_TASK_NOT_COMPLETED,
        )

    @staticmethod
    def reset_reward(data: AppData, child_id: str, reward_id: str) -> ActionResult:
        """Make one purchased reward available again."""
        return ResetEngine._reset_one(
            data,
            child_id,
            reward_id,
            const.DATA_CHILD_REWARDS,
            const.DATA_REWARD_PURCHASED,
            const.DATA_REWARD_PURCHASED_AT,
            const.REASON_REWARD_NOT_FOUND,
            const.REASON_REWARD_NOT_PURCHASED,
        )

    @staticmethod
    def reset_all_tasks(data: AppData, child_id: str) -> ActionResult:
        """Mark every task of a child as not completed."""
        return ResetEngine._reset_all(
            data,
            child_id,
            const.DATA_CHILD_TASKS,
            const.DATA_TASK_COMPLETED,
            const.DATA_TASK_COMPLETED_AT,
        )

    @staticmethod
    def reset_all_rewards(data: AppData, child_id: str) -> ActionResult:
        """Make every reward of a child available again."""
        return ResetEngine._reset_all(
            data,
            child_id,
            const.DATA_CHILD_REWARDS,
            const.DATA_REWARD_PURCHASED,
            const.DATA_REWARD_PURCHASED_AT,
        )

    @staticmethod
    def _reset_one(
        data: AppData,
        child_id: str,
        item_id: str,
        list_key: str,
        flag_key: str,
        stamp_key: str,
        not_found_reason: str,
        not_set_reason: str,
    ) -> ActionResult:
        """Clear one item; already-clear items are a successful no-op."""
        child = find_child(data, child_id)
        if child is None:
            return ActionResult.rejected(data, const.REASON_CHILD_NOT_FOUND)

        items = child.get(list_key, [])
        item = find_item(items, item_id)
        if item is None:
            return ActionResult.rejected(data, not_found_reason)

        if item.get(flag_key) is not True and stamp_key not in item:
            return ActionResult(data=data, reason=not_set_reason)

        new_items = replace_item(
            items, item_id, ResetEngine._cleared(item, flag_key, stamp_key)
        )
        new_child = {**child, list_key: new_items}
        return ActionResult(data=replace_child(data, child_id, new_child))

    @staticmethod
    def _reset_all(
        data: AppData,
        child_id: str,
        list_key: str,
        flag_key: str,
        stamp_key: str,
    ) -> ActionResult:
        """Clear every item in one of a child's lists."""
        child = find_child(data, child_id)
        if child is None:
            return ActionResult.rejected(data, const.REASON_CHILD_NOT_FOUND)

        items = child.get(list_key, [])
        if not any(
            item.get(flag_key) is True or stamp_key in item for item in items
        ):
            return ActionResult(data=data, reason=const.REASON_NOTHING_TO_RESET)

        new_items = [ResetEngine._cleared(item, flag_key, stamp_key) for item in items]
        new_child = {**child, list_key: new_items}
        return ActionResult(data=replace_child(data, child_id, new_child))

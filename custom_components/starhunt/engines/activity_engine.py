"""Activity Engine - Pure logic for earning and spending points.

This engine provides stateless, pure Python functions for:
- Completing tasks (points, activity log, streak bonus)
- Purchasing rewards (sufficient funds check, activity log)
- Parent point adjustments
- Activity window counting and display ordering

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data and return an
ActionResult. The input snapshot is never mutated.

Bonus rule: when the child has completed at least bonus_task_target tasks in
the trailing bonus window (the new completion included) and no bonus was
awarded within that window, bonus_points are added once and
bonusLastAwardedAt is stamped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..data_builders import build_activity
from ..utils.dt_utils import is_epoch_ms
from ..utils.math_utils import calculate_shortfall
from ..utils.snapshot_utils import find_child, find_item, replace_child, replace_item
from .action_result import ActionResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..type_defs import ActivityData, AppData, ChildData


class ActivityEngine:
    """Pure logic engine for task completion, purchases and point changes.

    All methods are static - no instance state.
    """

    # =========================================================================
    # ACTIVITY QUERIES
    # =========================================================================

    @staticmethod
    def count_tasks_in_window(
        activities: Iterable[ActivityData | dict[str, Any]],
        now: int,
        window_ms: int = const.BONUS_WINDOW_MS,
    ) -> int:
        """Count task activities with now - window_ms <= timestamp <= now."""
        start = now - window_ms
        count = 0
        for activity in activities:
            if activity.get(const.DATA_ACTIVITY_TYPE) != const.ACTIVITY_TYPE_TASK:
                continue
            stamp = activity.get(const.DATA_ACTIVITY_TIMESTAMP)
            if is_epoch_ms(stamp) and start <= stamp <= now:
                count += 1
        return count

    @staticmethod
    def recent_activities(
        child: ChildData | dict[str, Any], limit: int = const.RECENT_ACTIVITY_LIMIT
    ) -> list[ActivityData]:
        """Return up to limit activities, newest first.

        Display policy only; the stored log is never truncated.
        """
        activities = list(child.get(const.DATA_CHILD_ACTIVITIES, []))
        activities.sort(
            key=lambda a: a.get(const.DATA_ACTIVITY_TIMESTAMP, 0), reverse=True
        )
        return activities[: max(0, limit)]

    @staticmethod
    def is_bonus_on_cooldown(
        child: ChildData | dict[str, Any], now: int, window_ms: int
    ) -> bool:
        """Return True if a bonus was awarded within the last window_ms."""
        last = child.get(const.DATA_CHILD_BONUS_LAST_AWARDED_AT)
        if not is_epoch_ms(last):
            return False
        return now - last <= window_ms

    # =========================================================================
    # TASK COMPLETION
    # =========================================================================

    @staticmethod
    def complete_task(
        data: AppData,
        child_id: str,
        task_id: str,
        now: int,
        *,
        bonus_points: int = const.DEFAULT_BONUS_POINTS,
        bonus_task_target: int = const.DEFAULT_BONUS_TASK_TARGET,
        bonus_window_ms: int = const.BONUS_WINDOW_MS,
    ) -> ActionResult:
        """Mark a task completed, award its points and evaluate the bonus.

        Args:
            data: Current snapshot (not modified)
            child_id: Child completing the task
            task_id: Task being completed
            now: Completion time in epoch milliseconds
            bonus_points: Points added when the bonus triggers (0 disables it)
            bonus_task_target: Completions needed inside the window
            bonus_window_ms: Trailing window for counting and cooldown

        Returns:
            ActionResult. Completing an already completed task succeeds with
            reason task_already_completed and the same data object.
        """
        child = find_child(data, child_id)
        if child is None:
            return ActionResult.rejected(data, const.REASON_CHILD_NOT_FOUND)

        tasks = child.get(const.DATA_CHILD_TASKS, [])
        task = find_item(tasks, task_id)
        if task is None:
            return ActionResult.rejected(data, const.REASON_TASK_NOT_FOUND)

        if task.get(const.DATA_TASK_COMPLETED) is True:
            return ActionResult(data=data, reason=const.REASON_TASK_ALREADY_COMPLETED)

        points = task.get(const.DATA_TASK_POINTS, const.DEFAULT_ZERO)
        new_task = {
            **task,
            const.DATA_TASK_COMPLETED: True,
            const.DATA_TASK_COMPLETED_AT: now,
        }
        activity = build_activity(
            const.ACTIVITY_TYPE_TASK,
            task.get(const.DATA_TASK_NAME, const.SENTINEL_EMPTY),
            task.get(const.DATA_TASK_ICON, const.SENTINEL_EMPTY),
            points,
            now,
        )
        activities = [*child.get(const.DATA_CHILD_ACTIVITIES, []), activity]

        new_child: dict[str, Any] = {
            **child,
            const.DATA_CHILD_POINTS: child.get(const.DATA_CHILD_POINTS, 0) + points,
            const.DATA_CHILD_TASKS: replace_item(tasks, task_id, new_task),
            const.DATA_CHILD_ACTIVITIES: activities,
        }

        bonus = 0
        if (
            bonus_points > 0
            and ActivityEngine.count_tasks_in_window(activities, now, bonus_window_ms)
            >= bonus_task_target
            and not ActivityEngine.is_bonus_on_cooldown(child, now, bonus_window_ms)
        ):
            bonus = bonus_points
            new_child[const.DATA_CHILD_POINTS] += bonus
            new_child[const.DATA_CHILD_BONUS_LAST_AWARDED_AT] = now

        return ActionResult(
            data=replace_child(data, child_id, new_child),
            bonus_awarded=bonus,
        )

    # =========================================================================
    # REWARD PURCHASE
    # =========================================================================

    @staticmethod
    def purchase_reward(
        data: AppData, child_id: str, reward_id: str, now: int
    ) -> ActionResult:
        """Buy a reward if the child can afford it.

        Rejections leave data untouched. insufficient_points carries the
        exact shortfall.
        """
        child = find_child(data, child_id)
        if child is None:
            return ActionResult.rejected(data, const.REASON_CHILD_NOT_FOUND)

        rewards = child.get(const.DATA_CHILD_REWARDS, [])
        reward = find_item(rewards, reward_id)
        if reward is None:
            return ActionResult.rejected(data, const.REASON_REWARD_NOT_FOUND)

        if reward.get(const.DATA_REWARD_PURCHASED) is True:
            return ActionResult.rejected(data, const.REASON_REWARD_ALREADY_PURCHASED)

        cost = reward.get(const.DATA_REWARD_COST, const.DEFAULT_ZERO)
        balance = child.get(const.DATA_CHILD_POINTS, const.DEFAULT_ZERO)
        if balance < cost:
            return ActionResult.rejected(
                data,
                const.REASON_INSUFFICIENT_POINTS,
                shortfall=calculate_shortfall(balance, cost),
            )

        new_reward = {
            **reward,
            const.DATA_REWARD_PURCHASED: True,
            const.DATA_REWARD_PURCHASED_AT: now,
        }
        activity = build_activity(
            const.ACTIVITY_TYPE_REWARD,
            reward.get(const.DATA_REWARD_NAME, const.SENTINEL_EMPTY),
            reward.get(const.DATA_REWARD_ICON, const.SENTINEL_EMPTY),
            -cost,
            now,
        )
        new_child = {
            **child,
            const.DATA_CHILD_POINTS: balance - cost,
            const.DATA_CHILD_REWARDS: replace_item(rewards, reward_id, new_reward),
            const.DATA_CHILD_ACTIVITIES: [
                *child.get(const.DATA_CHILD_ACTIVITIES, []),
                activity,
            ],
        }
        return ActionResult(data=replace_child(data, child_id, new_child))

    # =========================================================================
    # MANUAL ADJUSTMENT (parent mode)
    # =========================================================================

    @staticmethod
    def adjust_points(data: AppData, child_id: str, delta: Any) -> ActionResult:
        """Add (delta > 0) or deduct (delta < 0) points.

        delta must be a non-zero int. A deduction larger than the balance is
        rejected as insufficient_points so the balance never goes negative.
        Adjustments are not logged as activities.
        """
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            return ActionResult.rejected(data, const.REASON_INVALID_POINTS)

        child = find_child(data, child_id)
        if child is None:
            return ActionResult.rejected(data, const.REASON_CHILD_NOT_FOUND)

        balance = child.get(const.DATA_CHILD_POINTS, const.DEFAULT_ZERO)
        if balance + delta < 0:
            return ActionResult.rejected(
                data,
                const.REASON_INSUFFICIENT_POINTS,
                shortfall=calculate_shortfall(balance, -delta),
            )

        new_child = {**child, const.DATA_CHILD_POINTS: balance + delta}
        return ActionResult(data=replace_child(data, child_id, new_child))

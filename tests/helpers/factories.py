"""Snapshot factories for Star Hunt tests.

Build children, tasks, rewards and activities in the stored (camelCase)
shape without going through the engines, so tests can set up any state,
including states the engines would never produce.
"""

from typing import Any

from custom_components.starhunt import const, data_builders as db

# Fixed clock (2024-06-01 08:00:00 UTC).
NOW_MS = 1_717_228_800_000
HOUR_MS = const.MS_PER_HOUR
DAY_MS = 24 * HOUR_MS

CHILD_ID = "c1"
SECOND_CHILD_ID = "c2"
PARENT_PIN = "1234"


def make_task(
    task_id: str = "t1",
    name: str = "Clean your room",
    points: int = 5,
    *,
    icon: str = "🧹",
    completed_at: int | None = None,
) -> dict[str, Any]:
    """Create a task, completed when completed_at is given."""
    task: dict[str, Any] = {
        const.DATA_TASK_ID: task_id,
        const.DATA_TASK_NAME: name,
        const.DATA_TASK_ICON: icon,
        const.DATA_TASK_POINTS: points,
        const.DATA_TASK_COMPLETED: completed_at is not None,
    }
    if completed_at is not None:
        task[const.DATA_TASK_COMPLETED_AT] = completed_at
    return task


def make_reward(
    reward_id: str = "r1",
    name: str = "Ice cream",
    cost: int = 20,
    *,
    icon: str = "🍦",
    purchased_at: int | None = None,
) -> dict[str, Any]:
    """Create a reward, purchased when purchased_at is given."""
    reward: dict[str, Any] = {
        const.DATA_REWARD_ID: reward_id,
        const.DATA_REWARD_NAME: name,
        const.DATA_REWARD_ICON: icon,
        const.DATA_REWARD_COST: cost,
        const.DATA_REWARD_PURCHASED: purchased_at is not None,
    }
    if purchased_at is not None:
        reward[const.DATA_REWARD_PURCHASED_AT] = purchased_at
    return reward


def make_activity(
    activity_id: str,
    timestamp: int,
    points: int = 5,
    activity_type: str = const.ACTIVITY_TYPE_TASK,
) -> dict[str, Any]:
    """Create an activity log entry."""
    return {
        const.DATA_ACTIVITY_ID: activity_id,
        const.DATA_ACTIVITY_TYPE: activity_type,
        const.DATA_ACTIVITY_NAME: "Entry",
        const.DATA_ACTIVITY_ICON: "⭐",
        const.DATA_ACTIVITY_POINTS: points,
        const.DATA_ACTIVITY_TIMESTAMP: timestamp,
    }


def make_child(
    child_id: str = CHILD_ID,
    name: str = "Emma",
    points: int = 0,
    *,
    tasks: list[dict[str, Any]] | None = None,
    rewards: list[dict[str, Any]] | None = None,
    activities: list[dict[str, Any]] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Create a child in the current snapshot shape."""
    return {
        const.DATA_CHILD_ID: child_id,
        const.DATA_CHILD_NAME: name,
        const.DATA_CHILD_AVATAR: "👧",
        const.DATA_CHILD_POINTS: points,
        const.DATA_CHILD_TASKS: tasks if tasks is not None else [make_task()],
        const.DATA_CHILD_REWARDS: rewards if rewards is not None else [make_reward()],
        const.DATA_CHILD_ACTIVITIES: activities or [],
        **extra,
    }


def make_app_data(
    *children: dict[str, Any], **settings: Any
) -> dict[str, Any]:
    """Create a snapshot with default settings overridden by settings."""
    return {
        const.DATA_CHILDREN: list(children),
        const.DATA_SETTINGS: {**db.default_settings(), **settings},
    }

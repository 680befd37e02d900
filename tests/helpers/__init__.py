"""Test helpers for Star Hunt integration tests.

    from tests.helpers import make_app_data, make_child, make_task, NOW_MS
"""

from tests.helpers.factories import (
    CHILD_ID,
    DAY_MS,
    HOUR_MS,
    NOW_MS,
    PARENT_PIN,
    SECOND_CHILD_ID,
    make_activity,
    make_app_data,
    make_child,
    make_reward,
    make_task,
)

__all__ = [
    "CHILD_ID",
    "DAY_MS",
    "HOUR_MS",
    "NOW_MS",
    "PARENT_PIN",
    "SECOND_CHILD_ID",
    "make_activity",
    "make_app_data",
    "make_child",
    "make_reward",
    "make_task",
]

"""Merge Engine - Pure logic for combining two device snapshots.

Used when a snapshot arrives from another device (QR code, pasted text,
e-mail or deep link). There is no shared history, so the merge is a fixed
rule rather than a three-way reconciliation:

- Children present on both sides: points are summed, tasks and rewards are
  unioned by id (local order first, remote-only items appended) and a shared
  item is done if either side has it done. All other item fields come from
  the local side.
- Children present only remotely are appended as they are.
- Household settings (PIN, reset policy) always stay local.

Points are ADDED, so importing the same snapshot twice counts its points
twice. That matches how the phone app behaves and is left to the parent.

ARCHITECTURE: Pure logic, NO Home Assistant dependencies. Inputs are never
mutated; unchanged local children keep their identity.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import is_epoch_ms

if TYPE_CHECKING:
    from ..type_defs import ActivityData, AppData, ChildData


class MergeEngine:
    """Pure logic engine for multi-device snapshot merges."""

    @staticmethod
    def merge(local: AppData, remote: AppData) -> AppData:
        """Combine local and remote into a new snapshot.

        Both inputs are expected to be sanitized already.
        """
        remote_by_id: dict[str, ChildData] = {}
        for child in remote.get(const.DATA_CHILDREN, []):
            remote_by_id.setdefault(child.get(const.DATA_CHILD_ID), child)

        children: list[ChildData] = []
        local_ids: set[str] = set()
        for local_child in local.get(const.DATA_CHILDREN, []):
            child_id = local_child.get(const.DATA_CHILD_ID)
            local_ids.add(child_id)
            remote_child = remote_by_id.get(child_id)
            if remote_child is None:
                children.append(local_child)
            else:
                children.append(MergeEngine.merge_child(local_child, remote_child))

        for child_id, remote_child in remote_by_id.items():
            if child_id not in local_ids:
                children.append(remote_child)

        return {
            const.DATA_CHILDREN: children,
            const.DATA_SETTINGS: local.get(const.DATA_SETTINGS, {}),
        }  # type: ignore[return-value]

    @staticmethod
    def merge_child(local: ChildData, remote: ChildData) -> ChildData:
        """Merge two versions of the same child."""
        merged: dict[str, Any] = {
            **local,
            const.DATA_CHILD_POINTS: local.get(const.DATA_CHILD_POINTS, 0)
            + remote.get(const.DATA_CHILD_POINTS, 0),
            const.DATA_CHILD_TASKS: MergeEngine.merge_items(
                local.get(const.DATA_CHILD_TASKS, []),
                remote.get(const.DATA_CHILD_TASKS, []),
                const.DATA_TASK_COMPLETED,
                const.DATA_TASK_COMPLETED_AT,
            ),
            const.DATA_CHILD_REWARDS: MergeEngine.merge_items(
                local.get(const.DATA_CHILD_REWARDS, []),
                remote.get(const.DATA_CHILD_REWARDS, []),
                const.DATA_REWARD_PURCHASED,
                const.DATA_REWARD_PURCHASED_AT,
            ),
            const.DATA_CHILD_ACTIVITIES: MergeEngine.merge_activities(
                local.get(const.DATA_CHILD_ACTIVITIES, []),
                remote.get(const.DATA_CHILD_ACTIVITIES, []),
            ),
        }

        stamps = [
            stamp
            for stamp in (
                local.get(const.DATA_CHILD_BONUS_LAST_AWARDED_AT),
                remote.get(const.DATA_CHILD_BONUS_LAST_AWARDED_AT),
            )
            if is_epoch_ms(stamp)
        ]
        if stamps:
            merged[const.DATA_CHILD_BONUS_LAST_AWARDED_AT] = max(stamps)

        return merged  # type: ignore[return-value]

    @staticmethod
    def merge_items(
        local_items: list[Any],
        remote_items: list[Any],
        flag_key: str,
        stamp_key: str,
    ) -> list[Any]:
        """Union two task or reward lists by id with OR on flag_key.

        A shared item takes its timestamp from whichever side has it done,
        local first. An item that ends up not done carries no timestamp.
        """
        merged: dict[str, Any] = {}
        for item in local_items:
            merged.setdefault(item.get(const.DATA_TASK_ID), item)

        for remote_item in remote_items:
            item_id = remote_item.get(const.DATA_TASK_ID)
            existing = merged.get(item_id)
            if existing is None:
                merged[item_id] = remote_item
                continue
            merged[item_id] = MergeEngine._merge_flag(
                existing, remote_item, flag_key, stamp_key
            )

        return list(merged.values())

    @staticmethod
    def _merge_flag(
        local_item: dict[str, Any],
        remote_item: dict[str, Any],
        flag_key: str,
        stamp_key: str,
    ) -> dict[str, Any]:
        local_done = local_item.get(flag_key) is True
        remote_done = remote_item.get(flag_key) is True
        if local_done or not remote_done:
            return local_item

        result = {**local_item, flag_key: True}
        result.pop(stamp_key, None)
        if stamp_key in remote_item:
            result[stamp_key] = remote_item[stamp_key]
        return result

    @staticmethod
    def merge_activities(
        local_activities: list[ActivityData], remote_activities: list[ActivityData]
    ) -> list[ActivityData]:
        """Union activity logs by id, ordered by timestamp (stable)."""
        seen: set[str] = set()
        combined: list[ActivityData] = []
        for activity in [*local_activities, *remote_activities]:
            activity_id = activity.get(const.DATA_ACTIVITY_ID)
            if activity_id in seen:
                continue
            seen.add(activity_id)
            combined.append(activity)
        combined.sort(key=lambda a: a.get(const.DATA_ACTIVITY_TIMESTAMP, 0))
        return combined

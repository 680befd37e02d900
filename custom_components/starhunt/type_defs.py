"""Type definitions for Star Hunt data structures.

The snapshot is a plain JSON-compatible dict so it can be stored by the Home
Assistant Store and exchanged with other devices unchanged. These TypedDicts
describe that shape for static analysis only; they are not enforced at
runtime. Runtime normalization belongs to migration.py.

Keys are camelCase because the same document is read by the phone app on the
other side of a sync. Always access them through the const.DATA_* names.

IMPORTANT: This file must NOT import from coordinator.py or any module that
imports the coordinator, to avoid circular dependencies.
"""

from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ChildId = str
TaskId = str
RewardId = str
EpochMs = int  # Milliseconds since the Unix epoch, UTC

ActivityType = Literal["task", "reward"]


# =============================================================================
# Items owned by a child
# =============================================================================


class TaskData(TypedDict):
    """A task a child can complete for points.

    completedAt is present exactly while completed is True. A completed task
    without completedAt comes from older data and never auto-resets.
    """

    id: TaskId
    name: str
    icon: str
    points: int
    completed: bool
    completedAt: NotRequired[EpochMs]


class RewardData(TypedDict):
    """A reward a child can buy with points."""

    id: RewardId
    name: str
    icon: str
    cost: int
    purchased: bool
    purchasedAt: NotRequired[EpochMs]


class ActivityData(TypedDict):
    """Append-only log entry.

    points is positive for task completions and the negated cost for reward
    purchases.
    """

    id: str
    type: ActivityType
    name: str
    icon: str
    points: int
    timestamp: EpochMs


# =============================================================================
# Child and root snapshot
# =============================================================================


class ChildData(TypedDict):
    """A child profile with its own tasks, rewards and activity log."""

    id: ChildId
    name: str
    avatar: str
    points: int
    tasks: list[TaskData]
    rewards: list[RewardData]
    activities: list[ActivityData]
    bonusLastAwardedAt: NotRequired[EpochMs]
    enable24hReset: NotRequired[bool]


class SettingsData(TypedDict):
    """Household settings; never overwritten by an imported snapshot."""

    parentPin: str
    requirePinForPurchase: NotRequired[bool]
    enable24hReset: NotRequired[bool]


class AppData(TypedDict):
    """Root persisted and transferred unit."""

    children: list[ChildData]
    settings: SettingsData


# =============================================================================
# Service response contracts
# =============================================================================


class ExportResponse(TypedDict):
    """Response of the export_snapshot service."""

    payload: str
    url_param: str
    size_bytes: int
    channels: dict[str, bool]

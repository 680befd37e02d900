"""Migration and sanitization of stored or imported snapshots.

Every snapshot that enters the integration (from the Home Assistant store or
from another device) passes through sanitize_app_data before any engine sees
it. The function is total: whatever the input, it returns a well-formed
snapshot and never raises. Running it on its own output changes nothing.

Shapes handled:
- current: {"children": [...], "settings": {...}} with per-child tasks/rewards
- legacy_flat: older app versions kept one shared "tasks"/"rewards" list at
  the root; those lists are copied onto every child that has none of its own
- invalid: anything that is not a dict, replaced by a fresh empty household
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from . import const, data_builders as db
from .utils.dt_utils import coerce_epoch_ms, is_epoch_ms
from .utils.math_utils import coerce_int

if TYPE_CHECKING:
    from .type_defs import ActivityData, AppData, ChildData, SettingsData


def detect_snapshot_shape(raw: Any) -> str:
    """Return SNAPSHOT_SHAPE_CURRENT, SNAPSHOT_SHAPE_LEGACY_FLAT or SNAPSHOT_SHAPE_INVALID."""
    if not isinstance(raw, dict):
        return const.SNAPSHOT_SHAPE_INVALID
    if isinstance(raw.get(const.DATA_LEGACY_TASKS), list) or isinstance(
        raw.get(const.DATA_LEGACY_REWARDS), list
    ):
        return const.SNAPSHOT_SHAPE_LEGACY_FLAT
    return const.SNAPSHOT_SHAPE_CURRENT


def sanitize_app_data(raw: Any, language: str | None) -> AppData:
    """Return a well-formed snapshot built from raw.

    Args:
        raw: Anything decoded from JSON (or None when nothing is stored)
        language: Language used for default task/reward sets

    Returns:
        A new AppData. raw is never modified.
    """
    try:
        return SnapshotMigrator(raw, language).run_all_migrations()
    except (TypeError, ValueError, AttributeError, RecursionError) as err:
        const.LOGGER.error(
            "ERROR: Snapshot could not be sanitized, using an empty household: %s",
            err,
        )
        return db.default_app_data()


class SnapshotMigrator:
    """Normalizes one raw snapshot.

    Each step works on a private deep copy, so the caller's object is never
    touched. Each step is idempotent.

    Attributes:
        raw: The original input.
        language: Language for default task/reward sets.
        shape: Result of detect_snapshot_shape, computed once.
    """

    def __init__(self, raw: Any, language: str | None) -> None:
        """Initialize the migrator for one snapshot.

        Args:
            raw: Snapshot as decoded from JSON.
            language: Language for default task/reward sets.
        """
        self.raw = raw
        self.language = language
        self.shape = detect_snapshot_shape(raw)
        self._data: dict[str, Any] = {}

    def run_all_migrations(self) -> AppData:
        """Execute all normalization steps in order and return the result."""
        if self.shape == const.SNAPSHOT_SHAPE_INVALID:
            if self.raw is not None:
                const.LOGGER.debug(
                    "DEBUG: Snapshot is a %s, not an object; using defaults",
                    type(self.raw).__name__,
                )
            return db.default_app_data()

        self._data = copy.deepcopy(self.raw)

        self._ensure_minimal_structure()
        self._sanitize_settings()
        if self.shape == const.SNAPSHOT_SHAPE_LEGACY_FLAT:
            self._migrate_legacy_flat_shape()
        self._sanitize_children()

        return {
            const.DATA_CHILDREN: self._data[const.DATA_CHILDREN],
            const.DATA_SETTINGS: self._data[const.DATA_SETTINGS],
        }  # type: ignore[return-value]

    # -------------------------------------------------------------------------
    # Root
    # -------------------------------------------------------------------------

    def _ensure_minimal_structure(self) -> None:
        """Make sure children is a list and settings is a dict."""
        if not isinstance(self._data.get(const.DATA_CHILDREN), list):
            if const.DATA_CHILDREN in self._data:
                const.LOGGER.debug("DEBUG: children is not a list; dropping it")
            self._data[const.DATA_CHILDREN] = []
        if not isinstance(self._data.get(const.DATA_SETTINGS), dict):
            if const.DATA_SETTINGS in self._data:
                const.LOGGER.debug("DEBUG: settings is not an object; using defaults")
            self._data[const.DATA_SETTINGS] = db.default_settings()

    def _sanitize_settings(self) -> None:
        """Keep only known settings with the right types."""
        raw = self._data[const.DATA_SETTINGS]
        settings: SettingsData = db.default_settings()

        pin = raw.get(const.DATA_SETTINGS_PARENT_PIN)
        if db.is_valid_pin(pin):
            settings[const.DATA_SETTINGS_PARENT_PIN] = pin  # type: ignore[literal-required]
        elif pin is not None:
            const.LOGGER.debug("DEBUG: Stored parent PIN is malformed; using default")

        require_pin = raw.get(const.DATA_SETTINGS_REQUIRE_PIN_FOR_PURCHASE)
        if isinstance(require_pin, bool):
            settings[const.DATA_SETTINGS_REQUIRE_PIN_FOR_PURCHASE] = require_pin  # type: ignore[literal-required]

        enable_reset = raw.get(const.DATA_SETTINGS_ENABLE_24H_RESET)
        if isinstance(enable_reset, bool):
            settings[const.DATA_SETTINGS_ENABLE_24H_RESET] = enable_reset  # type: ignore[literal-required]

        self._data[const.DATA_SETTINGS] = settings

    def _migrate_legacy_flat_shape(self) -> None:
        """Copy root-level tasks/rewards onto every child lacking its own."""
        legacy_tasks = self._data.pop(const.DATA_LEGACY_TASKS, None)
        legacy_rewards = self._data.pop(const.DATA_LEGACY_REWARDS, None)
        const.LOGGER.info("INFO: Migrating legacy snapshot with shared tasks/rewards")

        for child in self._data[const.DATA_CHILDREN]:
            if not isinstance(child, dict):
                continue
            if isinstance(legacy_tasks, list) and not isinstance(
                child.get(const.DATA_CHILD_TASKS), list
            ):
                child[const.DATA_CHILD_TASKS] = copy.deepcopy(legacy_tasks)
            if isinstance(legacy_rewards, list) and not isinstance(
                child.get(const.DATA_CHILD_REWARDS), list
            ):
                child[const.DATA_CHILD_REWARDS] = copy.deepcopy(legacy_rewards)

    # -------------------------------------------------------------------------
    # Children
    # -------------------------------------------------------------------------

    def _sanitize_children(self) -> None:
        """Normalize every child; drop non-objects and duplicate ids."""
        default_reset = (
            self._data[const.DATA_SETTINGS].get(const.DATA_SETTINGS_ENABLE_24H_RESET)
            is not False
        )
        children: list[ChildData] = []
        seen: set[str] = set()
        for raw_child in self._data[const.DATA_CHILDREN]:
            if not isinstance(raw_child, dict):
                const.LOGGER.debug("DEBUG: Dropping non-object child entry")
                continue
            child = self._sanitize_child(raw_child, default_reset)
            if child[const.DATA_CHILD_ID] in seen:
                const.LOGGER.debug(
                    "DEBUG: Dropping duplicate child id %s", child[const.DATA_CHILD_ID]
                )
                continue
            seen.add(child[const.DATA_CHILD_ID])
            children.append(child)
        self._data[const.DATA_CHILDREN] = children

    def _sanitize_child(self, raw: dict[str, Any], default_reset: bool) -> ChildData:
        points = coerce_int(raw.get(const.DATA_CHILD_POINTS), const.DEFAULT_ZERO)
        if points < 0:
            const.LOGGER.debug("DEBUG: Clamping negative points %s to 0", points)
            points = 0

        tasks = raw.get(const.DATA_CHILD_TASKS)
        if not isinstance(tasks, list):
            tasks = db.default_tasks(self.language)
        rewards = raw.get(const.DATA_CHILD_REWARDS)
        if not isinstance(rewards, list):
            rewards = db.default_rewards(self.language)

        child: dict[str, Any] = {
            const.DATA_CHILD_ID: _coerce_id(raw.get(const.DATA_CHILD_ID)),
            const.DATA_CHILD_NAME: _coerce_text(raw.get(const.DATA_CHILD_NAME)),
            const.DATA_CHILD_AVATAR: _coerce_text(
                raw.get(const.DATA_CHILD_AVATAR), const.DEFAULT_CHILD_AVATAR
            ),
            const.DATA_CHILD_POINTS: points,
            const.DATA_CHILD_TASKS: _sanitize_items(
                tasks,
                const.DATA_TASK_POINTS,
                const.DEFAULT_TASK_POINTS,
                const.DATA_TASK_COMPLETED,
                const.DATA_TASK_COMPLETED_AT,
            ),
            const.DATA_CHILD_REWARDS: _sanitize_items(
                rewards,
                const.DATA_REWARD_COST,
                const.DEFAULT_REWARD_COST,
                const.DATA_REWARD_PURCHASED,
                const.DATA_REWARD_PURCHASED_AT,
            ),
            const.DATA_CHILD_ACTIVITIES: _sanitize_activities(
                raw.get(const.DATA_CHILD_ACTIVITIES)
            ),
        }

        bonus_at = coerce_epoch_ms(raw.get(const.DATA_CHILD_BONUS_LAST_AWARDED_AT))
        if bonus_at is not None:
            child[const.DATA_CHILD_BONUS_LAST_AWARDED_AT] = bonus_at

        enable_reset = raw.get(const.DATA_CHILD_ENABLE_24H_RESET)
        child[const.DATA_CHILD_ENABLE_24H_RESET] = (
            enable_reset if isinstance(enable_reset, bool) else default_reset
        )
        return child  # type: ignore[return-value]


# ================================================================================================
# Item helpers
# ================================================================================================


def _coerce_id(value: Any) -> str:
    """Return value as an id string, generating one when unusable."""
    if isinstance(value, str) and value:
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    const.LOGGER.debug("DEBUG: Generating id for entry with id %r", value)
    return db.new_id()


def _coerce_text(value: Any, default: str = const.SENTINEL_EMPTY) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def _sanitize_items(
    items: list[Any],
    amount_key: str,
    amount_default: int,
    flag_key: str,
    stamp_key: str,
) -> list[dict[str, Any]]:
    """Normalize a task or reward list.

    The done flag is a strict bool. A timestamp survives only while the item
    is done and the timestamp is numeric.
    """
    result: list[dict[str, Any]] = []
    seen: set[str] = set()
    for raw in items:
        if not isinstance(raw, dict):
            const.LOGGER.debug("DEBUG: Dropping non-object item entry")
            continue
        item_id = _coerce_id(raw.get(const.DATA_TASK_ID))
        if item_id in seen:
            const.LOGGER.debug("DEBUG: Dropping duplicate item id %s", item_id)
            continue
        seen.add(item_id)

        done = raw.get(flag_key) is True
        item: dict[str, Any] = {
            const.DATA_TASK_ID: item_id,
            const.DATA_TASK_NAME: _coerce_text(raw.get(const.DATA_TASK_NAME)),
            const.DATA_TASK_ICON: _coerce_text(
                raw.get(const.DATA_TASK_ICON), const.DEFAULT_ITEM_ICON
            ),
            amount_key: max(1, coerce_int(raw.get(amount_key), amount_default)),
            flag_key: done,
        }
        stamp = coerce_epoch_ms(raw.get(stamp_key)) if done else None
        if stamp is not None:
            item[stamp_key] = stamp
        result.append(item)
    return result


def _sanitize_activities(raw: Any) -> list[ActivityData]:
    """Keep well-formed activity entries; drop the rest."""
    if not isinstance(raw, list):
        return []
    result: list[ActivityData] = []
    seen: set[str] = set()
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        activity_type = entry.get(const.DATA_ACTIVITY_TYPE)
        stamp = entry.get(const.DATA_ACTIVITY_TIMESTAMP)
        points = entry.get(const.DATA_ACTIVITY_POINTS)
        if (
            activity_type not in const.ACTIVITY_TYPES
            or not is_epoch_ms(stamp)
            or not is_epoch_ms(points)
        ):
            const.LOGGER.debug("DEBUG: Dropping malformed activity %r", entry)
            continue
        activity_id = _coerce_id(entry.get(const.DATA_ACTIVITY_ID))
        if activity_id in seen:
            continue
        seen.add(activity_id)
        result.append(
            {
                const.DATA_ACTIVITY_ID: activity_id,
                const.DATA_ACTIVITY_TYPE: activity_type,
                const.DATA_ACTIVITY_NAME: _coerce_text(
                    entry.get(const.DATA_ACTIVITY_NAME)
                ),
                const.DATA_ACTIVITY_ICON: _coerce_text(
                    entry.get(const.DATA_ACTIVITY_ICON)
                ),
                const.DATA_ACTIVITY_POINTS: int(points),
                const.DATA_ACTIVITY_TIMESTAMP: int(stamp),
            }  # type: ignore[misc]
        )
    return result

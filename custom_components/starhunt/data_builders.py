"""Entity building and validation helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Entity field defaults (children, tasks, rewards, activities)
- Business rule validation for user-supplied fields
- Language default task/reward sets
- A fresh default snapshot

### Build Functions
Each entity type has a `build_<entity>()` function that:
- Takes already-validated values
- Generates an id (UUID string) for new entities
- Applies field defaults
- Returns a complete dict ready to be placed in a snapshot

### Validation Functions
Each entity type has a `validate_<entity>_data()` function that:
- Takes raw values from a service call
- Returns dict of errors: {error_field: translation_key}
- Never raises

Consumers:
- engines/household_engine.py (admin operations)
- engines/activity_engine.py (activity log entries)
- migration.py (language defaults while sanitizing)
- coordinator.py (full data reset, default translation on load)
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any
import uuid

from . import const

if TYPE_CHECKING:
    from .type_defs import (
        ActivityData,
        ActivityType,
        AppData,
        ChildData,
        RewardData,
        SettingsData,
        TaskData,
    )

_PIN_PATTERN = re.compile(r"[0-9]{4}")


def new_id() -> str:
    """Return a fresh entity id."""
    return str(uuid.uuid4())


def _is_int_in_range(value: Any, min_val: int, max_val: int) -> bool:
    """Return True for a real int (not bool) within [min_val, max_val]."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return min_val <= value <= max_val


def _validate_name(
    name: Any, max_len: int, empty_key: str, too_long_key: str
) -> str | None:
    """Return a translation key if name is unusable, else None."""
    if not isinstance(name, str) or not name.strip():
        return empty_key
    if len(name.strip()) > max_len:
        return too_long_key
    return None


def _has_icon(icon: Any) -> bool:
    return isinstance(icon, str) and bool(icon.strip())


# ==============================================================================
# LANGUAGE DEFAULTS
# ==============================================================================

# (icon, {language: name}, points) - the icon is what identifies a default item
# when translating names after a language switch.
_DEFAULT_TASKS: tuple[tuple[str, dict[str, str], int], ...] = (
    ("🧹", {const.LANGUAGE_EN: "Clean your room", const.LANGUAGE_NO: "Rydd rommet"}, 5),
    ("🪥", {const.LANGUAGE_EN: "Brush your teeth", const.LANGUAGE_NO: "Puss tennene"}, 2),
    ("⚽", {const.LANGUAGE_EN: "Play outside", const.LANGUAGE_NO: "Lek ute"}, 3),
)

_DEFAULT_REWARDS: tuple[tuple[str, dict[str, str], int], ...] = (
    (
        "🍦",
        {const.LANGUAGE_EN: "Ice cream on Saturday", const.LANGUAGE_NO: "Is på lørdag"},
        30,
    ),
    (
        "📱",
        {
            const.LANGUAGE_EN: "10 extra minutes screen time",
            const.LANGUAGE_NO: "10 min ekstra skjermtid",
        },
        10,
    ),
    (
        "🎠",
        {const.LANGUAGE_EN: "Family outing", const.LANGUAGE_NO: "Familieutflukt"},
        100,
    ),
)


def _language(language: str | None) -> str:
    if language in const.SUPPORTED_LANGUAGES:
        return language  # type: ignore[return-value]
    return const.DEFAULT_LANGUAGE


def default_tasks(language: str | None) -> list[TaskData]:
    """Return the built-in task set for a language (fresh list every call).

    Unknown languages fall back to English.
    """
    lang = _language(language)
    return [
        {
            const.DATA_TASK_ID: str(index),
            const.DATA_TASK_NAME: names[lang],
            const.DATA_TASK_ICON: icon,
            const.DATA_TASK_POINTS: points,
            const.DATA_TASK_COMPLETED: False,
        }  # type: ignore[misc]
        for index, (icon, names, points) in enumerate(_DEFAULT_TASKS, start=1)
    ]


def default_rewards(language: str | None) -> list[RewardData]:
    """Return the built-in reward set for a language (fresh list every call)."""
    lang = _language(language)
    return [
        {
            const.DATA_REWARD_ID: str(index),
            const.DATA_REWARD_NAME: names[lang],
            const.DATA_REWARD_ICON: icon,
            const.DATA_REWARD_COST: cost,
            const.DATA_REWARD_PURCHASED: False,
        }  # type: ignore[misc]
        for index, (icon, names, cost) in enumerate(_DEFAULT_REWARDS, start=1)
    ]


def default_settings() -> SettingsData:
    """Return household settings for a new installation."""
    return {
        const.DATA_SETTINGS_PARENT_PIN: const.DEFAULT_PARENT_PIN,
        const.DATA_SETTINGS_ENABLE_24H_RESET: const.DEFAULT_ENABLE_24H_RESET,
    }  # type: ignore[return-value]


def default_app_data(parent_pin: str | None = None) -> AppData:
    """Return an empty household (no children) with default settings."""
    settings = default_settings()
    if isinstance(parent_pin, str) and _PIN_PATTERN.fullmatch(parent_pin):
        settings[const.DATA_SETTINGS_PARENT_PIN] = parent_pin  # type: ignore[literal-required]
    return {const.DATA_CHILDREN: [], const.DATA_SETTINGS: settings}  # type: ignore[return-value]


def _translate_items(
    items: list[Any],
    table: tuple[tuple[str, dict[str, str], int], ...],
    name_key: str,
    icon_key: str,
    language: str,
) -> tuple[list[Any], bool]:
    """Rename default items whose name matches any known translation."""
    by_icon = {icon: names for icon, names, _ in table}
    result: list[Any] = []
    changed = False
    for item in items:
        names = by_icon.get(item.get(icon_key))
        if (
            names is not None
            and item.get(name_key) in names.values()
            and item.get(name_key) != names[language]
        ):
            item = {**item, name_key: names[language]}
            changed = True
        result.append(item)
    return (result if changed else items), changed


def translate_default_items(data: AppData, language: str | None) -> AppData:
    """Rename untouched default tasks/rewards into language.

    An item counts as a default when its icon belongs to a built-in item and
    its name equals that item's name in any supported language. Items the
    parent renamed are left alone. Returns data itself when nothing changed.
    """
    lang = _language(language)
    children: list[ChildData] = []
    changed = False
    for child in data.get(const.DATA_CHILDREN, []):
        tasks, tasks_changed = _translate_items(
            child.get(const.DATA_CHILD_TASKS, []),
            _DEFAULT_TASKS,
            const.DATA_TASK_NAME,
            const.DATA_TASK_ICON,
            lang,
        )
        rewards, rewards_changed = _translate_items(
            child.get(const.DATA_CHILD_REWARDS, []),
            _DEFAULT_REWARDS,
            const.DATA_REWARD_NAME,
            const.DATA_REWARD_ICON,
            lang,
        )
        if tasks_changed or rewards_changed:
            child = {**child, const.DATA_CHILD_TASKS: tasks, const.DATA_CHILD_REWARDS: rewards}
            changed = True
        children.append(child)
    if not changed:
        return data
    return {**data, const.DATA_CHILDREN: children}


# ==============================================================================
# CHILDREN
# ==============================================================================


def validate_child_data(name: Any, avatar: Any) -> dict[str, str]:
    """Validate a new child profile.

    Validation Rules:
        1. Name 1-30 characters after trimming
        2. Avatar not empty
    """
    errors: dict[str, str] = {}
    name_error = _validate_name(
        name,
        const.MAX_CHILD_NAME_LENGTH,
        const.TRANS_KEY_ERROR_CHILD_NAME_EMPTY,
        const.TRANS_KEY_ERROR_CHILD_NAME_TOO_LONG,
    )
    if name_error:
        errors[const.CFOP_ERROR_NAME] = name_error
    if not _has_icon(avatar):
        errors[const.CFOP_ERROR_AVATAR] = const.TRANS_KEY_ERROR_AVATAR_REQUIRED
    return errors


def build_child(
    name: str,
    avatar: str,
    language: str | None,
    *,
    child_id: str | None = None,
) -> ChildData:
    """Build a new child with zero points and the language default sets."""
    return {
        const.DATA_CHILD_ID: child_id or new_id(),
        const.DATA_CHILD_NAME: name.strip(),
        const.DATA_CHILD_AVATAR: avatar.strip(),
        const.DATA_CHILD_POINTS: const.DEFAULT_ZERO,
        const.DATA_CHILD_TASKS: default_tasks(language),
        const.DATA_CHILD_REWARDS: default_rewards(language),
        const.DATA_CHILD_ACTIVITIES: [],
    }  # type: ignore[return-value]


# ==============================================================================
# TASKS
# ==============================================================================


def validate_task_data(name: Any, icon: Any, points: Any) -> dict[str, str]:
    """Validate a new task.

    Validation Rules:
        1. Name 1-50 characters after trimming
        2. Icon not empty
        3. Points integer in 1-100
    """
    errors: dict[str, str] = {}
    name_error = _validate_name(
        name,
        const.MAX_ITEM_NAME_LENGTH,
        const.TRANS_KEY_ERROR_TASK_NAME_EMPTY,
        const.TRANS_KEY_ERROR_TASK_NAME_TOO_LONG,
    )
    if name_error:
        errors[const.CFOP_ERROR_NAME] = name_error
    if not _has_icon(icon):
        errors[const.CFOP_ERROR_ICON] = const.TRANS_KEY_ERROR_ICON_REQUIRED
    if not _is_int_in_range(points, const.MIN_TASK_POINTS, const.MAX_TASK_POINTS):
        errors[const.CFOP_ERROR_POINTS] = const.TRANS_KEY_ERROR_POINTS_RANGE
    return errors


def build_task(
    name: str, icon: str, points: int, *, task_id: str | None = None
) -> TaskData:
    """Build a new, not yet completed task."""
    return {
        const.DATA_TASK_ID: task_id or new_id(),
        const.DATA_TASK_NAME: name.strip(),
        const.DATA_TASK_ICON: icon.strip(),
        const.DATA_TASK_POINTS: points,
        const.DATA_TASK_COMPLETED: False,
    }  # type: ignore[return-value]


# ==============================================================================
# REWARDS
# ==============================================================================


def validate_reward_data(name: Any, icon: Any, cost: Any) -> dict[str, str]:
    """Validate a new reward.

    Validation Rules:
        1. Name 1-50 characters after trimming
        2. Icon not empty
        3. Cost integer in 1-1000
    """
    errors: dict[str, str] = {}
    name_error = _validate_name(
        name,
        const.MAX_ITEM_NAME_LENGTH,
        const.TRANS_KEY_ERROR_REWARD_NAME_EMPTY,
        const.TRANS_KEY_ERROR_REWARD_NAME_TOO_LONG,
    )
    if name_error:
        errors[const.CFOP_ERROR_NAME] = name_error
    if not _has_icon(icon):
        errors[const.CFOP_ERROR_ICON] = const.TRANS_KEY_ERROR_ICON_REQUIRED
    if not _is_int_in_range(cost, const.MIN_REWARD_COST, const.MAX_REWARD_COST):
        errors[const.CFOP_ERROR_COST] = const.TRANS_KEY_ERROR_COST_RANGE
    return errors


def build_reward(
    name: str, icon: str, cost: int, *, reward_id: str | None = None
) -> RewardData:
    """Build a new, not yet purchased reward."""
    return {
        const.DATA_REWARD_ID: reward_id or new_id(),
        const.DATA_REWARD_NAME: name.strip(),
        const.DATA_REWARD_ICON: icon.strip(),
        const.DATA_REWARD_COST: cost,
        const.DATA_REWARD_PURCHASED: False,
    }  # type: ignore[return-value]


# ==============================================================================
# ACTIVITIES
# ==============================================================================


def build_activity(
    activity_type: ActivityType,
    name: str,
    icon: str,
    points: int,
    timestamp: int,
) -> ActivityData:
    """Build an activity log entry (points already signed by the caller)."""
    return {
        const.DATA_ACTIVITY_ID: new_id(),
        const.DATA_ACTIVITY_TYPE: activity_type,
        const.DATA_ACTIVITY_NAME: name,
        const.DATA_ACTIVITY_ICON: icon,
        const.DATA_ACTIVITY_POINTS: points,
        const.DATA_ACTIVITY_TIMESTAMP: timestamp,
    }  # type: ignore[return-value]


# ==============================================================================
# PIN
# ==============================================================================


def is_valid_pin(pin: Any) -> bool:
    """Return True for a string of exactly four digits."""
    return isinstance(pin, str) and bool(_PIN_PATTERN.fullmatch(pin))


def validate_pin_data(new_pin: Any, confirm_pin: Any) -> dict[str, str]:
    """Validate a PIN change.

    Validation Rules:
        1. Exactly 4 digits
        2. Confirmation equals the new PIN
    """
    if not is_valid_pin(new_pin):
        return {const.CFOP_ERROR_PIN: const.TRANS_KEY_ERROR_PIN_FORMAT}
    if new_pin != confirm_pin:
        return {const.CFOP_ERROR_PIN: const.TRANS_KEY_ERROR_PIN_MISMATCH}
    return {}

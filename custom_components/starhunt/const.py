# File: const.py
"""Constants for the Star Hunt integration.

This file centralizes configuration keys, defaults, storage keys, wire-format
field names, validation limits, and service identifiers for consistency across
the integration.
"""

import logging

from homeassistant.const import Platform

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
STARHUNT_TITLE = "Star Hunt"

# Integration Domain
DOMAIN = "starhunt"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORE = "store"
STORAGE_KEY = "starhunt_data"
STORAGE_VERSION = 1

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_LANGUAGE = "language"
CONF_PARENT_PIN = "parent_pin"
CONF_RESET_WINDOW_HOURS = "reset_window_hours"
CONF_SCAN_INTERVAL_MS = "scan_interval_ms"
CONF_BONUS_POINTS = "bonus_points"
CONF_BONUS_TASK_TARGET = "bonus_task_target"

# Languages with built-in default tasks and rewards
LANGUAGE_EN = "en"
LANGUAGE_NO = "no"
SUPPORTED_LANGUAGES = [LANGUAGE_EN, LANGUAGE_NO]
DEFAULT_LANGUAGE = LANGUAGE_EN

# ------------------------------------------------------------------------------------------------
# Timing
# ------------------------------------------------------------------------------------------------
MS_PER_SECOND = 1000
MS_PER_HOUR = 60 * 60 * MS_PER_SECOND

DEFAULT_RESET_WINDOW_HOURS = 24
RESET_WINDOW_MS = DEFAULT_RESET_WINDOW_HOURS * MS_PER_HOUR
RESET_IMMEDIATE_MS = 0

DEFAULT_SCAN_INTERVAL_MS = 500
MIN_SCAN_INTERVAL_MS = 100
MAX_SCAN_INTERVAL_MS = 5000

MIN_RESET_WINDOW_HOURS = 1
MAX_RESET_WINDOW_HOURS = 168

# ------------------------------------------------------------------------------------------------
# Bonus
# ------------------------------------------------------------------------------------------------
BONUS_WINDOW_MS = 24 * MS_PER_HOUR
DEFAULT_BONUS_POINTS = 5
DEFAULT_BONUS_TASK_TARGET = 3
MAX_BONUS_POINTS = 100
MAX_BONUS_TASK_TARGET = 20

# ------------------------------------------------------------------------------------------------
# Display
# ------------------------------------------------------------------------------------------------
RECENT_ACTIVITY_LIMIT = 10

# ------------------------------------------------------------------------------------------------
# Data Keys (wire format shared with other devices - do not rename)
# ------------------------------------------------------------------------------------------------
DATA_CHILDREN = "children"
DATA_SETTINGS = "settings"

# Legacy flat shape (tasks/rewards stored at the root)
DATA_LEGACY_TASKS = "tasks"
DATA_LEGACY_REWARDS = "rewards"

# Settings
DATA_SETTINGS_PARENT_PIN = "parentPin"
DATA_SETTINGS_REQUIRE_PIN_FOR_PURCHASE = "requirePinForPurchase"
DATA_SETTINGS_ENABLE_24H_RESET = "enable24hReset"

# Child
DATA_CHILD_ID = "id"
DATA_CHILD_NAME = "name"
DATA_CHILD_AVATAR = "avatar"
DATA_CHILD_POINTS = "points"
DATA_CHILD_TASKS = "tasks"
DATA_CHILD_REWARDS = "rewards"
DATA_CHILD_ACTIVITIES = "activities"
DATA_CHILD_BONUS_LAST_AWARDED_AT = "bonusLastAwardedAt"
DATA_CHILD_ENABLE_24H_RESET = "enable24hReset"

# Task
DATA_TASK_ID = "id"
DATA_TASK_NAME = "name"
DATA_TASK_ICON = "icon"
DATA_TASK_POINTS = "points"
DATA_TASK_COMPLETED = "completed"
DATA_TASK_COMPLETED_AT = "completedAt"

# Reward
DATA_REWARD_ID = "id"
DATA_REWARD_NAME = "name"
DATA_REWARD_ICON = "icon"
DATA_REWARD_COST = "cost"
DATA_REWARD_PURCHASED = "purchased"
DATA_REWARD_PURCHASED_AT = "purchasedAt"

# Activity
DATA_ACTIVITY_ID = "id"
DATA_ACTIVITY_TYPE = "type"
DATA_ACTIVITY_NAME = "name"
DATA_ACTIVITY_ICON = "icon"
DATA_ACTIVITY_POINTS = "points"
DATA_ACTIVITY_TIMESTAMP = "timestamp"

ACTIVITY_TYPE_TASK = "task"
ACTIVITY_TYPE_REWARD = "reward"
ACTIVITY_TYPES = frozenset({ACTIVITY_TYPE_TASK, ACTIVITY_TYPE_REWARD})

# Snapshot shapes recognized by the migrator
SNAPSHOT_SHAPE_CURRENT = "current"
SNAPSHOT_SHAPE_LEGACY_FLAT = "legacy_flat"
SNAPSHOT_SHAPE_INVALID = "invalid"

# ------------------------------------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------------------------------------
DEFAULT_ZERO = 0
DEFAULT_PARENT_PIN = "1234"
DEFAULT_ENABLE_24H_RESET = True
DEFAULT_CHILD_AVATAR = "⭐"
DEFAULT_ITEM_ICON = "⭐"
DEFAULT_TASK_POINTS = 5
DEFAULT_REWARD_COST = 20
SENTINEL_EMPTY = ""

# ------------------------------------------------------------------------------------------------
# Validation Limits
# ------------------------------------------------------------------------------------------------
MAX_ITEM_NAME_LENGTH = 50
MAX_CHILD_NAME_LENGTH = 30
MIN_TASK_POINTS = 1
MAX_TASK_POINTS = 100
MIN_REWARD_COST = 1
MAX_REWARD_COST = 1000

# ------------------------------------------------------------------------------------------------
# Sync Transport Limits (bytes, advisory)
# ------------------------------------------------------------------------------------------------
SYNC_CHANNEL_QR = "qr"
SYNC_CHANNEL_SMS = "sms"
SYNC_CHANNEL_EMAIL = "email"
SYNC_CHANNEL_LIMITS: dict[str, int] = {
    SYNC_CHANNEL_QR: 2900,
    SYNC_CHANNEL_SMS: 1000,
    SYNC_CHANNEL_EMAIL: 50000,
}

# ------------------------------------------------------------------------------------------------
# Action Result Reasons
# ------------------------------------------------------------------------------------------------
REASON_CHILD_NOT_FOUND = "child_not_found"
REASON_TASK_NOT_FOUND = "task_not_found"
REASON_REWARD_NOT_FOUND = "reward_not_found"
REASON_TASK_ALREADY_COMPLETED = "task_already_completed"
REASON_TASK_NOT_COMPLETED = "task_not_completed"
REASON_REWARD_ALREADY_PURCHASED = "reward_already_purchased"
REASON_REWARD_NOT_PURCHASED = "reward_not_purchased"
REASON_INSUFFICIENT_POINTS = "insufficient_points"
REASON_INVALID_POINTS = "invalid_points"
REASON_VALIDATION_FAILED = "validation_failed"
REASON_NOTHING_TO_RESET = "nothing_to_reset"

# ------------------------------------------------------------------------------------------------
# Validation Error Fields / Translation Keys
# ------------------------------------------------------------------------------------------------
CFOP_ERROR_NAME = "name"
CFOP_ERROR_ICON = "icon"
CFOP_ERROR_AVATAR = "avatar"
CFOP_ERROR_POINTS = "points"
CFOP_ERROR_COST = "cost"
CFOP_ERROR_PIN = "pin"

TRANS_KEY_ERROR_TASK_NAME_EMPTY = "task_name_cannot_be_empty"
TRANS_KEY_ERROR_TASK_NAME_TOO_LONG = "task_name_too_long"
TRANS_KEY_ERROR_REWARD_NAME_EMPTY = "reward_name_cannot_be_empty"
TRANS_KEY_ERROR_REWARD_NAME_TOO_LONG = "reward_name_too_long"
TRANS_KEY_ERROR_CHILD_NAME_EMPTY = "child_name_cannot_be_empty"
TRANS_KEY_ERROR_CHILD_NAME_TOO_LONG = "child_name_too_long"
TRANS_KEY_ERROR_ICON_REQUIRED = "select_icon_required"
TRANS_KEY_ERROR_AVATAR_REQUIRED = "select_avatar_required"
TRANS_KEY_ERROR_POINTS_RANGE = "points_out_of_range"
TRANS_KEY_ERROR_COST_RANGE = "price_out_of_range"
TRANS_KEY_ERROR_PIN_FORMAT = "pin_must_be_4_digits"
TRANS_KEY_ERROR_PIN_MISMATCH = "pins_do_not_match"
TRANS_KEY_ERROR_WRONG_PIN = "wrong_pin"
TRANS_KEY_ERROR_INVALID_PAYLOAD = "invalid_payload"
TRANS_KEY_ERROR_MUST_HAVE_ONE_CHILD = "must_have_one_child"
TRANS_KEY_ERROR_MISSING_TARGET = "missing_target"
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_COMPLETE_TASK = "complete_task"
SERVICE_PURCHASE_REWARD = "purchase_reward"
SERVICE_ADJUST_POINTS = "adjust_points"
SERVICE_ADD_CHILD = "add_child"
SERVICE_REMOVE_CHILD = "remove_child"
SERVICE_ADD_TASK = "add_task"
SERVICE_REMOVE_TASK = "remove_task"
SERVICE_ADD_REWARD = "add_reward"
SERVICE_REMOVE_REWARD = "remove_reward"
SERVICE_RESET_TASK = "reset_task"
SERVICE_RESET_TASKS = "reset_tasks"
SERVICE_RESET_REWARD = "reset_reward"
SERVICE_RESET_REWARDS = "reset_rewards"
SERVICE_UPDATE_PIN = "update_pin"
SERVICE_UPDATE_SETTINGS = "update_settings"
SERVICE_SET_CHILD_RESET_MODE = "set_child_reset_mode"
SERVICE_RESET_ALL_DATA = "reset_all_data"
SERVICE_IMPORT_SNAPSHOT = "import_snapshot"
SERVICE_EXPORT_SNAPSHOT = "export_snapshot"

# Service Fields
FIELD_CHILD_ID = "child_id"
FIELD_CHILD_NAME = "child_name"
FIELD_TASK_ID = "task_id"
FIELD_TASK_NAME = "task_name"
FIELD_REWARD_ID = "reward_id"
FIELD_REWARD_NAME = "reward_name"
FIELD_NAME = "name"
FIELD_ICON = "icon"
FIELD_AVATAR = "avatar"
FIELD_POINTS = "points"
FIELD_COST = "cost"
FIELD_PIN = "pin"
FIELD_NEW_PIN = "new_pin"
FIELD_CONFIRM_PIN = "confirm_pin"
FIELD_REQUIRE_PIN_FOR_PURCHASE = "require_pin_for_purchase"
FIELD_ENABLE_24H_RESET = "enable_24h_reset"
FIELD_PAYLOAD = "payload"

# Export response keys
EXPORT_PAYLOAD = "payload"
EXPORT_URL_PARAM = "url_param"
EXPORT_SIZE_BYTES = "size_bytes"
EXPORT_CHANNELS = "channels"

# ------------------------------------------------------------------------------------------------
# Sensors
# ------------------------------------------------------------------------------------------------
SENSOR_UID_SUFFIX_CHILD_POINTS = "_child_points"
TRANS_KEY_SENSOR_CHILD_POINTS = "child_points_sensor"
DEFAULT_POINTS_ICON = "mdi:star"

ATTR_CHILD_NAME = "child_name"
ATTR_AVATAR = "avatar"
ATTR_TASKS_COMPLETED = "tasks_completed"
ATTR_TASKS_TOTAL = "tasks_total"
ATTR_REWARDS_PURCHASED = "rewards_purchased"
ATTR_RECENT_ACTIVITIES = "recent_activities"
ATTR_BONUS_LAST_AWARDED_AT = "bonus_last_awarded_at"
ATTR_RESET_MODE = "reset_mode"

RESET_MODE_WINDOW = "window"
RESET_MODE_IMMEDIATE = "immediate"

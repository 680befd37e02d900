# File: helpers/flow_helpers.py
"""Config and options flow helpers for Star Hunt.

Schema builders and validators shared by config_flow.py and options_flow.py.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import voluptuous as vol
from homeassistant.helpers import selector

from .. import const, data_builders as db


def _int_box(min_val: int, max_val: int) -> vol.All:
    """Integer input rendered as a number box."""
    return vol.All(
        selector.NumberSelector(
            selector.NumberSelectorConfig(
                mode=selector.NumberSelectorMode.BOX,
                min=min_val,
                max=max_val,
                step=1,
            )
        ),
        vol.Coerce(int),
        vol.Range(min=min_val, max=max_val),
    )


def _language_selector() -> selector.SelectSelector:
    return selector.SelectSelector(
        selector.SelectSelectorConfig(
            options=const.SUPPORTED_LANGUAGES,
            mode=selector.SelectSelectorMode.DROPDOWN,
            translation_key=const.CONF_LANGUAGE,
        )
    )


def build_user_schema(defaults: Mapping[str, Any] | None = None) -> vol.Schema:
    """Schema for the initial setup step (language and parent PIN)."""
    defaults = defaults or {}
    return vol.Schema(
        {
            vol.Required(
                const.CONF_LANGUAGE,
                default=defaults.get(const.CONF_LANGUAGE, const.DEFAULT_LANGUAGE),
            ): _language_selector(),
            vol.Required(
                const.CONF_PARENT_PIN,
                default=defaults.get(const.CONF_PARENT_PIN, const.DEFAULT_PARENT_PIN),
            ): str,
        }
    )


def validate_user_input(user_input: Mapping[str, Any]) -> dict[str, str]:
    """Validate the setup step; returns {field: translation_key}."""
    errors: dict[str, str] = {}
    if not db.is_valid_pin(user_input.get(const.CONF_PARENT_PIN)):
        errors[const.CONF_PARENT_PIN] = const.TRANS_KEY_ERROR_PIN_FORMAT
    return errors


def default_options(language: str = const.DEFAULT_LANGUAGE) -> dict[str, Any]:
    """Options stored on a new config entry."""
    return {
        const.CONF_LANGUAGE: language,
        const.CONF_RESET_WINDOW_HOURS: const.DEFAULT_RESET_WINDOW_HOURS,
        const.CONF_SCAN_INTERVAL_MS: const.DEFAULT_SCAN_INTERVAL_MS,
        const.CONF_BONUS_POINTS: const.DEFAULT_BONUS_POINTS,
        const.CONF_BONUS_TASK_TARGET: const.DEFAULT_BONUS_TASK_TARGET,
    }


def build_options_schema(options: Mapping[str, Any]) -> vol.Schema:
    """Schema for the options step, pre-filled with current values."""
    current = {**default_options(), **options}
    return vol.Schema(
        {
            vol.Required(
                const.CONF_LANGUAGE, default=current[const.CONF_LANGUAGE]
            ): _language_selector(),
            vol.Required(
                const.CONF_RESET_WINDOW_HOURS,
                default=current[const.CONF_RESET_WINDOW_HOURS],
            ): _int_box(const.MIN_RESET_WINDOW_HOURS, const.MAX_RESET_WINDOW_HOURS),
            vol.Required(
                const.CONF_SCAN_INTERVAL_MS,
                default=current[const.CONF_SCAN_INTERVAL_MS],
            ): _int_box(const.MIN_SCAN_INTERVAL_MS, const.MAX_SCAN_INTERVAL_MS),
            vol.Required(
                const.CONF_BONUS_POINTS, default=current[const.CONF_BONUS_POINTS]
            ): _int_box(0, const.MAX_BONUS_POINTS),
            vol.Required(
                const.CONF_BONUS_TASK_TARGET,
                default=current[const.CONF_BONUS_TASK_TARGET],
            ): _int_box(1, const.MAX_BONUS_TASK_TARGET),
        }
    )

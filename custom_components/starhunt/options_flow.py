# File: options_flow.py
"""Options Flow for the Star Hunt integration.

Edits language, reset window, refresh interval and bonus rules. Saving the
options reloads the entry (see async_update_options in __init__.py), which
also translates untouched default task/reward names to the new language.
"""

from __future__ import annotations

from typing import Any

from homeassistant import config_entries
from homeassistant.config_entries import ConfigFlowResult

from . import const
from .helpers import flow_helpers as fh


class StarHuntOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for Star Hunt settings."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Show and save the options form."""
        if user_input is not None:
            const.LOGGER.debug("DEBUG: Saving Star Hunt options: %s", user_input)
            return self.async_create_entry(data=user_input)

        return self.async_show_form(
            step_id="init",
            data_schema=fh.build_options_schema(self.config_entry.options),
        )

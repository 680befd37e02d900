# File: config_flow.py
"""Config flow for the Star Hunt integration.

One household per Home Assistant instance. Setup asks for the language of the
default tasks/rewards and the initial parent PIN; everything else (children,
tasks, rewards) is managed through services afterwards.
"""

from __future__ import annotations

from typing import Any

from homeassistant import config_entries
from homeassistant.config_entries import ConfigFlowResult
from homeassistant.core import callback

from . import const
from .helpers import flow_helpers as fh
from .options_flow import StarHuntOptionsFlowHandler


class StarHuntConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for Star Hunt."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for language and parent PIN, then create the entry."""
        if self._async_current_entries():
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        if user_input is not None:
            errors = fh.validate_user_input(user_input)
            if not errors:
                language = user_input[const.CONF_LANGUAGE]
                const.LOGGER.info("INFO: Creating Star Hunt entry (%s)", language)
                return self.async_create_entry(
                    title=const.STARHUNT_TITLE,
                    data={
                        const.CONF_LANGUAGE: language,
                        const.CONF_PARENT_PIN: user_input[const.CONF_PARENT_PIN],
                    },
                    options=fh.default_options(language),
                )

        return self.async_show_form(
            step_id="user",
            data_schema=fh.build_user_schema(user_input),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> StarHuntOptionsFlowHandler:
        """Return the Options Flow."""
        return StarHuntOptionsFlowHandler()

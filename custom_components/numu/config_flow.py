# File: config_flow.py
"""Config flow for the Numu integration.

A single step collects the week start convention and the consistency cache
window. Settings are stored in entry options so the options flow can edit
them later.
"""

from __future__ import annotations

from typing import Any

from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from . import flow_helpers as fh
from .options_flow import NumuOptionsFlowHandler


class NumuConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for Numu."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        """Handle the initial step."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        if user_input is not None:
            errors = fh.validate_settings_inputs(user_input)
            if not errors:
                const.LOGGER.info(
                    "INFO: Creating Numu entry with settings %s", user_input
                )
                return self.async_create_entry(
                    title=const.NUMU_TITLE,
                    data={},
                    options=fh.build_settings_data(user_input),
                )

        return self.async_show_form(
            step_id="user",
            data_schema=fh.build_settings_schema(user_input),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return NumuOptionsFlowHandler()

# File: options_flow.py
"""Options flow for the Numu integration: edit week start and cache window."""

from __future__ import annotations

from typing import Any

from homeassistant import config_entries

from . import const
from . import flow_helpers as fh


class NumuOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for editing integration settings."""

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        errors: dict[str, str] = {}
        if user_input is not None:
            errors = fh.validate_settings_inputs(user_input)
            if not errors:
                const.LOGGER.debug("DEBUG: Updating Numu options: %s", user_input)
                return self.async_create_entry(
                    title="", data=fh.build_settings_data(user_input)
                )

        return self.async_show_form(
            step_id="init",
            data_schema=fh.build_settings_schema(
                user_input or dict(self.config_entry.options)
            ),
            errors=errors,
        )

# File: flow_helpers.py
"""Helpers for the Numu integration's Config and Options flow.

Both flows edit the same two settings, so they share one schema builder,
one validator and one data builder:

- validate_settings_inputs(user_input) -> errors_dict
- build_settings_schema(default) -> vol.Schema
- build_settings_data(user_input) -> options dict
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.helpers import selector

from . import const

# ----------------------------------------------------------------------------------
# SETTINGS SCHEMA
# ----------------------------------------------------------------------------------


def build_settings_schema(default: dict[str, Any] | None = None) -> vol.Schema:
    """Build a schema for week start and consistency cache window."""
    default = default or {}
    return vol.Schema(
        {
            vol.Required(
                const.CONF_WEEK_START,
                default=default.get(const.CONF_WEEK_START, const.DEFAULT_WEEK_START),
            ): selector.SelectSelector(
                selector.SelectSelectorConfig(
                    options=const.WEEK_START_OPTIONS,
                    mode=selector.SelectSelectorMode.DROPDOWN,
                    translation_key=const.CONF_WEEK_START,
                )
            ),
            vol.Required(
                const.CONF_CONSISTENCY_CACHE_MINUTES,
                default=default.get(
                    const.CONF_CONSISTENCY_CACHE_MINUTES,
                    const.DEFAULT_CONSISTENCY_CACHE_MINUTES,
                ),
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    mode=selector.NumberSelectorMode.BOX,
                    min=const.MIN_CONSISTENCY_CACHE_MINUTES,
                    max=const.MAX_CONSISTENCY_CACHE_MINUTES,
                    step=1,
                )
            ),
        }
    )


def validate_settings_inputs(user_input: dict[str, Any]) -> dict[str, str]:
    """Validate settings inputs.

    Returns:
        Dictionary of errors (empty if validation passes).
    """
    errors: dict[str, str] = {}

    if user_input.get(const.CONF_WEEK_START) not in const.WEEK_START_OPTIONS:
        errors[const.CONF_WEEK_START] = "invalid_week_start"

    try:
        minutes = int(
            user_input.get(
                const.CONF_CONSISTENCY_CACHE_MINUTES,
                const.DEFAULT_CONSISTENCY_CACHE_MINUTES,
            )
        )
    except (TypeError, ValueError):
        errors[const.CONF_CONSISTENCY_CACHE_MINUTES] = "invalid_cache_minutes"
    else:
        if not (
            const.MIN_CONSISTENCY_CACHE_MINUTES
            <= minutes
            <= const.MAX_CONSISTENCY_CACHE_MINUTES
        ):
            errors[const.CONF_CONSISTENCY_CACHE_MINUTES] = "invalid_cache_minutes"

    return errors


def build_settings_data(user_input: dict[str, Any]) -> dict[str, Any]:
    """Build options data from validated user input.

    NumberSelector returns floats; the cache window is stored as whole minutes.
    """
    return {
        const.CONF_WEEK_START: user_input.get(
            const.CONF_WEEK_START, const.DEFAULT_WEEK_START
        ),
        const.CONF_CONSISTENCY_CACHE_MINUTES: int(
            user_input.get(
                const.CONF_CONSISTENCY_CACHE_MINUTES,
                const.DEFAULT_CONSISTENCY_CACHE_MINUTES,
            )
        ),
    }

# File: services.py
"""Defines custom services for the Numu integration.

These services allow direct actions through scripts or automations, and are
the entry point for external completion sources (e.g. a health integration
calling complete_task with source="health").
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const

if TYPE_CHECKING:
    from .coordinator import NumuDataCoordinator

# --- Service Schemas ---
FREQUENCY_FIELDS = {
    vol.Optional(const.FIELD_FREQUENCY, default=const.FREQUENCY_DAILY): vol.In(
        const.FREQUENCY_OPTIONS
    ),
    vol.Optional(const.FIELD_DAYS): vol.All(cv.ensure_list, [vol.Coerce(int)]),
    vol.Optional(const.FIELD_TIMES): vol.Coerce(int),
}

CREATE_SYSTEM_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_SYSTEM_NAME): cv.string,
        vol.Optional(const.FIELD_CATEGORY): cv.string,
        vol.Optional(const.FIELD_DESCRIPTION): cv.string,
    }
)

SYSTEM_ID_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_SYSTEM_ID): cv.string,
    }
)

CREATE_TASK_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_SYSTEM_ID): cv.string,
        vol.Required(const.FIELD_TASK_NAME): cv.string,
        **FREQUENCY_FIELDS,
    }
)

UPDATE_TASK_FREQUENCY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TASK_ID): cv.string,
        **FREQUENCY_FIELDS,
    }
)

TASK_ID_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TASK_ID): cv.string,
    }
)

COMPLETE_TASK_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TASK_ID): cv.string,
        vol.Optional(const.FIELD_DATE): cv.date,
        vol.Optional(const.FIELD_DURATION_MINUTES): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
        vol.Optional(const.FIELD_SOURCE, default=const.SOURCE_SERVICE): cv.string,
    }
)

UNCOMPLETE_TASK_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TASK_ID): cv.string,
        vol.Optional(const.FIELD_DATE): cv.date,
    }
)

CREATE_TEST_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_SYSTEM_ID): cv.string,
        vol.Required(const.FIELD_TEST_NAME): cv.string,
        vol.Optional(const.FIELD_UNIT): cv.string,
        vol.Optional(
            const.FIELD_GOAL_DIRECTION, default=const.GOAL_DIRECTION_HIGHER
        ): vol.In(const.GOAL_DIRECTION_OPTIONS),
        vol.Optional(const.FIELD_TARGET_VALUE): vol.Coerce(float),
        vol.Optional(const.FIELD_TRACK_EVERY, default=1): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
        vol.Optional(const.FIELD_TRACK_UNIT, default=const.TRACKING_UNIT_WEEKS): vol.In(
            const.TRACKING_UNITS
        ),
        vol.Optional(const.FIELD_DESCRIPTION): cv.string,
    }
)

TEST_ID_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TEST_ID): cv.string,
    }
)

RECORD_TEST_ENTRY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TEST_ID): cv.string,
        vol.Required(const.FIELD_VALUE): vol.Coerce(float),
        vol.Optional(const.FIELD_DATE): cv.date,
        vol.Optional(const.FIELD_NOTES): cv.string,
        vol.Optional(const.FIELD_CONDITIONS): cv.string,
    }
)


def _get_coordinator(hass: HomeAssistant) -> NumuDataCoordinator:
    """Return the coordinator of the (single) loaded Numu entry."""
    entries = hass.data.get(const.DOMAIN, {})
    for entry_data in entries.values():
        return entry_data[const.COORDINATOR]
    raise HomeAssistantError(
        translation_domain=const.DOMAIN,
        translation_key=const.TRANS_KEY_ERROR_NOT_LOADED,
    )


def _frequency_from_call(data: dict[str, Any]) -> dict[str, Any]:
    frequency: dict[str, Any] = {const.FREQUENCY_TYPE: data[const.FIELD_FREQUENCY]}
    if const.FIELD_DAYS in data:
        frequency[const.FREQUENCY_DAYS] = data[const.FIELD_DAYS]
    if const.FIELD_TIMES in data:
        frequency[const.FREQUENCY_TIMES] = data[const.FIELD_TIMES]
    return frequency


def async_setup_services(hass: HomeAssistant) -> None:
    """Register Numu services."""
    if hass.services.has_service(const.DOMAIN, const.SERVICE_CREATE_SYSTEM):
        return

    async def handle_create_system(call: ServiceCall) -> ServiceResponse:
        """Handle creating a system. Responds with its id."""
        coordinator = _get_coordinator(hass)
        user_input = {const.DATA_NAME: call.data[const.FIELD_SYSTEM_NAME]}
        if const.FIELD_CATEGORY in call.data:
            user_input[const.DATA_SYSTEM_CATEGORY] = call.data[const.FIELD_CATEGORY]
        if const.FIELD_DESCRIPTION in call.data:
            user_input[const.DATA_SYSTEM_DESCRIPTION] = call.data[
                const.FIELD_DESCRIPTION
            ]
        system_id = await coordinator.task_manager.async_create_system(user_input)
        return {const.FIELD_SYSTEM_ID: system_id}

    async def handle_delete_system(call: ServiceCall) -> None:
        coordinator = _get_coordinator(hass)
        await coordinator.task_manager.async_delete_system(
            call.data[const.FIELD_SYSTEM_ID]
        )

    async def handle_create_task(call: ServiceCall) -> ServiceResponse:
        """Handle creating a task. Responds with its id."""
        coordinator = _get_coordinator(hass)
        task_id = await coordinator.task_manager.async_create_task(
            {
                const.DATA_TASK_SYSTEM_ID: call.data[const.FIELD_SYSTEM_ID],
                const.DATA_NAME: call.data[const.FIELD_TASK_NAME],
                const.DATA_TASK_FREQUENCY: _frequency_from_call(call.data),
            }
        )
        return {const.FIELD_TASK_ID: task_id}

    async def handle_update_task_frequency(call: ServiceCall) -> None:
        coordinator = _get_coordinator(hass)
        await coordinator.task_manager.async_update_task_frequency(
            call.data[const.FIELD_TASK_ID], _frequency_from_call(call.data)
        )

    async def handle_delete_task(call: ServiceCall) -> None:
        coordinator = _get_coordinator(hass)
        await coordinator.task_manager.async_delete_task(call.data[const.FIELD_TASK_ID])

    async def handle_complete_task(call: ServiceCall) -> None:
        """Handle marking a task complete, today unless a date is given."""
        coordinator = _get_coordinator(hass)
        task_id = call.data[const.FIELD_TASK_ID]
        await coordinator.task_manager.async_mark_complete(
            task_id,
            call.data.get(const.FIELD_DATE),
            duration_minutes=call.data.get(const.FIELD_DURATION_MINUTES),
            source=call.data.get(const.FIELD_SOURCE),
        )
        const.LOGGER.info(
            "INFO: Task %s completed via service (source=%s)",
            task_id,
            call.data.get(const.FIELD_SOURCE),
        )

    async def handle_uncomplete_task(call: ServiceCall) -> None:
        coordinator = _get_coordinator(hass)
        removed = await coordinator.task_manager.async_unmark_complete(
            call.data[const.FIELD_TASK_ID], call.data.get(const.FIELD_DATE)
        )
        if not removed:
            const.LOGGER.warning(
                "WARNING: Uncomplete Task: no completion found for task %s",
                call.data[const.FIELD_TASK_ID],
            )

    async def handle_create_test(call: ServiceCall) -> ServiceResponse:
        """Handle creating a performance test. Responds with its id."""
        coordinator = _get_coordinator(hass)
        user_input: dict[str, Any] = {
            const.DATA_TEST_SYSTEM_ID: call.data[const.FIELD_SYSTEM_ID],
            const.DATA_NAME: call.data[const.FIELD_TEST_NAME],
            const.DATA_TEST_GOAL_DIRECTION: call.data[const.FIELD_GOAL_DIRECTION],
            const.DATA_TEST_TRACKING: {
                const.TRACKING_UNIT: call.data[const.FIELD_TRACK_UNIT],
                const.TRACKING_COUNT: call.data[const.FIELD_TRACK_EVERY],
            },
        }
        if const.FIELD_UNIT in call.data:
            user_input[const.DATA_TEST_UNIT] = call.data[const.FIELD_UNIT]
        if const.FIELD_TARGET_VALUE in call.data:
            user_input[const.DATA_TEST_TARGET_VALUE] = call.data[
                const.FIELD_TARGET_VALUE
            ]
        if const.FIELD_DESCRIPTION in call.data:
            user_input[const.DATA_TEST_DESCRIPTION] = call.data[const.FIELD_DESCRIPTION]
        test_id = await coordinator.performance_test_manager.async_create_test(
            user_input
        )
        return {const.FIELD_TEST_ID: test_id}

    async def handle_delete_test(call: ServiceCall) -> None:
        coordinator = _get_coordinator(hass)
        await coordinator.performance_test_manager.async_delete_test(
            call.data[const.FIELD_TEST_ID]
        )

    async def handle_record_test_entry(call: ServiceCall) -> ServiceResponse:
        """Handle recording a measured value. Responds with the entry id."""
        coordinator = _get_coordinator(hass)
        entry, personal_record = (
            await coordinator.performance_test_manager.async_record_entry(
                call.data[const.FIELD_TEST_ID],
                call.data[const.FIELD_VALUE],
                call.data.get(const.FIELD_DATE),
                notes=call.data.get(const.FIELD_NOTES),
                conditions=call.data.get(const.FIELD_CONDITIONS),
            )
        )
        return {
            "entry_id": entry[const.DATA_INTERNAL_ID],
            "personal_record": personal_record,
        }

    async def handle_get_test_summary(call: ServiceCall) -> ServiceResponse:
        coordinator = _get_coordinator(hass)
        return coordinator.performance_test_manager.get_test_summary(
            call.data[const.FIELD_TEST_ID]
        )

    async def handle_get_system_summary(call: ServiceCall) -> ServiceResponse:
        coordinator = _get_coordinator(hass)
        return await coordinator.statistics_manager.async_get_system_summary(
            call.data[const.FIELD_SYSTEM_ID]
        )

    async def handle_get_task_summary(call: ServiceCall) -> ServiceResponse:
        coordinator = _get_coordinator(hass)
        return await coordinator.statistics_manager.async_get_task_summary(
            call.data[const.FIELD_TASK_ID]
        )

    # --- Register Services ---
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_CREATE_SYSTEM,
        handle_create_system,
        schema=CREATE_SYSTEM_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_DELETE_SYSTEM,
        handle_delete_system,
        schema=SYSTEM_ID_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_CREATE_TASK,
        handle_create_task,
        schema=CREATE_TASK_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_TASK_FREQUENCY,
        handle_update_task_frequency,
        schema=UPDATE_TASK_FREQUENCY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_DELETE_TASK,
        handle_delete_task,
        schema=TASK_ID_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_COMPLETE_TASK,
        handle_complete_task,
        schema=COMPLETE_TASK_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UNCOMPLETE_TASK,
        handle_uncomplete_task,
        schema=UNCOMPLETE_TASK_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_CREATE_TEST,
        handle_create_test,
        schema=CREATE_TEST_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_DELETE_TEST,
        handle_delete_test,
        schema=TEST_ID_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RECORD_TEST_ENTRY,
        handle_record_test_entry,
        schema=RECORD_TEST_ENTRY_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_TEST_SUMMARY,
        handle_get_test_summary,
        schema=TEST_ID_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_SYSTEM_SUMMARY,
        handle_get_system_summary,
        schema=SYSTEM_ID_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_TASK_SUMMARY,
        handle_get_task_summary,
        schema=TASK_ID_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )

    const.LOGGER.info("INFO: Numu services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister Numu services when unloading the integration."""
    for service in const.SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: Numu services have been unregistered")

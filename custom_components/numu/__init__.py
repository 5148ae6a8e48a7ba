# File: __init__.py
"""Initialization file for the Numu integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and preparing the coordinator for data handling.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization for data synchronization.
- Storage management for persistent data handling.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
import homeassistant.util.dt as dt_util

from . import const
from .coordinator import NumuDataCoordinator
from .services import async_setup_services, async_unload_services
from .store import NumuStore
from .utils import dt_utils

PLATFORMS = [
    Platform.SENSOR,
]


def set_default_timezone(hass: HomeAssistant) -> None:
    """Point the engines' calendar-day helpers at the configured timezone."""
    time_zone = dt_util.get_time_zone(hass.config.time_zone)
    if time_zone is not None:
        dt_utils.set_default_timezone(time_zone)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for Numu entry: %s", entry.entry_id)

    # Calendar days are local; must be set before any day is derived
    set_default_timezone(hass)

    store = NumuStore(hass, const.STORAGE_KEY)
    await store.async_initialize()

    coordinator = NumuDataCoordinator(hass, entry, store)

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise ConfigEntryNotReady from e

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORE: store,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    # Option changes (week start, cache window) take effect on reload
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    const.LOGGER.info("INFO: Numu setup complete for entry: %s", entry.entry_id)
    return True


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading Numu entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)

    if unload_ok:
        hass.data[const.DOMAIN].pop(entry.entry_id)
        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry: delete its storage file."""
    const.LOGGER.info("INFO: Removing Numu entry: %s", entry.entry_id)

    store = NumuStore(hass, const.STORAGE_KEY)
    await store.async_delete_storage()

    const.LOGGER.info("INFO: Numu entry data cleared: %s", entry.entry_id)

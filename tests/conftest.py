"""Shared fixtures for Numu tests."""

from datetime import datetime
from typing import Any
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.numu.const import (
    CONF_CONSISTENCY_CACHE_MINUTES,
    CONF_WEEK_START,
    COORDINATOR,
    DEFAULT_CONSISTENCY_CACHE_MINUTES,
    DEFAULT_WEEK_START,
    DOMAIN,
)
from custom_components.numu.coordinator import NumuDataCoordinator
from custom_components.numu.store import NumuStore

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title="Numu",
        data={},
        options={
            CONF_WEEK_START: DEFAULT_WEEK_START,
            CONF_CONSISTENCY_CACHE_MINUTES: DEFAULT_CONSISTENCY_CACHE_MINUTES,
        },
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
def mock_storage_data() -> dict[str, Any]:
    """Return an empty storage structure."""
    return NumuStore.get_default_structure()


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the Numu integration for testing with mocked storage."""
    mock_config_entry.add_to_hass(hass)

    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry


@pytest.fixture
def coordinator(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> NumuDataCoordinator:
    """Return the coordinator of the loaded test entry."""
    return hass.data[DOMAIN][init_integration.entry_id][COORDINATOR]


@pytest.fixture
def local_dt(hass: HomeAssistant):
    """Build aware datetimes in the test instance's timezone."""

    def _make(year: int, month: int, day: int, hour: int = 12, minute: int = 0):
        return datetime(
            year, month, day, hour, minute, tzinfo=ZoneInfo(hass.config.time_zone)
        )

    return _make

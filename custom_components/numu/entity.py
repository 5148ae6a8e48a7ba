"""Base entity classes for Numu integration."""

from __future__ import annotations

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from . import const
from .coordinator import NumuDataCoordinator


class NumuCoordinatorEntity(CoordinatorEntity[NumuDataCoordinator]):
    """Base entity class for Numu sensors with typed coordinator access.

    All Numu entities hang off one service device per config entry.
    """

    _attr_has_entity_name = True

    def __init__(self, coordinator: NumuDataCoordinator, key: str) -> None:
        super().__init__(coordinator)
        entry_id = coordinator.config_entry.entry_id
        self._attr_unique_id = f"{entry_id}_{key}"
        self._attr_translation_key = key
        self._attr_device_info = DeviceInfo(
            identifiers={(const.DOMAIN, entry_id)},
            name=const.NUMU_TITLE,
            entry_type=DeviceEntryType.SERVICE,
        )

    @property
    def coordinator(self) -> NumuDataCoordinator:
        """Return typed coordinator."""
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: NumuDataCoordinator) -> None:
        object.__setattr__(self, "_coordinator", value)

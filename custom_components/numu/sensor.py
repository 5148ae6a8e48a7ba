# File: sensor.py
"""Sensors for the Numu integration.

- NumuLevelSensor: current level; XP, tier and counters as attributes
- NumuAchievementsSensor: number of unlocked achievements; recent unlocks
  as attributes

Both read the progress profile through the coordinator and refresh whenever
a manager calls coordinator._persist_and_update().
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .coordinator import NumuDataCoordinator
from .entity import NumuCoordinatorEntity


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for Numu integration."""
    coordinator: NumuDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    async_add_entities(
        [
            NumuLevelSensor(coordinator),
            NumuAchievementsSensor(coordinator),
        ]
    )


class NumuLevelSensor(NumuCoordinatorEntity, SensorEntity):
    """Sensor for the current progression level."""

    _attr_icon = "mdi:trophy-variant"
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, coordinator: NumuDataCoordinator) -> None:
        super().__init__(coordinator, const.SENSOR_KEY_LEVEL)

    @property
    def native_value(self) -> int:
        return self.coordinator.progress_data.get(const.DATA_PROGRESS_LEVEL, 1)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """XP within the level, tier and the achievement counters."""
        attributes = self.coordinator.gamification_manager.get_level_summary()
        attributes.pop(const.DATA_PROGRESS_LEVEL, None)
        attributes[const.ATTR_COUNTERS] = dict(
            self.coordinator.progress_data.get(const.DATA_PROGRESS_COUNTERS, {})
        )
        return attributes


class NumuAchievementsSensor(NumuCoordinatorEntity, SensorEntity):
    """Sensor for the number of unlocked achievements."""

    _attr_icon = "mdi:medal"

    def __init__(self, coordinator: NumuDataCoordinator) -> None:
        super().__init__(coordinator, const.SENSOR_KEY_ACHIEVEMENTS)

    @property
    def native_value(self) -> int:
        return sum(
            1
            for achievement in self.coordinator.achievements_data.values()
            if achievement.get(const.DATA_ACHIEVEMENT_UNLOCKED)
        )

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        achievements = self.coordinator.achievements_data
        recently = self.coordinator.progress_data.get(
            const.DATA_PROGRESS_RECENTLY_UNLOCKED, []
        )
        return {
            const.ATTR_TOTAL_ACHIEVEMENTS: len(achievements),
            const.ATTR_UNLOCKED: sorted(
                achievement_id
                for achievement_id, achievement in achievements.items()
                if achievement.get(const.DATA_ACHIEVEMENT_UNLOCKED)
            ),
            const.ATTR_RECENTLY_UNLOCKED: [
                achievements[achievement_id][const.DATA_NAME]
                for achievement_id in recently
                if achievement_id in achievements
            ],
        }

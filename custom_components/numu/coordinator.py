# File: coordinator.py
"""Coordinator for the Numu integration.

Owns the store and the managers, exposes read-only views over stored
systems/tasks, and builds the immutable TaskHistory snapshots every engine
works on. All writes happen in managers on the event loop; the coordinator
only persists and notifies listeners.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import const
from .engines.performance_test_engine import Measurement
from .engines.recurrence_engine import Frequency
from .engines.streak_engine import TaskHistory
from .managers import (
    GamificationManager,
    PerformanceTestManager,
    StatisticsManager,
    TaskManager,
)
from .utils.dt_utils import dt_parse_datetime, dt_parse_day, start_of_day

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .store import NumuStore
    from .type_defs import (
        AchievementData,
        PerformanceTestData,
        ProgressData,
        SystemData,
        TaskData,
    )


class NumuDataCoordinator(DataUpdateCoordinator):
    """Coordinator for Numu integration.

    Manages data primarily using internal_id for entities.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: NumuStore,
    ) -> None:
        """Initialize the NumuDataCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=const.DEFAULT_UPDATE_INTERVAL),
        )
        self.config_entry = config_entry
        self.store = store

        self.task_manager = TaskManager(hass, self)
        self.performance_test_manager = PerformanceTestManager(hass, self)
        self.statistics_manager = StatisticsManager(hass, self)
        self.gamification_manager = GamificationManager(hass, self)

    # -------------------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------------------

    @property
    def week_start(self) -> str:
        return self.config_entry.options.get(
            const.CONF_WEEK_START, const.DEFAULT_WEEK_START
        )

    @property
    def consistency_cache_window(self) -> timedelta:
        minutes = self.config_entry.options.get(
            const.CONF_CONSISTENCY_CACHE_MINUTES,
            const.DEFAULT_CONSISTENCY_CACHE_MINUTES,
        )
        return timedelta(minutes=minutes)

    # -------------------------------------------------------------------------------------
    # Data views
    # -------------------------------------------------------------------------------------

    @property
    def systems_data(self) -> dict[str, SystemData]:
        return self.store.data[const.DATA_SYSTEMS]

    @property
    def tasks_data(self) -> dict[str, TaskData]:
        return self.store.data[const.DATA_TASKS]

    @property
    def tests_data(self) -> dict[str, PerformanceTestData]:
        return self.store.data[const.DATA_TESTS]

    @property
    def progress_data(self) -> ProgressData:
        return self.store.data[const.DATA_PROGRESS]

    @property
    def achievements_data(self) -> dict[str, AchievementData]:
        return self.store.data[const.DATA_ACHIEVEMENTS]

    def task_ids_for_system(self, system_id: str) -> list[str]:
        return [
            task_id
            for task_id, task in self.tasks_data.items()
            if task.get(const.DATA_TASK_SYSTEM_ID) == system_id
        ]

    def task_history(self, task_id: str) -> TaskHistory | None:
        """Build an immutable snapshot of a task for the engines."""
        task = self.tasks_data.get(task_id)
        if task is None:
            return None
        created_at = dt_parse_datetime(task.get(const.DATA_CREATED_AT))
        created = (
            start_of_day(created_at)
            if created_at is not None
            else dt_parse_day(task.get(const.DATA_CREATED_AT))
        )
        if created is None:
            const.LOGGER.warning(
                "WARNING: Task %s has an unreadable created_at: %s",
                task_id,
                task.get(const.DATA_CREATED_AT),
            )
            return None
        return TaskHistory(
            task_id=task_id,
            frequency=Frequency.from_dict(task[const.DATA_TASK_FREQUENCY]),
            created=created,
            completions=frozenset(self.store.get_completion_days(task_id)),
        )

    def system_histories(self, system_id: str) -> list[TaskHistory]:
        histories = []
        for task_id in self.task_ids_for_system(system_id):
            history = self.task_history(task_id)
            if history is not None:
                histories.append(history)
        return histories

    def test_ids_for_system(self, system_id: str) -> list[str]:
        return [
            test_id
            for test_id, test in self.tests_data.items()
            if test.get(const.DATA_TEST_SYSTEM_ID) == system_id
        ]

    def test_measurements(self, test_id: str) -> list[Measurement]:
        """Immutable snapshots of a test's entries, oldest first."""
        measurements = []
        for entry in self.store.get_test_entries(test_id):
            recorded_at = dt_parse_datetime(entry.get(const.DATA_ENTRY_RECORDED_AT))
            day = dt_parse_day(entry.get(const.DATA_ENTRY_DAY))
            if recorded_at is None or day is None:
                const.LOGGER.warning(
                    "WARNING: Skipping unreadable entry %s of test %s",
                    entry.get(const.DATA_INTERNAL_ID),
                    test_id,
                )
                continue
            measurements.append(
                Measurement(
                    value=float(entry[const.DATA_ENTRY_VALUE]),
                    day=day,
                    recorded_at=recorded_at,
                )
            )
        measurements.sort(key=lambda m: (m.day, m.recorded_at))
        return measurements

    # -------------------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------------------

    async def _async_update_data(self) -> dict[str, Any]:
        """Periodic update: hand the current data to listening entities."""
        data = self.store.data
        if not data:
            raise UpdateFailed("Error updating Numu data: storage not loaded")
        return data

    async def async_config_entry_first_refresh(self) -> None:
        """Set up managers, then perform the first refresh."""
        await self.task_manager.async_setup()
        await self.performance_test_manager.async_setup()
        await self.statistics_manager.async_setup()
        await self.gamification_manager.async_setup()

        self._persist()
        await super().async_config_entry_first_refresh()

    # -------------------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------------------

    def _persist(self) -> None:
        """Save to persistent storage."""
        self.hass.async_create_task(self.store.async_save())

    def _persist_and_update(self) -> None:
        """Save and push the new state to listening entities."""
        self._persist()
        self.async_set_updated_data(self.store.data)

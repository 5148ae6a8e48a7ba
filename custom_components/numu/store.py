# File: store.py
"""Handles persistent data storage for the Numu integration.

Uses Home Assistant's Storage helper to save and load systems, tasks, the
completion log, performance tests and their entries, the progress profile
and achievements, so state is preserved across restarts.

The completion log is stored day-keyed per task
(`completions[task_id][day_iso]`), which makes "at most one completion per
task per day" a property of the data shape rather than a runtime check.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const
from .data_builders import build_completion_event, build_progress
from .utils.dt_utils import dt_parse_day

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .type_defs import CompletionEventData, PerformanceTestEntryData


class NumuStore:
    """Handles persistent storage operations for Numu data.

    Thin wrapper around Home Assistant's Store API plus the completion log
    operations. Utilizes internal_id as the primary key for all entities.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).
        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return canonical empty data structure for fresh installations."""
        return {
            const.DATA_META: {
                const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION_CURRENT,
                const.DATA_META_LAST_ROLLOVER_DAY: None,
            },
            const.DATA_SYSTEMS: {},
            const.DATA_TASKS: {},
            const.DATA_COMPLETIONS: {},
            const.DATA_PROGRESS: build_progress(),
            const.DATA_ACHIEVEMENTS: {},
            const.DATA_TESTS: {},
            const.DATA_TEST_ENTRIES: {},
        }

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure. Missing
        top-level buckets are filled from the default structure.
        """
        const.LOGGER.debug("DEBUG: NumuStore: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = NumuStore.get_default_structure()
            return

        self._data = existing_data
        for key, default in NumuStore.get_default_structure().items():
            self._data.setdefault(key, default)
        const.LOGGER.debug(
            "DEBUG: Loaded existing data from storage: %s",
            {
                "systems": len(self._data[const.DATA_SYSTEMS]),
                "tasks": len(self._data[const.DATA_TASKS]),
                "completion_logs": len(self._data[const.DATA_COMPLETIONS]),
                "achievements": len(self._data[const.DATA_ACHIEVEMENTS]),
                "tests": len(self._data[const.DATA_TESTS]),
            },
        )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def get_storage_path(self) -> str:
        """Get the storage file path."""
        return self._store.path

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Raises:
            No exceptions raised - errors are logged but do not stop execution.
            OSError: Logged when file system issues prevent saving.
            TypeError: Logged when data contains non-serializable types.
            ValueError: Logged when data is invalid for JSON serialization.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data format: %s",
                err,
            )

    async def async_clear_data(self) -> None:
        """Clear all stored data and reset to default structure."""
        const.LOGGER.warning("WARNING: Clearing all Numu data and resetting storage")
        self._data.clear()
        self._data = NumuStore.get_default_structure()
        await self.async_save()

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        await self.async_clear_data()

        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s",
                self._store.path,
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )

    # ------------------------------------------------------------------------------------
    # Completion log
    # ------------------------------------------------------------------------------------

    def _task_log(self, task_id: str) -> dict[str, CompletionEventData]:
        return self._data[const.DATA_COMPLETIONS].get(task_id, {})

    def get_events(self, task_id: str) -> list[CompletionEventData]:
        """Return a task's completion events ordered by day (oldest first)."""
        log = self._task_log(task_id)
        return [log[day] for day in sorted(log)]

    def get_completion_days(self, task_id: str) -> set[date]:
        """Return the set of calendar days on which a task was completed."""
        days: set[date] = set()
        for day_iso in self._task_log(task_id):
            day = dt_parse_day(day_iso)
            if day is not None:
                days.add(day)
        return days

    def has_event(self, task_id: str, day: date) -> bool:
        return day.isoformat() in self._task_log(task_id)

    def put_event(
        self,
        task_id: str,
        day: date,
        occurred_at: datetime,
        duration_minutes: int | None = None,
        source: str | None = None,
    ) -> tuple[CompletionEventData, bool]:
        """Record a completion for (task_id, day).

        Idempotent per day: an existing event for the same day is merged
        (occurred_at refreshed, duration/source overwritten when given) and
        never duplicated.

        Returns:
            (event, created) where created is False for a merge.
        """
        log = self._data[const.DATA_COMPLETIONS].setdefault(task_id, {})
        day_iso = day.isoformat()
        existing = log.get(day_iso)

        if existing is None:
            event = build_completion_event(
                task_id, day, occurred_at, duration_minutes, source
            )
            log[day_iso] = event
            const.LOGGER.debug(
                "DEBUG: Completion added for task %s on %s (source=%s)",
                task_id,
                day_iso,
                source,
            )
            return event, True

        existing[const.DATA_EVENT_OCCURRED_AT] = occurred_at.isoformat()
        if duration_minutes is not None:
            existing[const.DATA_EVENT_DURATION_MINUTES] = int(duration_minutes)  # type: ignore[literal-required]
        if source:
            existing[const.DATA_EVENT_SOURCE] = source  # type: ignore[literal-required]
        const.LOGGER.debug(
            "DEBUG: Completion merged for task %s on %s", task_id, day_iso
        )
        return existing, False

    def remove_event(self, task_id: str, day: date) -> bool:
        """Remove the completion for (task_id, day). Returns True if one existed."""
        log = self._data[const.DATA_COMPLETIONS].get(task_id)
        if not log:
            return False
        removed = log.pop(day.isoformat(), None) is not None
        if not log:
            self._data[const.DATA_COMPLETIONS].pop(task_id, None)
        return removed

    def remove_task_events(self, task_id: str) -> int:
        """Delete a task's whole completion log. Returns the number removed."""
        log = self._data[const.DATA_COMPLETIONS].pop(task_id, None) or {}
        return len(log)

    # ------------------------------------------------------------------------------------
    # Performance test entries
    # ------------------------------------------------------------------------------------

    def get_test_entries(self, test_id: str) -> list[PerformanceTestEntryData]:
        """Return a test's entries in the order they were recorded."""
        return list(self._data[const.DATA_TEST_ENTRIES].get(test_id, []))

    def count_test_entries(self) -> int:
        return sum(
            len(entries) for entries in self._data[const.DATA_TEST_ENTRIES].values()
        )

    def put_test_entry(self, test_id: str, entry: PerformanceTestEntryData) -> None:
        """Append an entry. Several entries on the same day are all kept."""
        self._data[const.DATA_TEST_ENTRIES].setdefault(test_id, []).append(entry)
        const.LOGGER.debug(
            "DEBUG: Test entry %s added for test %s (value=%s)",
            entry[const.DATA_INTERNAL_ID],
            test_id,
            entry[const.DATA_ENTRY_VALUE],
        )

    def remove_test_entries(self, test_id: str) -> int:
        """Delete all of a test's entries. Returns the number removed."""
        entries = self._data[const.DATA_TEST_ENTRIES].pop(test_id, None) or []
        return len(entries)

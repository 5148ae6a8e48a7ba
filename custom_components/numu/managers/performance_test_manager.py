"""Performance Test Manager - measured results per system.

Owns every write to performance tests and their entries:
- create / delete tests (deleting a system deletes its tests)
- record a measured value for a calendar day (default today)

A recorded value is compared with the test's earlier entries before it is
stored, so the TEST_ENTRY_ADDED payload already says whether it is a
personal record and whether it improved on the previous value.

Events emitted:
- SIGNAL_SUFFIX_TEST_CREATED / SIGNAL_SUFFIX_TEST_DELETED
- SIGNAL_SUFFIX_TEST_ENTRY_ADDED
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..data_builders import (
    EntityValidationError,
    build_test,
    build_test_entry,
    parse_tracking_frequency,
)
from ..engines.performance_test_engine import PerformanceTestEngine
from ..utils.dt_utils import dt_now_utc, start_of_day
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import PerformanceTestData, PerformanceTestEntryData


__all__ = ["PerformanceTestManager"]


class PerformanceTestManager(BaseManager):
    """Manager for performance tests and their recorded values."""

    async def async_setup(self) -> None:
        self.listen(const.SIGNAL_SUFFIX_SYSTEM_DELETED, self._on_system_deleted)
        const.LOGGER.debug(
            "PerformanceTestManager: ready with %s tests",
            len(self.coordinator.tests_data),
        )

    def _require_test(self, test_id: str) -> PerformanceTestData:
        test = self.coordinator.tests_data.get(test_id)
        if test is None:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_TEST_NOT_FOUND,
                translation_placeholders={"test_id": test_id},
            )
        return test

    # =========================================================================
    # Tests
    # =========================================================================

    async def async_create_test(
        self, user_input: dict[str, Any], now: datetime | None = None
    ) -> str:
        """Create a test under an existing system and return its internal_id.

        Raises:
            HomeAssistantError: Unknown system, empty name, unknown goal
                direction, invalid tracking frequency or non-numeric target.
        """
        now = now or dt_now_utc()
        self._require_system(user_input.get(const.DATA_TEST_SYSTEM_ID, ""))
        try:
            test = build_test(user_input, now=now)
        except EntityValidationError as err:
            raise self._validation_error(err) from err

        test_id = test[const.DATA_INTERNAL_ID]
        self.coordinator.tests_data[test_id] = test
        const.LOGGER.info(
            "INFO: Created test '%s' (%s) in system %s, %s is better",
            test["name"],
            test_id,
            test["system_id"],
            test["goal_direction"],
        )

        self.emit(
            const.SIGNAL_SUFFIX_TEST_CREATED,
            test_id=test_id,
            system_id=test["system_id"],
        )
        self.coordinator._persist_and_update()
        return test_id

    async def async_delete_test(self, test_id: str) -> None:
        """Delete a test and all of its entries."""
        async with self._get_lock("test", test_id):
            test = self._require_test(test_id)
            self._delete_test_data(test_id, test[const.DATA_TEST_SYSTEM_ID])
            self.coordinator._persist_and_update()

    def _delete_test_data(self, test_id: str, system_id: str) -> None:
        removed = self.coordinator.store.remove_test_entries(test_id)
        self.coordinator.tests_data.pop(test_id, None)
        self._locks.pop(f"test:{test_id}", None)
        const.LOGGER.info("INFO: Deleted test %s and %s entries", test_id, removed)
        self.emit(
            const.SIGNAL_SUFFIX_TEST_DELETED,
            test_id=test_id,
            system_id=system_id,
        )

    @callback
    def _on_system_deleted(self, payload: dict[str, Any]) -> None:
        system_id = payload.get("system_id", "")
        for test_id in self.coordinator.test_ids_for_system(system_id):
            self._delete_test_data(test_id, system_id)

    # =========================================================================
    # Entries
    # =========================================================================

    async def async_record_entry(
        self,
        test_id: str,
        value: Any,
        day: date | None = None,
        *,
        notes: str | None = None,
        conditions: str | None = None,
        now: datetime | None = None,
    ) -> tuple[PerformanceTestEntryData, bool]:
        """Record a measured value for a day and report whether it is a record.

        Returns:
            The stored entry and True when it beats every earlier value.
        """
        now = now or dt_now_utc()
        async with self._get_lock("test", test_id):
            test = self._require_test(test_id)
            entry_day = self._resolve_day(day, now)
            try:
                entry = build_test_entry(
                    test_id, value, entry_day, now, notes=notes, conditions=conditions
                )
            except EntityValidationError as err:
                raise self._validation_error(err) from err

            direction = test[const.DATA_TEST_GOAL_DIRECTION]
            previous = self.coordinator.test_measurements(test_id)
            number = entry[const.DATA_ENTRY_VALUE]
            personal_record = PerformanceTestEngine.is_personal_record(
                previous, number, direction
            )
            improved = PerformanceTestEngine.is_improvement(previous, number, direction)

            self.coordinator.store.put_test_entry(test_id, entry)
            if personal_record:
                const.LOGGER.info(
                    "INFO: New personal record on test '%s': %s %s",
                    test["name"],
                    number,
                    test.get(const.DATA_TEST_UNIT, ""),
                )

            self.emit(
                const.SIGNAL_SUFFIX_TEST_ENTRY_ADDED,
                test_id=test_id,
                system_id=test[const.DATA_TEST_SYSTEM_ID],
                entry_id=entry[const.DATA_INTERNAL_ID],
                now=now.isoformat(),
                personal_record=personal_record,
                improved=improved,
            )
            self.coordinator._persist_and_update()
            return entry, personal_record

    # =========================================================================
    # Summaries
    # =========================================================================

    def get_test_summary(
        self, test_id: str, now: datetime | None = None
    ) -> dict[str, Any]:
        """Values, trend and schedule of one test."""
        test = self._require_test(test_id)
        today = start_of_day(now or dt_now_utc())
        direction = test[const.DATA_TEST_GOAL_DIRECTION]
        target = test.get(const.DATA_TEST_TARGET_VALUE)
        measurements = self.coordinator.test_measurements(test_id)
        try:
            frequency = parse_tracking_frequency(test[const.DATA_TEST_TRACKING])
        except EntityValidationError as err:
            raise self._validation_error(err) from err

        engine = PerformanceTestEngine
        return {
            "test_id": test_id,
            "name": test[const.DATA_NAME],
            "unit": test.get(const.DATA_TEST_UNIT, ""),
            "goal_direction": direction,
            "target_value": target,
            "frequency": frequency.display_text,
            "entry_count": len(measurements),
            "latest_value": engine.latest_value(measurements),
            "best_value": engine.best_value(measurements, direction),
            "average_value": engine.average_value(measurements),
            "improvement_percentage": engine.improvement_percentage(measurements),
            "trend": engine.trend(measurements, direction),
            "is_due": engine.is_due(measurements, frequency, today),
            "next_due": engine.next_due_day(measurements, frequency, today).isoformat(),
            "target_met": engine.target_met(measurements, target, direction),
        }

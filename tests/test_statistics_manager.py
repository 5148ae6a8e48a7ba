"""Tests for StatisticsManager: cached consistency and derived summaries.

Categories:
- Consistency cache: hit within the window, invalidation on writes, expiry
- Stale executor results are discarded when data changed meanwhile
- Sync getters are cache-only; every history walk runs in the executor
- Midnight rollover invalidates every cache
- Task and system summaries over the morning routine scenario
"""

from datetime import timedelta
import threading
from typing import Any
from unittest.mock import patch

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
import pytest

from custom_components.numu import const
from custom_components.numu.coordinator import NumuDataCoordinator
from custom_components.numu.engines.consistency_engine import ConsistencyEngine
from tests.helpers import SetupResult, local_time, setup_from_yaml

SCENARIO = "tests/scenarios/scenario_morning_routine.yaml"


@pytest.fixture
async def scenario(
    hass: HomeAssistant, coordinator: NumuDataCoordinator
) -> SetupResult:
    """Morning routine through Friday 2025-01-10 (day 4)."""
    return await setup_from_yaml(hass, coordinator, SCENARIO)


# =============================================================================
# Consistency cache
# =============================================================================


class TestConsistencyCache:
    """Compute once, reuse, recompute after a write."""

    async def test_system_cache_lifecycle(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        stats = scenario.coordinator.statistics_manager
        system_id = scenario.system_ids["Morning Routine"]
        friday_evening = local_time(hass, scenario.day(4)).replace(hour=18)

        with patch.object(
            ConsistencyEngine,
            "task_consistency",
            wraps=ConsistencyEngine.task_consistency,
        ) as walk:
            first = await stats.async_get_system_consistency(system_id, friday_evening)
            walks_after_miss = walk.call_count
            assert walks_after_miss > 0
            assert (first.completed, first.expected) == (7, 8)

            second = await stats.async_get_system_consistency(
                system_id, friday_evening + timedelta(minutes=2)
            )
            assert second is first
            assert walk.call_count == walks_after_miss

            # Backfill Thursday's stretch: invalidates the system cache
            await scenario.coordinator.task_manager.async_mark_complete(
                scenario.task_ids["Stretch"],
                scenario.day(3),
                now=friday_evening + timedelta(minutes=3),
            )
            await hass.async_block_till_done()
            third = await stats.async_get_system_consistency(
                system_id, friday_evening + timedelta(minutes=4)
            )
            assert walk.call_count > walks_after_miss
            assert (third.completed, third.expected) == (8, 8)
            assert third.ratio == 1.0

    async def test_cache_expires_after_window(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        stats = scenario.coordinator.statistics_manager
        system_id = scenario.system_ids["Morning Routine"]
        now = local_time(hass, scenario.day(4)).replace(hour=18)

        first = await stats.async_get_system_consistency(system_id, now)
        later = await stats.async_get_system_consistency(
            system_id, now + timedelta(minutes=const.DEFAULT_CONSISTENCY_CACHE_MINUTES)
        )
        assert later is not first
        assert later.computed_at == now + timedelta(minutes=5)

    async def test_task_cache_invalidated_by_unmark(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        stats = scenario.coordinator.statistics_manager
        task_id = scenario.task_ids["Read"]
        now = local_time(hass, scenario.day(4)).replace(hour=18)

        assert (await stats.async_get_task_consistency(task_id, now)).ratio == 1.0
        await scenario.coordinator.task_manager.async_unmark_complete(
            task_id, scenario.day(2), now=now
        )
        after = await stats.async_get_task_consistency(
            task_id, now + timedelta(seconds=1)
        )
        assert (after.completed, after.expected) == (2, 3)

    async def test_stale_executor_result_is_discarded(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        """A write during the executor walk keeps the old result out of the cache."""
        stats = scenario.coordinator.statistics_manager
        system_id = scenario.system_ids["Morning Routine"]
        now = local_time(hass, scenario.day(4)).replace(hour=18)

        async def _racing_executor(target, *args: Any):
            result = target(*args)
            stats.invalidate_task(None, system_id)
            return result

        with patch(
            "homeassistant.core.HomeAssistant.async_add_executor_job",
            side_effect=_racing_executor,
        ):
            result = await stats.async_get_system_consistency(system_id, now)

        assert result.expected == 8
        assert not stats._system_cache[system_id].is_valid

    async def test_midnight_rollover_invalidates_everything(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        coordinator = scenario.coordinator
        stats = coordinator.statistics_manager
        system_id = scenario.system_ids["Morning Routine"]
        task_id = scenario.task_ids["Stretch"]
        now = local_time(hass, scenario.day(4)).replace(hour=23)

        await stats.async_get_system_consistency(system_id, now)
        await stats.async_get_task_consistency(task_id, now)

        midnight = local_time(hass, scenario.day(5)).replace(hour=0, minute=0, second=1)
        stats._on_midnight_tick(midnight)

        assert not stats._system_cache[system_id].is_valid
        assert not stats._task_cache[task_id].is_valid
        meta = coordinator.store.data[const.DATA_META]
        assert meta[const.DATA_META_LAST_ROLLOVER_DAY] == "2025-01-11"

        # Saturday counts as one more expected stretch day
        refreshed = await stats.async_get_system_consistency(system_id, midnight)
        assert refreshed.expected == 9

    async def test_deleted_system_is_not_readable(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        coordinator = scenario.coordinator
        system_id = scenario.system_ids["Morning Routine"]
        await coordinator.statistics_manager.async_get_system_consistency(system_id)

        await coordinator.task_manager.async_delete_system(system_id)

        assert system_id not in coordinator.statistics_manager._system_cache
        with pytest.raises(HomeAssistantError):
            await coordinator.statistics_manager.async_get_system_consistency(system_id)


class TestConsistencyOffLoop:
    """The history walk never runs on the event loop thread."""

    async def test_sync_getters_only_read_the_cache(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        stats = scenario.coordinator.statistics_manager
        system_id = scenario.system_ids["Morning Routine"]
        task_id = scenario.task_ids["Stretch"]
        now = local_time(hass, scenario.day(4)).replace(hour=18)

        with patch.object(
            ConsistencyEngine,
            "task_consistency",
            wraps=ConsistencyEngine.task_consistency,
        ) as walk:
            assert stats.get_task_consistency(task_id, now) is None
            assert stats.get_system_consistency(system_id, now) is None
            assert walk.call_count == 0

        computed = await stats.async_get_task_consistency(task_id, now)
        assert stats.get_task_consistency(task_id, now + timedelta(minutes=1)) is computed

        system = await stats.async_get_system_consistency(system_id, now)
        assert stats.get_system_consistency(system_id, now) is system

    async def test_completions_and_summaries_walk_in_executor(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        coordinator = scenario.coordinator
        loop_thread = threading.get_ident()
        walk_threads: list[int] = []
        task_walk = ConsistencyEngine.task_consistency
        system_walk = ConsistencyEngine.system_consistency

        def _task_walk(*args: Any) -> Any:
            walk_threads.append(threading.get_ident())
            return task_walk(*args)

        def _system_walk(*args: Any) -> Any:
            walk_threads.append(threading.get_ident())
            return system_walk(*args)

        now = local_time(hass, scenario.day(4)).replace(hour=18)
        with (
            patch.object(ConsistencyEngine, "task_consistency", side_effect=_task_walk),
            patch.object(
                ConsistencyEngine, "system_consistency", side_effect=_system_walk
            ),
        ):
            await coordinator.task_manager.async_mark_complete(
                scenario.task_ids["Stretch"], scenario.day(3), now=now
            )
            await hass.async_block_till_done()
            await coordinator.statistics_manager.async_get_task_summary(
                scenario.task_ids["Read"], now
            )

        assert walk_threads
        assert loop_thread not in walk_threads


# =============================================================================
# Summaries
# =============================================================================


class TestSummaries:
    """Derived task and system attributes on Friday of the scenario week."""

    async def test_recovered_daily_task(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        summary = await scenario.coordinator.statistics_manager.async_get_task_summary(
            scenario.task_ids["Stretch"], local_time(hass, scenario.day(4))
        )
        assert summary["frequency"] == "Every day"
        assert summary["is_due_today"] is True
        assert summary["completed_today"] is True
        assert summary["current_streak"] == 1
        assert summary["longest_streak"] == 3
        assert summary["streak_health"] == const.STREAK_HEALTH_RECOVERED
        assert summary["last_completed"] == "2025-01-10"
        assert summary["consistency"] == 0.8
        assert "week_count" not in summary

    async def test_weekly_target_task(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        summary = await scenario.coordinator.statistics_manager.async_get_task_summary(
            scenario.task_ids["Run"], local_time(hass, scenario.day(4))
        )
        assert summary["is_due_today"] is False
        assert summary["week_count"] == 4
        assert summary["week_target"] == 3
        assert summary["week_met"] is True
        assert summary["weeks_met_streak"] == 1

    async def test_streak_snapshot_and_week_progress(
        self, scenario: SetupResult
    ) -> None:
        stats = scenario.coordinator.statistics_manager
        snapshot = stats.get_task_streak(scenario.task_ids["Read"], scenario.day(4))
        assert snapshot.current_streak == 3
        assert snapshot.health == const.STREAK_HEALTH_HEALTHY

        assert stats.get_week_progress(scenario.task_ids["Read"], scenario.day(4)) is None
        progress = stats.get_week_progress(scenario.task_ids["Run"], scenario.day(4))
        assert (progress.count, progress.target, progress.is_met) == (4, 3, True)

    async def test_system_summary(
        self, hass: HomeAssistant, scenario: SetupResult
    ) -> None:
        summary = await scenario.coordinator.statistics_manager.async_get_system_summary(
            scenario.system_ids["Morning Routine"], local_time(hass, scenario.day(4))
        )
        assert summary["task_count"] == 3
        assert set(summary["todays_tasks"]) == {
            scenario.task_ids["Stretch"],
            scenario.task_ids["Read"],
        }
        assert summary["today_completion_rate"] == 1.0
        assert summary["completion_rate"] == 1.0
        assert summary["current_streak"] == 1
        assert summary["consistency"] == 0.875
        assert summary["consistency_completed"] == 7
        assert summary["consistency_expected"] == 8
        assert summary["week_completion"] == pytest.approx(10 / 11)
        assert summary["month_completion"] == pytest.approx(10 / 11)

    async def test_unknown_task_summary(self, coordinator: NumuDataCoordinator) -> None:
        with pytest.raises(HomeAssistantError) as err:
            await coordinator.statistics_manager.async_get_task_summary("missing")
        assert err.value.translation_key == const.TRANS_KEY_ERROR_TASK_NOT_FOUND

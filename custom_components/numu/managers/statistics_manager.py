"""Statistics Manager - derived streak, consistency and summary reads.

Nothing this manager computes is persisted. Every value can be rebuilt from
the completion log, so the only state kept here is presentation cache:

- _task_cache[task_id] / _system_cache[system_id]: ConsistencyCache values
- _generations[key]: bumped on every invalidation of that key

Event subscriptions:
- SIGNAL_SUFFIX_COMPLETION_ADDED / _REMOVED → invalidate task + its system
- SIGNAL_SUFFIX_TASK_CREATED / _UPDATED → invalidate task + its system
- SIGNAL_SUFFIX_TASK_DELETED → drop task cache, invalidate its system
- SIGNAL_SUFFIX_SYSTEM_DELETED → drop system cache

Invalidation handlers are @callback so they run inside emit(), before the
mutating manager returns. The midnight timer invalidates everything, because
"today" moving forward changes every expected-day count.

The consistency walk only ever runs in the executor, over immutable
TaskHistory snapshots taken on the loop. Its result is only stored if the
key's generation did not change while it ran. The synchronous getters are
cache-only: they return a fresh cached value or None, and never walk.
"""

from __future__ import annotations

from datetime import date, datetime
from functools import partial
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.event import async_track_time_change

from .. import const
from ..engines.consistency_engine import (
    ConsistencyCache,
    ConsistencyEngine,
    get_or_recompute,
    invalidate,
    is_fresh,
)
from ..engines.recurrence_engine import RecurrenceEngine
from ..engines.statistics_engine import StatisticsEngine
from ..engines.streak_engine import StreakEngine
from ..engines.weekly_target_engine import WeeklyTargetEngine
from ..utils.dt_utils import dt_now_utc, start_of_day
from .base_manager import BaseManager

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import NumuDataCoordinator
    from ..engines.consistency_engine import ConsistencyResult
    from ..engines.streak_engine import StreakSnapshot, TaskHistory
    from ..engines.weekly_target_engine import WeekProgress


__all__ = ["StatisticsManager"]

# Trailing windows reported by system summaries
SUMMARY_WEEK_DAYS = 7
SUMMARY_MONTH_DAYS = 30


class StatisticsManager(BaseManager):
    """Manager for cached consistency and derived statistics.

    Responsibilities:
    - Own the per-task and per-system consistency caches
    - Invalidate caches on data signals and at midnight
    - Serve streak snapshots, weekly progress and system summaries

    NOT responsible for:
    - Writing completions (TaskManager)
    - XP, counters and achievements (GamificationManager)
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: NumuDataCoordinator,
    ) -> None:
        super().__init__(hass, coordinator)
        self._task_cache: dict[str, ConsistencyCache] = {}
        self._system_cache: dict[str, ConsistencyCache] = {}
        self._generations: dict[str, int] = {}

    async def async_setup(self) -> None:
        """Subscribe to data signals and register the midnight timer."""
        self.listen(const.SIGNAL_SUFFIX_COMPLETION_ADDED, self._on_task_data_changed)
        self.listen(const.SIGNAL_SUFFIX_COMPLETION_REMOVED, self._on_task_data_changed)
        self.listen(const.SIGNAL_SUFFIX_TASK_CREATED, self._on_task_data_changed)
        self.listen(const.SIGNAL_SUFFIX_TASK_UPDATED, self._on_task_data_changed)
        self.listen(const.SIGNAL_SUFFIX_TASK_DELETED, self._on_task_deleted)
        self.listen(const.SIGNAL_SUFFIX_SYSTEM_DELETED, self._on_system_deleted)

        self.coordinator.config_entry.async_on_unload(
            async_track_time_change(
                self.hass,
                self._on_midnight_tick,
                **const.DEFAULT_DAILY_RESET_TIME,
            )
        )

        const.LOGGER.debug(
            "StatisticsManager initialized: midnight timer registered for entry %s",
            self.entry_id,
        )

    # =========================================================================
    # Invalidation
    # =========================================================================

    def _bump(self, key: str) -> None:
        self._generations[key] = self._generations.get(key, 0) + 1

    def invalidate_task(self, task_id: str | None, system_id: str | None) -> None:
        """Invalidate a task's cache and the cache of the system it belongs to."""
        if task_id:
            self._bump(f"task:{task_id}")
            if task_id in self._task_cache:
                self._task_cache[task_id] = invalidate(self._task_cache[task_id])
        if system_id:
            self._bump(f"system:{system_id}")
            if system_id in self._system_cache:
                self._system_cache[system_id] = invalidate(
                    self._system_cache[system_id]
                )

    def invalidate_all(self) -> None:
        for task_id in list(self._task_cache):
            self.invalidate_task(task_id, None)
        for system_id in list(self._system_cache):
            self.invalidate_task(None, system_id)

    @callback
    def _on_task_data_changed(self, payload: dict[str, Any]) -> None:
        self.invalidate_task(payload.get("task_id"), payload.get("system_id"))

    @callback
    def _on_task_deleted(self, payload: dict[str, Any]) -> None:
        task_id = payload.get("task_id")
        self.invalidate_task(task_id, payload.get("system_id"))
        if task_id:
            self._task_cache.pop(task_id, None)

    @callback
    def _on_system_deleted(self, payload: dict[str, Any]) -> None:
        system_id = payload.get("system_id")
        if system_id:
            self._bump(f"system:{system_id}")
            self._system_cache.pop(system_id, None)

    @callback
    def _on_midnight_tick(self, now: datetime) -> None:
        """Invalidate every cache and announce the new day."""
        today = start_of_day(now)
        const.LOGGER.debug("StatisticsManager: Day rollover to %s", today)
        self.invalidate_all()

        meta = self.coordinator.store.data.setdefault(const.DATA_META, {})
        meta[const.DATA_META_LAST_ROLLOVER_DAY] = today.isoformat()
        self.emit(const.SIGNAL_SUFFIX_DAY_ROLLOVER, day=today.isoformat())
        self.coordinator._persist_and_update()

    # =========================================================================
    # Consistency reads
    # =========================================================================

    def _fresh(
        self, cache_store: dict[str, ConsistencyCache], key: str, now: datetime
    ) -> ConsistencyCache | None:
        cache = cache_store.get(key)
        if cache is None or not is_fresh(
            cache, now, self.coordinator.consistency_cache_window
        ):
            return None
        return cache

    def get_task_consistency(
        self, task_id: str, now: datetime | None = None
    ) -> ConsistencyCache | None:
        """Cached consistency of one task, None when it needs recomputing.

        Never walks the history. Use async_get_task_consistency to refresh.
        """
        self._require_history(task_id)
        return self._fresh(self._task_cache, task_id, now or dt_now_utc())

    def get_system_consistency(
        self, system_id: str, now: datetime | None = None
    ) -> ConsistencyCache | None:
        """Cached consistency of a system, None when it needs recomputing."""
        self._require_system(system_id)
        return self._fresh(self._system_cache, system_id, now or dt_now_utc())

    async def _async_read(
        self,
        cache_store: dict[str, ConsistencyCache],
        cache_id: str,
        kind: str,
        now: datetime,
        recompute_fn: Callable[[], ConsistencyResult],
        still_exists: Callable[[], bool],
    ) -> ConsistencyCache:
        """Serve a fresh cache entry or recompute it in the executor.

        The result is only cached if the key was not invalidated while the
        walk ran and the task or system still exists.
        """
        cached = self._fresh(cache_store, cache_id, now)
        if cached is not None:
            const.LOGGER.debug("DEBUG: Consistency cache hit for %s %s", kind, cache_id)
            return cached

        const.LOGGER.debug("DEBUG: Consistency cache miss for %s %s", kind, cache_id)
        key = f"{kind}:{cache_id}"
        generation = self._generations.get(key, 0)
        new_cache, _ = await self.hass.async_add_executor_job(
            get_or_recompute,
            cache_store.get(cache_id, ConsistencyCache.empty()),
            now,
            recompute_fn,
            self.coordinator.consistency_cache_window,
        )

        if self._generations.get(key, 0) == generation and still_exists():
            cache_store[cache_id] = new_cache
        else:
            const.LOGGER.debug(
                "DEBUG: Discarding stale consistency result for %s %s", kind, cache_id
            )
        return new_cache

    async def async_get_task_consistency(
        self, task_id: str, now: datetime | None = None
    ) -> ConsistencyCache:
        """Cached read of one task's lifetime consistency."""
        now = now or dt_now_utc()
        history = self._require_history(task_id)
        return await self._async_read(
            self._task_cache,
            task_id,
            "task",
            now,
            partial(
                ConsistencyEngine.task_consistency,
                history.frequency,
                history.created,
                history.completions,
                start_of_day(now),
            ),
            lambda: task_id in self.coordinator.tasks_data,
        )

    async def async_get_system_consistency(
        self, system_id: str, now: datetime | None = None
    ) -> ConsistencyCache:
        """Cached read of a system's consistency, recomputing in the executor."""
        now = now or dt_now_utc()
        self._require_system(system_id)
        histories = self.coordinator.system_histories(system_id)
        return await self._async_read(
            self._system_cache,
            system_id,
            "system",
            now,
            partial(ConsistencyEngine.system_consistency, histories, start_of_day(now)),
            lambda: system_id in self.coordinator.systems_data,
        )

    # =========================================================================
    # Streaks and weekly targets
    # =========================================================================

    def _require_history(self, task_id: str) -> TaskHistory:
        history = self.coordinator.task_history(task_id)
        if history is None:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_TASK_NOT_FOUND,
                translation_placeholders={"task_id": task_id},
            )
        return history

    def get_task_streak(self, task_id: str, today: date | None = None) -> StreakSnapshot:
        today = today or start_of_day(dt_now_utc())
        return StreakEngine.evaluate(self._require_history(task_id), today)

    def get_week_progress(
        self, task_id: str, today: date | None = None
    ) -> WeekProgress | None:
        """This week's progress for a weekly-target task, None for fixed-day tasks."""
        today = today or start_of_day(dt_now_utc())
        history = self._require_history(task_id)
        if not history.frequency.is_weekly_target:
            return None
        return WeeklyTargetEngine.week_progress(
            history.frequency.times,
            history.completions,
            today,
            self.coordinator.week_start,
        )

    async def async_get_task_summary(
        self, task_id: str, now: datetime | None = None
    ) -> dict[str, Any]:
        """Everything a dashboard shows for one task, evaluated at one `now`."""
        now = now or dt_now_utc()
        today = start_of_day(now)
        history = self._require_history(task_id)
        consistency = await self.async_get_task_consistency(task_id, now)
        streak = StreakEngine.evaluate(history, today)

        summary: dict[str, Any] = {
            "task_id": task_id,
            "frequency": history.frequency.display_text,
            "is_due_today": history.created <= today
            and RecurrenceEngine.is_due(history.frequency, today),
            "completed_today": today in history.completions,
            "current_streak": streak.current_streak,
            "longest_streak": streak.longest_streak,
            "streak_health": streak.health,
            "last_completed": streak.last_completed.isoformat()
            if streak.last_completed
            else None,
            "consistency": consistency.ratio,
        }
        if history.frequency.is_weekly_target:
            week_start = self.coordinator.week_start
            progress = WeeklyTargetEngine.week_progress(
                history.frequency.times, history.completions, today, week_start
            )
            summary["week_count"] = progress.count
            summary["week_target"] = progress.target
            summary["week_met"] = progress.is_met
            summary["weeks_met_streak"] = WeeklyTargetEngine.weeks_met_streak(
                history.frequency.times,
                history.completions,
                today,
                history.created,
                week_start,
            )
        return summary

    # =========================================================================
    # System summary
    # =========================================================================

    async def async_get_system_summary(
        self, system_id: str, now: datetime | None = None
    ) -> dict[str, Any]:
        """Derived system attributes, all evaluated against the same `now`."""
        now = now or dt_now_utc()
        today = start_of_day(now)
        week_start = self.coordinator.week_start

        consistency = await self.async_get_system_consistency(system_id, now)
        histories = self.coordinator.system_histories(system_id)
        week = StatisticsEngine.period_completion(
            histories, today, SUMMARY_WEEK_DAYS, week_start
        )
        month = StatisticsEngine.period_completion(
            histories, today, SUMMARY_MONTH_DAYS, week_start
        )

        return {
            "system_id": system_id,
            "task_count": len(histories),
            "todays_tasks": [
                h.task_id for h in StatisticsEngine.todays_tasks(histories, today)
            ],
            "today_completion_rate": StatisticsEngine.today_completion_rate(
                histories, today
            ),
            "completion_rate": StatisticsEngine.dashboard_completion_rate(
                histories, today, week_start
            ),
            "current_streak": StreakEngine.system_streak(histories, today),
            "consistency": consistency.ratio,
            "consistency_completed": consistency.completed,
            "consistency_expected": consistency.expected,
            "week_completion": week.ratio,
            "month_completion": month.ratio,
        }

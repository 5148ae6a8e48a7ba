"""Gamification Manager - XP, counters and achievement unlocks.

This manager turns completion activity into progression:
- Completion XP (base + streak bonus), paid once per task per day
- Running counters that achievements are measured against
- Achievement evaluation via the pure ProgressionEngine
- Level-up / unlock announcements (dispatcher signals + HA bus events)
- Performance test counters (entries, personal records, improvement runs)

ARCHITECTURE:
- GamificationManager = STATEFUL orchestration (owns the progress profile)
- ProgressionEngine = pure evaluation logic (STATELESS)

Handlers are @callback, so a completion's XP and unlocks are applied inside
TaskManager's emit() and are visible as soon as async_mark_complete returns.
Consistency counters are the exception: the consistency walk runs in the
executor, so a completion schedules a task that reads the system's
consistency and updates those counters once it has been computed.

Removing a completion never takes XP or counters back. Re-adding the same
day is a no-op here because the day is already in xp_awarded_days.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback

from .. import const
from ..data_builders import default_achievements
from ..engines.performance_test_engine import PerformanceTestEngine
from ..engines.progression_engine import ProgressionEngine
from ..engines.statistics_engine import StatisticsEngine
from ..engines.streak_engine import StreakEngine
from ..engines.weekly_target_engine import WeeklyTargetEngine
from ..utils.dt_utils import (
    as_local,
    dt_now_utc,
    dt_parse_datetime,
    dt_parse_day,
    start_of_day,
    week_key,
)
from ..utils.math_utils import calculate_percentage
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import date, datetime

    from ..engines.streak_engine import TaskHistory
    from ..type_defs import ProgressData, TaskData


__all__ = ["GamificationManager"]


class GamificationManager(BaseManager):
    """Manager for the progress profile and achievements.

    Responsibilities:
    - Seed the achievement catalog on first run
    - Award completion XP and maintain counters
    - Evaluate and apply achievement unlocks
    - Emit level_up / achievement_unlocked and fire matching bus events

    NOT responsible for:
    - Streak or consistency math (engines, via StatisticsManager)
    - Writing completions (TaskManager)
    """

    async def async_setup(self) -> None:
        """Seed achievements and subscribe to activity signals."""
        self._ensure_catalog()

        self.listen(const.SIGNAL_SUFFIX_COMPLETION_ADDED, self._on_completion_added)
        self.listen(const.SIGNAL_SUFFIX_SYSTEM_CREATED, self._on_system_created)
        self.listen(const.SIGNAL_SUFFIX_TEST_ENTRY_ADDED, self._on_test_entry_added)

        const.LOGGER.debug(
            "GamificationManager initialized: level %s, %s achievements for entry %s",
            self.profile.get(const.DATA_PROGRESS_LEVEL, 1),
            len(self.coordinator.achievements_data),
            self.entry_id,
        )

    @property
    def profile(self) -> ProgressData:
        return self.coordinator.progress_data

    def _ensure_catalog(self) -> None:
        """Add catalog achievements missing from storage and zero-fill counters.

        Stored consistency achievements saved without a duration span get
        their min_days from the catalog.
        """
        achievements = self.coordinator.achievements_data
        added = 0
        for achievement_id, achievement in default_achievements().items():
            if achievement_id not in achievements:
                achievements[achievement_id] = achievement
                added += 1
            elif const.DATA_ACHIEVEMENT_MIN_DAYS in achievement:
                achievements[achievement_id].setdefault(
                    const.DATA_ACHIEVEMENT_MIN_DAYS,  # type: ignore[misc]
                    achievement[const.DATA_ACHIEVEMENT_MIN_DAYS],  # type: ignore[literal-required]
                )
        if added:
            const.LOGGER.info("INFO: Seeded %s achievements", added)

        counters = self.profile.setdefault(const.DATA_PROGRESS_COUNTERS, {})
        for counter in const.PROGRESS_COUNTERS:
            counters.setdefault(counter, 0)
        self.profile.setdefault(const.DATA_PROGRESS_IMPROVEMENT_RUN, 0)  # type: ignore[misc]

    def _increment(self, counter: str, amount: int = 1) -> int:
        counters = self.profile[const.DATA_PROGRESS_COUNTERS]
        counters[counter] = counters.get(counter, 0) + amount
        return counters[counter]

    def _raise_to(self, counter: str, value: int) -> None:
        """Counters like longest_streak only ever move up."""
        counters = self.profile[const.DATA_PROGRESS_COUNTERS]
        if value > counters.get(counter, 0):
            counters[counter] = value

    # =========================================================================
    # Signal handlers
    # =========================================================================

    @callback
    def _on_completion_added(self, payload: dict[str, Any]) -> None:
        """Pay completion XP and update counters for a new (task, day) completion."""
        if not payload.get("created"):
            return

        task_id = payload.get("task_id", "")
        task = self.coordinator.tasks_data.get(task_id)
        day = dt_parse_day(payload.get("day"))
        history = self.coordinator.task_history(task_id)
        if task is None or day is None or history is None:
            return

        awarded = task.setdefault(const.DATA_TASK_XP_AWARDED_DAYS, [])
        if day.isoformat() in awarded:
            const.LOGGER.debug(
                "DEBUG: Task %s already paid XP for %s, skipping", task_id, day
            )
            return
        awarded.append(day.isoformat())

        now = dt_parse_datetime(payload.get("now")) or dt_now_utc()
        level = ProgressionEngine.award_xp(
            self.profile, ProgressionEngine.completion_xp(self._streak_for(history, day))
        )
        self._increment(const.COUNTER_TASKS_COMPLETED)
        self._update_time_of_day(day, now)
        self._update_streak_and_targets(task, history, day)
        system_id = payload.get("system_id", "")
        self._update_perfect_days(system_id, day)

        self._evaluate_and_announce(now, level)
        self.coordinator._persist()
        self.hass.async_create_task(self._async_update_consistency(system_id, now))

    @callback
    def _on_system_created(self, payload: dict[str, Any]) -> None:
        self._increment(const.COUNTER_SYSTEMS_CREATED)
        now = dt_parse_datetime(payload.get("now")) or dt_now_utc()
        self._evaluate_and_announce(now, None)
        self.coordinator._persist()

    @callback
    def _on_test_entry_added(self, payload: dict[str, Any]) -> None:
        """Count the entry, personal records, records held and improvement runs."""
        test_id = payload.get("test_id", "")
        store = self.coordinator.store
        self._raise_to(const.COUNTER_TESTS_COMPLETED, store.count_test_entries())
        self._raise_to(const.COUNTER_TEST_REPEATS, len(store.get_test_entries(test_id)))
        if payload.get("personal_record"):
            self._increment(const.COUNTER_PERSONAL_RECORDS)

        records_held = sum(
            1
            for tid, test in self.coordinator.tests_data.items()
            if PerformanceTestEngine.holds_record(
                self.coordinator.test_measurements(tid),
                test[const.DATA_TEST_GOAL_DIRECTION],
            )
        )
        self._raise_to(const.COUNTER_RECORDS_HELD, records_held)

        # None for a first entry, which neither extends nor breaks the run
        improved = payload.get("improved")
        if improved is not None:
            run = self.profile.get(const.DATA_PROGRESS_IMPROVEMENT_RUN, 0)
            run = run + 1 if improved else 0
            self.profile[const.DATA_PROGRESS_IMPROVEMENT_RUN] = run  # type: ignore[literal-required]
            self._raise_to(const.COUNTER_IMPROVEMENT_STREAK, run)

        now = dt_parse_datetime(payload.get("now")) or dt_now_utc()
        self._evaluate_and_announce(now, None)
        self.coordinator._persist()

    # =========================================================================
    # Counter updates
    # =========================================================================

    def _streak_for(self, history: TaskHistory, day: date) -> int:
        """Streak used for the XP bonus: days for fixed tasks, weeks for targets."""
        frequency = history.frequency
        if frequency.is_weekly_target:
            return WeeklyTargetEngine.weeks_met_streak(
                frequency.times,
                history.completions,
                day,
                history.created,
                self.coordinator.week_start,
            )
        return StreakEngine.current_streak(
            frequency, history.created, history.completions, day
        )

    def _update_time_of_day(self, day: date, now: datetime) -> None:
        """Early bird / night owl only count completions logged on the day itself."""
        local_now = as_local(now)
        if local_now.date() != day:
            return
        if local_now.hour < const.EARLY_BIRD_BEFORE_HOUR:
            self._increment(const.COUNTER_EARLY_BIRD)
        elif local_now.hour >= const.NIGHT_OWL_FROM_HOUR:
            self._increment(const.COUNTER_NIGHT_OWL)

    def _update_streak_and_targets(
        self, task: TaskData, history: TaskHistory, day: date
    ) -> None:
        frequency = history.frequency
        if not frequency.is_weekly_target:
            self._raise_to(
                const.COUNTER_LONGEST_STREAK,
                StreakEngine.longest_streak(history.completions),
            )
            return

        week_start = self.coordinator.week_start
        progress = WeeklyTargetEngine.week_progress(
            frequency.times, history.completions, day, week_start
        )
        key = week_key(day, week_start)
        weeks_met = task.setdefault(const.DATA_TASK_TARGET_WEEKS_MET, [])
        if progress.is_met and key not in weeks_met:
            weeks_met.append(key)
            self._increment(const.COUNTER_WEEKLY_TARGETS_MET)
            const.LOGGER.debug(
                "DEBUG: Weekly target met for task %s in week %s",
                task[const.DATA_INTERNAL_ID],
                key,
            )

    def _update_perfect_days(self, system_id: str, day: date) -> None:
        system = self.coordinator.systems_data.get(system_id)
        if system is None:
            return

        histories = self.coordinator.system_histories(system_id)
        perfect_days = system.setdefault(const.DATA_SYSTEM_PERFECT_DAYS, [])
        if day.isoformat() not in perfect_days and StatisticsEngine.is_perfect_day(
            histories, day
        ):
            perfect_days.append(day.isoformat())
            self._increment(const.COUNTER_PERFECT_DAYS)

    async def _async_update_consistency(self, system_id: str, now: datetime) -> None:
        """Raise the consistency counters from the system's current consistency.

        A span counter only moves once the system is at least that many days
        old, so holding 90% for a month needs a month of history.
        """
        if system_id not in self.coordinator.systems_data:
            return
        consistency = (
            await self.coordinator.statistics_manager.async_get_system_consistency(
                system_id, now
            )
        )
        system = self.coordinator.systems_data.get(system_id)
        if system is None:
            return

        percent = int(
            calculate_percentage(
                consistency.completed, consistency.expected, precision=0
            )
        )
        if consistency.expected >= const.CONSISTENCY_MIN_EXPECTED_DAYS:
            self._raise_to(const.COUNTER_BEST_CONSISTENCY, percent)

        created = dt_parse_datetime(system.get(const.DATA_CREATED_AT))
        if created is not None:
            age_days = (start_of_day(now) - start_of_day(created)).days + 1
            for span, counter in const.CONSISTENCY_SPAN_COUNTERS.items():
                if age_days >= span:
                    self._raise_to(counter, percent)

        self._evaluate_and_announce(now, None)
        self.coordinator._persist_and_update()

    # =========================================================================
    # Evaluation
    # =========================================================================

    def _evaluate_and_announce(self, now: datetime, level: int | None) -> None:
        """Apply newly satisfied achievements and announce unlocks / level-ups.

        Args:
            now: Timestamp recorded on unlocks and level-ups
            level: New level already reached by an XP award before evaluation
        """
        profile = self.profile
        achievements = self.coordinator.achievements_data
        ProgressionEngine.refresh_progress(
            profile[const.DATA_PROGRESS_COUNTERS], achievements
        )

        unlocked = ProgressionEngine.evaluate(profile, achievements)
        unlock_level = ProgressionEngine.apply_unlocks(
            profile, achievements, unlocked, now
        )
        if unlock_level is not None:
            level = unlock_level

        recently = profile.setdefault(const.DATA_PROGRESS_RECENTLY_UNLOCKED, [])
        del recently[: max(len(recently) - const.RECENTLY_UNLOCKED_LIMIT, 0)]

        for achievement_id in unlocked:
            achievement = achievements[achievement_id]
            const.LOGGER.info(
                "INFO: Achievement unlocked: %s (+%s XP)",
                achievement[const.DATA_NAME],
                achievement[const.DATA_ACHIEVEMENT_XP_REWARD],
            )
            event_data = {
                "achievement_id": achievement_id,
                "name": achievement[const.DATA_NAME],
                "tier": achievement[const.DATA_ACHIEVEMENT_TIER],
                "xp_reward": achievement[const.DATA_ACHIEVEMENT_XP_REWARD],
            }
            self.emit(const.SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED, **event_data)
            self.hass.bus.async_fire(const.EVENT_ACHIEVEMENT_UNLOCKED, event_data)

        if level is not None:
            profile[const.DATA_PROGRESS_LAST_LEVEL_UP] = now.isoformat()
            const.LOGGER.info(
                "INFO: Level up to %s (%s XP)",
                level,
                profile[const.DATA_PROGRESS_TOTAL_XP],
            )
            event_data = {
                "level": level,
                "total_xp": profile[const.DATA_PROGRESS_TOTAL_XP],
                "tier": ProgressionEngine.level_tier(level),
            }
            self.emit(const.SIGNAL_SUFFIX_LEVEL_UP, **event_data)
            self.hass.bus.async_fire(const.EVENT_LEVEL_UP, event_data)

    def get_level_summary(self) -> dict[str, Any]:
        """Level, XP within the level and tier for the current profile."""
        total_xp = self.profile.get(const.DATA_PROGRESS_TOTAL_XP, 0)
        summary = ProgressionEngine.level_progress(total_xp)
        summary[const.ATTR_TOTAL_XP] = total_xp
        return summary

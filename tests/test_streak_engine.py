"""Unit tests for StreakEngine.

Tests streak and streak-health logic over calendar days:
- Current streak for daily and specific-weekday tasks
- Pending today (neither extends nor breaks)
- "Never miss twice" health: healthy, at_risk, recovered, broken
- Longest streak over consecutive calendar days
- System streak across several tasks
"""

from datetime import date, timedelta

from custom_components.numu import const
from custom_components.numu.engines.recurrence_engine import Frequency
from custom_components.numu.engines.streak_engine import StreakEngine, TaskHistory

# Day 0 of every scenario: Monday 2025-01-06
DAY0 = date(2025, 1, 6)


def day(n: int) -> date:
    """Return scenario day n."""
    return DAY0 + timedelta(days=n)


def make_history(
    completed: list[int],
    frequency: Frequency | None = None,
    created: int = 0,
    task_id: str = "task-1",
) -> TaskHistory:
    """Create a TaskHistory from scenario day offsets."""
    return TaskHistory(
        task_id=task_id,
        frequency=frequency or Frequency.daily(),
        created=day(created),
        completions=frozenset(day(n) for n in completed),
    )


# =============================================================================
# Current streak
# =============================================================================


class TestCurrentStreak:
    """Consecutive completed due days ending today."""

    def test_unbroken_daily_streak(self) -> None:
        snapshot = StreakEngine.evaluate(make_history([0, 1, 2, 3]), day(3))
        assert snapshot.current_streak == 4
        assert snapshot.health == const.STREAK_HEALTH_HEALTHY

    def test_pending_today_keeps_yesterdays_streak(self) -> None:
        """Today not completed yet: the streak through yesterday stands."""
        snapshot = StreakEngine.evaluate(make_history([0, 1, 2]), day(3))
        assert snapshot.current_streak == 3
        assert snapshot.health == const.STREAK_HEALTH_HEALTHY
        assert snapshot.trailing_misses == 0

    def test_non_due_days_are_skipped(self) -> None:
        """Mon/Wed/Fri task: the days in between never break the streak."""
        history = make_history([0, 2, 4, 7], Frequency.specific_weekdays([1, 3, 5]))
        assert StreakEngine.evaluate(history, day(8)).current_streak == 4

    def test_days_before_creation_are_not_due(self) -> None:
        history = make_history([5, 6], created=5)
        snapshot = StreakEngine.evaluate(history, day(6))
        assert snapshot.current_streak == 2
        assert snapshot.health == const.STREAK_HEALTH_HEALTHY

    def test_no_completions(self) -> None:
        snapshot = StreakEngine.evaluate(make_history([]), day(0))
        assert snapshot.current_streak == 0
        assert snapshot.longest_streak == 0
        assert snapshot.last_completed is None
        assert snapshot.health == const.STREAK_HEALTH_HEALTHY

    def test_weekly_target_has_no_day_streak(self) -> None:
        history = make_history([0, 1, 2], Frequency.weekly_target(3))
        assert StreakEngine.evaluate(history, day(2)).current_streak == 0

    def test_future_completions_are_ignored_for_longest_and_last(self) -> None:
        snapshot = StreakEngine.evaluate(make_history([0, 1, 9]), day(1))
        assert snapshot.longest_streak == 2
        assert snapshot.last_completed == day(1)


# =============================================================================
# Health
# =============================================================================


class TestStreakHealth:
    """Never miss twice."""

    def test_single_miss_is_at_risk(self) -> None:
        """Completed days 0-2, day 3 missed, day 4 still pending."""
        snapshot = StreakEngine.evaluate(make_history([0, 1, 2]), day(4))
        assert snapshot.health == const.STREAK_HEALTH_AT_RISK
        assert snapshot.current_streak == 0
        assert snapshot.trailing_misses == 1

    def test_scenario_recovered_after_single_miss(self) -> None:
        """Completed 0,1,2, missed 3, completed 4: streak restarts at 1."""
        snapshot = StreakEngine.evaluate(make_history([0, 1, 2, 4]), day(4))
        assert snapshot.current_streak == 1
        assert snapshot.health == const.STREAK_HEALTH_RECOVERED
        assert snapshot.longest_streak == 3

    def test_scenario_broken_after_two_misses(self) -> None:
        """Missed days 3 and 4: broken until a completion starts a new run."""
        history = make_history([0, 1, 2])
        before = StreakEngine.evaluate(history, day(5))
        assert before.health == const.STREAK_HEALTH_BROKEN
        assert before.current_streak == 0
        assert before.trailing_misses == 2

        after = StreakEngine.evaluate(make_history([0, 1, 2, 5]), day(5))
        assert after.current_streak == 1
        assert after.health != const.STREAK_HEALTH_BROKEN

    def test_recovered_becomes_healthy_after_next_completion(self) -> None:
        snapshot = StreakEngine.evaluate(make_history([0, 1, 2, 4, 5]), day(5))
        assert snapshot.current_streak == 2
        assert snapshot.health == const.STREAK_HEALTH_HEALTHY

    def test_miss_on_non_due_day_does_not_count(self) -> None:
        """Weekday task: the weekend between Friday and Monday is not a miss."""
        history = make_history([0, 1, 2, 3, 4], Frequency.weekdays())
        snapshot = StreakEngine.evaluate(history, day(7))
        assert snapshot.health == const.STREAK_HEALTH_HEALTHY
        assert snapshot.current_streak == 5


# =============================================================================
# Longest streak
# =============================================================================


class TestLongestStreak:
    """Consecutive calendar days, regardless of frequency."""

    def test_gap_resets_run(self) -> None:
        days = [day(n) for n in (0, 1, 2, 4, 5, 6, 7, 9)]
        assert StreakEngine.longest_streak(days) == 4

    def test_duplicates_are_ignored(self) -> None:
        assert StreakEngine.longest_streak([day(0), day(0), day(1)]) == 2

    def test_empty(self) -> None:
        assert StreakEngine.longest_streak([]) == 0


# =============================================================================
# System streak
# =============================================================================


class TestSystemStreak:
    """Days on which every due task of a system was completed."""

    def test_all_tasks_done(self) -> None:
        histories = [
            make_history([0, 1, 2], task_id="a"),
            make_history([0, 2], Frequency.specific_weekdays([1, 3]), task_id="b"),
        ]
        assert StreakEngine.system_streak(histories, day(2)) == 3

    def test_one_task_missed_breaks(self) -> None:
        histories = [
            make_history([0, 1, 2], task_id="a"),
            make_history([0, 2], task_id="b"),
        ]
        assert StreakEngine.system_streak(histories, day(2)) == 1

    def test_today_pending(self) -> None:
        histories = [
            make_history([0, 1, 2], task_id="a"),
            make_history([0, 1], task_id="b"),
        ]
        assert StreakEngine.system_streak(histories, day(2)) == 2

    def test_weekly_targets_do_not_participate(self) -> None:
        histories = [make_history([0, 1], Frequency.weekly_target(2))]
        assert StreakEngine.system_streak(histories, day(1)) == 0

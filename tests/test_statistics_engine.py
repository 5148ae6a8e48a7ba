"""Unit tests for StatisticsEngine derived system metrics.

Categories:
- Today's tasks and today's completion rate
- Dashboard completion rate with capped weekly targets
- Trailing period completion
- Perfect-day detection
"""

from datetime import date, timedelta

import pytest

from custom_components.numu.engines.recurrence_engine import Frequency
from custom_components.numu.engines.statistics_engine import StatisticsEngine
from custom_components.numu.engines.streak_engine import TaskHistory

# Monday 2025-01-06
MONDAY = date(2025, 1, 6)


def day(n: int) -> date:
    return MONDAY + timedelta(days=n)


def make_history(
    task_id: str,
    completed: list[int],
    frequency: Frequency | None = None,
    created: int = 0,
) -> TaskHistory:
    return TaskHistory(
        task_id=task_id,
        frequency=frequency or Frequency.daily(),
        created=day(created),
        completions=frozenset(day(n) for n in completed),
    )


@pytest.fixture
def histories() -> list[TaskHistory]:
    """A daily task, a Mon/Wed/Fri task and a 3x weekly target."""
    return [
        make_history("daily", [0, 1, 2]),
        make_history("mwf", [0], Frequency.specific_weekdays([1, 3, 5])),
        make_history("target", [0, 1, 2, 3], Frequency.weekly_target(3)),
    ]


class TestToday:
    """Fixed-day tasks due on a day."""

    def test_todays_tasks_exclude_weekly_targets(self, histories) -> None:
        assert [h.task_id for h in StatisticsEngine.todays_tasks(histories, day(2))] == [
            "daily",
            "mwf",
        ]
        assert [h.task_id for h in StatisticsEngine.todays_tasks(histories, day(1))] == [
            "daily"
        ]

    def test_tasks_created_later_are_not_due(self) -> None:
        history = make_history("new", [], created=5)
        assert StatisticsEngine.todays_tasks([history], day(2)) == []

    def test_today_completion_rate(self, histories) -> None:
        assert StatisticsEngine.today_completion_rate(histories, day(2)) == 0.5
        assert StatisticsEngine.today_completion_rate(histories, day(0)) == 1.0

    def test_nothing_due_is_zero(self) -> None:
        weekend_only = [make_history("w", [], Frequency.weekends())]
        assert StatisticsEngine.today_completion_rate(weekend_only, day(0)) == 0.0


class TestDashboardCompletionRate:
    """Weekly targets contribute their capped weekly ratio."""

    def test_blended_rate(self, histories) -> None:
        # daily done (1.0), mwf missed (0.0), target 4 of 3 capped (1.0)
        rate = StatisticsEngine.dashboard_completion_rate(histories, day(2))
        assert rate == pytest.approx(2 / 3)

    def test_over_target_never_exceeds_one(self) -> None:
        over = [make_history("target", [0, 1, 2, 3, 4], Frequency.weekly_target(2))]
        assert StatisticsEngine.dashboard_completion_rate(over, day(4)) == 1.0

    def test_empty(self) -> None:
        assert StatisticsEngine.dashboard_completion_rate([], day(0)) == 0.0


class TestPeriodCompletion:
    """Trailing windows ending at a day."""

    def test_week_window(self, histories) -> None:
        result = StatisticsEngine.period_completion(histories, day(6), 7)
        # daily 3/7, mwf 1/3, target min(4, 3)/3
        assert result.completed == 3 + 1 + 3
        assert result.expected == 7 + 3 + 3

    def test_window_clipped_to_creation(self) -> None:
        history = make_history("late", [5, 6], created=5)
        result = StatisticsEngine.period_completion([history], day(6), 30)
        assert (result.completed, result.expected) == (2, 2)


class TestPerfectDay:
    def test_perfect_day(self, histories) -> None:
        assert StatisticsEngine.is_perfect_day(histories, day(0))
        assert not StatisticsEngine.is_perfect_day(histories, day(2))

    def test_nothing_due_is_not_perfect(self) -> None:
        weekend_only = [make_history("w", [], Frequency.weekends())]
        assert not StatisticsEngine.is_perfect_day(weekend_only, day(0))

"""Statistics Engine - derived system metrics for dashboards.

This engine computes the System attributes that are never stored:
- Tasks due today and today's completion rate
- Dashboard completion rate (weekly targets blended in at capped progress)
- Trailing-period completion (week / month views)
- Perfect-day detection for the perfect-day counter

Design Principles:
    - Stateless: No coordinator reference, operates on TaskHistory snapshots
    - Deterministic: `today` is always passed in
    - Capped: weekly-target completions above target never raise a rate
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING

from ..utils import dt_utils
from ..utils.math_utils import safe_ratio
from .consistency_engine import ConsistencyResult
from .recurrence_engine import RecurrenceEngine
from .weekly_target_engine import WeeklyTargetEngine

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .streak_engine import TaskHistory


class StatisticsEngine:
    """Stateless system-level aggregations over task histories."""

    # ────────────────────────────────────────────────────────────────
    # Today
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def todays_tasks(histories: Iterable[TaskHistory], today: date) -> list[TaskHistory]:
        """Tasks with a fixed due day today (weekly targets excluded)."""
        return [
            h
            for h in histories
            if h.created <= today and RecurrenceEngine.is_due(h.frequency, today)
        ]

    @classmethod
    def today_completion_rate(
        cls, histories: Iterable[TaskHistory], today: date
    ) -> float:
        """Completed / due for today's fixed-day tasks; 0.0 when nothing is due."""
        due = cls.todays_tasks(histories, today)
        done = sum(1 for h in due if today in h.completions)
        return safe_ratio(done, len(due))

    @staticmethod
    def dashboard_completion_rate(
        histories: Iterable[TaskHistory],
        today: date,
        week_start: str = dt_utils.WEEK_START_MONDAY,
    ) -> float:
        """Average progress across today's tasks and this week's targets.

        Fixed-day tasks due today contribute 1.0 or 0.0. Weekly-target tasks
        contribute their capped weekly ratio.
        """
        contributions: list[float] = []
        for history in histories:
            if history.created > today:
                continue
            frequency = history.frequency
            if frequency.is_weekly_target:
                progress = WeeklyTargetEngine.week_progress(
                    frequency.times, history.completions, today, week_start
                )
                contributions.append(WeeklyTargetEngine.capped_ratio(progress))
            elif RecurrenceEngine.is_due(frequency, today):
                contributions.append(1.0 if today in history.completions else 0.0)

        if not contributions:
            return 0.0
        return sum(contributions) / len(contributions)

    # ────────────────────────────────────────────────────────────────
    # Periods
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def period_completion(
        histories: Iterable[TaskHistory],
        end_day: date,
        days: int,
        week_start: str = dt_utils.WEEK_START_MONDAY,
    ) -> ConsistencyResult:
        """Completed vs expected across the trailing `days` ending at end_day.

        Weekly targets contribute `target` expected per calendar week that
        overlaps the period (from the creation week on) and at most `target`
        completed per week.
        """
        start = end_day - timedelta(days=max(days, 1) - 1)
        completed = 0
        expected = 0

        for history in histories:
            if history.created > end_day:
                continue
            frequency = history.frequency

            if frequency.is_weekly_target:
                week = max(
                    dt_utils.week_start_for(start, week_start),
                    dt_utils.week_start_for(history.created, week_start),
                )
                while week <= end_day:
                    progress = WeeklyTargetEngine.week_progress(
                        frequency.times, history.completions, week, week_start
                    )
                    expected += progress.target
                    completed += WeeklyTargetEngine.capped_count(progress)
                    week += timedelta(days=7)
                continue

            for day in RecurrenceEngine.due_days(
                frequency, max(start, history.created), end_day
            ):
                expected += 1
                if day in history.completions:
                    completed += 1

        return ConsistencyResult.from_counts(completed, expected)

    # ────────────────────────────────────────────────────────────────
    # Perfect days
    # ────────────────────────────────────────────────────────────────

    @classmethod
    def is_perfect_day(cls, histories: Iterable[TaskHistory], day: date) -> bool:
        """True when at least one task was due on `day` and all were completed."""
        due = cls.todays_tasks(histories, day)
        return bool(due) and all(day in h.completions for h in due)

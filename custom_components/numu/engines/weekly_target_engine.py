"""Weekly Target Engine for Numu.

Progress for "complete N times per week" tasks. Counts are raw; every
aggregation site must go through `capped_count` / `capped_ratio` so a week
with more completions than its target never contributes more than 100%.

The week convention ("monday" or "sunday") is chosen once per integration
entry and passed in; it is never inferred from locale here.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING, NamedTuple

from ..utils import dt_utils
from ..utils.math_utils import safe_ratio

if TYPE_CHECKING:
    from collections.abc import Iterable


class WeekProgress(NamedTuple):
    """Completions in one calendar week against the weekly target."""

    count: int
    target: int
    is_met: bool


class WeeklyTargetEngine:
    """Stateless weekly-target calculations."""

    @staticmethod
    def completions_in_week(
        completion_days: Iterable[date],
        any_day: date,
        week_start: str = dt_utils.WEEK_START_MONDAY,
    ) -> int:
        """Count distinct completion days in the week containing `any_day`."""
        first, last = dt_utils.week_bounds(any_day, week_start)
        return len({d for d in completion_days if first <= d <= last})

    @classmethod
    def week_progress(
        cls,
        target: int,
        completion_days: Iterable[date],
        day: date,
        week_start: str = dt_utils.WEEK_START_MONDAY,
    ) -> WeekProgress:
        """Return (count, target, is_met) for the week containing `day`.

        `count` is not capped; use `capped_count` when aggregating.
        """
        count = cls.completions_in_week(completion_days, day, week_start)
        return WeekProgress(count=count, target=target, is_met=count >= target)

    @staticmethod
    def capped_count(progress: WeekProgress) -> int:
        return min(progress.count, progress.target)

    @staticmethod
    def capped_ratio(progress: WeekProgress) -> float:
        """Fraction of the weekly target reached, never above 1.0."""
        return safe_ratio(progress.count, progress.target)

    @classmethod
    def weeks_met(
        cls,
        target: int,
        completion_days: Iterable[date],
        week_start: str = dt_utils.WEEK_START_MONDAY,
    ) -> list[str]:
        """Return week keys of every week in which the target was met."""
        per_week: dict[str, int] = {}
        for day in set(completion_days):
            key = dt_utils.week_key(day, week_start)
            per_week[key] = per_week.get(key, 0) + 1
        return sorted(key for key, count in per_week.items() if count >= target)

    @classmethod
    def weeks_met_streak(
        cls,
        target: int,
        completion_days: Iterable[date],
        today: date,
        created: date,
        week_start: str = dt_utils.WEEK_START_MONDAY,
    ) -> int:
        """Count consecutive weeks with the target met, ending this week.

        The current week is pending until its target is met. Weeks before the
        creation week are not counted.
        """
        days = set(completion_days)
        creation_week = dt_utils.week_start_for(created, week_start)
        week = dt_utils.week_start_for(today, week_start)
        streak = 0
        while week >= creation_week:
            progress = cls.week_progress(target, days, week, week_start)
            if progress.is_met:
                streak += 1
            elif week != dt_utils.week_start_for(today, week_start):
                break
            week -= timedelta(days=7)
        return streak

"""Consistency Engine for Numu.

Lifetime completed/expected ratios for tasks and systems, plus the
time-boxed cache value object that fronts the expensive system walk.

The cache is a plain value: `get_or_recompute` and `invalidate` return new
cache values instead of mutating anything, so callers decide where the cache
lives (the statistics manager keeps one per task and per system).

IMPORTANT: This module must NOT import from coordinator.py to avoid circular imports.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, NamedTuple

from .. import const
from ..utils.math_utils import safe_ratio
from .recurrence_engine import RecurrenceEngine

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable

    from .recurrence_engine import Frequency
    from .streak_engine import TaskHistory

DEFAULT_CACHE_WINDOW = timedelta(minutes=const.DEFAULT_CONSISTENCY_CACHE_MINUTES)


class ConsistencyResult(NamedTuple):
    """Completed vs expected due days and their bounded ratio."""

    completed: int
    expected: int
    ratio: float

    @classmethod
    def from_counts(cls, completed: int, expected: int) -> ConsistencyResult:
        return cls(completed, expected, safe_ratio(completed, expected))


@dataclass(frozen=True)
class ConsistencyCache:
    """Last computed consistency value and when it was computed.

    `computed_at is None` means the cache is empty or was invalidated.
    """

    ratio: float = 0.0
    computed_at: datetime | None = None
    completed: int = 0
    expected: int = 0

    @classmethod
    def empty(cls) -> ConsistencyCache:
        return cls()

    @property
    def is_valid(self) -> bool:
        return self.computed_at is not None


def is_fresh(
    cache: ConsistencyCache, now: datetime, window: timedelta = DEFAULT_CACHE_WINDOW
) -> bool:
    """Return True if the cache was computed less than `window` before `now`.

    A computed_at in the future (clock moved backwards) counts as stale.
    """
    if cache.computed_at is None:
        return False
    age = now - cache.computed_at
    return timedelta(0) <= age < window


def get_or_recompute(
    cache: ConsistencyCache,
    now: datetime,
    recompute_fn: Callable[[], ConsistencyResult | float],
    window: timedelta = DEFAULT_CACHE_WINDOW,
) -> tuple[ConsistencyCache, float]:
    """Return (cache, ratio), recomputing only when the cache is stale.

    A fresh cache is returned unchanged and `recompute_fn` is not called.
    Otherwise `recompute_fn` is called exactly once and the returned cache
    is stamped with `now`.
    """
    if is_fresh(cache, now, window):
        return cache, cache.ratio

    result = recompute_fn()
    if isinstance(result, ConsistencyResult):
        new_cache = ConsistencyCache(
            ratio=result.ratio,
            computed_at=now,
            completed=result.completed,
            expected=result.expected,
        )
    else:
        new_cache = ConsistencyCache(ratio=float(result), computed_at=now)
    return new_cache, new_cache.ratio


def invalidate(cache: ConsistencyCache) -> ConsistencyCache:
    """Return a copy of the cache that the next read must recompute."""
    return replace(cache, computed_at=None)


class ConsistencyEngine:
    """Stateless completed/expected calculations."""

    @staticmethod
    def task_consistency(
        frequency: Frequency,
        created: date,
        completions: Collection[date],
        today: date,
    ) -> ConsistencyResult:
        """Lifetime consistency for a single fixed-day task.

        Expected counts every due day from creation through today; completed
        counts the due days among them that have a completion. Weekly targets
        have no due days and report 0/0.
        """
        if frequency.is_weekly_target or today < created:
            return ConsistencyResult.from_counts(0, 0)

        due = RecurrenceEngine.due_days(frequency, created, today)
        completed = sum(1 for day in due if day in completions)
        return ConsistencyResult.from_counts(completed, len(due))

    @classmethod
    def system_consistency(
        cls, histories: Iterable[TaskHistory], today: date
    ) -> ConsistencyResult:
        """Roll task consistency up to a system.

        Due and completed days are summed across tasks, so a task with a long
        history weighs more than one created yesterday.
        """
        completed = 0
        expected = 0
        for history in histories:
            result = cls.task_consistency(
                history.frequency, history.created, history.completions, today
            )
            completed += result.completed
            expected += result.expected
        return ConsistencyResult.from_counts(completed, expected)

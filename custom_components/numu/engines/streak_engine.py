"""Streak Engine for Numu.

Turns a task's frequency and completion days into current streak, longest
streak and streak health. All functions are pure and take an injected
`today`; nothing here reads the clock.

Conventions:
- Days before the task's creation day are never due.
- A due day equal to `today` that is not completed yet is *pending*: it
  neither extends nor breaks the streak.
- One missed due day is a grace miss ("never miss twice"): the streak count
  restarts from the next completion, but health reports AT_RISK rather than
  BROKEN, and completing the next due day shows RECOVERED.

IMPORTANT: This module must NOT import from coordinator.py to avoid circular imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING

from .. import const
from .recurrence_engine import RecurrenceEngine

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Iterator

    from .recurrence_engine import Frequency


@dataclass(frozen=True)
class TaskHistory:
    """Immutable snapshot of one task's schedule and completion days.

    Managers build these from storage so engines (and executor jobs) never
    touch live storage dicts.
    """

    task_id: str
    frequency: Frequency
    created: date
    completions: frozenset[date]


@dataclass(frozen=True)
class StreakSnapshot:
    """Everything the UI needs about a task's streak on a given day."""

    current_streak: int
    longest_streak: int
    health: str
    trailing_misses: int
    last_completed: date | None


class StreakEngine:
    """Stateless streak calculations over calendar days."""

    @staticmethod
    def _due_days_backward(
        frequency: Frequency, created: date, today: date
    ) -> Iterator[date]:
        """Yield due days from today back to the creation day (newest first)."""
        day = today
        step = timedelta(days=1)
        while day >= created:
            if RecurrenceEngine.is_due(frequency, day):
                yield day
            day -= step

    @classmethod
    def _elapsed_statuses(
        cls,
        frequency: Frequency,
        created: date,
        completions: Collection[date],
        today: date,
    ) -> Iterator[bool]:
        """Yield completed/missed for each elapsed due day, newest first.

        A pending today is skipped.
        """
        for day in cls._due_days_backward(frequency, created, today):
            done = day in completions
            if day == today and not done:
                continue
            yield done

    @classmethod
    def current_streak(
        cls,
        frequency: Frequency,
        created: date,
        completions: Collection[date],
        today: date,
    ) -> int:
        """Count consecutive completed due days ending today.

        Non-due days are skipped. The walk stops at the first due day that
        was missed. Weekly targets have no due days and always return 0;
        their streak is measured in weeks by the weekly target engine.
        """
        streak = 0
        for done in cls._elapsed_statuses(frequency, created, completions, today):
            if not done:
                break
            streak += 1
        return streak

    @staticmethod
    def longest_streak(completions: Iterable[date]) -> int:
        """Return the longest run of completions on consecutive calendar days.

        A gap of exactly one day extends the run; anything larger resets it
        to 1. Returns 0 for an empty history.
        """
        longest = 0
        running = 0
        previous: date | None = None
        for day in sorted(set(completions)):
            if previous is not None and (day - previous).days == 1:
                running += 1
            else:
                running = 1
            longest = max(longest, running)
            previous = day
        return longest

    @classmethod
    def trailing_misses(
        cls,
        frequency: Frequency,
        created: date,
        completions: Collection[date],
        today: date,
    ) -> int:
        """Count consecutive missed due days before the most recent completion."""
        misses = 0
        for done in cls._elapsed_statuses(frequency, created, completions, today):
            if done:
                break
            misses += 1
        return misses

    @classmethod
    def health(
        cls,
        frequency: Frequency,
        created: date,
        completions: Collection[date],
        today: date,
    ) -> str:
        """Classify streak health as healthy, at_risk, recovered or broken.

        Only the three most recent elapsed due days matter:
        - two or more trailing misses: broken
        - exactly one trailing miss: at_risk
        - completed, missed, completed: recovered
        - anything else (including no elapsed due days): healthy
        """
        recent: list[bool] = []
        for done in cls._elapsed_statuses(frequency, created, completions, today):
            recent.append(done)
            if len(recent) == 3:
                break

        if not recent:
            return const.STREAK_HEALTH_HEALTHY

        misses = 0
        for done in recent:
            if done:
                break
            misses += 1

        if misses >= 2:
            return const.STREAK_HEALTH_BROKEN
        if misses == 1:
            return const.STREAK_HEALTH_AT_RISK
        if len(recent) == 3 and not recent[1] and recent[2]:
            return const.STREAK_HEALTH_RECOVERED
        return const.STREAK_HEALTH_HEALTHY

    @classmethod
    def evaluate(cls, history: TaskHistory, today: date) -> StreakSnapshot:
        """Build a full streak snapshot for one task."""
        completions = history.completions
        past = [d for d in completions if d <= today]
        return StreakSnapshot(
            current_streak=cls.current_streak(
                history.frequency, history.created, completions, today
            ),
            longest_streak=cls.longest_streak(past),
            health=cls.health(history.frequency, history.created, completions, today),
            trailing_misses=cls.trailing_misses(
                history.frequency, history.created, completions, today
            ),
            last_completed=max(past) if past else None,
        )

    # =========================================================================
    # System-level streak
    # =========================================================================

    @staticmethod
    def system_streak(histories: Iterable[TaskHistory], today: date) -> int:
        """Count consecutive days on which every task due that day was completed.

        Days with nothing due are skipped. Today is pending until all of its
        due tasks are completed. Weekly-target tasks have no due days and do
        not participate.
        """
        tasks = [h for h in histories if not h.frequency.is_weekly_target]
        if not tasks:
            return 0

        earliest = min(h.created for h in tasks)
        streak = 0
        day = today
        step = timedelta(days=1)
        while day >= earliest:
            due = [
                h
                for h in tasks
                if h.created <= day and RecurrenceEngine.is_due(h.frequency, day)
            ]
            if due:
                if all(day in h.completions for h in due):
                    streak += 1
                elif day != today:
                    break
            day -= step
        return streak

"""Performance Test Engine - pure analytics for measured results.

A performance test is a value measured again and again (mile time, max
push-ups) to show whether a system is producing results. For a test's
measurement history this engine answers:
- latest, best and average value
- improvement from the first to the latest measurement, and the trend
- whether a new measurement is due, and from which day
- whether a new value is a personal record or an improvement

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Measurements arrive as immutable snapshots built by the coordinator; "better"
always means better in the test's goal direction.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from statistics import fmean
from typing import TYPE_CHECKING, Any

from .. import const
from .recurrence_engine import InvalidFrequencyError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..type_defs import TrackingFrequencyData


@dataclass(frozen=True)
class TrackingFrequency:
    """How often a test should be measured: every `count` days or weeks."""

    unit: str
    count: int = 1

    def __post_init__(self) -> None:
        if self.unit not in const.TRACKING_UNITS:
            raise InvalidFrequencyError(
                f"Unknown tracking unit: {self.unit!r}", self.unit
            )
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise InvalidFrequencyError(
                f"Tracking count must be an integer, got {self.count!r}", self.unit
            )
        if self.count < 1:
            raise InvalidFrequencyError(
                f"Tracking count must be at least 1, got {self.count}", self.unit
            )

    @classmethod
    def weekly(cls) -> TrackingFrequency:
        return cls(const.TRACKING_UNIT_WEEKS)

    @property
    def interval_days(self) -> int:
        if self.unit == const.TRACKING_UNIT_WEEKS:
            return self.count * 7
        return self.count

    @property
    def display_text(self) -> str:
        if self.unit == const.TRACKING_UNIT_WEEKS:
            return "Weekly" if self.count == 1 else f"Every {self.count} weeks"
        return "Daily" if self.count == 1 else f"Every {self.count} days"

    def to_dict(self) -> TrackingFrequencyData:
        return {const.TRACKING_UNIT: self.unit, const.TRACKING_COUNT: self.count}  # type: ignore[return-value]

    @classmethod
    def from_dict(
        cls, data: TrackingFrequencyData | dict[str, Any]
    ) -> TrackingFrequency:
        """Parse a stored tracking frequency.

        Raises:
            InvalidFrequencyError: Not a mapping, unknown unit or bad count.
        """
        if not isinstance(data, dict):
            raise InvalidFrequencyError(
                f"Tracking frequency must be a mapping, got {data!r}"
            )
        return cls(
            data.get(const.TRACKING_UNIT),  # type: ignore[arg-type]
            data.get(const.TRACKING_COUNT, 1),
        )


@dataclass(frozen=True)
class Measurement:
    """One recorded value: the local day it counts for and when it was logged."""

    value: float
    day: date
    recorded_at: datetime


class PerformanceTestEngine:
    """Stateless analytics over a test's measurements.

    Every method accepts measurements in any order and sorts them by day,
    then by recording time, itself.
    """

    @staticmethod
    def _ordered(measurements: Sequence[Measurement]) -> list[Measurement]:
        return sorted(measurements, key=lambda m: (m.day, m.recorded_at))

    @staticmethod
    def is_better(value: float, reference: float, direction: str) -> bool:
        """Strictly better in the goal direction; equal values are not better."""
        if direction == const.GOAL_DIRECTION_LOWER:
            return value < reference
        return value > reference

    # =========================================================================
    # Values
    # =========================================================================

    @classmethod
    def latest_value(cls, measurements: Sequence[Measurement]) -> float | None:
        if not measurements:
            return None
        return cls._ordered(measurements)[-1].value

    @staticmethod
    def best_value(
        measurements: Sequence[Measurement], direction: str
    ) -> float | None:
        if not measurements:
            return None
        values = [m.value for m in measurements]
        return min(values) if direction == const.GOAL_DIRECTION_LOWER else max(values)

    @staticmethod
    def average_value(measurements: Sequence[Measurement]) -> float | None:
        if not measurements:
            return None
        return fmean(m.value for m in measurements)

    @classmethod
    def improvement_percentage(
        cls, measurements: Sequence[Measurement]
    ) -> float | None:
        """Signed change from the first to the latest value, in percent.

        None with fewer than two measurements or a first value of zero.
        """
        if len(measurements) < 2:
            return None
        ordered = cls._ordered(measurements)
        first, last = ordered[0].value, ordered[-1].value
        if first == 0:
            return None
        return (last - first) / first * 100

    @classmethod
    def trend(cls, measurements: Sequence[Measurement], direction: str) -> str:
        improvement = cls.improvement_percentage(measurements)
        if improvement is None:
            return const.TEST_TREND_NO_DATA
        if abs(improvement) < const.TEST_TREND_STABLE_PERCENT:
            return const.TEST_TREND_STABLE
        if (direction == const.GOAL_DIRECTION_LOWER and improvement < 0) or (
            direction != const.GOAL_DIRECTION_LOWER and improvement > 0
        ):
            return const.TEST_TREND_IMPROVING
        return const.TEST_TREND_DECLINING

    @classmethod
    def target_met(
        cls,
        measurements: Sequence[Measurement],
        target: float | None,
        direction: str,
    ) -> bool | None:
        """Whether the best value reaches the target. None without a target."""
        if target is None:
            return None
        best = cls.best_value(measurements, direction)
        if best is None:
            return False
        return best == target or cls.is_better(best, target, direction)

    # =========================================================================
    # Scheduling
    # =========================================================================

    @classmethod
    def next_due_day(
        cls,
        measurements: Sequence[Measurement],
        frequency: TrackingFrequency,
        today: date,
    ) -> date:
        """First day a new measurement is due; today if never measured."""
        if not measurements:
            return today
        last_day = max(m.day for m in measurements)
        return last_day + timedelta(days=frequency.interval_days)

    @classmethod
    def is_due(
        cls,
        measurements: Sequence[Measurement],
        frequency: TrackingFrequency,
        today: date,
    ) -> bool:
        return cls.next_due_day(measurements, frequency, today) <= today

    # =========================================================================
    # Records
    # =========================================================================

    @classmethod
    def is_personal_record(
        cls, previous: Sequence[Measurement], value: float, direction: str
    ) -> bool:
        """A value beating every earlier one. The first measurement is a baseline."""
        best = cls.best_value(previous, direction)
        return best is not None and cls.is_better(value, best, direction)

    @classmethod
    def is_improvement(
        cls, previous: Sequence[Measurement], value: float, direction: str
    ) -> bool | None:
        """Compare with the latest earlier value. None for a first measurement."""
        latest = cls.latest_value(previous)
        if latest is None:
            return None
        return cls.is_better(value, latest, direction)

    @classmethod
    def holds_record(cls, measurements: Sequence[Measurement], direction: str) -> bool:
        """True once the best value has beaten the baseline measurement."""
        if len(measurements) < 2:
            return False
        baseline = cls._ordered(measurements)[0].value
        best = cls.best_value(measurements, direction)
        return best is not None and cls.is_better(best, baseline, direction)

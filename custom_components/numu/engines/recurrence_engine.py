"""Recurrence Engine for Numu.

Answers "is this task due on this calendar day?" for every frequency kind and
expands due days over a range using `dateutil.rrule`.

Frequencies are validated once, when a `Frequency` is constructed or parsed
from storage. Every function below is total over valid frequencies.

IMPORTANT: This module must NOT import from coordinator.py to avoid circular imports.
Only import from const.py, utils, and standard libraries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, ClassVar

from dateutil.rrule import DAILY, rrule

from .. import const

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..type_defs import FrequencyData


class InvalidFrequencyError(ValueError):
    """Raised when a frequency definition cannot be constructed."""

    def __init__(self, message: str, frequency_type: str | None = None) -> None:
        super().__init__(message)
        self.frequency_type = frequency_type


@dataclass(frozen=True)
class Frequency:
    """Recurrence rule attached to a task.

    Use the classmethod constructors; direct construction is validated too.
    `days` holds ISO weekday numbers and is only meaningful for
    specific_weekdays. `times` is only meaningful for weekly_target.
    """

    kind: str
    days: frozenset[int] = field(default_factory=frozenset)
    times: int = 0

    _FIXED_DAYS: ClassVar[dict[str, frozenset[int]]] = {
        const.FREQUENCY_DAILY: const.ISO_WEEKDAYS,
        const.FREQUENCY_WEEKDAYS: const.ISO_WORKWEEK,
        const.FREQUENCY_WEEKENDS: const.ISO_WEEKEND,
    }

    def __post_init__(self) -> None:
        if self.kind not in const.FREQUENCY_OPTIONS:
            raise InvalidFrequencyError(
                f"Unknown frequency type: {self.kind!r}", self.kind
            )
        # Normalize any iterable of days into a frozenset
        object.__setattr__(self, "days", frozenset(self.days))

        if self.kind == const.FREQUENCY_SPECIFIC_WEEKDAYS:
            if not self.days:
                raise InvalidFrequencyError(
                    "specific_weekdays requires at least one weekday", self.kind
                )
            # bool is an int subclass; True must not pass as Monday
            invalid = sorted(
                (
                    d
                    for d in self.days
                    if isinstance(d, bool)
                    or not isinstance(d, int)
                    or d not in const.ISO_WEEKDAYS
                ),
                key=repr,
            )
            if invalid:
                raise InvalidFrequencyError(
                    f"Weekday numbers must be 1-7 (Monday-Sunday), got {invalid}",
                    self.kind,
                )
        elif self.days:
            object.__setattr__(self, "days", frozenset())

        if self.kind == const.FREQUENCY_WEEKLY_TARGET:
            if isinstance(self.times, bool) or not isinstance(self.times, int):
                raise InvalidFrequencyError(
                    f"weekly_target times must be an integer, got {self.times!r}",
                    self.kind,
                )
            if self.times < 1:
                raise InvalidFrequencyError(
                    f"weekly_target times must be at least 1, got {self.times}",
                    self.kind,
                )
        elif self.times:
            object.__setattr__(self, "times", 0)

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def daily(cls) -> Frequency:
        return cls(const.FREQUENCY_DAILY)

    @classmethod
    def weekdays(cls) -> Frequency:
        return cls(const.FREQUENCY_WEEKDAYS)

    @classmethod
    def weekends(cls) -> Frequency:
        return cls(const.FREQUENCY_WEEKENDS)

    @classmethod
    def specific_weekdays(cls, days: Iterable[int]) -> Frequency:
        return cls(const.FREQUENCY_SPECIFIC_WEEKDAYS, days=frozenset(days))

    @classmethod
    def weekly_target(cls, times: int) -> Frequency:
        return cls(const.FREQUENCY_WEEKLY_TARGET, times=times)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def is_weekly_target(self) -> bool:
        return self.kind == const.FREQUENCY_WEEKLY_TARGET

    @property
    def due_weekdays(self) -> frozenset[int]:
        """ISO weekdays on which this frequency is due (empty for weekly targets)."""
        if self.kind == const.FREQUENCY_SPECIFIC_WEEKDAYS:
            return self.days
        return self._FIXED_DAYS.get(self.kind, frozenset())

    @property
    def display_text(self) -> str:
        """Human readable summary, e.g. "Mon, Wed, Fri" or "3× per week"."""
        if self.kind == const.FREQUENCY_DAILY:
            return "Every day"
        if self.kind == const.FREQUENCY_WEEKDAYS:
            return "Weekdays"
        if self.kind == const.FREQUENCY_WEEKENDS:
            return "Weekends"
        if self.kind == const.FREQUENCY_WEEKLY_TARGET:
            return f"{self.times}× per week"
        return ", ".join(const.WEEKDAY_SHORT_NAMES[d] for d in sorted(self.days))

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> FrequencyData:
        data: dict[str, Any] = {const.FREQUENCY_TYPE: self.kind}
        if self.kind == const.FREQUENCY_SPECIFIC_WEEKDAYS:
            data[const.FREQUENCY_DAYS] = sorted(self.days)
        if self.kind == const.FREQUENCY_WEEKLY_TARGET:
            data[const.FREQUENCY_TIMES] = self.times
        return data  # type: ignore[return-value]

    @classmethod
    def from_dict(cls, data: FrequencyData | dict[str, Any]) -> Frequency:
        """Parse a stored frequency.

        Raises:
            InvalidFrequencyError: Unknown type or invalid parameters.
                There is no fallback to daily.
        """
        if not isinstance(data, dict):
            raise InvalidFrequencyError(f"Frequency must be a mapping, got {data!r}")
        kind = data.get(const.FREQUENCY_TYPE)
        if not isinstance(kind, str):
            raise InvalidFrequencyError(f"Frequency type missing in {data!r}")
        if kind == const.FREQUENCY_SPECIFIC_WEEKDAYS:
            days = data.get(const.FREQUENCY_DAYS) or []
            try:
                # bools stay bools so the constructor rejects them
                parsed_days = [d if isinstance(d, bool) else int(d) for d in days]
            except (TypeError, ValueError) as err:
                raise InvalidFrequencyError(
                    f"Invalid weekday list: {days!r}", kind
                ) from err
            return cls.specific_weekdays(parsed_days)
        if kind == const.FREQUENCY_WEEKLY_TARGET:
            times = data.get(const.FREQUENCY_TIMES)
            return cls.weekly_target(times)  # type: ignore[arg-type]
        return cls(kind)


class RecurrenceEngine:
    """Stateless due-day evaluation for task frequencies.

    Weekly targets have no fixed due days: `is_due` is always False for them
    and their progress is tracked by the weekly target engine instead.
    """

    # Map ISO weekday numbers to rrule weekday indexes (Monday=0)
    ISO_TO_RRULE_WEEKDAY: ClassVar[dict[int, int]] = {
        iso: iso - 1 for iso in const.ISO_WEEKDAYS
    }
    RRULE_DAY_CODES: ClassVar[dict[int, str]] = {
        1: "MO",
        2: "TU",
        3: "WE",
        4: "TH",
        5: "FR",
        6: "SA",
        7: "SU",
    }

    @staticmethod
    def is_due(frequency: Frequency, day: date) -> bool:
        """Return True when a task with this frequency is due on `day`."""
        if frequency.is_weekly_target:
            return False
        return day.isoweekday() in frequency.due_weekdays

    @classmethod
    def due_days(cls, frequency: Frequency, start: date, end: date) -> list[date]:
        """Return every due day in [start, end] in ascending order."""
        if frequency.is_weekly_target or end < start:
            return []
        rule = rrule(
            DAILY,
            dtstart=start,
            until=end,
            byweekday=[  # type: ignore[arg-type]
                cls.ISO_TO_RRULE_WEEKDAY[d] for d in sorted(frequency.due_weekdays)
            ],
        )
        return [occurrence.date() for occurrence in rule]

    @classmethod
    def count_due_days(cls, frequency: Frequency, start: date, end: date) -> int:
        """Return the number of due days in [start, end]."""
        if frequency.is_weekly_target or end < start:
            return 0
        if frequency.kind == const.FREQUENCY_DAILY:
            return (end - start).days + 1
        return len(cls.due_days(frequency, start, end))

    @classmethod
    def to_rrule_string(cls, frequency: Frequency) -> str:
        """Generate RFC 5545 RRULE string for iCal export.

        Returns:
            RRULE string (e.g., "FREQ=WEEKLY;BYDAY=MO,WE,FR")
            or empty string for weekly targets, which have no fixed days.
        """
        if frequency.is_weekly_target:
            return ""
        if frequency.kind == const.FREQUENCY_DAILY:
            return "FREQ=DAILY;INTERVAL=1"
        days = ",".join(
            cls.RRULE_DAY_CODES[d] for d in sorted(frequency.due_weekdays)
        )
        return f"FREQ=WEEKLY;INTERVAL=1;BYDAY={days}"

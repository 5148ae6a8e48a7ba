"""Unit tests for the Frequency type and RecurrenceEngine.

Categories:
- Construction and validation (no silent fallback to daily)
- Storage round trip and display text
- is_due for every frequency kind
- Due-day expansion over ranges (rrule backed)
"""

from datetime import date, timedelta

import pytest

from custom_components.numu import const
from custom_components.numu.engines.recurrence_engine import (
    Frequency,
    InvalidFrequencyError,
    RecurrenceEngine,
)

# 2025-01-06 is a Monday
MONDAY = date(2025, 1, 6)


def week_of(start: date = MONDAY) -> list[date]:
    """Return the seven days starting at `start`."""
    return [start + timedelta(days=offset) for offset in range(7)]


# =============================================================================
# Construction
# =============================================================================


class TestFrequencyValidation:
    """Invalid frequencies can never be constructed."""

    def test_unknown_kind_raises(self) -> None:
        with pytest.raises(InvalidFrequencyError, match="Unknown frequency type"):
            Frequency("fortnightly")

    def test_specific_weekdays_requires_days(self) -> None:
        with pytest.raises(InvalidFrequencyError):
            Frequency.specific_weekdays([])

    @pytest.mark.parametrize("days", [[0], [8], [1, 9]])
    def test_specific_weekdays_out_of_range(self, days) -> None:
        with pytest.raises(InvalidFrequencyError, match="1-7"):
            Frequency.specific_weekdays(days)

    @pytest.mark.parametrize("days", [[True], [False, 2], ["x", 9], [None, 1]])
    def test_specific_weekdays_non_integer_days(self, days) -> None:
        """Booleans and mixed-type lists fail validation instead of TypeError."""
        with pytest.raises(InvalidFrequencyError, match="1-7"):
            Frequency.specific_weekdays(days)

    @pytest.mark.parametrize("times", [0, -2])
    def test_weekly_target_requires_positive_times(self, times) -> None:
        with pytest.raises(InvalidFrequencyError, match="at least 1"):
            Frequency.weekly_target(times)

    @pytest.mark.parametrize("times", [None, "3", 2.5, True])
    def test_weekly_target_requires_int(self, times) -> None:
        with pytest.raises(InvalidFrequencyError):
            Frequency.weekly_target(times)

    def test_irrelevant_parameters_are_dropped(self) -> None:
        frequency = Frequency(const.FREQUENCY_DAILY, days=frozenset({1}), times=3)
        assert frequency.days == frozenset()
        assert frequency.times == 0

    def test_error_carries_kind(self) -> None:
        with pytest.raises(InvalidFrequencyError) as err:
            Frequency.weekly_target(0)
        assert err.value.frequency_type == const.FREQUENCY_WEEKLY_TARGET


class TestFrequencySerialization:
    """Stored form and display text."""

    @pytest.mark.parametrize(
        "frequency",
        [
            Frequency.daily(),
            Frequency.weekdays(),
            Frequency.weekends(),
            Frequency.specific_weekdays([5, 1, 3]),
            Frequency.weekly_target(3),
        ],
    )
    def test_round_trip(self, frequency) -> None:
        assert Frequency.from_dict(frequency.to_dict()) == frequency

    def test_specific_weekdays_stored_sorted(self) -> None:
        stored = Frequency.specific_weekdays([5, 1, 3]).to_dict()
        assert stored == {"type": "specific_weekdays", "days": [1, 3, 5]}

    @pytest.mark.parametrize(
        "data",
        [
            {"type": "hourly"},
            {},
            {"type": "weekly_target"},
            {"type": "specific_weekdays", "days": ["mon"]},
            {"type": "specific_weekdays", "days": [True]},
            ["daily"],
        ],
    )
    def test_from_dict_rejects_invalid(self, data) -> None:
        """No invalid stored frequency falls back to daily."""
        with pytest.raises(InvalidFrequencyError):
            Frequency.from_dict(data)

    def test_display_text(self) -> None:
        assert Frequency.daily().display_text == "Every day"
        assert Frequency.specific_weekdays([5, 1, 3]).display_text == "Mon, Wed, Fri"
        assert Frequency.weekly_target(3).display_text == "3× per week"


# =============================================================================
# is_due
# =============================================================================


class TestIsDue:
    """Due days per frequency kind across one Monday-Sunday week."""

    @pytest.mark.parametrize(
        ("frequency", "expected"),
        [
            (Frequency.daily(), [True] * 7),
            (Frequency.weekdays(), [True] * 5 + [False] * 2),
            (Frequency.weekends(), [False] * 5 + [True] * 2),
            (
                Frequency.specific_weekdays([1, 3, 5]),
                [True, False, True, False, True, False, False],
            ),
            (Frequency.weekly_target(3), [False] * 7),
        ],
    )
    def test_is_due_across_week(self, frequency, expected) -> None:
        assert [RecurrenceEngine.is_due(frequency, d) for d in week_of()] == expected


class TestDueDays:
    """Range expansion matches is_due day by day."""

    @pytest.mark.parametrize(
        "frequency",
        [
            Frequency.daily(),
            Frequency.weekdays(),
            Frequency.weekends(),
            Frequency.specific_weekdays([2, 7]),
        ],
    )
    def test_due_days_matches_is_due(self, frequency) -> None:
        start = MONDAY
        end = MONDAY + timedelta(days=40)
        expected = [
            start + timedelta(days=n)
            for n in range(41)
            if RecurrenceEngine.is_due(frequency, start + timedelta(days=n))
        ]
        assert RecurrenceEngine.due_days(frequency, start, end) == expected
        assert RecurrenceEngine.count_due_days(frequency, start, end) == len(expected)

    def test_empty_for_reversed_range(self) -> None:
        assert RecurrenceEngine.due_days(Frequency.daily(), MONDAY, MONDAY - timedelta(days=1)) == []
        assert RecurrenceEngine.count_due_days(Frequency.daily(), MONDAY, MONDAY - timedelta(days=1)) == 0

    def test_weekly_target_has_no_due_days(self) -> None:
        end = MONDAY + timedelta(days=13)
        assert RecurrenceEngine.due_days(Frequency.weekly_target(2), MONDAY, end) == []

    def test_rrule_strings(self) -> None:
        assert RecurrenceEngine.to_rrule_string(Frequency.daily()) == "FREQ=DAILY;INTERVAL=1"
        assert (
            RecurrenceEngine.to_rrule_string(Frequency.specific_weekdays([1, 3, 5]))
            == "FREQ=WEEKLY;INTERVAL=1;BYDAY=MO,WE,FR"
        )
        assert RecurrenceEngine.to_rrule_string(Frequency.weekly_target(2)) == ""

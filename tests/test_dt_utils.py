"""Tests for utils/dt_utils.py calendar helpers.

Categories:
- Local day derivation (start_of_day, dt_today_local)
- Parsing (dt_parse_day, dt_parse_datetime)
- Day arithmetic (days_between, iter_days)
- Calendar weeks for both week start conventions
"""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from freezegun import freeze_time
import pytest

from custom_components.numu.utils import dt_utils

PACIFIC = ZoneInfo("America/Los_Angeles")

# 2025-01-06 is a Monday
MONDAY = date(2025, 1, 6)
WEDNESDAY = date(2025, 1, 8)
SUNDAY = date(2025, 1, 12)


class TestLocalDays:
    """A timestamp maps to exactly one local calendar day."""

    def test_late_evening_stays_on_local_day(self) -> None:
        """23:30 local is still that day even though UTC has rolled over."""
        late = datetime(2025, 1, 7, 7, 30, tzinfo=UTC)  # 23:30 on Jan 6 in Pacific

        assert dt_utils.start_of_day(late, PACIFIC) == date(2025, 1, 6)
        assert dt_utils.start_of_day(late, ZoneInfo("UTC")) == date(2025, 1, 7)

    def test_date_is_returned_unchanged(self) -> None:
        assert dt_utils.start_of_day(MONDAY, PACIFIC) == MONDAY

    @freeze_time("2025-01-15 12:00:00", tz_offset=0)
    def test_today_local_uses_given_timezone(self) -> None:
        assert dt_utils.dt_today_local(ZoneInfo("UTC")) == date(2025, 1, 15)

    @freeze_time("2025-01-15 03:00:00", tz_offset=0)
    def test_today_local_before_local_midnight(self) -> None:
        """03:00 UTC is still the previous evening in Pacific time."""
        assert dt_utils.dt_today_local(PACIFIC) == date(2025, 1, 14)

    def test_naive_datetime_assumed_local_for_utc_conversion(self) -> None:
        dt_utils.set_default_timezone(PACIFIC)
        try:
            converted = dt_utils.as_utc(datetime(2025, 1, 6, 16, 0))
            assert converted == datetime(2025, 1, 7, 0, 0, tzinfo=UTC)
        finally:
            dt_utils.set_default_timezone(ZoneInfo("UTC"))


class TestParsing:
    """Parsing never raises on bad input."""

    def test_parse_iso_date(self) -> None:
        assert dt_utils.dt_parse_day("2025-01-06") == MONDAY

    def test_parse_iso_datetime_to_local_day(self) -> None:
        dt_utils.set_default_timezone(PACIFIC)
        try:
            assert dt_utils.dt_parse_day("2025-01-07T07:30:00+00:00") == MONDAY
        finally:
            dt_utils.set_default_timezone(ZoneInfo("UTC"))

    @pytest.mark.parametrize("value", [None, "", "not-a-date", "2025-13-45"])
    def test_parse_invalid_day_returns_none(self, value) -> None:
        assert dt_utils.dt_parse_day(value) is None

    def test_parse_datetime_is_utc(self) -> None:
        parsed = dt_utils.dt_parse_datetime("2025-01-06T10:00:00-08:00")
        assert parsed == datetime(2025, 1, 6, 18, 0, tzinfo=UTC)

    def test_parse_datetime_invalid_returns_none(self) -> None:
        assert dt_utils.dt_parse_datetime("yesterday") is None


class TestDayArithmetic:
    """Signed differences and inclusive iteration."""

    def test_days_between_is_signed(self) -> None:
        assert dt_utils.days_between(MONDAY, SUNDAY) == 6
        assert dt_utils.days_between(SUNDAY, MONDAY) == -6

    def test_iter_days_is_inclusive(self) -> None:
        days = list(dt_utils.iter_days(MONDAY, WEDNESDAY))
        assert days == [MONDAY, date(2025, 1, 7), WEDNESDAY]

    def test_iter_days_empty_when_reversed(self) -> None:
        assert list(dt_utils.iter_days(WEDNESDAY, MONDAY)) == []

    def test_iso_weekday(self) -> None:
        assert dt_utils.iso_weekday(MONDAY) == 1
        assert dt_utils.iso_weekday(SUNDAY) == 7


class TestCalendarWeeks:
    """Week boundaries for the monday and sunday conventions."""

    def test_monday_weeks(self) -> None:
        assert dt_utils.week_start_for(SUNDAY) == MONDAY
        assert dt_utils.week_bounds(WEDNESDAY) == (MONDAY, SUNDAY)
        assert dt_utils.week_key(SUNDAY) == "2025-01-06"

    def test_sunday_weeks(self) -> None:
        sunday_week = dt_utils.WEEK_START_SUNDAY
        assert dt_utils.week_start_for(WEDNESDAY, sunday_week) == date(2025, 1, 5)
        assert dt_utils.week_start_for(SUNDAY, sunday_week) == SUNDAY
        assert not dt_utils.same_week(WEDNESDAY, SUNDAY, sunday_week)

    def test_same_week_monday(self) -> None:
        assert dt_utils.same_week(MONDAY, SUNDAY)
        assert not dt_utils.same_week(SUNDAY, date(2025, 1, 13))

    def test_unknown_convention_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown week start"):
            dt_utils.week_start_for(MONDAY, "friday")

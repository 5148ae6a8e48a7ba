"""Tests for data_builders.py entity construction and validation.

Categories:
- Systems: name validation, ids, defaults, update semantics
- Tasks: frequency validation, default frequency, update keeps identity
- Completion events: optional provenance fields
- Performance tests and their entries
- Progress profile and achievement catalog, including consistency spans
"""

from datetime import UTC, date, datetime

import pytest

from custom_components.numu import const
from custom_components.numu.data_builders import (
    EntityValidationError,
    build_achievement,
    build_completion_event,
    build_progress,
    build_system,
    build_task,
    build_test,
    build_test_entry,
    parse_frequency,
)
from custom_components.numu.engines.recurrence_engine import Frequency

NOW = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)


class TestBuildSystem:
    def test_create(self) -> None:
        system = build_system(
            {const.DATA_NAME: "  Morning  ", const.DATA_SYSTEM_CATEGORY: "health"},
            now=NOW,
        )
        assert system["name"] == "Morning"
        assert system["category"] == "health"
        assert system["created_at"] == NOW.isoformat()
        assert system["perfect_days"] == []
        assert len(system["internal_id"]) == 36

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_name_required(self, name) -> None:
        with pytest.raises(EntityValidationError) as err:
            build_system({const.DATA_NAME: name}, now=NOW)
        assert err.value.translation_key == const.TRANS_KEY_ERROR_NAME_REQUIRED
        assert err.value.field == const.DATA_NAME

    def test_update_keeps_identity(self) -> None:
        original = build_system({const.DATA_NAME: "Morning"}, now=NOW)
        updated = build_system({const.DATA_SYSTEM_DESCRIPTION: "Start well"}, original)
        assert updated["internal_id"] == original["internal_id"]
        assert updated["created_at"] == original["created_at"]
        assert updated["name"] == "Morning"
        assert updated["description"] == "Start well"


class TestBuildTask:
    def test_create_with_frequency(self) -> None:
        task = build_task(
            {
                const.DATA_NAME: "Stretch",
                const.DATA_TASK_SYSTEM_ID: "sys1",
                const.DATA_TASK_FREQUENCY: {"type": "specific_weekdays", "days": [3, 1]},
            },
            now=NOW,
        )
        assert task["frequency"] == {"type": "specific_weekdays", "days": [1, 3]}
        assert task["system_id"] == "sys1"
        assert task["xp_awarded_days"] == []
        assert task["target_weeks_met"] == []

    def test_default_frequency_is_daily(self) -> None:
        task = build_task(
            {const.DATA_NAME: "Stretch", const.DATA_TASK_SYSTEM_ID: "sys1"}, now=NOW
        )
        assert task["frequency"] == {"type": "daily"}

    def test_invalid_frequency_rejected(self) -> None:
        with pytest.raises(EntityValidationError) as err:
            build_task(
                {
                    const.DATA_NAME: "Stretch",
                    const.DATA_TASK_SYSTEM_ID: "sys1",
                    const.DATA_TASK_FREQUENCY: {"type": "weekly_target", "times": 0},
                },
                now=NOW,
            )
        assert err.value.translation_key == const.TRANS_KEY_ERROR_INVALID_FREQUENCY
        assert "at least 1" in err.value.placeholders["error"]

    def test_system_required(self) -> None:
        with pytest.raises(EntityValidationError) as err:
            build_task({const.DATA_NAME: "Stretch"}, now=NOW)
        assert err.value.field == const.DATA_TASK_SYSTEM_ID

    def test_update_frequency_keeps_bookkeeping(self) -> None:
        original = build_task(
            {const.DATA_NAME: "Stretch", const.DATA_TASK_SYSTEM_ID: "sys1"}, now=NOW
        )
        original["xp_awarded_days"].append("2025-01-06")
        updated = build_task(
            {const.DATA_TASK_FREQUENCY: {"type": "weekly_target", "times": 3}},
            existing=original,
        )
        assert updated["internal_id"] == original["internal_id"]
        assert updated["frequency"] == {"type": "weekly_target", "times": 3}
        assert updated["xp_awarded_days"] == ["2025-01-06"]

    def test_parse_frequency_passes_through_instances(self) -> None:
        frequency = Frequency.weekends()
        assert parse_frequency(frequency) is frequency


class TestCompletionEvent:
    def test_minimal_event(self) -> None:
        event = build_completion_event("task1", date(2025, 1, 6), NOW)
        assert event == {
            "task_id": "task1",
            "day": "2025-01-06",
            "occurred_at": NOW.isoformat(),
        }

    def test_provenance_fields(self) -> None:
        event = build_completion_event(
            "task1", date(2025, 1, 6), NOW, duration_minutes=20, source="health"
        )
        assert event["duration_minutes"] == 20
        assert event["source"] == "health"


class TestBuildTest:
    def test_create_with_defaults(self) -> None:
        test = build_test({"name": " Push-ups ", "system_id": "s1"}, now=NOW)
        assert test["name"] == "Push-ups"
        assert test["system_id"] == "s1"
        assert test["goal_direction"] == const.GOAL_DIRECTION_HIGHER
        assert test["tracking_frequency"] == {"unit": "weeks", "count": 1}
        assert test["target_value"] is None
        assert test["unit"] == ""
        assert test["created_at"] == NOW.isoformat()
        assert "description" not in test

    def test_lower_is_better_with_target(self) -> None:
        test = build_test(
            {
                "name": "Mile",
                "system_id": "s1",
                "unit": "min",
                "goal_direction": "lower",
                "target_value": "7.5",
                "tracking_frequency": {"unit": "days", "count": 10},
            }
        )
        assert test["goal_direction"] == const.GOAL_DIRECTION_LOWER
        assert test["target_value"] == 7.5
        assert test["tracking_frequency"] == {"unit": "days", "count": 10}

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("goal_direction", "sideways"),
            ("target_value", "fast"),
            ("target_value", True),
            ("target_value", float("nan")),
            ("tracking_frequency", {"unit": "months", "count": 1}),
            ("tracking_frequency", {"unit": "weeks", "count": 0}),
        ],
    )
    def test_invalid_fields(self, field, value) -> None:
        with pytest.raises(EntityValidationError) as err:
            build_test({"name": "Mile", "system_id": "s1", field: value})
        assert err.value.field == field

    def test_system_required(self) -> None:
        with pytest.raises(EntityValidationError):
            build_test({"name": "Mile"})

    def test_update_keeps_identity(self) -> None:
        created = build_test({"name": "Mile", "system_id": "s1"}, now=NOW)
        updated = build_test({"target_value": 7}, existing=created)
        assert updated["internal_id"] == created["internal_id"]
        assert updated["created_at"] == created["created_at"]
        assert updated["target_value"] == 7.0


class TestBuildTestEntry:
    def test_entry(self) -> None:
        entry = build_test_entry(
            "t1", "42", date(2025, 1, 6), NOW, notes="easy", conditions="indoor"
        )
        assert entry["test_id"] == "t1"
        assert entry["value"] == 42.0
        assert entry["day"] == "2025-01-06"
        assert entry["recorded_at"] == NOW.isoformat()
        assert entry["notes"] == "easy"
        assert entry["conditions"] == "indoor"

    def test_optional_fields_omitted(self) -> None:
        entry = build_test_entry("t1", 3, date(2025, 1, 6), NOW)
        assert "notes" not in entry
        assert "conditions" not in entry

    @pytest.mark.parametrize("value", [None, "abc", False, float("inf")])
    def test_value_must_be_a_number(self, value) -> None:
        with pytest.raises(EntityValidationError):
            build_test_entry("t1", value, date(2025, 1, 6), NOW)


class TestProgression:
    def test_fresh_profile(self) -> None:
        profile = build_progress()
        assert profile["level"] == 1
        assert profile["total_xp"] == 0
        assert set(profile["counters"]) == set(const.PROGRESS_COUNTERS)
        assert all(value == 0 for value in profile["counters"].values())

    def test_achievement_validation(self) -> None:
        with pytest.raises(EntityValidationError):
            build_achievement("x", "X", "", "bogus", 1, 10)
        with pytest.raises(EntityValidationError):
            build_achievement("x", "X", "", const.ACHIEVEMENT_CATEGORY_TASKS, 0, 10)

    def test_consistency_span(self) -> None:
        achievement = build_achievement(
            "x", "X", "", const.ACHIEVEMENT_CATEGORY_CONSISTENCY, 80, 10, min_days=30
        )
        assert achievement["min_days"] == 30
        plain = build_achievement("y", "Y", "", const.ACHIEVEMENT_CATEGORY_TASKS, 1, 10)
        assert "min_days" not in plain

    @pytest.mark.parametrize(
        ("category", "min_days"),
        [
            (const.ACHIEVEMENT_CATEGORY_CONSISTENCY, 10),
            (const.ACHIEVEMENT_CATEGORY_TASKS, 7),
        ],
    )
    def test_invalid_span(self, category, min_days) -> None:
        with pytest.raises(EntityValidationError) as err:
            build_achievement("x", "X", "", category, 50, 10, min_days=min_days)
        assert err.value.field == const.DATA_ACHIEVEMENT_MIN_DAYS

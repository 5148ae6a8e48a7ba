"""Type definitions for Numu data structures.

TypedDict is used for the static entity shapes stored in `.storage/numu_data`.
Day-keyed and counter-keyed maps stay `dict[str, ...]` because their keys are
only known at runtime.

IMPORTANT: This file must NOT import from coordinator.py, managers, or any
file that imports coordinator to avoid circular dependencies.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime checks (.get() defaults,
validation in data_builders.py) are still required.
"""

from typing import NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

SystemId = str  # UUID string
TaskId = str  # UUID string
PerformanceTestId = str  # UUID string
AchievementId = str  # slug, e.g. "week_warrior"
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"


# =============================================================================
# Entities
# =============================================================================


class FrequencyData(TypedDict):
    """Stored form of a task frequency."""

    type: str
    days: NotRequired[list[int]]  # ISO weekdays, specific_weekdays only
    times: NotRequired[int]  # weekly_target only


class SystemData(TypedDict):
    """A system groups tasks toward one goal."""

    internal_id: SystemId
    name: str
    created_at: ISODatetime
    category: str
    description: NotRequired[str]
    perfect_days: list[ISODate]  # days already counted as perfect


class TaskData(TypedDict):
    """A recurring habit belonging to a system."""

    internal_id: TaskId
    system_id: SystemId
    name: str
    created_at: ISODatetime
    frequency: FrequencyData
    xp_awarded_days: list[ISODate]
    target_weeks_met: list[ISODate]  # week keys already counted


class TrackingFrequencyData(TypedDict):
    """Stored form of a performance test's measuring interval."""

    unit: str  # "days" or "weeks"
    count: int


class PerformanceTestData(TypedDict):
    """A repeated measurement showing whether a system produces results."""

    internal_id: PerformanceTestId
    system_id: SystemId
    name: str
    created_at: ISODatetime
    unit: str
    goal_direction: str  # "higher" or "lower"
    tracking_frequency: TrackingFrequencyData
    target_value: NotRequired[float | None]
    description: NotRequired[str]


class PerformanceTestEntryData(TypedDict):
    """One recorded value of a performance test."""

    internal_id: str
    test_id: PerformanceTestId
    value: float
    day: ISODate
    recorded_at: ISODatetime
    notes: NotRequired[str]
    conditions: NotRequired[str]


class CompletionEventData(TypedDict):
    """One completion of a task on one calendar day."""

    task_id: TaskId
    day: ISODate
    occurred_at: ISODatetime
    duration_minutes: NotRequired[int | None]
    source: NotRequired[str | None]


class ProgressData(TypedDict):
    """XP, level and achievement counters for the installation."""

    total_xp: int
    level: int
    counters: dict[str, int]
    recently_unlocked: list[AchievementId]
    last_level_up: NotRequired[ISODatetime | None]
    improvement_run: NotRequired[int]  # consecutive improving test entries


class AchievementData(TypedDict):
    """A badge unlocked when its category counter reaches the threshold."""

    internal_id: AchievementId
    name: str
    description: str
    category: str
    threshold: int
    xp_reward: int
    tier: str
    badge: str
    unlocked: bool
    unlocked_at: ISODatetime | None
    progress: int
    min_days: NotRequired[int]  # consistency achievements only


# Day-keyed completion log for one task: {ISODate: CompletionEventData}
TaskCompletionLog = dict[ISODate, CompletionEventData]

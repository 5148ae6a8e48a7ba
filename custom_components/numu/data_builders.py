"""Entity building and validation helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Entity field defaults
- Business logic validation (names, frequencies, test goals)
- Complete entity structure building

### Build Functions
Each entity type has a `build_<entity>()` function that:
- Takes data with DATA_* keys (service calls map directly onto these)
- Generates internal_id (UUID) for new entities
- Sets created_at from the injected `now`
- Applies field defaults
- Returns complete entity dict ready for storage

Consumers:
- managers/task_manager.py (systems, tasks, completion events)
- managers/performance_test_manager.py (performance tests and their entries)
- managers/gamification_manager.py (progress profile, achievement catalog)
- store.py (default structure)
"""

from __future__ import annotations

from datetime import date, datetime
import math
from typing import Any
import uuid

from . import const
from .engines.performance_test_engine import TrackingFrequency
from .engines.recurrence_engine import Frequency, InvalidFrequencyError
from .type_defs import (
    AchievementData,
    CompletionEventData,
    PerformanceTestData,
    PerformanceTestEntryData,
    ProgressData,
    SystemData,
    TaskData,
)
from .utils.dt_utils import dt_now_utc

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class EntityValidationError(Exception):
    """Validation error with field-specific information.

    Attributes:
        field: The DATA_* / FIELD_* constant identifying the failing input
        translation_key: The TRANS_KEY_* constant for the error message
        placeholders: Optional dict for translation string placeholders

    Example:
        raise EntityValidationError(
            field=const.DATA_TASK_FREQUENCY,
            translation_key=const.TRANS_KEY_ERROR_INVALID_FREQUENCY,
            placeholders={"error": str(err)},
        )
    """

    def __init__(
        self,
        field: str,
        translation_key: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        self.field = field
        self.translation_key = translation_key
        self.placeholders = placeholders or {}
        super().__init__(translation_key)


# ==============================================================================
# HELPERS
# ==============================================================================


def _field_getter(user_input: dict[str, Any], existing: dict[str, Any] | None):
    """Return a lookup with priority user_input > existing > default."""

    def get_field(data_key: str, default: Any) -> Any:
        if data_key in user_input:
            return user_input[data_key]
        if existing is not None:
            return existing.get(data_key, default)
        return default

    return get_field


def _validated_name(
    user_input: dict[str, Any], raw_name: Any, *, is_create: bool
) -> str:
    name = str(raw_name).strip() if raw_name else ""
    if (is_create or const.DATA_NAME in user_input) and not name:
        raise EntityValidationError(
            field=const.DATA_NAME,
            translation_key=const.TRANS_KEY_ERROR_NAME_REQUIRED,
        )
    return name


def parse_frequency(raw: Frequency | dict[str, Any]) -> Frequency:
    """Validate a frequency from service input or storage.

    Raises:
        EntityValidationError: If the frequency is invalid.
    """
    if isinstance(raw, Frequency):
        return raw
    try:
        return Frequency.from_dict(raw)
    except InvalidFrequencyError as err:
        raise EntityValidationError(
            field=const.DATA_TASK_FREQUENCY,
            translation_key=const.TRANS_KEY_ERROR_INVALID_FREQUENCY,
            placeholders={"error": str(err)},
        ) from err


# ==============================================================================
# SYSTEMS
# ==============================================================================


def build_system(
    user_input: dict[str, Any],
    existing: SystemData | None = None,
    now: datetime | None = None,
) -> SystemData:
    """Build system data for create or update operations.

    Raises:
        EntityValidationError: If name validation fails (empty/whitespace)
    """
    is_create = existing is None
    get_field = _field_getter(user_input, existing)  # type: ignore[arg-type]

    name = _validated_name(
        user_input, get_field(const.DATA_NAME, ""), is_create=is_create
    )

    if existing is None:
        internal_id = str(uuid.uuid4())
        created_at = (now or dt_now_utc()).isoformat()
    else:
        internal_id = existing[const.DATA_INTERNAL_ID]
        created_at = existing[const.DATA_CREATED_AT]

    system = SystemData(
        internal_id=internal_id,
        name=name,
        created_at=created_at,
        category=str(get_field(const.DATA_SYSTEM_CATEGORY, "") or ""),
        perfect_days=list(get_field(const.DATA_SYSTEM_PERFECT_DAYS, [])),
    )
    description = get_field(const.DATA_SYSTEM_DESCRIPTION, None)
    if description:
        system[const.DATA_SYSTEM_DESCRIPTION] = str(description)  # type: ignore[literal-required]
    return system


# ==============================================================================
# TASKS
# ==============================================================================


def build_task(
    user_input: dict[str, Any],
    existing: TaskData | None = None,
    now: datetime | None = None,
) -> TaskData:
    """Build task data for create or update operations.

    The frequency is validated here, so a task with an invalid frequency can
    never reach storage.

    Raises:
        EntityValidationError: Empty name, missing system or invalid frequency
    """
    is_create = existing is None
    get_field = _field_getter(user_input, existing)  # type: ignore[arg-type]

    name = _validated_name(
        user_input, get_field(const.DATA_NAME, ""), is_create=is_create
    )

    system_id = get_field(const.DATA_TASK_SYSTEM_ID, None)
    if not system_id:
        raise EntityValidationError(
            field=const.DATA_TASK_SYSTEM_ID,
            translation_key=const.TRANS_KEY_ERROR_SYSTEM_NOT_FOUND,
        )

    raw_frequency = get_field(const.DATA_TASK_FREQUENCY, None)
    if raw_frequency is None:
        frequency = Frequency.daily()
    else:
        frequency = parse_frequency(raw_frequency)

    if existing is None:
        internal_id = str(uuid.uuid4())
        created_at = (now or dt_now_utc()).isoformat()
    else:
        internal_id = existing[const.DATA_INTERNAL_ID]
        created_at = existing[const.DATA_CREATED_AT]

    return TaskData(
        internal_id=internal_id,
        system_id=str(system_id),
        name=name,
        created_at=created_at,
        frequency=frequency.to_dict(),
        xp_awarded_days=list(get_field(const.DATA_TASK_XP_AWARDED_DAYS, [])),
        target_weeks_met=list(get_field(const.DATA_TASK_TARGET_WEEKS_MET, [])),
    )


# ==============================================================================
# COMPLETION EVENTS
# ==============================================================================


def build_completion_event(
    task_id: str,
    day: date,
    occurred_at: datetime,
    duration_minutes: int | None = None,
    source: str | None = None,
) -> CompletionEventData:
    """Build one completion log entry.

    `source` is provenance only (manual, service, health, ...).
    """
    event = CompletionEventData(
        task_id=task_id,
        day=day.isoformat(),
        occurred_at=occurred_at.isoformat(),
    )
    if duration_minutes is not None:
        event[const.DATA_EVENT_DURATION_MINUTES] = int(duration_minutes)  # type: ignore[literal-required]
    if source:
        event[const.DATA_EVENT_SOURCE] = source  # type: ignore[literal-required]
    return event


# ==============================================================================
# PERFORMANCE TESTS
# ==============================================================================


def parse_tracking_frequency(
    raw: TrackingFrequency | dict[str, Any],
) -> TrackingFrequency:
    """Validate a test's tracking frequency from service input or storage.

    Raises:
        EntityValidationError: If the tracking frequency is invalid.
    """
    if isinstance(raw, TrackingFrequency):
        return raw
    try:
        return TrackingFrequency.from_dict(raw)
    except InvalidFrequencyError as err:
        raise EntityValidationError(
            field=const.DATA_TEST_TRACKING,
            translation_key=const.TRANS_KEY_ERROR_INVALID_FREQUENCY,
            placeholders={"error": str(err)},
        ) from err


def _optional_number(field: str, raw: Any) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise EntityValidationError(
            field=field,
            translation_key=const.TRANS_KEY_ERROR_INVALID_TEST,
            placeholders={"error": f"{field} must be a number, got {raw!r}"},
        )
    try:
        number = float(raw)
    except (TypeError, ValueError) as err:
        raise EntityValidationError(
            field=field,
            translation_key=const.TRANS_KEY_ERROR_INVALID_TEST,
            placeholders={"error": f"{field} must be a number, got {raw!r}"},
        ) from err
    if not math.isfinite(number):
        raise EntityValidationError(
            field=field,
            translation_key=const.TRANS_KEY_ERROR_INVALID_TEST,
            placeholders={"error": f"{field} must be finite, got {raw!r}"},
        )
    return number


def build_test(
    user_input: dict[str, Any],
    existing: PerformanceTestData | None = None,
    now: datetime | None = None,
) -> PerformanceTestData:
    """Build performance test data for create or update operations.

    Defaults: higher is better, measured weekly, no target.

    Raises:
        EntityValidationError: Empty name, missing system, unknown goal
            direction, invalid tracking frequency or non-numeric target
    """
    is_create = existing is None
    get_field = _field_getter(user_input, existing)  # type: ignore[arg-type]

    name = _validated_name(
        user_input, get_field(const.DATA_NAME, ""), is_create=is_create
    )

    system_id = get_field(const.DATA_TEST_SYSTEM_ID, None)
    if not system_id:
        raise EntityValidationError(
            field=const.DATA_TEST_SYSTEM_ID,
            translation_key=const.TRANS_KEY_ERROR_SYSTEM_NOT_FOUND,
        )

    direction = get_field(const.DATA_TEST_GOAL_DIRECTION, const.GOAL_DIRECTION_HIGHER)
    if direction not in const.GOAL_DIRECTION_OPTIONS:
        raise EntityValidationError(
            field=const.DATA_TEST_GOAL_DIRECTION,
            translation_key=const.TRANS_KEY_ERROR_INVALID_TEST,
            placeholders={"error": f"unknown goal direction {direction!r}"},
        )

    raw_tracking = get_field(const.DATA_TEST_TRACKING, None)
    tracking = (
        TrackingFrequency.weekly()
        if raw_tracking is None
        else parse_tracking_frequency(raw_tracking)
    )

    if existing is None:
        internal_id = str(uuid.uuid4())
        created_at = (now or dt_now_utc()).isoformat()
    else:
        internal_id = existing[const.DATA_INTERNAL_ID]
        created_at = existing[const.DATA_CREATED_AT]

    test = PerformanceTestData(
        internal_id=internal_id,
        system_id=str(system_id),
        name=name,
        created_at=created_at,
        unit=str(get_field(const.DATA_TEST_UNIT, "") or ""),
        goal_direction=direction,
        tracking_frequency=tracking.to_dict(),
        target_value=_optional_number(
            const.DATA_TEST_TARGET_VALUE,
            get_field(const.DATA_TEST_TARGET_VALUE, None),
        ),
    )
    description = get_field(const.DATA_TEST_DESCRIPTION, None)
    if description:
        test[const.DATA_TEST_DESCRIPTION] = str(description)  # type: ignore[literal-required]
    return test


def build_test_entry(
    test_id: str,
    value: Any,
    day: date,
    recorded_at: datetime,
    notes: str | None = None,
    conditions: str | None = None,
) -> PerformanceTestEntryData:
    """Build one recorded value of a performance test.

    Raises:
        EntityValidationError: If the value is missing or not a number
    """
    number = _optional_number(const.DATA_ENTRY_VALUE, value)
    if number is None:
        raise EntityValidationError(
            field=const.DATA_ENTRY_VALUE,
            translation_key=const.TRANS_KEY_ERROR_INVALID_TEST,
            placeholders={"error": "a value is required"},
        )
    entry = PerformanceTestEntryData(
        internal_id=str(uuid.uuid4()),
        test_id=test_id,
        value=number,
        day=day.isoformat(),
        recorded_at=recorded_at.isoformat(),
    )
    if notes:
        entry[const.DATA_ENTRY_NOTES] = str(notes)  # type: ignore[literal-required]
    if conditions:
        entry[const.DATA_ENTRY_CONDITIONS] = str(conditions)  # type: ignore[literal-required]
    return entry


# ==============================================================================
# PROGRESSION
# ==============================================================================


def build_progress() -> ProgressData:
    """Return a fresh progress profile: level 1, no XP, all counters at 0."""
    return ProgressData(
        total_xp=0,
        level=1,
        counters={counter: 0 for counter in const.PROGRESS_COUNTERS},
        recently_unlocked=[],
        last_level_up=None,
        improvement_run=0,
    )


def build_achievement(
    internal_id: str,
    name: str,
    description: str,
    category: str,
    threshold: int,
    xp_reward: int,
    tier: str = const.ACHIEVEMENT_TIER_BRONZE,
    badge: str = "mdi:trophy",
    min_days: int = 0,
) -> AchievementData:
    """Build a locked achievement definition.

    `min_days` is only valid for consistency achievements and must be one of
    the tracked spans (const.CONSISTENCY_SPAN_COUNTERS).

    Raises:
        EntityValidationError: Unknown category, non-positive threshold or
            an untracked span
    """
    if category not in const.ACHIEVEMENT_CATEGORY_COUNTERS:
        raise EntityValidationError(
            field=const.DATA_ACHIEVEMENT_CATEGORY,
            translation_key=const.TRANS_KEY_ERROR_INVALID_ACHIEVEMENT,
            placeholders={"error": f"unknown category {category}"},
        )
    if threshold < 1:
        raise EntityValidationError(
            field=const.DATA_ACHIEVEMENT_THRESHOLD,
            translation_key=const.TRANS_KEY_ERROR_INVALID_ACHIEVEMENT,
            placeholders={"error": f"threshold must be positive, got {threshold}"},
        )
    if min_days and (
        category != const.ACHIEVEMENT_CATEGORY_CONSISTENCY
        or min_days not in const.CONSISTENCY_SPAN_COUNTERS
    ):
        raise EntityValidationError(
            field=const.DATA_ACHIEVEMENT_MIN_DAYS,
            translation_key=const.TRANS_KEY_ERROR_INVALID_ACHIEVEMENT,
            placeholders={"error": f"no {min_days}-day span for {category}"},
        )
    achievement = AchievementData(
        internal_id=internal_id,
        name=name,
        description=description,
        category=category,
        threshold=threshold,
        xp_reward=xp_reward,
        tier=tier,
        badge=badge,
        unlocked=False,
        unlocked_at=None,
        progress=0,
    )
    if min_days:
        achievement[const.DATA_ACHIEVEMENT_MIN_DAYS] = min_days  # type: ignore[literal-required]
    return achievement


def default_achievements() -> dict[str, AchievementData]:
    """Return the seeded achievement catalog keyed by internal_id."""
    return {
        entry[0]: build_achievement(*entry) for entry in const.DEFAULT_ACHIEVEMENTS
    }

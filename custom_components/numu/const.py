# File: const.py
"""Constants for the Numu integration.

This file centralizes configuration keys, defaults, storage keys, signal
names, service names and gamification tables for consistency across the
integration.
"""

import logging

from .utils import dt_utils

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
NUMU_TITLE = "Numu"

# Integration Domain
DOMAIN = "numu"

# Logger
LOGGER = logging.getLogger(__package__)

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORE = "store"
STORAGE_KEY = "numu_data"
STORAGE_VERSION = 1
SCHEMA_VERSION_CURRENT = 1

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_WEEK_START = "week_start"
CONF_CONSISTENCY_CACHE_MINUTES = "consistency_cache_minutes"

WEEK_START_MONDAY = dt_utils.WEEK_START_MONDAY
WEEK_START_SUNDAY = dt_utils.WEEK_START_SUNDAY
WEEK_START_OPTIONS = [WEEK_START_MONDAY, WEEK_START_SUNDAY]

DEFAULT_WEEK_START = WEEK_START_MONDAY
DEFAULT_CONSISTENCY_CACHE_MINUTES = 5
MIN_CONSISTENCY_CACHE_MINUTES = 1
MAX_CONSISTENCY_CACHE_MINUTES = 60

# Coordinator refresh interval (minutes); mutations push updates immediately
DEFAULT_UPDATE_INTERVAL = 15
DEFAULT_DAILY_RESET_TIME = {"hour": 0, "minute": 0, "second": 1}

# Most recent unlocks kept on the progress profile
RECENTLY_UNLOCKED_LIMIT = 10

# ------------------------------------------------------------------------------------------------
# Storage Data Keys
# ------------------------------------------------------------------------------------------------
DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schema_version"
DATA_META_LAST_ROLLOVER_DAY = "last_rollover_day"

DATA_SYSTEMS = "systems"
DATA_TASKS = "tasks"
DATA_COMPLETIONS = "completions"
DATA_PROGRESS = "progress"
DATA_ACHIEVEMENTS = "achievements"
DATA_TESTS = "tests"
DATA_TEST_ENTRIES = "test_entries"

# Common entity fields
DATA_INTERNAL_ID = "internal_id"
DATA_NAME = "name"
DATA_CREATED_AT = "created_at"

# System fields
DATA_SYSTEM_CATEGORY = "category"
DATA_SYSTEM_DESCRIPTION = "description"
DATA_SYSTEM_PERFECT_DAYS = "perfect_days"

# Task fields
DATA_TASK_SYSTEM_ID = "system_id"
DATA_TASK_FREQUENCY = "frequency"
DATA_TASK_XP_AWARDED_DAYS = "xp_awarded_days"
DATA_TASK_TARGET_WEEKS_MET = "target_weeks_met"

# Completion event fields
DATA_EVENT_TASK_ID = "task_id"
DATA_EVENT_DAY = "day"
DATA_EVENT_OCCURRED_AT = "occurred_at"
DATA_EVENT_DURATION_MINUTES = "duration_minutes"
DATA_EVENT_SOURCE = "source"

# Progress profile fields
DATA_PROGRESS_TOTAL_XP = "total_xp"
DATA_PROGRESS_LEVEL = "level"
DATA_PROGRESS_COUNTERS = "counters"
DATA_PROGRESS_RECENTLY_UNLOCKED = "recently_unlocked"
DATA_PROGRESS_LAST_LEVEL_UP = "last_level_up"
DATA_PROGRESS_IMPROVEMENT_RUN = "improvement_run"

# Achievement fields
DATA_ACHIEVEMENT_DESCRIPTION = "description"
DATA_ACHIEVEMENT_CATEGORY = "category"
DATA_ACHIEVEMENT_THRESHOLD = "threshold"
DATA_ACHIEVEMENT_XP_REWARD = "xp_reward"
DATA_ACHIEVEMENT_TIER = "tier"
DATA_ACHIEVEMENT_BADGE = "badge"
DATA_ACHIEVEMENT_UNLOCKED = "unlocked"
DATA_ACHIEVEMENT_UNLOCKED_AT = "unlocked_at"
DATA_ACHIEVEMENT_PROGRESS = "progress"
DATA_ACHIEVEMENT_MIN_DAYS = "min_days"

# Performance test fields
DATA_TEST_SYSTEM_ID = "system_id"
DATA_TEST_UNIT = "unit"
DATA_TEST_DESCRIPTION = "description"
DATA_TEST_GOAL_DIRECTION = "goal_direction"
DATA_TEST_TARGET_VALUE = "target_value"
DATA_TEST_TRACKING = "tracking_frequency"

# Performance test entry fields
DATA_ENTRY_TEST_ID = "test_id"
DATA_ENTRY_VALUE = "value"
DATA_ENTRY_DAY = "day"
DATA_ENTRY_RECORDED_AT = "recorded_at"
DATA_ENTRY_NOTES = "notes"
DATA_ENTRY_CONDITIONS = "conditions"

# ------------------------------------------------------------------------------------------------
# Frequencies
# ------------------------------------------------------------------------------------------------
FREQUENCY_TYPE = "type"
FREQUENCY_DAYS = "days"
FREQUENCY_TIMES = "times"

FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKDAYS = "weekdays"
FREQUENCY_WEEKENDS = "weekends"
FREQUENCY_SPECIFIC_WEEKDAYS = "specific_weekdays"
FREQUENCY_WEEKLY_TARGET = "weekly_target"

FREQUENCY_OPTIONS = [
    FREQUENCY_DAILY,
    FREQUENCY_WEEKDAYS,
    FREQUENCY_WEEKENDS,
    FREQUENCY_SPECIFIC_WEEKDAYS,
    FREQUENCY_WEEKLY_TARGET,
]

# ISO weekday numbers (1=Monday ... 7=Sunday)
ISO_WEEKDAYS = frozenset(range(1, 8))
ISO_WORKWEEK = frozenset(range(1, 6))
ISO_WEEKEND = frozenset({6, 7})
WEEKDAY_SHORT_NAMES = {
    1: "Mon",
    2: "Tue",
    3: "Wed",
    4: "Thu",
    5: "Fri",
    6: "Sat",
    7: "Sun",
}

# ------------------------------------------------------------------------------------------------
# Streak Health
# ------------------------------------------------------------------------------------------------
STREAK_HEALTH_HEALTHY = "healthy"
STREAK_HEALTH_AT_RISK = "at_risk"
STREAK_HEALTH_RECOVERED = "recovered"
STREAK_HEALTH_BROKEN = "broken"

# ------------------------------------------------------------------------------------------------
# Completion Sources (provenance, display only)
# ------------------------------------------------------------------------------------------------
SOURCE_MANUAL = "manual"
SOURCE_SERVICE = "service"
SOURCE_HEALTH = "health"

# ------------------------------------------------------------------------------------------------
# Performance Tests
# ------------------------------------------------------------------------------------------------
GOAL_DIRECTION_HIGHER = "higher"
GOAL_DIRECTION_LOWER = "lower"
GOAL_DIRECTION_OPTIONS = [GOAL_DIRECTION_HIGHER, GOAL_DIRECTION_LOWER]

# Stored tracking frequency: {"unit": "days" | "weeks", "count": n}
TRACKING_UNIT = "unit"
TRACKING_COUNT = "count"
TRACKING_UNIT_DAYS = "days"
TRACKING_UNIT_WEEKS = "weeks"
TRACKING_UNITS = [TRACKING_UNIT_DAYS, TRACKING_UNIT_WEEKS]

TEST_TREND_IMPROVING = "improving"
TEST_TREND_STABLE = "stable"
TEST_TREND_DECLINING = "declining"
TEST_TREND_NO_DATA = "no_data"

# Changes smaller than this (percent, either way) read as stable
TEST_TREND_STABLE_PERCENT = 5

# ------------------------------------------------------------------------------------------------
# Progression
# ------------------------------------------------------------------------------------------------
XP_LEVEL_BASE = 50
XP_LEVEL_EXPONENT = 1.5
XP_COMPLETION_BASE = 10
XP_STREAK_BONUS_PER_DAY = 2
XP_STREAK_BONUS_MAX = 100

# Upper bounds (exclusive) of each tier by level
LEVEL_TIERS = [
    (10, "Bronze Beginner"),
    (25, "Silver Seeker"),
    (50, "Gold Achiever"),
    (100, "Platinum Pro"),
]
LEVEL_TIER_TOP = "Diamond Master"

# Completion time-of-day boundaries (local hour)
EARLY_BIRD_BEFORE_HOUR = 8
NIGHT_OWL_FROM_HOUR = 22

# Best-consistency counter only counts systems with enough history
CONSISTENCY_MIN_EXPECTED_DAYS = 7

# Progress counters
COUNTER_TASKS_COMPLETED = "tasks_completed"
COUNTER_TESTS_COMPLETED = "tests_completed"
COUNTER_SYSTEMS_CREATED = "systems_created"
COUNTER_LONGEST_STREAK = "longest_streak"
COUNTER_PERFECT_DAYS = "perfect_days"
COUNTER_WEEKLY_TARGETS_MET = "weekly_targets_met"
COUNTER_BEST_CONSISTENCY = "best_consistency"
COUNTER_EARLY_BIRD = "early_bird"
COUNTER_NIGHT_OWL = "night_owl"
COUNTER_TEST_REPEATS = "test_repeats"
COUNTER_PERSONAL_RECORDS = "personal_records"
COUNTER_RECORDS_HELD = "records_held"
COUNTER_IMPROVEMENT_STREAK = "improvement_streak"

# Best consistency of a system at least this many days old
COUNTER_BEST_CONSISTENCY_WEEK = "best_consistency_7d"
COUNTER_BEST_CONSISTENCY_FORTNIGHT = "best_consistency_14d"
COUNTER_BEST_CONSISTENCY_MONTH = "best_consistency_30d"
CONSISTENCY_SPAN_COUNTERS = {
    7: COUNTER_BEST_CONSISTENCY_WEEK,
    14: COUNTER_BEST_CONSISTENCY_FORTNIGHT,
    30: COUNTER_BEST_CONSISTENCY_MONTH,
}

PROGRESS_COUNTERS = [
    COUNTER_TASKS_COMPLETED,
    COUNTER_TESTS_COMPLETED,
    COUNTER_SYSTEMS_CREATED,
    COUNTER_LONGEST_STREAK,
    COUNTER_PERFECT_DAYS,
    COUNTER_WEEKLY_TARGETS_MET,
    COUNTER_BEST_CONSISTENCY,
    COUNTER_EARLY_BIRD,
    COUNTER_NIGHT_OWL,
    COUNTER_TEST_REPEATS,
    COUNTER_PERSONAL_RECORDS,
    COUNTER_RECORDS_HELD,
    COUNTER_IMPROVEMENT_STREAK,
    COUNTER_BEST_CONSISTENCY_WEEK,
    COUNTER_BEST_CONSISTENCY_FORTNIGHT,
    COUNTER_BEST_CONSISTENCY_MONTH,
]

# Achievement categories
ACHIEVEMENT_CATEGORY_STREAK = "streak"
ACHIEVEMENT_CATEGORY_TASKS = "tasks"
ACHIEVEMENT_CATEGORY_TESTS = "tests"
ACHIEVEMENT_CATEGORY_SYSTEMS = "systems"
ACHIEVEMENT_CATEGORY_PERFECT_DAYS = "perfect_days"
ACHIEVEMENT_CATEGORY_WEEKLY_TARGETS = "weekly_targets"
ACHIEVEMENT_CATEGORY_CONSISTENCY = "consistency"
ACHIEVEMENT_CATEGORY_EARLY_BIRD = "early_bird"
ACHIEVEMENT_CATEGORY_NIGHT_OWL = "night_owl"
ACHIEVEMENT_CATEGORY_TEST_REPEATS = "test_repeats"
ACHIEVEMENT_CATEGORY_PERSONAL_RECORDS = "personal_records"
ACHIEVEMENT_CATEGORY_RECORDS_HELD = "records_held"
ACHIEVEMENT_CATEGORY_IMPROVEMENT = "improvement"

ACHIEVEMENT_CATEGORY_COUNTERS = {
    ACHIEVEMENT_CATEGORY_STREAK: COUNTER_LONGEST_STREAK,
    ACHIEVEMENT_CATEGORY_TASKS: COUNTER_TASKS_COMPLETED,
    ACHIEVEMENT_CATEGORY_TESTS: COUNTER_TESTS_COMPLETED,
    ACHIEVEMENT_CATEGORY_SYSTEMS: COUNTER_SYSTEMS_CREATED,
    ACHIEVEMENT_CATEGORY_PERFECT_DAYS: COUNTER_PERFECT_DAYS,
    ACHIEVEMENT_CATEGORY_WEEKLY_TARGETS: COUNTER_WEEKLY_TARGETS_MET,
    ACHIEVEMENT_CATEGORY_CONSISTENCY: COUNTER_BEST_CONSISTENCY,
    ACHIEVEMENT_CATEGORY_EARLY_BIRD: COUNTER_EARLY_BIRD,
    ACHIEVEMENT_CATEGORY_NIGHT_OWL: COUNTER_NIGHT_OWL,
    ACHIEVEMENT_CATEGORY_TEST_REPEATS: COUNTER_TEST_REPEATS,
    ACHIEVEMENT_CATEGORY_PERSONAL_RECORDS: COUNTER_PERSONAL_RECORDS,
    ACHIEVEMENT_CATEGORY_RECORDS_HELD: COUNTER_RECORDS_HELD,
    ACHIEVEMENT_CATEGORY_IMPROVEMENT: COUNTER_IMPROVEMENT_STREAK,
}

ACHIEVEMENT_TIER_BRONZE = "bronze"
ACHIEVEMENT_TIER_SILVER = "silver"
ACHIEVEMENT_TIER_GOLD = "gold"
ACHIEVEMENT_TIER_PLATINUM = "platinum"
ACHIEVEMENT_TIER_DIAMOND = "diamond"

# Default achievement catalog, seeded on first run.
# (internal_id, name, description, category, threshold, xp_reward, tier, badge[, min_days])
# min_days: the consistency must be held by a system at least that many days old
DEFAULT_ACHIEVEMENTS = [
    # Streak
    ("first_steps", "First Steps", "Complete your first day", ACHIEVEMENT_CATEGORY_STREAK, 1, 10, ACHIEVEMENT_TIER_BRONZE, "mdi:shoe-print"),
    ("week_warrior", "Week Warrior", "Maintain a 7-day streak", ACHIEVEMENT_CATEGORY_STREAK, 7, 50, ACHIEVEMENT_TIER_BRONZE, "mdi:fire"),
    ("month_master", "Month Master", "Maintain a 30-day streak", ACHIEVEMENT_CATEGORY_STREAK, 30, 200, ACHIEVEMENT_TIER_SILVER, "mdi:calendar-check"),
    ("century_club", "Century Club", "Maintain a 100-day streak", ACHIEVEMENT_CATEGORY_STREAK, 100, 1000, ACHIEVEMENT_TIER_GOLD, "mdi:trophy"),
    ("year_legend", "Year Legend", "Maintain a 365-day streak", ACHIEVEMENT_CATEGORY_STREAK, 365, 5000, ACHIEVEMENT_TIER_PLATINUM, "mdi:crown"),
    ("unbreakable", "Unbreakable", "Maintain a 500-day streak", ACHIEVEMENT_CATEGORY_STREAK, 500, 10000, ACHIEVEMENT_TIER_DIAMOND, "mdi:diamond-stone"),
    # Weekly targets
    ("weekly_habit", "Weekly Habit", "Meet a weekly target 4 times", ACHIEVEMENT_CATEGORY_WEEKLY_TARGETS, 4, 100, ACHIEVEMENT_TIER_BRONZE, "mdi:calendar-week"),
    ("consistent_climber", "Consistent Climber", "Meet a weekly target 12 times", ACHIEVEMENT_CATEGORY_WEEKLY_TARGETS, 12, 500, ACHIEVEMENT_TIER_SILVER, "mdi:stairs-up"),
    # Systems
    ("system_builder", "System Builder", "Create your first system", ACHIEVEMENT_CATEGORY_SYSTEMS, 1, 25, ACHIEVEMENT_TIER_BRONZE, "mdi:cube-outline"),
    ("multi_tasker", "Multi-Tasker", "Create 3 systems", ACHIEVEMENT_CATEGORY_SYSTEMS, 3, 75, ACHIEVEMENT_TIER_BRONZE, "mdi:cube-scan"),
    ("life_designer", "Life Designer", "Create 5 systems", ACHIEVEMENT_CATEGORY_SYSTEMS, 5, 150, ACHIEVEMENT_TIER_SILVER, "mdi:palette"),
    ("master_architect", "Master Architect", "Create 10 systems", ACHIEVEMENT_CATEGORY_SYSTEMS, 10, 500, ACHIEVEMENT_TIER_GOLD, "mdi:city"),
    # Perfect days
    ("perfect_day", "Perfect Day", "Complete every due task of a system in one day", ACHIEVEMENT_CATEGORY_PERFECT_DAYS, 1, 50, ACHIEVEMENT_TIER_BRONZE, "mdi:star"),
    ("perfect_week", "Perfect Week", "Record 7 perfect days", ACHIEVEMENT_CATEGORY_PERFECT_DAYS, 7, 250, ACHIEVEMENT_TIER_SILVER, "mdi:star-circle"),
    # Tasks
    ("task_master", "Task Master", "Complete 10 tasks", ACHIEVEMENT_CATEGORY_TASKS, 10, 20, ACHIEVEMENT_TIER_BRONZE, "mdi:check-all"),
    ("century_of_tasks", "Century of Tasks", "Complete 100 tasks", ACHIEVEMENT_CATEGORY_TASKS, 100, 100, ACHIEVEMENT_TIER_SILVER, "mdi:numeric-10-box-multiple"),
    ("thousand_strong", "Thousand Strong", "Complete 1000 tasks", ACHIEVEMENT_CATEGORY_TASKS, 1000, 1000, ACHIEVEMENT_TIER_GOLD, "mdi:arm-flex"),
    ("early_bird", "Early Bird", "Complete 10 tasks before 8 AM", ACHIEVEMENT_CATEGORY_EARLY_BIRD, 10, 100, ACHIEVEMENT_TIER_SILVER, "mdi:weather-sunset-up"),
    ("night_owl", "Night Owl", "Complete 10 tasks after 10 PM", ACHIEVEMENT_CATEGORY_NIGHT_OWL, 10, 100, ACHIEVEMENT_TIER_SILVER, "mdi:owl"),
    # Tests
    ("first_test", "First Test", "Complete your first test", ACHIEVEMENT_CATEGORY_TESTS, 1, 20, ACHIEVEMENT_TIER_BRONZE, "mdi:clipboard-check"),
    ("baseline_builder", "Baseline Builder", "Complete 5 tests", ACHIEVEMENT_CATEGORY_TESTS, 5, 75, ACHIEVEMENT_TIER_BRONZE, "mdi:chart-line"),
    ("progress_tracker", "Progress Tracker", "Complete the same test 3 times", ACHIEVEMENT_CATEGORY_TEST_REPEATS, 3, 50, ACHIEVEMENT_TIER_SILVER, "mdi:chart-timeline-variant"),
    ("personal_record", "Personal Record", "Beat your previous best on any test", ACHIEVEMENT_CATEGORY_PERSONAL_RECORDS, 1, 100, ACHIEVEMENT_TIER_SILVER, "mdi:podium-gold"),
    ("improvement_streak", "Improvement Streak", "Improve 3 tests in a row", ACHIEVEMENT_CATEGORY_IMPROVEMENT, 3, 200, ACHIEVEMENT_TIER_GOLD, "mdi:trending-up"),
    ("all_time_best", "All-Time Best", "Hold 5 personal records", ACHIEVEMENT_CATEGORY_RECORDS_HELD, 5, 500, ACHIEVEMENT_TIER_PLATINUM, "mdi:trophy-award"),
    # Consistency (percent)
    ("habit_starter", "Habit Starter", "Hold 50% consistency on a system for a week", ACHIEVEMENT_CATEGORY_CONSISTENCY, 50, 25, ACHIEVEMENT_TIER_BRONZE, "mdi:sprout", 7),
    ("getting_there", "Getting There", "Hold 70% consistency on a system for 2 weeks", ACHIEVEMENT_CATEGORY_CONSISTENCY, 70, 75, ACHIEVEMENT_TIER_BRONZE, "mdi:leaf", 14),
    ("solid_foundation", "Solid Foundation", "Hold 80% consistency on a system for a month", ACHIEVEMENT_CATEGORY_CONSISTENCY, 80, 200, ACHIEVEMENT_TIER_SILVER, "mdi:pillar", 30),
    ("elite_performer", "Elite Performer", "Hold 90% consistency on a system for a month", ACHIEVEMENT_CATEGORY_CONSISTENCY, 90, 500, ACHIEVEMENT_TIER_GOLD, "mdi:medal", 30),
    ("perfection", "Perfection", "Hold 100% consistency on a system for a week", ACHIEVEMENT_CATEGORY_CONSISTENCY, 100, 300, ACHIEVEMENT_TIER_PLATINUM, "mdi:check-decagram", 7),
]  # fmt: skip

# ------------------------------------------------------------------------------------------------
# Event Signals (instance-scoped dispatcher suffixes)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_SYSTEM_CREATED = "system_created"
SIGNAL_SUFFIX_SYSTEM_DELETED = "system_deleted"
SIGNAL_SUFFIX_TASK_CREATED = "task_created"
SIGNAL_SUFFIX_TASK_UPDATED = "task_updated"
SIGNAL_SUFFIX_TASK_DELETED = "task_deleted"
SIGNAL_SUFFIX_COMPLETION_ADDED = "completion_added"
SIGNAL_SUFFIX_COMPLETION_REMOVED = "completion_removed"
SIGNAL_SUFFIX_TEST_CREATED = "test_created"
SIGNAL_SUFFIX_TEST_DELETED = "test_deleted"
SIGNAL_SUFFIX_TEST_ENTRY_ADDED = "test_entry_added"
SIGNAL_SUFFIX_DAY_ROLLOVER = "day_rollover"
SIGNAL_SUFFIX_LEVEL_UP = "level_up"
SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED = "achievement_unlocked"

# Home Assistant bus events (consumed by notification automations)
EVENT_LEVEL_UP = f"{DOMAIN}_level_up"
EVENT_ACHIEVEMENT_UNLOCKED = f"{DOMAIN}_achievement_unlocked"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_CREATE_SYSTEM = "create_system"
SERVICE_DELETE_SYSTEM = "delete_system"
SERVICE_CREATE_TASK = "create_task"
SERVICE_UPDATE_TASK_FREQUENCY = "update_task_frequency"
SERVICE_DELETE_TASK = "delete_task"
SERVICE_COMPLETE_TASK = "complete_task"
SERVICE_UNCOMPLETE_TASK = "uncomplete_task"
SERVICE_CREATE_TEST = "create_test"
SERVICE_DELETE_TEST = "delete_test"
SERVICE_RECORD_TEST_ENTRY = "record_test_entry"
SERVICE_GET_TEST_SUMMARY = "get_test_summary"
SERVICE_GET_SYSTEM_SUMMARY = "get_system_summary"
SERVICE_GET_TASK_SUMMARY = "get_task_summary"

SERVICES = [
    SERVICE_CREATE_SYSTEM,
    SERVICE_DELETE_SYSTEM,
    SERVICE_CREATE_TASK,
    SERVICE_UPDATE_TASK_FREQUENCY,
    SERVICE_DELETE_TASK,
    SERVICE_COMPLETE_TASK,
    SERVICE_UNCOMPLETE_TASK,
    SERVICE_GET_SYSTEM_SUMMARY,
    SERVICE_GET_TASK_SUMMARY,
    SERVICE_CREATE_TEST,
    SERVICE_DELETE_TEST,
    SERVICE_RECORD_TEST_ENTRY,
    SERVICE_GET_TEST_SUMMARY,
]

FIELD_SYSTEM_ID = "system_id"
FIELD_SYSTEM_NAME = "system_name"
FIELD_CATEGORY = "category"
FIELD_DESCRIPTION = "description"
FIELD_TASK_ID = "task_id"
FIELD_TASK_NAME = "task_name"
FIELD_FREQUENCY = "frequency"
FIELD_DAYS = "days"
FIELD_TIMES = "times"
FIELD_DATE = "date"
FIELD_DURATION_MINUTES = "duration_minutes"
FIELD_SOURCE = "source"
FIELD_TEST_ID = "test_id"
FIELD_TEST_NAME = "test_name"
FIELD_UNIT = "unit"
FIELD_GOAL_DIRECTION = "goal_direction"
FIELD_TARGET_VALUE = "target_value"
FIELD_TRACK_EVERY = "track_every"
FIELD_TRACK_UNIT = "track_unit"
FIELD_VALUE = "value"
FIELD_NOTES = "notes"
FIELD_CONDITIONS = "conditions"

# ------------------------------------------------------------------------------------------------
# Sensor attributes
# ------------------------------------------------------------------------------------------------
ATTR_TOTAL_XP = "total_xp"
ATTR_XP_IN_LEVEL = "xp_in_level"
ATTR_XP_TO_NEXT_LEVEL = "xp_to_next_level"
ATTR_LEVEL_PROGRESS = "level_progress"
ATTR_LEVEL_TIER = "level_tier"
ATTR_COUNTERS = "counters"
ATTR_UNLOCKED = "unlocked"
ATTR_RECENTLY_UNLOCKED = "recently_unlocked"
ATTR_TOTAL_ACHIEVEMENTS = "total_achievements"

SENSOR_KEY_LEVEL = "level"
SENSOR_KEY_ACHIEVEMENTS = "achievements"

# ------------------------------------------------------------------------------------------------
# Translation keys (errors)
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_NAME_REQUIRED = "name_required"
TRANS_KEY_ERROR_INVALID_FREQUENCY = "invalid_frequency"
TRANS_KEY_ERROR_INVALID_ACHIEVEMENT = "invalid_achievement"
TRANS_KEY_ERROR_SYSTEM_NOT_FOUND = "system_not_found"
TRANS_KEY_ERROR_TASK_NOT_FOUND = "task_not_found"
TRANS_KEY_ERROR_NOT_LOADED = "not_loaded"
TRANS_KEY_ERROR_INVALID_DATE = "invalid_date"
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
TRANS_KEY_ERROR_TEST_NOT_FOUND = "test_not_found"
TRANS_KEY_ERROR_INVALID_TEST = "invalid_test"

"""Engine modules for Numu integration.

Contains pure computation engines (no Home Assistant imports):
- recurrence_engine: Frequency definitions and due-day evaluation
- streak_engine: Current/longest streak and streak health
- consistency_engine: Completed/expected ratios and the consistency cache
- weekly_target_engine: Weekly target progress with capping
- statistics_engine: Derived system metrics for dashboards
- progression_engine: XP, levels and achievement evaluation
- performance_test_engine: Measured-result analytics, trends and records
"""

# Use relative imports within package to avoid mypy module resolution issues
from .consistency_engine import (
    ConsistencyCache,
    ConsistencyEngine,
    ConsistencyResult,
    get_or_recompute,
    invalidate,
    is_fresh,
)
from .performance_test_engine import (
    Measurement,
    PerformanceTestEngine,
    TrackingFrequency,
)
from .progression_engine import ProgressionEngine
from .recurrence_engine import Frequency, InvalidFrequencyError, RecurrenceEngine
from .statistics_engine import StatisticsEngine
from .streak_engine import StreakEngine, StreakSnapshot, TaskHistory
from .weekly_target_engine import WeeklyTargetEngine, WeekProgress

__all__ = [
    "ConsistencyCache",
    "ConsistencyEngine",
    "ConsistencyResult",
    "Frequency",
    "InvalidFrequencyError",
    "Measurement",
    "PerformanceTestEngine",
    "ProgressionEngine",
    "RecurrenceEngine",
    "StatisticsEngine",
    "StreakEngine",
    "StreakSnapshot",
    "TaskHistory",
    "TrackingFrequency",
    "WeekProgress",
    "WeeklyTargetEngine",
    "get_or_recompute",
    "invalidate",
    "is_fresh",
]

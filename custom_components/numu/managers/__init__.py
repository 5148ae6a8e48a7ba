"""Manager modules for Numu integration.

Managers orchestrate workflows and coordinate between engines.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .base_manager import BaseManager
from .gamification_manager import GamificationManager
from .performance_test_manager import PerformanceTestManager
from .statistics_manager import StatisticsManager
from .task_manager import TaskManager

__all__ = [
    "BaseManager",
    "GamificationManager",
    "PerformanceTestManager",
    "StatisticsManager",
    "TaskManager",
]

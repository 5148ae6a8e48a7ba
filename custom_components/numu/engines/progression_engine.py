"""Progression Engine - Pure logic for XP, levels and achievements.

This engine provides stateless, pure Python functions for:
- The level curve: xp_required(level) = floor(50 * level ** 1.5)
- XP awards with level-up detection
- Per-completion XP with a capped streak bonus
- Achievement evaluation against running counters

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.
The GamificationManager maintains counters and handles side effects
(persistence, signals, bus events).

Evaluation contract:
- `evaluate` never mutates anything and only returns ids that are not
  unlocked yet, so calling it twice without counter changes returns []
  the second time once the first delta has been applied.
- `apply_unlocks` is the only place an achievement flips to unlocked, and
  it never flips back.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .. import const

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ..type_defs import AchievementData, ProgressData


# Safety cap for level searches (xp_required(10000) is 50 million XP)
MAX_LEVEL = 10000


class ProgressionEngine:
    """Pure logic engine for XP and achievement progression.

    All methods are static - no instance state. This enables easy unit testing
    without any Home Assistant mocking.
    """

    # =========================================================================
    # LEVEL CURVE
    # =========================================================================

    @staticmethod
    def xp_required(level: int) -> int:
        """Total XP needed to reach `level`. Level 1 needs 0."""
        if level <= 1:
            return 0
        return math.floor(const.XP_LEVEL_BASE * level**const.XP_LEVEL_EXPONENT)

    @classmethod
    def level_for_xp(cls, total_xp: int) -> int:
        """Return the highest level whose requirement is at most total_xp."""
        level = 1
        while level < MAX_LEVEL and cls.xp_required(level + 1) <= total_xp:
            level += 1
        return level

    @classmethod
    def level_progress(cls, total_xp: int) -> dict[str, Any]:
        """Describe progress within the current level.

        Returns:
            dict with level, xp_in_level, xp_to_next_level, progress (0-1)
            and tier.
        """
        level = cls.level_for_xp(total_xp)
        floor_xp = cls.xp_required(level)
        next_xp = cls.xp_required(level + 1)
        span = next_xp - floor_xp
        return {
            const.DATA_PROGRESS_LEVEL: level,
            const.ATTR_XP_IN_LEVEL: total_xp - floor_xp,
            const.ATTR_XP_TO_NEXT_LEVEL: next_xp - total_xp,
            const.ATTR_LEVEL_PROGRESS: (total_xp - floor_xp) / span if span > 0 else 0.0,
            const.ATTR_LEVEL_TIER: cls.level_tier(level),
        }

    @staticmethod
    def level_tier(level: int) -> str:
        """Return the display tier for a level (Bronze Beginner ... Diamond Master)."""
        for upper_bound, name in const.LEVEL_TIERS:
            if level < upper_bound:
                return name
        return const.LEVEL_TIER_TOP

    # =========================================================================
    # XP AWARDS
    # =========================================================================

    @staticmethod
    def completion_xp(current_streak: int) -> int:
        """XP for one completion: base plus a streak bonus capped at 100."""
        bonus = min(
            max(current_streak, 0) * const.XP_STREAK_BONUS_PER_DAY,
            const.XP_STREAK_BONUS_MAX,
        )
        return const.XP_COMPLETION_BASE + bonus

    @classmethod
    def award_xp(cls, profile: ProgressData, amount: int) -> int | None:
        """Add XP to a profile in place.

        Args:
            profile: Progress profile dict (mutated)
            amount: Non-negative XP amount

        Returns:
            The new level if this award raised it, otherwise None.

        Raises:
            ValueError: If amount is negative (XP never decreases).
        """
        if amount < 0:
            raise ValueError(f"XP awards must be non-negative, got {amount}")

        old_level = profile.get(const.DATA_PROGRESS_LEVEL, 1)
        total = profile.get(const.DATA_PROGRESS_TOTAL_XP, 0) + amount
        new_level = max(old_level, cls.level_for_xp(total))

        profile[const.DATA_PROGRESS_TOTAL_XP] = total
        profile[const.DATA_PROGRESS_LEVEL] = new_level

        if new_level > old_level:
            return new_level
        return None

    # =========================================================================
    # ACHIEVEMENTS
    # =========================================================================

    @staticmethod
    def counter_for(
        counters: Mapping[str, int], achievement: AchievementData
    ) -> int | None:
        """Return the counter value an achievement is measured against.

        Achievements with `min_days` read the span counter instead, e.g. the
        best consistency of a system at least 30 days old.

        Returns None for an unknown category or span so it can never unlock.
        """
        category = achievement.get(const.DATA_ACHIEVEMENT_CATEGORY)
        counter_key = const.ACHIEVEMENT_CATEGORY_COUNTERS.get(category or "")
        min_days = achievement.get(const.DATA_ACHIEVEMENT_MIN_DAYS) or 0
        if counter_key is not None and min_days:
            counter_key = const.CONSISTENCY_SPAN_COUNTERS.get(min_days)
        if counter_key is None:
            return None
        return int(counters.get(counter_key, 0))

    @classmethod
    def achievement_progress(
        cls, counters: Mapping[str, int], achievement: AchievementData
    ) -> int:
        """Counter value clamped to the achievement threshold."""
        threshold = achievement.get(const.DATA_ACHIEVEMENT_THRESHOLD, 0)
        value = cls.counter_for(counters, achievement) or 0
        return min(value, threshold)

    @classmethod
    def evaluate(
        cls,
        profile: ProgressData,
        achievements: Mapping[str, AchievementData],
    ) -> list[str]:
        """Return ids of achievements newly satisfied by the profile counters.

        Pure: nothing is mutated. Already-unlocked achievements are never
        returned.
        """
        counters = profile.get(const.DATA_PROGRESS_COUNTERS, {})
        newly_unlocked: list[str] = []
        for achievement_id, achievement in achievements.items():
            if achievement.get(const.DATA_ACHIEVEMENT_UNLOCKED, False):
                continue
            value = cls.counter_for(counters, achievement)
            if value is None:
                const.LOGGER.warning(
                    "WARNING: Achievement '%s' has no counter for category '%s'",
                    achievement_id,
                    achievement.get(const.DATA_ACHIEVEMENT_CATEGORY),
                )
                continue
            threshold = achievement.get(const.DATA_ACHIEVEMENT_THRESHOLD, 0)
            if threshold > 0 and value >= threshold:
                newly_unlocked.append(achievement_id)
        return newly_unlocked

    @classmethod
    def apply_unlocks(
        cls,
        profile: ProgressData,
        achievements: Mapping[str, AchievementData],
        achievement_ids: Iterable[str],
        now: datetime,
    ) -> int | None:
        """Mark achievements unlocked and award their XP, in place.

        Ids that are unknown or already unlocked are ignored.

        Returns:
            The highest new level reached, or None if the level did not change.
        """
        new_level: int | None = None
        recently = profile.setdefault(const.DATA_PROGRESS_RECENTLY_UNLOCKED, [])
        for achievement_id in achievement_ids:
            achievement = achievements.get(achievement_id)
            if achievement is None or achievement.get(const.DATA_ACHIEVEMENT_UNLOCKED):
                continue
            achievement[const.DATA_ACHIEVEMENT_UNLOCKED] = True
            achievement[const.DATA_ACHIEVEMENT_UNLOCKED_AT] = now.isoformat()
            achievement[const.DATA_ACHIEVEMENT_PROGRESS] = achievement.get(
                const.DATA_ACHIEVEMENT_THRESHOLD, 0
            )
            if achievement_id not in recently:
                recently.append(achievement_id)
            level = cls.award_xp(profile, achievement.get(const.DATA_ACHIEVEMENT_XP_REWARD, 0))
            if level is not None:
                new_level = level
        return new_level

    @classmethod
    def refresh_progress(
        cls,
        counters: Mapping[str, int],
        achievements: Mapping[str, AchievementData],
    ) -> None:
        """Update the stored progress value of every locked achievement."""
        for achievement in achievements.values():
            if achievement.get(const.DATA_ACHIEVEMENT_UNLOCKED):
                continue
            achievement[const.DATA_ACHIEVEMENT_PROGRESS] = cls.achievement_progress(
                counters, achievement
            )

"""
Streak Tracking System

Daily/weekly/monthly counters live on UserProgress.streaks. Only the daily
streak has behavior here:
- bonus XP: min(cap, daily * per_day), 5 XP per day capped at 50 by default
- reset: daily back to 0, no XP effect
- add: daily + 1, then a daily_streak award worth the bonus for the new count

With the default event rules the daily_streak award bumps streaks.daily a
second time, so one add_daily_streak() moves the counter by 2 (see
config.LEGACY_DAILY_STREAK_COUNT).
"""

from typing import Optional, Tuple
import logging

from creator_xp import config
from creator_xp.gamification.achievement_system import (
    DEFAULT_EVENT_RULES,
    EventRules,
    EventSource,
)
from creator_xp.gamification.catalog import (
    ACHIEVEMENTS,
    CREATOR_LEVELS,
    AchievementCatalog,
    LevelCatalog,
)
from creator_xp.gamification.xp_system import award_xp
from creator_xp.models.progress import AwardReport, UserProgress

logger = logging.getLogger(__name__)


def calculate_daily_bonus(
    progress: UserProgress,
    per_day: Optional[int] = None,
    cap: Optional[int] = None,
) -> int:
    """Bonus XP for the current daily streak"""
    per_day = config.DAILY_BONUS_PER_DAY if per_day is None else per_day
    cap = config.DAILY_BONUS_CAP if cap is None else cap
    return min(cap, progress.streaks.daily * per_day)


def reset_daily_streak(progress: UserProgress) -> UserProgress:
    """Daily streak back to 0"""
    updated = progress.model_copy(deep=True)
    old_streak = updated.streaks.daily
    updated.streaks.daily = 0
    logger.info(f"User {progress.user_id} daily streak reset. Previous: {old_streak} days")
    return updated


def add_daily_streak(
    progress: UserProgress,
    levels: LevelCatalog = CREATOR_LEVELS,
    achievements: AchievementCatalog = ACHIEVEMENTS,
    rules: EventRules = DEFAULT_EVENT_RULES,
    grant_achievement_xp: Optional[bool] = None,
    per_day: Optional[int] = None,
    cap: Optional[int] = None,
) -> Tuple[UserProgress, AwardReport]:
    """
    Count one more streak day and award the daily bonus

    The bonus is computed from the already-incremented counter.

    Returns:
        (updated record, report of the daily_streak award)
    """
    updated = progress.model_copy(deep=True)
    updated.streaks.daily += 1
    bonus = calculate_daily_bonus(updated, per_day=per_day, cap=cap)

    logger.info(f"User {progress.user_id} streak day {updated.streaks.daily}: +{bonus} XP bonus")

    return award_xp(
        updated,
        bonus,
        EventSource.DAILY_STREAK.value,
        levels=levels,
        achievements=achievements,
        rules=rules,
        grant_achievement_xp=grant_achievement_xp,
    )

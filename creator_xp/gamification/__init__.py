"""
Creator progression engine

Turns domain events into XP, level transitions and achievement unlocks:
- Level and achievement catalogs (validated at load time)
- Scoring functions (event attributes -> XP)
- XP/level and streak functions over UserProgress values
- ProgressionEngine, one user's record behind a method API
"""

from creator_xp.gamification.catalog import (
    ACHIEVEMENTS,
    CREATOR_LEVELS,
    AchievementCatalog,
    LevelCatalog,
    load_catalogs_from_file,
)
from creator_xp.gamification.scoring import content_plan_xp, post_xp, trend_xp
from creator_xp.gamification.achievement_system import EventSource, build_event_rules
from creator_xp.gamification.xp_system import award_xp, get_progress_to_next_level
from creator_xp.gamification.streak_system import add_daily_streak, calculate_daily_bonus
from creator_xp.gamification.engine import ProgressionEngine

__all__ = [
    "ACHIEVEMENTS",
    "CREATOR_LEVELS",
    "AchievementCatalog",
    "LevelCatalog",
    "load_catalogs_from_file",
    "content_plan_xp",
    "post_xp",
    "trend_xp",
    "EventSource",
    "build_event_rules",
    "award_xp",
    "get_progress_to_next_level",
    "add_daily_streak",
    "calculate_daily_bonus",
    "ProgressionEngine",
]

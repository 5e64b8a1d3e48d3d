"""Pydantic models for creator progression"""
from creator_xp.models.progress import (
    Achievement,
    AwardReport,
    Level,
    LevelProgress,
    Rarity,
    RARITY_COLORS,
    Streaks,
    UserProgress,
    UserStats,
    rarity_color,
)

__all__ = [
    "Achievement",
    "AwardReport",
    "Level",
    "LevelProgress",
    "Rarity",
    "RARITY_COLORS",
    "Streaks",
    "UserProgress",
    "UserStats",
    "rarity_color",
]

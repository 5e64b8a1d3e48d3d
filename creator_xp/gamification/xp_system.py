"""
XP and Leveling System

Applies XP awards to a progress record and derives level views from it.
Every function takes a UserProgress and, where it changes anything, returns
a new one; the argument is never mutated.

Leveling rule:
- current_level steps up by at most one per award, and only when the
  immediately next level's xpRequired is met. A large award that crosses two
  thresholds leaves the user one level short until the next award (an award
  of 0 XP is enough to catch up).
"""

from typing import Any, List, Optional, Tuple
import logging

from pydantic import ValidationError as PydanticValidationError

from creator_xp import config
from creator_xp.exceptions import ValidationError
from creator_xp.gamification.achievement_system import (
    DEFAULT_EVENT_RULES,
    EventRules,
    check_achievements,
)
from creator_xp.gamification.catalog import (
    ACHIEVEMENTS,
    CREATOR_LEVELS,
    AchievementCatalog,
    LevelCatalog,
)
from creator_xp.models.progress import (
    AwardReport,
    Level,
    LevelProgress,
    UserProgress,
    UserStats,
)

logger = logging.getLogger(__name__)


def award_xp(
    progress: UserProgress,
    amount: int,
    source: str,
    levels: LevelCatalog = CREATOR_LEVELS,
    achievements: AchievementCatalog = ACHIEVEMENTS,
    rules: EventRules = DEFAULT_EVENT_RULES,
    grant_achievement_xp: Optional[bool] = None,
) -> Tuple[UserProgress, AwardReport]:
    """
    Award XP and evaluate level-up and achievements

    Args:
        progress: Current record (not modified)
        amount: XP to add; callers guarantee it is non-negative
        source: Event tag (content_plan_created, viral_post, daily_streak, ...)
        levels: Level catalog
        achievements: Achievement catalog
        rules: Event tag -> achievement rule table
        grant_achievement_xp: Add unlocked achievements' xpReward to XP
            (defaults to config.GRANT_ACHIEVEMENT_XP)

    Returns:
        (updated record, report)
    """
    if grant_achievement_xp is None:
        grant_achievement_xp = config.GRANT_ACHIEVEMENT_XP

    updated = progress.model_copy(deep=True)
    old_level = updated.current_level

    updated.current_xp += amount
    updated.total_xp += amount

    leveled_up = _check_level_up(updated, levels)
    unlocked = check_achievements(updated, source, achievements, rules)

    xp_awarded = amount
    if grant_achievement_xp and unlocked:
        # No second level check: the next award picks the threshold up
        reward = sum(a.xp_reward for a in unlocked)
        updated.current_xp += reward
        updated.total_xp += reward
        xp_awarded += reward

    logger.info(
        f"Awarded {xp_awarded} XP to user {updated.user_id} for {source}. "
        f"Total: {updated.total_xp} XP, Level: {updated.current_level}"
    )
    if leveled_up:
        logger.info(f"User {updated.user_id} leveled up from {old_level} to {updated.current_level}!")

    report = AwardReport(
        xp_awarded=xp_awarded,
        leveled_up=leveled_up,
        new_level=get_current_level(updated, levels) if leveled_up else None,
        achievements_unlocked=unlocked,
    )
    return updated, report


def _check_level_up(progress: UserProgress, levels: LevelCatalog) -> bool:
    """Step current_level by one if the next level's threshold is met"""
    next_level = levels.get(progress.current_level + 1)
    if next_level is not None and progress.current_xp >= next_level.xp_required:
        progress.current_level = next_level.level
        return True
    return False


def get_current_level(progress: UserProgress, levels: LevelCatalog = CREATOR_LEVELS) -> Level:
    """Level entry for current_level; the first level if the record is out of range"""
    return levels.get(progress.current_level) or levels.first


def get_next_level(progress: UserProgress, levels: LevelCatalog = CREATOR_LEVELS) -> Optional[Level]:
    """Next level entry, or None at the top of the catalog"""
    return levels.get(progress.current_level + 1)


def get_progress_to_next_level(progress: UserProgress, levels: LevelCatalog = CREATOR_LEVELS) -> LevelProgress:
    """
    XP progress within the current level

    Returns:
        current: XP earned since entering the current level
        required: XP span between current and next level thresholds
        percentage: current / required * 100, capped at 100

        At the max level: current is the running total, required 0, percentage 100.
    """
    current_level = get_current_level(progress, levels)
    next_level = get_next_level(progress, levels)

    if next_level is None:
        return LevelProgress(current=progress.current_xp, required=0, percentage=100)

    current = progress.current_xp - current_level.xp_required
    required = next_level.xp_required - current_level.xp_required
    if required <= 0:
        return LevelProgress(current=current, required=0, percentage=100)

    percentage = min(100, current / required * 100)
    return LevelProgress(current=current, required=required, percentage=percentage)


def get_unlocked_features(progress: UserProgress, levels: LevelCatalog = CREATOR_LEVELS) -> List[str]:
    """unlockFeatures of the current level only (not accumulated from lower levels)"""
    return list(get_current_level(progress, levels).unlock_features)


def update_stats(progress: UserProgress, **partial: Any) -> UserProgress:
    """
    Overwrite the named stats fields

    Field names may be snake_case or the stored camelCase names. Values
    replace the current ones; nothing is added.

    Raises:
        ValidationError: unknown field or invalid value
    """
    known = set(UserStats.model_fields)
    aliases = {f.alias: name for name, f in UserStats.model_fields.items() if f.alias}

    normalized = {}
    for key, value in partial.items():
        name = aliases.get(key, key)
        if name not in known:
            raise ValidationError(
                message=f"Unknown stats field: {key}",
                field=key,
                value=value,
                user_id=progress.user_id,
                operation="update_stats",
            )
        normalized[name] = value

    try:
        stats = UserStats.model_validate({**progress.stats.model_dump(), **normalized})
    except PydanticValidationError as e:
        raise ValidationError(
            message=f"Invalid stats update: {e}",
            field="stats",
            value=partial,
            user_id=progress.user_id,
            operation="update_stats",
            cause=e,
        )

    updated = progress.model_copy(deep=True)
    updated.stats = stats
    logger.debug(f"Updated stats for user {progress.user_id}: {sorted(normalized)}")
    return updated

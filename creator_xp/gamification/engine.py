"""
Progression Engine

Owns one user's UserProgress for the length of a session and exposes the
progression operations as methods. It is synchronous and does no I/O; the
caller loads the record before constructing the engine, persists
get_user_progress() afterwards, and serializes concurrent use for the same
user (see creator_xp.services.progression_service).
"""

from typing import Any, List, Optional, Union
import logging

from creator_xp import config
from creator_xp.gamification import streak_system, xp_system
from creator_xp.gamification.achievement_system import (
    EventRules,
    build_event_rules,
    get_available_achievements,
)
from creator_xp.gamification.catalog import (
    ACHIEVEMENTS,
    CREATOR_LEVELS,
    AchievementCatalog,
    LevelCatalog,
)
from creator_xp.models.progress import (
    Achievement,
    AwardReport,
    Level,
    LevelProgress,
    UserProgress,
    rarity_color,
)

logger = logging.getLogger(__name__)


class ProgressionEngine:
    """
    Progression operations over a single user's record.

    Example:
        engine = ProgressionEngine("creator-42")
        report = engine.apply_award(120, "content_plan_created")
        report.leveled_up              # True, level 2
        engine.get_user_progress()     # copy to persist
    """

    def __init__(
        self,
        progress: Union[UserProgress, str],
        levels: Optional[LevelCatalog] = None,
        achievements: Optional[AchievementCatalog] = None,
        rules: Optional[EventRules] = None,
        grant_achievement_xp: Optional[bool] = None,
        legacy_daily_streak_count: Optional[bool] = None,
    ):
        """
        Args:
            progress: Stored record to resume, or a user id to start fresh
            levels: Level catalog (built-in by default)
            achievements: Achievement catalog (built-in by default)
            rules: Event tag -> achievement rule table; built from
                legacy_daily_streak_count when omitted
            grant_achievement_xp: Defaults to config.GRANT_ACHIEVEMENT_XP
            legacy_daily_streak_count: Defaults to config.LEGACY_DAILY_STREAK_COUNT
        """
        if isinstance(progress, UserProgress):
            self._progress = progress.model_copy(deep=True)
        else:
            self._progress = UserProgress.new(progress)

        self.levels = levels if levels is not None else CREATOR_LEVELS
        self.achievements = achievements if achievements is not None else ACHIEVEMENTS

        if legacy_daily_streak_count is None:
            legacy_daily_streak_count = config.LEGACY_DAILY_STREAK_COUNT
        self.rules = rules if rules is not None else build_event_rules(legacy_daily_streak_count)

        if grant_achievement_xp is None:
            grant_achievement_xp = config.GRANT_ACHIEVEMENT_XP
        self.grant_achievement_xp = grant_achievement_xp

        logger.debug(
            f"ProgressionEngine initialized for user {self._progress.user_id} "
            f"at level {self._progress.current_level}"
        )

    @property
    def user_id(self) -> str:
        return self._progress.user_id

    def apply_award(self, amount: int, source: str) -> AwardReport:
        """Add XP, step at most one level, run the achievement rules for `source`"""
        self._progress, report = xp_system.award_xp(
            self._progress,
            amount,
            source,
            levels=self.levels,
            achievements=self.achievements,
            rules=self.rules,
            grant_achievement_xp=self.grant_achievement_xp,
        )
        return report

    def get_current_level(self) -> Level:
        return xp_system.get_current_level(self._progress, self.levels)

    def get_next_level(self) -> Optional[Level]:
        return xp_system.get_next_level(self._progress, self.levels)

    def get_progress_to_next_level(self) -> LevelProgress:
        return xp_system.get_progress_to_next_level(self._progress, self.levels)

    def get_user_progress(self) -> UserProgress:
        """Snapshot of the record; changes to it do not reach the engine"""
        return self._progress.model_copy(deep=True)

    def update_stats(self, **partial: Any) -> None:
        """Overwrite named stats fields (replace, not add)"""
        self._progress = xp_system.update_stats(self._progress, **partial)

    def get_unlocked_features(self) -> List[str]:
        return xp_system.get_unlocked_features(self._progress, self.levels)

    def get_available_achievements(self) -> List[Achievement]:
        return get_available_achievements(self._progress, self.achievements)

    @staticmethod
    def get_rarity_color(rarity: str) -> str:
        return rarity_color(rarity)

    def calculate_daily_bonus(self) -> int:
        return streak_system.calculate_daily_bonus(self._progress)

    def reset_daily_streak(self) -> None:
        self._progress = streak_system.reset_daily_streak(self._progress)

    def add_daily_streak(self) -> AwardReport:
        self._progress, report = streak_system.add_daily_streak(
            self._progress,
            levels=self.levels,
            achievements=self.achievements,
            rules=self.rules,
            grant_achievement_xp=self.grant_achievement_xp,
        )
        return report

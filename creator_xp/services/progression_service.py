"""
ProgressionService - caller side of the progression engine

Turns domain events into engine calls and owns the transaction boundary
around them: load the record (or start one), apply the operation, save.
Award operations read-modify-write the record, so each user has an
asyncio.Lock held for the whole load -> apply -> save sequence. Different
users never share a lock.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, Optional, TypeVar

from creator_xp.gamification.catalog import AchievementCatalog, LevelCatalog
from creator_xp.gamification.engine import ProgressionEngine
from creator_xp.gamification.achievement_system import EventSource
from creator_xp.gamification.scoring import content_plan_xp, post_xp, trend_xp
from creator_xp.models.progress import AwardReport, UserProgress, rarity_color
from creator_xp.services.progress_store import ProgressStore
from creator_xp.validators import (
    AwardInput,
    ContentPlanScoreInput,
    PostScoreInput,
    TrendInput,
    validate_input,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Posts at or above this viral score count as viral_post events
VIRAL_SCORE_THRESHOLD = 90

POST_GENERATED_SOURCE = "post_generated"
TRENDS_USED_SOURCE = "trends_used"


class ProgressionService:
    """
    Service for creator progression.

    Responsibilities:
    - Input validation at the event boundary
    - XP scoring for content plans, posts and trends
    - Per-user serialization of engine operations
    - Loading and saving progress records
    """

    def __init__(
        self,
        store: ProgressStore,
        levels: Optional[LevelCatalog] = None,
        achievements: Optional[AchievementCatalog] = None,
        grant_achievement_xp: Optional[bool] = None,
        legacy_daily_streak_count: Optional[bool] = None,
    ):
        """
        Initialize ProgressionService.

        Args:
            store: Progress record store
            levels: Level catalog (built-in by default)
            achievements: Achievement catalog (built-in by default)
            grant_achievement_xp: Passed to each ProgressionEngine
            legacy_daily_streak_count: Passed to each ProgressionEngine
        """
        self.store = store
        self.levels = levels
        self.achievements = achievements
        self.grant_achievement_xp = grant_achievement_xp
        self.legacy_daily_streak_count = legacy_daily_streak_count
        # A user's lock lives only while some call holds or awaits it
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = defaultdict(int)
        logger.debug("ProgressionService initialized")

    def _engine_for(self, progress: UserProgress) -> ProgressionEngine:
        return ProgressionEngine(
            progress,
            levels=self.levels,
            achievements=self.achievements,
            grant_achievement_xp=self.grant_achievement_xp,
            legacy_daily_streak_count=self.legacy_daily_streak_count,
        )

    async def _load_or_create(self, user_id: str) -> UserProgress:
        progress = await self.store.load(user_id)
        if progress is None:
            logger.info(f"Creating progress record for new user {user_id}")
            progress = UserProgress.new(user_id)
        return progress

    async def _run(self, user_id: str, operation: Callable[[ProgressionEngine], T]) -> T:
        """Load, apply `operation` to an engine, save; all under the user's lock"""
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._lock_users[user_id] += 1
        try:
            async with lock:
                engine = self._engine_for(await self._load_or_create(user_id))
                result = operation(engine)
                await self.store.save(engine.get_user_progress())
                return result
        finally:
            self._lock_users[user_id] -= 1
            if not self._lock_users[user_id]:
                del self._lock_users[user_id]
                del self._locks[user_id]

    # ------------------------------------------------------------------
    # Awards
    # ------------------------------------------------------------------

    async def award(self, user_id: str, amount: int, source: str) -> AwardReport:
        """
        Apply a pre-computed XP award.

        Raises:
            ValidationError: negative amount or empty tag
        """
        award = validate_input(AwardInput, user_id=user_id, amount=amount, source=source)
        return await self._run(award.user_id, lambda e: e.apply_award(award.amount, award.source))

    async def record_content_plan(self, user_id: str, viral_score: float, engagement: float) -> AwardReport:
        """Score and award a created content plan"""
        scores = validate_input(ContentPlanScoreInput, viral_score=viral_score, engagement=engagement)
        amount = content_plan_xp(scores.viral_score, scores.engagement)
        return await self.award(user_id, amount, EventSource.CONTENT_PLAN_CREATED.value)

    async def record_post(
        self,
        user_id: str,
        platform: str,
        viral_score: float,
        viral: Optional[bool] = None,
    ) -> AwardReport:
        """
        Score and award a generated post.

        Args:
            viral: Whether the post counts as viral; defaults to
                viral_score >= VIRAL_SCORE_THRESHOLD
        """
        post = validate_input(PostScoreInput, platform=platform, viral_score=viral_score)
        if viral is None:
            viral = post.viral_score >= VIRAL_SCORE_THRESHOLD
        source = EventSource.VIRAL_POST.value if viral else POST_GENERATED_SOURCE
        return await self.award(user_id, post_xp(post.platform, post.viral_score), source)

    async def record_trends(self, user_id: str, trends_used: int) -> AwardReport:
        """Score and award trending topics used in a piece of content"""
        trends = validate_input(TrendInput, trends_used=trends_used)
        return await self.award(user_id, trend_xp(trends.trends_used), TRENDS_USED_SOURCE)

    # ------------------------------------------------------------------
    # Streaks and stats
    # ------------------------------------------------------------------

    async def add_daily_streak(self, user_id: str) -> AwardReport:
        return await self._run(user_id, lambda e: e.add_daily_streak())

    async def reset_daily_streak(self, user_id: str) -> UserProgress:
        def _reset(engine: ProgressionEngine) -> UserProgress:
            engine.reset_daily_streak()
            return engine.get_user_progress()

        return await self._run(user_id, _reset)

    async def update_stats(self, user_id: str, **partial: Any) -> UserProgress:
        """Overwrite named stats fields; raises ValidationError for unknown fields"""
        def _update(engine: ProgressionEngine) -> UserProgress:
            engine.update_stats(**partial)
            return engine.get_user_progress()

        return await self._run(user_id, _update)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    async def get_summary(self, user_id: str) -> Dict[str, Any]:
        """
        Read-only progression summary for display.

        Returns:
            {
                'user_id': str,
                'total_xp': int,
                'current_level': dict,
                'next_level': dict | None,
                'progress': {'current', 'required', 'percentage'},
                'unlocked_features': list,
                'achievements': [dict with 'color'],
                'available_achievements': [dict with 'color'],
                'daily_bonus': int,
                'streaks': dict
            }
        """
        engine = self._engine_for(await self._load_or_create(user_id))
        progress = engine.get_user_progress()
        next_level = engine.get_next_level()

        def _achievement_view(achievement) -> Dict[str, Any]:
            view = achievement.model_dump(mode="json", by_alias=True)
            view["color"] = rarity_color(achievement.rarity)
            return view

        return {
            "user_id": user_id,
            "total_xp": progress.total_xp,
            "current_level": engine.get_current_level().model_dump(mode="json", by_alias=True),
            "next_level": next_level.model_dump(mode="json", by_alias=True) if next_level else None,
            "progress": engine.get_progress_to_next_level().model_dump(),
            "unlocked_features": engine.get_unlocked_features(),
            "achievements": [_achievement_view(a) for a in progress.achievements],
            "available_achievements": [_achievement_view(a) for a in engine.get_available_achievements()],
            "daily_bonus": engine.calculate_daily_bonus(),
            "streaks": progress.streaks.model_dump(),
        }

"""Global test fixtures and utilities for creator-xp tests"""
import asyncio
import pytest

from creator_xp.gamification.catalog import AchievementCatalog, LevelCatalog
from creator_xp.gamification.engine import ProgressionEngine
from creator_xp.models.progress import Achievement, Level, Rarity, UserProgress
from creator_xp.services.progress_store import InMemoryProgressStore
from creator_xp.services.progression_service import ProgressionService


# ============================================================================
# User Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "creator-42"


@pytest.fixture
def fresh_progress(test_user_id):
    """Zeroed progress record at level 1"""
    return UserProgress.new(test_user_id)


@pytest.fixture
def stored_record(test_user_id):
    """Progress record as persisted (camelCase field names)"""
    return {
        "userId": test_user_id,
        "currentLevel": 2,
        "currentXP": 150,
        "totalXP": 150,
        "achievements": [
            {
                "id": "first_plan",
                "name": "First Steps",
                "description": "Create your first content plan",
                "icon": "🎯",
                "xpReward": 25,
                "rarity": "common",
            }
        ],
        "streaks": {"daily": 3, "weekly": 1, "monthly": 0},
        "stats": {
            "contentPlansCreated": 1,
            "postsGenerated": 4,
            "viralPosts": 0,
            "engagementRate": 3.5,
            "followersGained": 20,
        },
    }


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def engine(test_user_id):
    """Engine over a fresh record with the default rules"""
    return ProgressionEngine(test_user_id, grant_achievement_xp=False, legacy_daily_streak_count=True)


@pytest.fixture
def small_levels():
    """Three-level catalog for threshold tests"""
    return LevelCatalog([
        Level(level=1, name="One", xp_required=0, unlock_features=("a",)),
        Level(level=2, name="Two", xp_required=10, unlock_features=("b",)),
        Level(level=3, name="Three", xp_required=20, unlock_features=("c",)),
    ])


@pytest.fixture
def small_achievements():
    """Catalog with only the first_plan achievement"""
    return AchievementCatalog([
        Achievement(id="first_plan", name="First Steps", xp_reward=25, rarity=Rarity.COMMON),
    ])


# ============================================================================
# Service Fixtures
# ============================================================================

class SlowProgressStore(InMemoryProgressStore):
    """In-memory store that yields to the event loop on every call"""

    async def load(self, user_id):
        await asyncio.sleep(0)
        return await super().load(user_id)

    async def save(self, progress):
        await asyncio.sleep(0)
        await super().save(progress)


@pytest.fixture
def progress_store():
    return InMemoryProgressStore()


@pytest.fixture
def slow_store():
    return SlowProgressStore()


@pytest.fixture
def progression_service(progress_store):
    return ProgressionService(progress_store, grant_achievement_xp=False, legacy_daily_streak_count=True)

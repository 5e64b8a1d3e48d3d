"""Unit tests for Achievement System (creator_xp/gamification/achievement_system.py)"""
import pytest

from creator_xp.gamification.achievement_system import (
    DEFAULT_EVENT_RULES,
    EventRule,
    EventSource,
    UnlockRule,
    build_event_rules,
    check_achievements,
    get_available_achievements,
)
from creator_xp.gamification.catalog import ACHIEVEMENTS, AchievementCatalog
from creator_xp.models.progress import Achievement, UserProgress


# ============================================================================
# Default Rules
# ============================================================================

def test_first_content_plan_unlocks_first_plan(fresh_progress):
    unlocked = check_achievements(fresh_progress, "content_plan_created", ACHIEVEMENTS)

    assert [a.id for a in unlocked] == ["first_plan"]
    assert fresh_progress.stats.content_plans_created == 1
    assert fresh_progress.has_achievement("first_plan")


def test_first_viral_post_unlocks_viral_post(fresh_progress):
    unlocked = check_achievements(fresh_progress, EventSource.VIRAL_POST, ACHIEVEMENTS)

    assert [a.id for a in unlocked] == ["viral_post"]
    assert fresh_progress.stats.viral_posts == 1


def test_seventh_daily_streak_unlocks_streak_7(fresh_progress):
    """Test streak_7 unlocks when the bumped counter is exactly 7"""
    fresh_progress.streaks.daily = 6

    unlocked = check_achievements(fresh_progress, "daily_streak", ACHIEVEMENTS)

    assert [a.id for a in unlocked] == ["streak_7"]
    assert fresh_progress.streaks.daily == 7


def test_daily_streak_past_seven_does_not_unlock(fresh_progress):
    """Test the predicate is an exact match, not a threshold"""
    fresh_progress.streaks.daily = 7

    unlocked = check_achievements(fresh_progress, "daily_streak", ACHIEVEMENTS)

    assert unlocked == []
    assert fresh_progress.streaks.daily == 8


def test_second_content_plan_unlocks_nothing(fresh_progress):
    check_achievements(fresh_progress, "content_plan_created", ACHIEVEMENTS)
    unlocked = check_achievements(fresh_progress, "content_plan_created", ACHIEVEMENTS)

    assert unlocked == []
    assert fresh_progress.stats.content_plans_created == 2
    assert len(fresh_progress.achievements) == 1


def test_unlock_is_idempotent_after_counter_overwrite(fresh_progress):
    """Test an achievement already held is never appended twice"""
    check_achievements(fresh_progress, "content_plan_created", ACHIEVEMENTS)
    fresh_progress.stats.content_plans_created = 0

    unlocked = check_achievements(fresh_progress, "content_plan_created", ACHIEVEMENTS)

    assert unlocked == []
    assert [a.id for a in fresh_progress.achievements] == ["first_plan"]


def test_unknown_source_no_change(fresh_progress):
    before = fresh_progress.model_copy(deep=True)

    assert check_achievements(fresh_progress, "post_generated", ACHIEVEMENTS) == []
    assert fresh_progress == before


def test_rule_for_achievement_missing_from_catalog(fresh_progress):
    """Test rules pointing at ids outside the catalog are skipped"""
    catalog = AchievementCatalog([])

    assert check_achievements(fresh_progress, "content_plan_created", catalog) == []
    assert fresh_progress.stats.content_plans_created == 1


# ============================================================================
# Rule Table
# ============================================================================

def test_default_rules_cover_recognized_tags():
    assert set(DEFAULT_EVENT_RULES) == {"content_plan_created", "viral_post", "daily_streak"}


def test_daily_streak_without_bump():
    """Test the non-legacy table only reads streaks.daily"""
    rules = build_event_rules(count_daily_streak_on_award=False)
    progress = UserProgress.new("u1")
    progress.streaks.daily = 7

    unlocked = check_achievements(progress, "daily_streak", ACHIEVEMENTS, rules)

    assert [a.id for a in unlocked] == ["streak_7"]
    assert progress.streaks.daily == 7


def test_custom_rule_extends_without_code_change(fresh_progress):
    """Test a new achievement needs only a catalog entry and an UnlockRule"""
    catalog = AchievementCatalog([
        Achievement(id="trend_master", name="Trend Master", xp_reward=75, rarity="rare"),
    ])

    def bump_posts(progress):
        progress.stats.posts_generated += 1

    rules = {
        "trends_used": EventRule(
            bump=bump_posts,
            unlocks=(UnlockRule("trend_master", lambda p: p.stats.posts_generated >= 2),),
        ),
    }

    assert check_achievements(fresh_progress, "trends_used", catalog, rules) == []
    unlocked = check_achievements(fresh_progress, "trends_used", catalog, rules)

    assert [a.id for a in unlocked] == ["trend_master"]


# ============================================================================
# Available Achievements
# ============================================================================

def test_available_achievements_excludes_unlocked(fresh_progress):
    assert len(get_available_achievements(fresh_progress, ACHIEVEMENTS)) == 6

    check_achievements(fresh_progress, "content_plan_created", ACHIEVEMENTS)
    available = get_available_achievements(fresh_progress, ACHIEVEMENTS)

    assert len(available) == 5
    assert "first_plan" not in {a.id for a in available}

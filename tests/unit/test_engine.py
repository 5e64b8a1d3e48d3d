"""Unit tests for ProgressionEngine (creator_xp/gamification/engine.py)"""
import pytest

from creator_xp.exceptions import ValidationError
from creator_xp.gamification.engine import ProgressionEngine
from creator_xp.models.progress import UserProgress


# ============================================================================
# Construction
# ============================================================================

def test_new_engine_starts_at_level_one(engine, test_user_id):
    progress = engine.get_user_progress()

    assert progress.user_id == test_user_id
    assert progress.current_level == 1
    assert progress.current_xp == 0
    assert progress.achievements == []
    assert engine.get_current_level().name == "Rookie Creator"


def test_engine_resumes_from_stored_record(stored_record):
    """Test a persisted record is picked up as-is"""
    engine = ProgressionEngine(UserProgress.from_record(stored_record), grant_achievement_xp=False)

    assert engine.get_current_level().level == 2
    assert engine.get_progress_to_next_level().current == 50
    assert [a.id for a in engine.get_user_progress().achievements] == ["first_plan"]


def test_engine_does_not_share_state_with_caller(fresh_progress):
    """Test neither the constructor argument nor snapshots alias engine state"""
    engine = ProgressionEngine(fresh_progress, grant_achievement_xp=False)
    engine.apply_award(50, "other")
    assert fresh_progress.current_xp == 0

    snapshot = engine.get_user_progress()
    snapshot.current_xp = 9999
    snapshot.streaks.daily = 9
    assert engine.get_user_progress().current_xp == 50
    assert engine.get_user_progress().streaks.daily == 0


# ============================================================================
# Scenarios
# ============================================================================

def test_first_content_plan_scenario(engine):
    """Test 120 XP content plan on a fresh record"""
    report = engine.apply_award(120, "content_plan_created")
    progress = engine.get_user_progress()

    assert progress.current_xp == 120
    assert report.leveled_up is True
    assert report.new_level.level == 2
    assert "first_plan" in [a.id for a in report.achievements_unlocked]


def test_level_jump_regression(engine):
    """Test 1 -> level-3 threshold in one award lands on 2, a zero award reaches 3"""
    engine.apply_award(300, "other")
    assert engine.get_user_progress().current_level == 2

    report = engine.apply_award(0, "other")
    assert report.leveled_up is True
    assert engine.get_user_progress().current_level == 3


def test_repeated_trigger_never_duplicates(engine):
    for _ in range(5):
        engine.apply_award(10, "viral_post")

    ids = [a.id for a in engine.get_user_progress().achievements]
    assert ids == ["viral_post"]
    assert engine.get_user_progress().stats.viral_posts == 5


def test_level_never_decreases(engine):
    levels = []
    for amount in [60, 60, 0, 500, 0, 0, 400, 0, 10]:
        engine.apply_award(amount, "other")
        levels.append(engine.get_user_progress().current_level)

    assert levels == sorted(levels)
    assert all(b - a <= 1 for a, b in zip(levels, levels[1:]))
    assert levels[-1] == 5


def test_terminal_state(engine):
    """Test the max level has no next level and reports 100%"""
    for _ in range(5):
        engine.apply_award(250, "other")

    progress = engine.get_user_progress()
    assert progress.current_level == 5
    assert engine.get_next_level() is None

    result = engine.get_progress_to_next_level()
    assert result.percentage == 100
    assert result.required == 0
    assert result.current == 1250


# ============================================================================
# Views and Streaks
# ============================================================================

def test_unlocked_features_follow_level(engine):
    assert engine.get_unlocked_features() == ["Basic templates", "Standard hashtags"]

    engine.apply_award(100, "other")

    assert engine.get_unlocked_features() == ["Trend analysis", "Voice commands"]


def test_available_achievements(engine):
    engine.apply_award(10, "content_plan_created")

    available = [a.id for a in engine.get_available_achievements()]

    assert "first_plan" not in available
    assert len(available) == 5


def test_rarity_colors():
    assert ProgressionEngine.get_rarity_color("legendary") == "#F59E0B"
    assert ProgressionEngine.get_rarity_color("epic") == "#8B5CF6"
    assert ProgressionEngine.get_rarity_color("mythic") == "#6B7280"


def test_update_stats(engine):
    engine.update_stats(followersGained=1200, engagement_rate=7.25)
    stats = engine.get_user_progress().stats

    assert stats.followers_gained == 1200
    assert stats.engagement_rate == 7.25

    with pytest.raises(ValidationError):
        engine.update_stats(shares=3)


def test_streak_operations(engine):
    """Test add/reset daily streak with the default double count"""
    report = engine.add_daily_streak()
    assert report.xp_awarded == 5
    assert engine.get_user_progress().streaks.daily == 2
    assert engine.calculate_daily_bonus() == 10

    engine.reset_daily_streak()
    progress = engine.get_user_progress()
    assert progress.streaks.daily == 0
    assert progress.current_xp == 5
    assert engine.calculate_daily_bonus() == 0


def test_streak_single_count_engine(test_user_id):
    engine = ProgressionEngine(test_user_id, grant_achievement_xp=False, legacy_daily_streak_count=False)

    for _ in range(7):
        report = engine.add_daily_streak()

    assert engine.get_user_progress().streaks.daily == 7
    assert [a.id for a in report.achievements_unlocked] == ["streak_7"]


def test_grant_achievement_xp_engine(test_user_id):
    engine = ProgressionEngine(test_user_id, grant_achievement_xp=True)

    report = engine.apply_award(0, "viral_post")

    assert report.xp_awarded == 50
    assert engine.get_user_progress().current_xp == 50

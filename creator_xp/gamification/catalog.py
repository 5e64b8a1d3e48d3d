"""
Level and Achievement Catalogs

Static configuration for the progression engine. Catalogs are validated once
when they are built; a malformed catalog raises CatalogError at load time so
engine operations never have to deal with one.

Level invariants:
- levels are numbered 1, 2, 3, ... with no gaps or duplicates
- xpRequired is strictly increasing and level 1 requires 0 XP

Achievement invariants:
- ids are unique
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from creator_xp.exceptions import CatalogError
from creator_xp.models.progress import Achievement, Level, Rarity

logger = logging.getLogger(__name__)


class LevelCatalog:
    """Ordered, validated table of levels"""

    def __init__(self, levels: Iterable[Level]):
        self._levels: List[Level] = list(levels)
        self._validate()
        self._by_number: Dict[int, Level] = {lvl.level: lvl for lvl in self._levels}

    def _validate(self) -> None:
        if not self._levels:
            raise CatalogError("Level catalog is empty", catalog="levels")

        for index, lvl in enumerate(self._levels):
            expected = index + 1
            if lvl.level != expected:
                raise CatalogError(
                    f"Level catalog must be numbered 1..N in order; "
                    f"position {index} holds level {lvl.level}, expected {expected}",
                    catalog="levels",
                    context={"level": lvl.level, "position": index},
                )
            if index and lvl.xp_required <= self._levels[index - 1].xp_required:
                raise CatalogError(
                    f"xpRequired must strictly increase: level {lvl.level} requires "
                    f"{lvl.xp_required}, level {lvl.level - 1} requires "
                    f"{self._levels[index - 1].xp_required}",
                    catalog="levels",
                    context={"level": lvl.level},
                )

        if self._levels[0].xp_required != 0:
            raise CatalogError(
                f"Level 1 must require 0 XP, got {self._levels[0].xp_required}",
                catalog="levels",
            )

    def get(self, level: int) -> Optional[Level]:
        return self._by_number.get(level)

    @property
    def first(self) -> Level:
        return self._levels[0]

    @property
    def max_level(self) -> Level:
        return self._levels[-1]

    def __iter__(self) -> Iterator[Level]:
        return iter(self._levels)

    def __len__(self) -> int:
        return len(self._levels)

    def __repr__(self) -> str:
        return f"LevelCatalog({len(self._levels)} levels)"


class AchievementCatalog:
    """Validated set of achievements, kept in declaration order"""

    def __init__(self, achievements: Iterable[Achievement]):
        self._achievements: List[Achievement] = list(achievements)
        self._by_id: Dict[str, Achievement] = {}
        for achievement in self._achievements:
            if achievement.id in self._by_id:
                raise CatalogError(
                    f"Duplicate achievement id: {achievement.id}",
                    catalog="achievements",
                    context={"achievement_id": achievement.id},
                )
            self._by_id[achievement.id] = achievement

    def get(self, achievement_id: str) -> Optional[Achievement]:
        return self._by_id.get(achievement_id)

    def __contains__(self, achievement_id: object) -> bool:
        return achievement_id in self._by_id

    def __iter__(self) -> Iterator[Achievement]:
        return iter(self._achievements)

    def __len__(self) -> int:
        return len(self._achievements)

    def __repr__(self) -> str:
        return f"AchievementCatalog({len(self._achievements)} achievements)"


# ============================================================================
# Built-in catalogs
# ============================================================================

CREATOR_LEVELS = LevelCatalog([
    Level(
        level=1,
        name="Rookie Creator",
        xp_required=0,
        color="#CD7F32",
        badge="🥉",
        benefits=("Basic content generation", "5 daily AI calls"),
        unlock_features=("Basic templates", "Standard hashtags"),
    ),
    Level(
        level=2,
        name="Rising Star",
        xp_required=100,
        color="#C0C0C0",
        badge="🥈",
        benefits=("Advanced content generation", "10 daily AI calls"),
        unlock_features=("Trend analysis", "Voice commands"),
    ),
    Level(
        level=3,
        name="Content Creator",
        xp_required=300,
        color="#FFD700",
        badge="🥇",
        benefits=("Premium content generation", "20 daily AI calls"),
        unlock_features=("3D dashboard", "Advanced analytics"),
    ),
    Level(
        level=4,
        name="Viral Master",
        xp_required=600,
        color="#9D4EDD",
        badge="💎",
        benefits=("Unlimited AI calls", "Priority support"),
        unlock_features=("AI video generation", "Custom models"),
    ),
    Level(
        level=5,
        name="Content Legend",
        xp_required=1000,
        color="#FF6B6B",
        badge="👑",
        benefits=("All features unlocked", "Exclusive content"),
        unlock_features=("White-label options", "API access"),
    ),
])

ACHIEVEMENTS = AchievementCatalog([
    Achievement(
        id="first_plan",
        name="First Steps",
        description="Create your first content plan",
        icon="🎯",
        xp_reward=25,
        rarity=Rarity.COMMON,
    ),
    Achievement(
        id="viral_post",
        name="Going Viral",
        description="Generate a post with 90+ viral score",
        icon="🚀",
        xp_reward=50,
        rarity=Rarity.RARE,
    ),
    Achievement(
        id="streak_7",
        name="Consistent Creator",
        description="Generate content for 7 consecutive days",
        icon="🔥",
        xp_reward=100,
        rarity=Rarity.EPIC,
    ),
    Achievement(
        id="trend_master",
        name="Trend Master",
        description="Use 50 trending hashtags",
        icon="📈",
        xp_reward=75,
        rarity=Rarity.RARE,
    ),
    Achievement(
        id="ai_expert",
        name="AI Expert",
        description="Generate 100 AI-powered posts",
        icon="🤖",
        xp_reward=150,
        rarity=Rarity.EPIC,
    ),
    Achievement(
        id="engagement_king",
        name="Engagement King",
        description="Achieve 95%+ engagement prediction",
        icon="👑",
        xp_reward=200,
        rarity=Rarity.LEGENDARY,
    ),
])


# ============================================================================
# Loaders
# ============================================================================

def load_level_catalog(entries: Iterable[Dict[str, Any]]) -> LevelCatalog:
    """
    Build a LevelCatalog from plain dicts (camelCase or snake_case keys)

    Raises:
        CatalogError: an entry is malformed or the table breaks an invariant
    """
    try:
        levels = [Level.model_validate(entry) for entry in entries]
    except PydanticValidationError as e:
        raise CatalogError(f"Invalid level entry: {e}", catalog="levels", cause=e)
    return LevelCatalog(levels)


def load_achievement_catalog(entries: Iterable[Dict[str, Any]]) -> AchievementCatalog:
    """
    Build an AchievementCatalog from plain dicts

    Raises:
        CatalogError: an entry is malformed or an id repeats
    """
    try:
        achievements = [Achievement.model_validate(entry) for entry in entries]
    except PydanticValidationError as e:
        raise CatalogError(f"Invalid achievement entry: {e}", catalog="achievements", cause=e)
    return AchievementCatalog(achievements)


def load_catalogs_from_file(path: Union[str, Path]) -> tuple[LevelCatalog, AchievementCatalog]:
    """
    Load both catalogs from a JSON document

    Expected shape:
        {"levels": [{...}, ...], "achievements": [{...}, ...]}

    A missing "achievements" key means the built-in achievement catalog.
    """
    path = Path(path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Could not read catalog file {path}: {e}", catalog=str(path), cause=e)

    if not isinstance(document, dict) or not isinstance(document.get("levels"), list):
        raise CatalogError(f"Catalog file {path} has no 'levels' list", catalog=str(path))
    if "achievements" in document and not isinstance(document["achievements"], list):
        raise CatalogError(f"Catalog file {path}: 'achievements' must be a list", catalog=str(path))

    levels = load_level_catalog(document["levels"])
    if "achievements" in document:
        achievements = load_achievement_catalog(document["achievements"])
    else:
        achievements = ACHIEVEMENTS

    logger.info(f"Loaded catalogs from {path}: {len(levels)} levels, {len(achievements)} achievements")
    return levels, achievements

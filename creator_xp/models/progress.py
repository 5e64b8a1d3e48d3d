"""Progression models: catalog entries, per-user progress and award reports

Attribute names are snake_case; the camelCase aliases are the field names
already used by stored progress records, so ``to_record()`` and
``from_record()`` go through the aliases.
"""
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class Rarity(str, Enum):
    """Achievement rarity (display only)"""
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


RARITY_COLORS: dict[str, str] = {
    Rarity.COMMON.value: "#6B7280",
    Rarity.RARE.value: "#3B82F6",
    Rarity.EPIC.value: "#8B5CF6",
    Rarity.LEGENDARY.value: "#F59E0B",
}


def rarity_color(rarity: Any) -> str:
    """Display color for a rarity; unknown values get the common color"""
    key = rarity.value if isinstance(rarity, Rarity) else str(rarity)
    return RARITY_COLORS.get(key, RARITY_COLORS[Rarity.COMMON.value])


class Level(BaseModel):
    """Level catalog entry"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    level: int = Field(..., ge=1)
    name: str
    xp_required: int = Field(..., ge=0, alias="xpRequired")
    badge: str = ""
    color: str = ""
    benefits: tuple[str, ...] = ()
    unlock_features: tuple[str, ...] = Field(default=(), alias="unlockFeatures")


class Achievement(BaseModel):
    """Achievement catalog entry"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    icon: str = ""
    xp_reward: int = Field(..., ge=0, alias="xpReward")
    rarity: Rarity = Rarity.COMMON


class Streaks(BaseModel):
    """Consecutive-activity counters"""
    daily: int = Field(default=0, ge=0)
    weekly: int = Field(default=0, ge=0)
    monthly: int = Field(default=0, ge=0)


class UserStats(BaseModel):
    """Activity counters and metrics; the caller may overwrite any of them"""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    content_plans_created: int = Field(default=0, ge=0, alias="contentPlansCreated")
    posts_generated: int = Field(default=0, ge=0, alias="postsGenerated")
    viral_posts: int = Field(default=0, ge=0, alias="viralPosts")
    engagement_rate: float = Field(default=0.0, ge=0, alias="engagementRate")
    followers_gained: int = Field(default=0, ge=0, alias="followersGained")


class UserProgress(BaseModel):
    """
    One user's progression record

    current_xp and total_xp track the same running total; both are kept
    because stored records carry both fields.
    """
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    current_level: int = Field(default=1, ge=1, alias="currentLevel")
    current_xp: int = Field(default=0, ge=0, alias="currentXP")
    total_xp: int = Field(default=0, ge=0, alias="totalXP")
    achievements: list[Achievement] = Field(default_factory=list)
    streaks: Streaks = Field(default_factory=Streaks)
    stats: UserStats = Field(default_factory=UserStats)

    @classmethod
    def new(cls, user_id: str) -> "UserProgress":
        """Fresh record for a user seen for the first time"""
        return cls(user_id=user_id)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "UserProgress":
        """Resume from a stored record (camelCase or snake_case keys)"""
        return cls.model_validate(record)

    def to_record(self) -> dict[str, Any]:
        """Serialize with the stored-record field names"""
        return self.model_dump(mode="json", by_alias=True)

    def has_achievement(self, achievement_id: str) -> bool:
        return any(a.id == achievement_id for a in self.achievements)


class AwardReport(BaseModel):
    """What changed after one XP award"""
    model_config = ConfigDict(populate_by_name=True)

    xp_awarded: int = Field(default=0, alias="xpAwarded")
    leveled_up: bool = Field(default=False, alias="leveledUp")
    new_level: Optional[Level] = Field(default=None, alias="newLevel")
    achievements_unlocked: list[Achievement] = Field(default_factory=list, alias="achievementsUnlocked")


class LevelProgress(BaseModel):
    """Progress from the current level's threshold toward the next one"""
    current: int
    required: int
    percentage: float

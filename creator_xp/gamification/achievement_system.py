"""
Achievement System

Maps an award's event tag to the counter it bumps and the achievements it can
unlock. Each tag has one EventRule:
- bump: increments the counter the tag tracks (or None)
- unlocks: ordered UnlockRules, each an achievement id plus a predicate
  evaluated against the progress record after the bump

Adding an achievement means adding a catalog entry and an UnlockRule here;
check_achievements() does not change.

Recognized tags:
- content_plan_created: stats.content_plans_created, first_plan at exactly 1
- viral_post: stats.viral_posts, viral_post at exactly 1
- daily_streak: streaks.daily, streak_7 at exactly 7
Any other tag affects XP only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Tuple
import logging

from creator_xp.gamification.catalog import AchievementCatalog
from creator_xp.models.progress import Achievement, UserProgress

logger = logging.getLogger(__name__)


class EventSource(str, Enum):
    """Event tags that drive achievement checks"""
    CONTENT_PLAN_CREATED = "content_plan_created"
    VIRAL_POST = "viral_post"
    DAILY_STREAK = "daily_streak"


@dataclass(frozen=True)
class UnlockRule:
    achievement_id: str
    predicate: Callable[[UserProgress], bool]


@dataclass(frozen=True)
class EventRule:
    bump: Optional[Callable[[UserProgress], None]]
    unlocks: Tuple[UnlockRule, ...] = ()


EventRules = Mapping[str, EventRule]


def _bump_content_plans(progress: UserProgress) -> None:
    progress.stats.content_plans_created += 1


def _bump_viral_posts(progress: UserProgress) -> None:
    progress.stats.viral_posts += 1


def _bump_daily_streak(progress: UserProgress) -> None:
    progress.streaks.daily += 1


def build_event_rules(count_daily_streak_on_award: bool = True) -> Dict[str, EventRule]:
    """
    Default tag -> rule table

    Args:
        count_daily_streak_on_award: a daily_streak award bumps streaks.daily.
            With add_daily_streak() this counts every streak day twice; turn it
            off to have the award only read the counter.
    """
    return {
        EventSource.CONTENT_PLAN_CREATED.value: EventRule(
            bump=_bump_content_plans,
            unlocks=(UnlockRule("first_plan", lambda p: p.stats.content_plans_created == 1),),
        ),
        EventSource.VIRAL_POST.value: EventRule(
            bump=_bump_viral_posts,
            unlocks=(UnlockRule("viral_post", lambda p: p.stats.viral_posts == 1),),
        ),
        EventSource.DAILY_STREAK.value: EventRule(
            bump=_bump_daily_streak if count_daily_streak_on_award else None,
            unlocks=(UnlockRule("streak_7", lambda p: p.streaks.daily == 7),),
        ),
    }


DEFAULT_EVENT_RULES: Dict[str, EventRule] = build_event_rules()


def check_achievements(
    progress: UserProgress,
    source: str,
    catalog: AchievementCatalog,
    rules: EventRules = DEFAULT_EVENT_RULES,
) -> List[Achievement]:
    """
    Apply the rule for `source` to `progress` in place

    Bumps the tag's counter, then unlocks every achievement whose predicate
    holds and which is in the catalog and not already unlocked.

    Returns:
        Newly unlocked achievements, in rule order
    """
    rule = rules.get(source.value if isinstance(source, Enum) else source)
    if rule is None:
        return []

    if rule.bump is not None:
        rule.bump(progress)

    newly_unlocked: List[Achievement] = []
    for unlock in rule.unlocks:
        if progress.has_achievement(unlock.achievement_id):
            continue
        achievement = catalog.get(unlock.achievement_id)
        if achievement is None:
            logger.debug(f"Unlock rule for unknown achievement {unlock.achievement_id} skipped")
            continue
        if not unlock.predicate(progress):
            continue

        progress.achievements.append(achievement)
        newly_unlocked.append(achievement)
        logger.info(
            f"User {progress.user_id} unlocked achievement: {achievement.id} "
            f"({achievement.name})"
        )

    return newly_unlocked


def get_available_achievements(progress: UserProgress, catalog: AchievementCatalog) -> List[Achievement]:
    """Catalog achievements the user has not unlocked yet"""
    unlocked_ids = {a.id for a in progress.achievements}
    return [a for a in catalog if a.id not in unlocked_ids]

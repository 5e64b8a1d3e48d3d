"""
XP Scoring Functions

Pure functions mapping a domain event's attributes to an XP amount.

XP Award Rules:
- Content plan: 25 base + viral score / 10 + engagement / 10 (25-45 for 0-100 inputs)
- Post: (10 + viral score / 20) scaled by the platform multiplier
- Trends: 2 XP per trend used, capped at 50

Inputs are not clamped or rejected here; out-of-range inputs give
proportionally out-of-range XP. Use creator_xp.validators at the call site
when the nominal ranges must hold.
"""

import math
from typing import Dict

CONTENT_PLAN_BASE_XP = 25
POST_BASE_XP = 10
TREND_XP_PER_TREND = 2
TREND_XP_CAP = 50

PLATFORM_MULTIPLIERS: Dict[str, float] = {
    "TikTok": 1.5,
    "Instagram": 1.2,
    "YouTube": 1.3,
    "Twitter": 1.0,
    "LinkedIn": 1.1,
}
DEFAULT_PLATFORM_MULTIPLIER = 1.0


def content_plan_xp(viral_score: float, engagement: float) -> int:
    """XP for creating a content plan"""
    viral_bonus = math.floor(viral_score / 10)
    engagement_bonus = math.floor(engagement / 10)
    return CONTENT_PLAN_BASE_XP + viral_bonus + engagement_bonus


def platform_multiplier(platform: str) -> float:
    """Multiplier for a platform name (exact match); unknown platforms get 1.0"""
    return PLATFORM_MULTIPLIERS.get(platform, DEFAULT_PLATFORM_MULTIPLIER)


def post_xp(platform: str, viral_score: float) -> int:
    """
    XP for generating a post

    The multiplier is applied last and the product floored:
        post_xp("TikTok", 40) == floor((10 + 2) * 1.5) == 18
    """
    viral_bonus = math.floor(viral_score / 20)
    return math.floor((POST_BASE_XP + viral_bonus) * platform_multiplier(platform))


def trend_xp(trends_used: int) -> int:
    """XP for using trending topics, capped at TREND_XP_CAP"""
    return min(TREND_XP_CAP, trends_used * TREND_XP_PER_TREND)

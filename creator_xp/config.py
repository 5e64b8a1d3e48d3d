"""Configuration management"""
import logging
import os
from pathlib import Path
from typing import Dict, Optional
from dotenv import load_dotenv

load_dotenv()

# Integer settings that failed to parse; reported by validate_config()
_INVALID_INTS: Dict[str, str] = {}


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        _INVALID_INTS[name] = raw
        return default


# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Catalogs
# Empty means the built-in level and achievement catalogs are used.
_catalog_path = os.getenv("CATALOG_PATH", "")
CATALOG_PATH: Optional[Path] = Path(_catalog_path) if _catalog_path else None

# Progression rules
# - GRANT_ACHIEVEMENT_XP: add an unlocked achievement's xpReward to the user's XP
# - LEGACY_DAILY_STREAK_COUNT: the daily_streak award also bumps streaks.daily,
#   so add_daily_streak() counts twice (matches records written so far)
GRANT_ACHIEVEMENT_XP: bool = os.getenv("GRANT_ACHIEVEMENT_XP", "false").lower() == "true"
LEGACY_DAILY_STREAK_COUNT: bool = os.getenv("LEGACY_DAILY_STREAK_COUNT", "true").lower() == "true"

# Daily streak bonus: min(DAILY_BONUS_CAP, streak * DAILY_BONUS_PER_DAY)
DAILY_BONUS_PER_DAY: int = _int_env("DAILY_BONUS_PER_DAY", 5)
DAILY_BONUS_CAP: int = _int_env("DAILY_BONUS_CAP", 50)


# Validation
def validate_config() -> None:
    """Validate configuration"""
    if _INVALID_INTS:
        bad = ", ".join(f"{name}={raw!r}" for name, raw in _INVALID_INTS.items())
        raise ValueError(f"Integer settings could not be parsed: {bad}")
    if not isinstance(logging.getLevelName(LOG_LEVEL.upper()), int):
        raise ValueError(f"LOG_LEVEL must be a logging level name, got {LOG_LEVEL!r}")
    if DAILY_BONUS_PER_DAY <= 0:
        raise ValueError("DAILY_BONUS_PER_DAY must be positive")
    if DAILY_BONUS_CAP <= 0:
        raise ValueError("DAILY_BONUS_CAP must be positive")
    if CATALOG_PATH is not None and not CATALOG_PATH.is_file():
        raise ValueError(f"CATALOG_PATH does not point to a file: {CATALOG_PATH}")

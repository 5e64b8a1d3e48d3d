"""Replay a file of creator events through the progression engine

Usage:
    python -m creator_xp.main events.json [--catalog catalog.json]

events.json is a list of objects, each with a user_id and a type:
    {"user_id": "u1", "type": "award", "amount": 40, "source": "viral_post"}
    {"user_id": "u1", "type": "content_plan", "viral_score": 80, "engagement": 65}
    {"user_id": "u1", "type": "post", "platform": "TikTok", "viral_score": 92}
    {"user_id": "u1", "type": "trends", "trends_used": 12}
    {"user_id": "u1", "type": "daily_streak"}
    {"user_id": "u1", "type": "reset_streak"}
    {"user_id": "u1", "type": "stats", "stats": {"followersGained": 120}}

Prints every user's final progress record as JSON.
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from creator_xp import config
from creator_xp.config import validate_config, LOG_LEVEL
from creator_xp.exceptions import CreatorXPError, ValidationError
from creator_xp.gamification.catalog import load_catalogs_from_file
from creator_xp.services import InMemoryProgressStore, ProgressionService

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


async def apply_event(service: ProgressionService, event: Dict[str, Any]) -> None:
    """Dispatch one event dict to the matching service call"""
    if not isinstance(event, dict):
        raise ValidationError("Event must be a JSON object", field="event", value=event)
    user_id = event.get("user_id")
    event_type = event.get("type")
    if not user_id:
        raise ValidationError("Event has no user_id", field="user_id", value=event)

    if event_type == "award":
        report = await service.award(user_id, event.get("amount", 0), event.get("source", ""))
    elif event_type == "content_plan":
        report = await service.record_content_plan(user_id, event.get("viral_score", 0), event.get("engagement", 0))
    elif event_type == "post":
        report = await service.record_post(
            user_id, event.get("platform", ""), event.get("viral_score", 0), viral=event.get("viral")
        )
    elif event_type == "trends":
        report = await service.record_trends(user_id, event.get("trends_used", 0))
    elif event_type == "daily_streak":
        report = await service.add_daily_streak(user_id)
    elif event_type == "reset_streak":
        await service.reset_daily_streak(user_id)
        return
    elif event_type == "stats":
        stats = event.get("stats", {})
        if not isinstance(stats, dict):
            raise ValidationError("Stats event needs a 'stats' object", field="stats", value=stats)
        await service.update_stats(user_id, **stats)
        return
    else:
        raise ValidationError(f"Unknown event type: {event_type}", field="type", value=event_type)

    if report.leveled_up:
        logger.info(f"{user_id} reached level {report.new_level.level} ({report.new_level.name})")
    for achievement in report.achievements_unlocked:
        logger.info(f"{user_id} unlocked {achievement.icon} {achievement.name}")


async def replay(events: List[Dict[str, Any]], catalog_path: Optional[Path] = None) -> Dict[str, Any]:
    """Run events in order; returns {user_id: stored record}"""
    levels = achievements = None
    if catalog_path is not None:
        levels, achievements = load_catalogs_from_file(catalog_path)

    store = InMemoryProgressStore()
    service = ProgressionService(store, levels=levels, achievements=achievements)

    for event in events:
        await apply_event(service, event)

    return {user_id: (await store.get(user_id)).to_record() for user_id in store.user_ids()}


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point"""
    parser = argparse.ArgumentParser(description="Replay creator events through the progression engine")
    parser.add_argument("events", type=Path, help="JSON file with a list of events")
    parser.add_argument("--catalog", type=Path, default=None, help="JSON level/achievement catalog")
    args = parser.parse_args(argv)

    try:
        validate_config()
        events = json.loads(args.events.read_text(encoding="utf-8"))
        if not isinstance(events, list):
            raise ValidationError("Events file must contain a JSON list", field="events")
        records = asyncio.run(replay(events, args.catalog or config.CATALOG_PATH))
    except (OSError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        logger.error(f"Replay failed: {e}")
        return 1
    except CreatorXPError as e:
        logger.error(f"Replay failed: {e.message}")
        return 1

    print(json.dumps(records, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())

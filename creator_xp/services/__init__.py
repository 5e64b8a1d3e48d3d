"""
Service Layer Package

Caller-side wrappers around the progression engine:
- ProgressionService: validation, scoring, per-user locking, load/save
- ProgressStore / InMemoryProgressStore: persistence boundary
"""

from creator_xp.services.progress_store import InMemoryProgressStore, ProgressStore
from creator_xp.services.progression_service import ProgressionService

__all__ = [
    "InMemoryProgressStore",
    "ProgressStore",
    "ProgressionService",
]

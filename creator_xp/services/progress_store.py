"""
Progress persistence boundary

The progression engine never stores anything. ProgressStore is the shape the
service layer expects from a real backend (a database table keyed by user
id); InMemoryProgressStore keeps records in a dict for tests and the replay
CLI.
"""

import logging
from typing import Dict, List, Optional, Protocol

from creator_xp.exceptions import RecordNotFoundError
from creator_xp.models.progress import UserProgress

logger = logging.getLogger(__name__)


class ProgressStore(Protocol):
    """Load/save of whole UserProgress records"""

    async def load(self, user_id: str) -> Optional[UserProgress]:
        ...

    async def save(self, progress: UserProgress) -> None:
        ...


class InMemoryProgressStore:
    """In-memory store; records are copied in and out"""

    def __init__(self):
        self._records: Dict[str, dict] = {}

    async def load(self, user_id: str) -> Optional[UserProgress]:
        record = self._records.get(user_id)
        if record is None:
            return None
        return UserProgress.from_record(record)

    async def save(self, progress: UserProgress) -> None:
        self._records[progress.user_id] = progress.to_record()
        logger.debug(f"Saved progress for user {progress.user_id}")

    async def get(self, user_id: str) -> UserProgress:
        """Load a record that must exist"""
        progress = await self.load(user_id)
        if progress is None:
            raise RecordNotFoundError(
                f"No progress record for user {user_id}",
                record_type="UserProgress",
                record_id=user_id,
            )
        return progress

    def user_ids(self) -> List[str]:
        return list(self._records)

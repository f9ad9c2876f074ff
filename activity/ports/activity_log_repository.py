"""
ActivityLog repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from activity.domain.activity_log import ActivityLog
from core.domain.value_objects import ActivityType


class ActivityLogRepository(ABC):
    """Abstract append-only repository for journal entries."""

    @abstractmethod
    async def append(self, entry: ActivityLog) -> ActivityLog:
        """Insert a journal entry."""

    @abstractmethod
    async def list_by_team(
        self,
        team_id: uuid.UUID,
        limit: int,
        offset: int,
        activity_type: Optional[ActivityType] = None,
    ) -> Tuple[List[ActivityLog], int]:
        """
        Page through a team's journal, newest first.

        Args:
            team_id: Team UUID
            limit: Page size
            offset: Entries to skip
            activity_type: Optional type filter

        Returns:
            Tuple of (entries, total matching entries)
        """

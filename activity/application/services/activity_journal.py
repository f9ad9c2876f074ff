"""
Activity journal service.

Handlers call ``record`` after a successful write. Solo scopes have
no journal, so recording against them is a no-op.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from activity.domain.activity_log import ActivityLog
from activity.ports.activity_log_repository import ActivityLogRepository
from core.domain.value_objects import ActivityType, Scope, TeamScope

logger = logging.getLogger(__name__)


class ActivityJournal:
    """Append entries to the team journal."""

    def __init__(self, repository: ActivityLogRepository):
        self.repository = repository

    async def record(
        self,
        scope: Scope,
        admin_id: Optional[uuid.UUID],
        activity_type: ActivityType,
        description: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[ActivityLog]:
        """
        Record an entry for a team scope.

        Returns:
            The stored entry, or None for a solo scope
        """
        if not isinstance(scope, TeamScope):
            return None

        entry = ActivityLog.create(
            team_id=scope.team_id,
            admin_id=admin_id,
            activity_type=activity_type,
            description=description,
            metadata=metadata,
        )
        saved = await self.repository.append(entry)
        logger.debug(
            "Activity recorded",
            extra={"team_id": str(scope.team_id), "activity_type": activity_type.value},
        )
        return saved

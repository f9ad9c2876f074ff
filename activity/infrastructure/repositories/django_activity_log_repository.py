"""
Django implementation of ActivityLogRepository port.
"""
import uuid
from typing import List, Optional, Tuple

from asgiref.sync import sync_to_async

from activity.domain.activity_log import ActivityLog
from activity.infrastructure.models import ActivityLog as ActivityLogModel
from activity.ports.activity_log_repository import ActivityLogRepository
from core.domain.value_objects import ActivityType


class DjangoActivityLogRepository(ActivityLogRepository):
    """Django ORM implementation of ActivityLogRepository."""

    def _to_domain(self, model: ActivityLogModel) -> ActivityLog:
        """Convert Django model to domain entity."""
        return ActivityLog(
            id=model.id,
            team_id=model.team_id,
            admin_id=model.admin_id,
            activity_type=ActivityType(model.activity_type),
            description=model.description,
            created_at=model.created_at,
            metadata=model.metadata or {},
        )

    @sync_to_async
    def append(self, entry: ActivityLog) -> ActivityLog:
        """Insert a journal entry."""
        model = ActivityLogModel.objects.create(
            id=entry.id,
            team_id=entry.team_id,
            admin_id=entry.admin_id,
            activity_type=entry.activity_type.value,
            description=entry.description,
            metadata=entry.metadata,
            created_at=entry.created_at,
        )
        return self._to_domain(model)

    @sync_to_async
    def list_by_team(
        self,
        team_id: uuid.UUID,
        limit: int,
        offset: int,
        activity_type: Optional[ActivityType] = None,
    ) -> Tuple[List[ActivityLog], int]:
        """Page through a team's journal, newest first."""
        queryset = ActivityLogModel.objects.filter(team_id=team_id)
        if activity_type is not None:
            queryset = queryset.filter(activity_type=activity_type.value)
        total = queryset.count()
        page = queryset.order_by("-created_at")[offset:offset + limit]
        return [self._to_domain(model) for model in page], total

"""
Activity journal read handler.
"""
from typing import Any

from accounts.application.services.identity_gate import IdentityGate
from accounts.ports.admin_repository import AdminRepository
from activity.application.dto.activity_dto import ActivityDTO, ActivityPageDTO
from activity.application.queries.list_activity import ListActivityQuery
from activity.ports.activity_log_repository import ActivityLogRepository
from core.domain.exceptions import ValidationFailedError
from core.domain.value_objects import ActivityType

DEFAULT_LIMIT = 50
MAX_LIMIT = 100


def _as_int(raw: Any, default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


class ListActivityHandler:
    """Handler for ListActivityQuery."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        activity_repository: ActivityLogRepository,
        admin_repository: AdminRepository,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.activity_repository = activity_repository
        self.admin_repository = admin_repository

    async def handle(self, query: ListActivityQuery) -> ActivityPageDTO:
        """
        Handle list activity query.

        ``limit`` is clamped to 1..100 and ``offset`` to >= 0. Admins
        without a team get an empty page with ``has_team=False``.

        Raises:
            ValidationFailedError: Unknown activity type filter
        """
        actor = await self.identity_gate.require_actor(query.user_id)
        limit = min(max(_as_int(query.limit, DEFAULT_LIMIT), 1), MAX_LIMIT)
        offset = max(_as_int(query.offset, 0), 0)

        activity_type = None
        if query.activity_type:
            try:
                activity_type = ActivityType(query.activity_type)
            except ValueError:
                raise ValidationFailedError(f"Unknown activity type: {query.activity_type}")

        if not actor.has_team:
            return ActivityPageDTO(limit=limit, offset=offset, has_team=False)

        entries, total = await self.activity_repository.list_by_team(
            actor.team_id, limit=limit, offset=offset, activity_type=activity_type
        )
        admins = await self.admin_repository.find_many(
            entry.admin_id for entry in entries if entry.admin_id
        )
        return ActivityPageDTO(
            limit=limit,
            offset=offset,
            has_team=True,
            total=total,
            activities=[ActivityDTO.from_entity(entry, admins) for entry in entries],
        )

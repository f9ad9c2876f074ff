"""
Activity DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from accounts.domain.admin import Admin
from activity.domain.activity_log import ActivityLog


@dataclass
class ActivityAdminDTO:
    """DTO for the admin who performed an activity."""

    id: uuid.UUID
    email: str
    name: str


@dataclass
class ActivityDTO:
    """DTO for one journal entry."""

    id: uuid.UUID
    activity_type: str
    description: str
    metadata: Dict[str, Any]
    created_at: datetime
    admin: Optional[ActivityAdminDTO] = None

    @classmethod
    def from_entity(cls, entry: ActivityLog, admins: Dict[uuid.UUID, Admin]) -> "ActivityDTO":
        admin = admins.get(entry.admin_id) if entry.admin_id else None
        return cls(
            id=entry.id,
            activity_type=entry.activity_type.value,
            description=entry.description,
            metadata=entry.metadata,
            created_at=entry.created_at,
            admin=(
                ActivityAdminDTO(id=admin.id, email=str(admin.email), name=admin.full_name)
                if admin
                else None
            ),
        )


@dataclass
class ActivityPageDTO:
    """DTO for a page of the journal."""

    limit: int
    offset: int
    has_team: bool
    total: int = 0
    activities: List[ActivityDTO] = field(default_factory=list)

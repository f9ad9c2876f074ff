"""
ActivityLog domain entity.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.domain.value_objects import ActivityType


@dataclass(frozen=True)
class ActivityLog:
    """One journal entry. Entries are never updated or deleted."""

    id: uuid.UUID
    team_id: uuid.UUID
    admin_id: Optional[uuid.UUID]
    activity_type: ActivityType
    description: str
    created_at: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        team_id: uuid.UUID,
        admin_id: Optional[uuid.UUID],
        activity_type: ActivityType,
        description: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ActivityLog":
        """Create a new journal entry."""
        return cls(
            id=uuid.uuid4(),
            team_id=team_id,
            admin_id=admin_id,
            activity_type=activity_type,
            description=description,
            created_at=datetime.now(timezone.utc),
            metadata=metadata or {},
        )

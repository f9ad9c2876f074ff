"""
TeamMember domain entity.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from core.domain.value_objects import TeamRole


@dataclass(frozen=True)
class TeamMember:
    """Membership of one admin in one team."""

    id: uuid.UUID
    team_id: uuid.UUID
    admin_id: uuid.UUID
    role: TeamRole
    joined_at: datetime

    @classmethod
    def create(
        cls,
        team_id: uuid.UUID,
        admin_id: uuid.UUID,
        role: TeamRole = TeamRole.MEMBER,
        member_id: Optional[uuid.UUID] = None,
    ) -> "TeamMember":
        """Create a new membership."""
        return cls(
            id=member_id or uuid.uuid4(),
            team_id=team_id,
            admin_id=admin_id,
            role=role,
            joined_at=datetime.now(timezone.utc),
        )

    @property
    def is_owner(self) -> bool:
        return self.role == TeamRole.OWNER

    def with_role(self, role: TeamRole) -> "TeamMember":
        """
        Return a copy with a new role.

        Raises:
            ValueError: If the owner would be demoted or ownership granted
        """
        if self.is_owner:
            raise ValueError("Cannot change owner role")
        if role == TeamRole.OWNER:
            raise ValueError("Ownership cannot be granted")
        return replace(self, role=role)

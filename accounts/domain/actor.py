"""
Actor - the resolved caller of an operation.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from accounts.domain.admin import Admin
from core.domain.value_objects import Scope, SoloScope, TeamRole, TeamScope


@dataclass(frozen=True)
class Actor:
    """An administrator together with their team membership, if any."""

    admin: Admin
    team_id: Optional[uuid.UUID] = None
    role: Optional[TeamRole] = None
    member_id: Optional[uuid.UUID] = None

    @property
    def admin_id(self) -> uuid.UUID:
        return self.admin.id

    @property
    def has_team(self) -> bool:
        return self.team_id is not None

    @property
    def scope(self) -> Scope:
        """Owner scope for every ledger operation this actor performs."""
        if self.team_id is not None:
            return TeamScope(team_id=self.team_id)
        return SoloScope(admin_id=self.admin.id)

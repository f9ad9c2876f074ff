"""
Membership lookup port used by the identity gate.

Implemented by the team member repository; declared here so the
gate does not depend on the whole teams repository surface.
"""
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from teams.domain.team_member import TeamMember


class TeamMembershipLookup(ABC):
    """Resolve the (single) membership of an admin."""

    @abstractmethod
    async def find_by_admin(self, admin_id: uuid.UUID) -> Optional[TeamMember]:
        """Find the membership of an admin, if any."""

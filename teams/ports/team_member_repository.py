"""
TeamMember repository port (interface).
"""
import uuid
from abc import abstractmethod
from typing import List, Optional

from accounts.ports.team_membership_lookup import TeamMembershipLookup
from teams.domain.team_member import TeamMember


class TeamMemberRepository(TeamMembershipLookup):
    """Abstract repository for TeamMember entities."""

    @abstractmethod
    async def save(self, member: TeamMember) -> TeamMember:
        """
        Insert or update a membership.

        Raises:
            AlreadyTeamMemberError: If the admin already belongs to a team
        """

    @abstractmethod
    async def find_by_id(self, member_id: uuid.UUID) -> Optional[TeamMember]:
        """Find a membership by ID."""

    @abstractmethod
    async def list_by_team(self, team_id: uuid.UUID) -> List[TeamMember]:
        """List memberships of a team, oldest first."""

    @abstractmethod
    async def delete(self, member_id: uuid.UUID) -> None:
        """Delete a membership."""

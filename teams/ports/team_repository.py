"""
Team repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from teams.domain.team import Team
from teams.domain.team_member import TeamMember


class TeamRepository(ABC):
    """Abstract repository for Team entities."""

    @abstractmethod
    async def save(self, team: Team) -> Team:
        """Insert or update a team."""

    @abstractmethod
    async def find_by_id(self, team_id: uuid.UUID) -> Optional[Team]:
        """Find a team by ID."""

    @abstractmethod
    async def found(self, team: Team, owner: TeamMember) -> int:
        """
        Create a team around its owner in one transaction.

        Inserts the team and the owner membership, moves the owner's
        unscoped licenses into the team and zeroes the owner's solo
        seat counter. Nothing is written if any step fails.

        Raises:
            AlreadyTeamMemberError: If the owner joined a team meanwhile

        Returns:
            Number of licenses moved into the team
        """

    @abstractmethod
    async def add_purchased_seats(self, team_id: uuid.UUID, count: int) -> int:
        """
        Atomically add seats to the team counter.

        Returns:
            The new counter value
        """

"""
TeamInvitation repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from teams.domain.team_invitation import TeamInvitation


class TeamInvitationRepository(ABC):
    """Abstract repository for TeamInvitation entities."""

    @abstractmethod
    async def save(self, invitation: TeamInvitation) -> TeamInvitation:
        """Insert or update an invitation."""

    @abstractmethod
    async def find_by_id(self, invitation_id: uuid.UUID) -> Optional[TeamInvitation]:
        """Find an invitation by ID."""

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[TeamInvitation]:
        """Find an invitation by its token."""

    @abstractmethod
    async def find_pending(self, team_id: uuid.UUID, email: str) -> Optional[TeamInvitation]:
        """Find the unexpired pending invitation of an email to a team."""

    @abstractmethod
    async def list_pending(self, team_id: uuid.UUID) -> List[TeamInvitation]:
        """List unexpired pending invitations of a team, newest first."""

"""
TeamInvitation domain entity.
"""
import secrets
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.domain.value_objects import Email, InvitationStatus, TeamRole

DEFAULT_TTL_DAYS = 7


def generate_invitation_token() -> str:
    """Generate an unguessable single-use invitation token."""
    return secrets.token_urlsafe(32)


@dataclass(frozen=True)
class TeamInvitation:
    """
    A time-boxed, single-use invitation to join a team.

    Only actionable while pending and before ``expires_at``.
    """

    id: uuid.UUID
    team_id: uuid.UUID
    email: Email
    role: TeamRole
    token: str
    status: InvitationStatus
    invited_by: Optional[uuid.UUID]
    expires_at: datetime
    created_at: datetime
    accepted_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate invitation entity."""
        if self.role == TeamRole.OWNER:
            raise ValueError("Ownership cannot be granted by invitation")
        if not self.token:
            raise ValueError("Invitation token is required")

    @classmethod
    def create(
        cls,
        team_id: uuid.UUID,
        email: Email,
        role: TeamRole,
        invited_by: Optional[uuid.UUID],
        ttl_days: int = DEFAULT_TTL_DAYS,
        invitation_id: Optional[uuid.UUID] = None,
    ) -> "TeamInvitation":
        """
        Create a new pending invitation.

        Args:
            team_id: Team UUID
            email: Invitee email
            role: Role granted on acceptance
            invited_by: Admin UUID of the inviter
            ttl_days: Days until the invitation expires
            invitation_id: Optional UUID (generated if not provided)

        Returns:
            TeamInvitation entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=invitation_id or uuid.uuid4(),
            team_id=team_id,
            email=email,
            role=role,
            token=generate_invitation_token(),
            status=InvitationStatus.PENDING,
            invited_by=invited_by,
            expires_at=now + timedelta(days=ttl_days),
            created_at=now,
        )

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING

    def is_expired(self, current_time: Optional[datetime] = None) -> bool:
        """Check whether the invitation has expired."""
        check_time = current_time or datetime.now(timezone.utc)
        return self.expires_at <= check_time

    def is_actionable(self, current_time: Optional[datetime] = None) -> bool:
        """Pending and not yet expired."""
        return self.is_pending and not self.is_expired(current_time)

    def accept(self) -> "TeamInvitation":
        """
        Return a copy marked accepted.

        Raises:
            ValueError: If the invitation is not actionable
        """
        if not self.is_actionable():
            raise ValueError("Invitation is not actionable")
        return replace(
            self, status=InvitationStatus.ACCEPTED, accepted_at=datetime.now(timezone.utc)
        )

    def revoke(self) -> "TeamInvitation":
        """
        Return a copy marked revoked.

        Raises:
            ValueError: If the invitation is no longer pending
        """
        if not self.is_pending:
            raise ValueError("Only pending invitations can be revoked")
        return replace(self, status=InvitationStatus.REVOKED)

"""
Team DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from accounts.domain.admin import Admin
from teams.domain.team import Team
from teams.domain.team_invitation import TeamInvitation
from teams.domain.team_member import TeamMember


@dataclass
class AdminSummaryDTO:
    """DTO for the admin behind a membership or invitation."""

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str

    @classmethod
    def from_admin(cls, admin: Admin) -> "AdminSummaryDTO":
        return cls(
            id=admin.id,
            email=str(admin.email),
            first_name=admin.first_name,
            last_name=admin.last_name,
        )


@dataclass
class TeamDTO:
    """DTO for team details."""

    id: uuid.UUID
    name: str
    domain: str
    owner_id: uuid.UUID
    purchased_license_count: int
    created_at: datetime

    @classmethod
    def from_entity(cls, team: Team) -> "TeamDTO":
        return cls(
            id=team.id,
            name=team.name,
            domain=team.domain,
            owner_id=team.owner_id,
            purchased_license_count=team.purchased_license_count,
            created_at=team.created_at,
        )


@dataclass
class TeamMemberDTO:
    """DTO for a membership with its admin."""

    id: uuid.UUID
    team_id: uuid.UUID
    role: str
    joined_at: datetime
    admin: Optional[AdminSummaryDTO]

    @classmethod
    def from_entity(cls, member: TeamMember, admins: Dict[uuid.UUID, Admin]) -> "TeamMemberDTO":
        admin = admins.get(member.admin_id)
        return cls(
            id=member.id,
            team_id=member.team_id,
            role=member.role.value,
            joined_at=member.joined_at,
            admin=AdminSummaryDTO.from_admin(admin) if admin else None,
        )


@dataclass
class InvitationDTO:
    """DTO for an invitation."""

    id: uuid.UUID
    email: str
    role: str
    status: str
    expires_at: datetime
    created_at: datetime

    @classmethod
    def from_entity(cls, invitation: TeamInvitation) -> "InvitationDTO":
        return cls(
            id=invitation.id,
            email=str(invitation.email),
            role=invitation.role.value,
            status=invitation.status.value,
            expires_at=invitation.expires_at,
            created_at=invitation.created_at,
        )


@dataclass
class TeamOverviewDTO:
    """DTO for the team overview response."""

    has_team: bool
    team: Optional[TeamDTO] = None
    user_role: Optional[str] = None
    is_owner: bool = False
    members: List[TeamMemberDTO] = field(default_factory=list)
    pending_invitations: List[InvitationDTO] = field(default_factory=list)


@dataclass
class TeamMembersDTO:
    """DTO for the members list response."""

    members: List[TeamMemberDTO]
    current_user_role: str


@dataclass
class InvitationCreatedDTO:
    """DTO for the invite response."""

    invitation: InvitationDTO
    email_sent: bool


@dataclass
class TeamRefDTO:
    """DTO for the short team description embedded in other responses."""

    id: uuid.UUID
    name: str
    domain: str

    @classmethod
    def from_entity(cls, team: Team) -> "TeamRefDTO":
        return cls(id=team.id, name=team.name, domain=team.domain)


@dataclass
class InvitationPreviewDTO:
    """DTO for the public invitation preview."""

    id: uuid.UUID
    email: str
    role: str
    expires_at: datetime
    team: TeamRefDTO
    inviter: Optional[AdminSummaryDTO]


@dataclass
class AcceptedInvitationDTO:
    """DTO for the accept response."""

    team: TeamRefDTO
    role: str

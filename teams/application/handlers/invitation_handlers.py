"""
Invitation handlers.

Invitations are created by team owners/admins, previewed anonymously
through their token and accepted by the invited admin.
"""
import logging
from typing import List

from accounts.application.services.identity_gate import IdentityGate
from accounts.ports.admin_repository import AdminRepository
from activity.application.services.activity_journal import ActivityJournal
from core.domain.exceptions import (
    AlreadyTeamMemberError,
    InvalidInvitationError,
    InvitationNotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from core.domain.value_objects import ActivityType, Email, TeamScope
from core.infrastructure.events import event_bus
from notifications.application.services.dispatcher import NotificationDispatcher
from teams.application.commands.invitation_commands import (
    AcceptInvitationCommand,
    CancelInvitationCommand,
    InviteMemberCommand,
)
from teams.application.dto.team_dto import (
    AcceptedInvitationDTO,
    AdminSummaryDTO,
    InvitationCreatedDTO,
    InvitationDTO,
    InvitationPreviewDTO,
    TeamRefDTO,
)
from teams.application.handlers.team_handlers import parse_assignable_role, parse_uuid, require_team
from teams.application.queries.team_queries import ListInvitationsQuery, PreviewInvitationQuery
from teams.domain.events import MemberInvited, MemberJoined
from teams.domain.policy import Action, can
from teams.domain.team_invitation import DEFAULT_TTL_DAYS, TeamInvitation
from teams.domain.team_member import TeamMember
from teams.ports.team_invitation_repository import TeamInvitationRepository
from teams.ports.team_member_repository import TeamMemberRepository
from teams.ports.team_repository import TeamRepository

logger = logging.getLogger(__name__)


class InviteMemberHandler:
    """Handler for InviteMemberCommand."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        team_repository: TeamRepository,
        member_repository: TeamMemberRepository,
        invitation_repository: TeamInvitationRepository,
        admin_repository: AdminRepository,
        dispatcher: NotificationDispatcher,
        journal: ActivityJournal,
        ttl_days: int = DEFAULT_TTL_DAYS,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.team_repository = team_repository
        self.member_repository = member_repository
        self.invitation_repository = invitation_repository
        self.admin_repository = admin_repository
        self.dispatcher = dispatcher
        self.journal = journal
        self.ttl_days = ttl_days

    async def handle(self, command: InviteMemberCommand) -> InvitationCreatedDTO:
        """
        Handle invite command.

        A failed invitation email does not undo the invitation; the
        outcome is reported as ``email_sent``.

        Raises:
            ValidationFailedError: Bad email, role, domain, self-invite,
                existing member or pending invitation
            TeamNotFoundError: Caller has no team
            PermissionDeniedError: Caller is a plain member
        """
        actor = await self.identity_gate.require_actor(command.user_id)
        if not isinstance(command.email, str) or not command.email.strip():
            raise ValidationFailedError("Email is required")
        if not Email.is_valid(command.email):
            raise ValidationFailedError("Invalid email format")
        email = Email.parse(command.email)
        role = parse_assignable_role(command.role)

        team = await require_team(self.team_repository, actor)
        if not can(actor, Action.INVITE_MEMBER, team):
            raise PermissionDeniedError("Only team owners and admins can invite members")
        if not team.accepts_email_domain(email.domain):
            raise ValidationFailedError(f"Only @{team.domain} emails can be invited to this team")
        if email == actor.admin.email:
            raise ValidationFailedError("You cannot invite yourself")

        invitee = await self.admin_repository.find_by_email(email.value)
        if invitee is not None:
            membership = await self.member_repository.find_by_admin(invitee.id)
            if membership is not None and membership.team_id == team.id:
                raise ValidationFailedError("User is already a team member")
        if await self.invitation_repository.find_pending(team.id, email.value) is not None:
            raise ValidationFailedError("An invitation is already pending for this email")

        invitation = await self.invitation_repository.save(
            TeamInvitation.create(
                team_id=team.id,
                email=email,
                role=role,
                invited_by=actor.admin_id,
                ttl_days=self.ttl_days,
            )
        )

        delivery = await self.dispatcher.send_invitation(invitation, team, actor.admin)

        await self.journal.record(
            TeamScope(team_id=team.id),
            actor.admin_id,
            ActivityType.MEMBER_INVITED,
            f"Invited {email} to join the team as {role.value}",
            {"invited_email": email.value, "role": role.value},
        )
        await event_bus.publish(
            MemberInvited(
                team_id=team.id, invitation_id=invitation.id, email=email.value, role=role.value
            )
        )
        return InvitationCreatedDTO(
            invitation=InvitationDTO.from_entity(invitation), email_sent=delivery.success
        )


class ListInvitationsHandler:
    """Handler for ListInvitationsQuery."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        team_repository: TeamRepository,
        invitation_repository: TeamInvitationRepository,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.team_repository = team_repository
        self.invitation_repository = invitation_repository

    async def handle(self, query: ListInvitationsQuery) -> List[InvitationDTO]:
        """Pending invitations of the caller's team, newest first."""
        actor = await self.identity_gate.require_actor(query.user_id)
        team = await require_team(self.team_repository, actor)
        invitations = await self.invitation_repository.list_pending(team.id)
        return [InvitationDTO.from_entity(invitation) for invitation in invitations]


class CancelInvitationHandler:
    """Handler for CancelInvitationCommand."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        team_repository: TeamRepository,
        invitation_repository: TeamInvitationRepository,
        journal: ActivityJournal,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.team_repository = team_repository
        self.invitation_repository = invitation_repository
        self.journal = journal

    async def handle(self, command: CancelInvitationCommand) -> None:
        """
        Handle cancel command by revoking the invitation.

        Raises:
            ValidationFailedError: Missing invitation id
            TeamNotFoundError: Caller has no team
            PermissionDeniedError: Caller is a plain member
            InvitationNotFoundError: No pending invitation with that id in the team
        """
        actor = await self.identity_gate.require_actor(command.user_id)
        if not command.invitation_id:
            raise ValidationFailedError("Invitation ID is required")

        team = await require_team(self.team_repository, actor)
        if not can(actor, Action.CANCEL_INVITATION, team):
            raise PermissionDeniedError("Only team owners and admins can cancel invitations")

        invitation_id = parse_uuid(command.invitation_id)
        invitation = (
            await self.invitation_repository.find_by_id(invitation_id) if invitation_id else None
        )
        if invitation is None or invitation.team_id != team.id or not invitation.is_pending:
            raise InvitationNotFoundError()

        await self.invitation_repository.save(invitation.revoke())
        await self.journal.record(
            TeamScope(team_id=team.id),
            actor.admin_id,
            ActivityType.INVITATION_REVOKED,
            f"Cancelled invitation for {invitation.email}",
            {"invitation_id": str(invitation.id), "email": str(invitation.email)},
        )


class PreviewInvitationHandler:
    """Handler for PreviewInvitationQuery."""

    def __init__(
        self,
        team_repository: TeamRepository,
        invitation_repository: TeamInvitationRepository,
        admin_repository: AdminRepository,
    ):
        """Initialize handler with collaborators."""
        self.team_repository = team_repository
        self.invitation_repository = invitation_repository
        self.admin_repository = admin_repository

    async def handle(self, query: PreviewInvitationQuery) -> InvitationPreviewDTO:
        """
        Handle preview query. No session is required.

        Raises:
            ValidationFailedError: Missing token
            InvitationNotFoundError: Unknown token
            InvalidInvitationError: Expired or no longer pending
        """
        if not query.token:
            raise ValidationFailedError("Token is required")

        invitation = await self.invitation_repository.find_by_token(query.token)
        if invitation is None:
            raise InvitationNotFoundError()
        if invitation.is_expired():
            raise InvalidInvitationError("This invitation has expired", details={"expired": True})
        if not invitation.is_pending:
            raise InvalidInvitationError(
                f"This invitation has already been {invitation.status.value}",
                details={"status": invitation.status.value},
            )

        team = await self.team_repository.find_by_id(invitation.team_id)
        if team is None:
            raise InvitationNotFoundError()
        inviter = (
            await self.admin_repository.find_by_id(invitation.invited_by)
            if invitation.invited_by
            else None
        )
        return InvitationPreviewDTO(
            id=invitation.id,
            email=str(invitation.email),
            role=invitation.role.value,
            expires_at=invitation.expires_at,
            team=TeamRefDTO.from_entity(team),
            inviter=AdminSummaryDTO.from_admin(inviter) if inviter else None,
        )


class AcceptInvitationHandler:
    """Handler for AcceptInvitationCommand."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        team_repository: TeamRepository,
        member_repository: TeamMemberRepository,
        invitation_repository: TeamInvitationRepository,
        journal: ActivityJournal,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.team_repository = team_repository
        self.member_repository = member_repository
        self.invitation_repository = invitation_repository
        self.journal = journal

    async def handle(self, command: AcceptInvitationCommand) -> AcceptedInvitationDTO:
        """
        Handle accept command.

        Raises:
            ValidationFailedError: Missing token
            InvalidInvitationError: Unknown, expired or used token
            PermissionDeniedError: Invitation addressed to another email
            AlreadyTeamMemberError: Caller already belongs to a team
        """
        actor = await self.identity_gate.require_actor(command.user_id)
        if not command.token:
            raise ValidationFailedError("Invitation token is required")

        invitation = await self.invitation_repository.find_by_token(command.token)
        if invitation is None or not invitation.is_actionable():
            raise InvalidInvitationError()
        if invitation.email != actor.admin.email:
            raise PermissionDeniedError("This invitation was sent to a different email address")
        if actor.has_team:
            if actor.team_id == invitation.team_id:
                raise AlreadyTeamMemberError("You are already a member of this team")
            raise AlreadyTeamMemberError("You are already a member of another team")

        team = await self.team_repository.find_by_id(invitation.team_id)
        if team is None:
            raise InvalidInvitationError()

        await self.member_repository.save(
            TeamMember.create(team_id=team.id, admin_id=actor.admin_id, role=invitation.role)
        )
        await self.invitation_repository.save(invitation.accept())

        await self.journal.record(
            TeamScope(team_id=team.id),
            actor.admin_id,
            ActivityType.MEMBER_JOINED,
            f"{actor.admin.email} joined the team as {invitation.role.value}",
            {
                "invited_by": str(invitation.invited_by) if invitation.invited_by else None,
                "role": invitation.role.value,
            },
        )
        await event_bus.publish(
            MemberJoined(team_id=team.id, admin_id=actor.admin_id, role=invitation.role.value)
        )
        logger.info(
            "Invitation accepted",
            extra={"team_id": str(team.id), "admin_id": str(actor.admin_id)},
        )
        return AcceptedInvitationDTO(team=TeamRefDTO.from_entity(team), role=invitation.role.value)

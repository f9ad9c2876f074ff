"""
Team and membership handlers.
"""
import logging
import uuid
from typing import Any, Optional

from accounts.application.services.identity_gate import IdentityGate
from accounts.domain.actor import Actor
from accounts.ports.admin_repository import AdminRepository
from activity.application.services.activity_journal import ActivityJournal
from core.domain.exceptions import (
    AlreadyTeamMemberError,
    OwnerImmutableError,
    PermissionDeniedError,
    TeamMemberNotFoundError,
    TeamNotFoundError,
    ValidationFailedError,
)
from core.domain.value_objects import ActivityType, TeamRole, TeamScope
from core.infrastructure.events import event_bus
from notifications.domain.partner_program import PartnerProgramRegistry
from teams.application.commands.team_commands import (
    ChangeMemberRoleCommand,
    CreateTeamCommand,
    RemoveMemberCommand,
    UpdateTeamCommand,
)
from teams.application.dto.team_dto import (
    InvitationDTO,
    TeamDTO,
    TeamMemberDTO,
    TeamMembersDTO,
    TeamOverviewDTO,
    TeamRefDTO,
)
from teams.application.queries.team_queries import GetTeamQuery, ListMembersQuery
from teams.domain.events import MemberRemoved, MemberRoleChanged, TeamCreated
from teams.domain.policy import Action, can
from teams.domain.services import TeamEligibility, TeamNaming
from teams.domain.team import Team
from teams.domain.team_member import TeamMember
from teams.ports.team_invitation_repository import TeamInvitationRepository
from teams.ports.team_member_repository import TeamMemberRepository
from teams.ports.team_repository import TeamRepository

logger = logging.getLogger(__name__)


def parse_uuid(raw: Any) -> Optional[uuid.UUID]:
    """Parse an id from a request body, None when malformed."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


def parse_assignable_role(raw: Any) -> TeamRole:
    """
    Parse a role that may be granted to a member.

    Raises:
        ValidationFailedError: Unless the role is admin or member
    """
    for role in TeamRole.assignable():
        if raw == role.value:
            return role
    raise ValidationFailedError("Invalid role")


async def require_team(team_repository: TeamRepository, actor: Actor) -> Team:
    """
    Load the caller's team.

    Raises:
        TeamNotFoundError: If the caller has no team
    """
    if not actor.has_team:
        raise TeamNotFoundError()
    team = await team_repository.find_by_id(actor.team_id)
    if team is None:
        raise TeamNotFoundError()
    return team


class GetTeamHandler:
    """Handler for GetTeamQuery."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        team_repository: TeamRepository,
        member_repository: TeamMemberRepository,
        invitation_repository: TeamInvitationRepository,
        admin_repository: AdminRepository,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.team_repository = team_repository
        self.member_repository = member_repository
        self.invitation_repository = invitation_repository
        self.admin_repository = admin_repository

    async def handle(self, query: GetTeamQuery) -> TeamOverviewDTO:
        """
        Handle get team query.

        An admin without a team gets ``has_team=False`` rather than an error.
        """
        actor = await self.identity_gate.require_actor(query.user_id)
        if not actor.has_team:
            return TeamOverviewDTO(has_team=False)

        team = await require_team(self.team_repository, actor)
        members = await self.member_repository.list_by_team(team.id)
        invitations = await self.invitation_repository.list_pending(team.id)
        admins = await self.admin_repository.find_many(member.admin_id for member in members)

        return TeamOverviewDTO(
            has_team=True,
            team=TeamDTO.from_entity(team),
            user_role=actor.role.value,
            is_owner=team.owner_id == actor.admin_id,
            members=[TeamMemberDTO.from_entity(member, admins) for member in members],
            pending_invitations=[InvitationDTO.from_entity(inv) for inv in invitations],
        )


class UpdateTeamHandler:
    """Handler for UpdateTeamCommand."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        team_repository: TeamRepository,
        journal: ActivityJournal,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.team_repository = team_repository
        self.journal = journal

    async def handle(self, command: UpdateTeamCommand) -> TeamDTO:
        """
        Handle rename command.

        Raises:
            ValidationFailedError: If the name is missing or blank
            PermissionDeniedError: Unless the caller owns a team
        """
        actor = await self.identity_gate.require_actor(command.user_id)
        if not isinstance(command.name, str) or not command.name.strip():
            raise ValidationFailedError("Team name is required")

        team = await self.team_repository.find_by_id(actor.team_id) if actor.has_team else None
        if team is None or not can(actor, Action.UPDATE_TEAM, team):
            raise PermissionDeniedError("Only team owners can update team settings")

        name = command.name.strip()
        team = await self.team_repository.save(team.rename(name))

        await self.journal.record(
            TeamScope(team_id=team.id),
            actor.admin_id,
            ActivityType.TEAM_SETTINGS_UPDATED,
            f'Team name updated to "{name}"',
            {"new_name": name},
        )
        return TeamDTO.from_entity(team)


class CreateTeamHandler:
    """Handler for CreateTeamCommand."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        team_repository: TeamRepository,
        journal: ActivityJournal,
        eligibility: TeamEligibility,
        programs: PartnerProgramRegistry,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.team_repository = team_repository
        self.journal = journal
        self.eligibility = eligibility
        self.programs = programs

    async def handle(self, command: CreateTeamCommand) -> TeamRefDTO:
        """
        Handle create team command.

        The founder's seat counter and unscoped licenses move to the
        new team; the solo counter is zeroed.

        Raises:
            AlreadyTeamMemberError: If the caller already has a team
            PermissionDeniedError: If the caller's domain may not found teams
        """
        actor = await self.identity_gate.require_actor(command.user_id)
        admin = actor.admin
        if actor.has_team:
            raise AlreadyTeamMemberError()
        if not self.eligibility.can_create_team(admin):
            raise PermissionDeniedError(self.eligibility.rejection_message())

        name = command.name.strip() if isinstance(command.name, str) else ""
        if not name:
            program = self.programs.by_domain(admin.email.domain)
            name = TeamNaming.default_name(admin, program.name if program else None)

        team = Team.create(
            name=name,
            domain=admin.email.domain,
            owner_id=admin.id,
            purchased_license_count=admin.purchased_license_count,
        )
        owner = TeamMember.create(team_id=team.id, admin_id=admin.id, role=TeamRole.OWNER)
        moved = await self.team_repository.found(team, owner)

        await self.journal.record(
            TeamScope(team_id=team.id),
            admin.id,
            ActivityType.TEAM_SETTINGS_UPDATED,
            f'Created team "{team.name}"',
            {"action": "team_created"},
        )
        await event_bus.publish(
            TeamCreated(team_id=team.id, owner_id=admin.id, transferred_licenses=moved)
        )
        logger.info(
            "Team created",
            extra={"team_id": str(team.id), "owner_id": str(admin.id), "moved_licenses": moved},
        )
        return TeamRefDTO.from_entity(team)


class ListMembersHandler:
    """Handler for ListMembersQuery."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        team_repository: TeamRepository,
        member_repository: TeamMemberRepository,
        admin_repository: AdminRepository,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.team_repository = team_repository
        self.member_repository = member_repository
        self.admin_repository = admin_repository

    async def handle(self, query: ListMembersQuery) -> TeamMembersDTO:
        """Handle members query, oldest membership first."""
        actor = await self.identity_gate.require_actor(query.user_id)
        team = await require_team(self.team_repository, actor)

        members = await self.member_repository.list_by_team(team.id)
        admins = await self.admin_repository.find_many(member.admin_id for member in members)
        return TeamMembersDTO(
            members=[TeamMemberDTO.from_entity(member, admins) for member in members],
            current_user_role=actor.role.value,
        )


class _MemberCommandHandler:
    """Shared lookup for owner-only operations on another member."""

    denied_message = "Permission denied"

    def __init__(
        self,
        identity_gate: IdentityGate,
        team_repository: TeamRepository,
        member_repository: TeamMemberRepository,
        admin_repository: AdminRepository,
        journal: ActivityJournal,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.team_repository = team_repository
        self.member_repository = member_repository
        self.admin_repository = admin_repository
        self.journal = journal

    async def _load_target(self, actor: Actor, raw_member_id: Any) -> TeamMember:
        team = await require_team(self.team_repository, actor)
        if actor.role != TeamRole.OWNER:
            raise PermissionDeniedError(self.denied_message)

        member_id = parse_uuid(raw_member_id)
        member = await self.member_repository.find_by_id(member_id) if member_id else None
        if member is None or member.team_id != team.id:
            raise TeamMemberNotFoundError()
        return member

    async def _email_of(self, member: TeamMember) -> str:
        admin = await self.admin_repository.find_by_id(member.admin_id)
        return str(admin.email) if admin else str(member.admin_id)


class ChangeMemberRoleHandler(_MemberCommandHandler):
    """Handler for ChangeMemberRoleCommand."""

    denied_message = "Only team owners can change member roles"

    async def handle(self, command: ChangeMemberRoleCommand) -> None:
        """
        Handle change role command.

        Raises:
            ValidationFailedError: Missing id/role or role not assignable
            TeamNotFoundError: Caller has no team
            PermissionDeniedError: Caller is not the owner
            TeamMemberNotFoundError: Target not in the caller's team
            OwnerImmutableError: Target is the owner
        """
        actor = await self.identity_gate.require_actor(command.user_id)
        if not command.member_id or not command.role:
            raise ValidationFailedError("Member ID and role are required")
        role = parse_assignable_role(command.role)

        member = await self._load_target(actor, command.member_id)
        if member.is_owner:
            raise OwnerImmutableError()
        if not can(actor, Action.CHANGE_ROLE, member):
            raise PermissionDeniedError(self.denied_message)

        old_role = member.role.value
        await self.member_repository.save(member.with_role(role))

        email = await self._email_of(member)
        await self.journal.record(
            TeamScope(team_id=member.team_id),
            actor.admin_id,
            ActivityType.MEMBER_ROLE_CHANGED,
            f"Changed {email}'s role from {old_role} to {role.value}",
            {"member_id": str(member.admin_id), "old_role": old_role, "new_role": role.value},
        )
        await event_bus.publish(
            MemberRoleChanged(
                team_id=member.team_id, member_id=member.id, old_role=old_role, new_role=role.value
            )
        )


class RemoveMemberHandler(_MemberCommandHandler):
    """Handler for RemoveMemberCommand."""

    denied_message = "Only team owners can remove members"

    async def handle(self, command: RemoveMemberCommand) -> None:
        """
        Handle remove member command.

        The removed admin keeps their account; their licenses stay with the team.

        Raises:
            ValidationFailedError: Missing member id
            TeamNotFoundError: Caller has no team
            PermissionDeniedError: Caller is not the owner
            TeamMemberNotFoundError: Target not in the caller's team
            OwnerImmutableError: Target is the owner
        """
        actor = await self.identity_gate.require_actor(command.user_id)
        if not command.member_id:
            raise ValidationFailedError("Member ID is required")

        member = await self._load_target(actor, command.member_id)
        if member.is_owner:
            raise OwnerImmutableError("Cannot remove team owner")
        if not can(actor, Action.REMOVE_MEMBER, member):
            raise PermissionDeniedError(self.denied_message)

        email = await self._email_of(member)
        await self.member_repository.delete(member.id)

        await self.journal.record(
            TeamScope(team_id=member.team_id),
            actor.admin_id,
            ActivityType.MEMBER_REMOVED,
            f"Removed {email} from the team",
            {"removed_member_id": str(member.admin_id), "removed_member_email": email},
        )
        await event_bus.publish(
            MemberRemoved(team_id=member.team_id, member_id=member.id, admin_id=member.admin_id)
        )

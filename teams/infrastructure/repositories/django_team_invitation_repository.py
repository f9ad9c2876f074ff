"""
Django implementation of TeamInvitationRepository port.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.utils import timezone

from core.domain.value_objects import Email, InvitationStatus, TeamRole
from teams.domain.team_invitation import TeamInvitation
from teams.infrastructure.models import TeamInvitation as TeamInvitationModel
from teams.ports.team_invitation_repository import TeamInvitationRepository


class DjangoTeamInvitationRepository(TeamInvitationRepository):
    """Django ORM implementation of TeamInvitationRepository."""

    def _to_domain(self, model: TeamInvitationModel) -> TeamInvitation:
        """Convert Django model to domain entity."""
        return TeamInvitation(
            id=model.id,
            team_id=model.team_id,
            email=Email(model.email),
            role=TeamRole(model.role),
            token=model.token,
            status=InvitationStatus(model.status),
            invited_by=model.invited_by_id,
            expires_at=model.expires_at,
            created_at=model.created_at,
            accepted_at=model.accepted_at,
        )

    def _actionable(self, team_id: uuid.UUID):
        return TeamInvitationModel.objects.filter(
            team_id=team_id,
            status=InvitationStatus.PENDING.value,
            expires_at__gt=timezone.now(),
        )

    @sync_to_async
    def save(self, invitation: TeamInvitation) -> TeamInvitation:
        """Insert or update an invitation."""
        model, _ = TeamInvitationModel.objects.update_or_create(
            id=invitation.id,
            defaults={
                "team_id": invitation.team_id,
                "email": str(invitation.email),
                "role": invitation.role.value,
                "token": invitation.token,
                "status": invitation.status.value,
                "invited_by_id": invitation.invited_by,
                "expires_at": invitation.expires_at,
                "created_at": invitation.created_at,
                "accepted_at": invitation.accepted_at,
            },
        )
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, invitation_id: uuid.UUID) -> Optional[TeamInvitation]:
        """Find an invitation by ID."""
        try:
            return self._to_domain(TeamInvitationModel.objects.get(id=invitation_id))
        except TeamInvitationModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_token(self, token: str) -> Optional[TeamInvitation]:
        """Find an invitation by token."""
        model = TeamInvitationModel.objects.filter(token=token).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_pending(self, team_id: uuid.UUID, email: str) -> Optional[TeamInvitation]:
        """Find the unexpired pending invitation of an email to a team."""
        model = self._actionable(team_id).filter(email=email).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def list_pending(self, team_id: uuid.UUID) -> List[TeamInvitation]:
        """List unexpired pending invitations of a team, newest first."""
        models = self._actionable(team_id).order_by("-created_at")
        return [self._to_domain(model) for model in models]

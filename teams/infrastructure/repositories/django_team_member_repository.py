"""
Django implementation of TeamMemberRepository port.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from core.domain.exceptions import AlreadyTeamMemberError
from core.domain.value_objects import TeamRole
from teams.domain.team_member import TeamMember
from teams.infrastructure.models import TeamMember as TeamMemberModel
from teams.ports.team_member_repository import TeamMemberRepository


class DjangoTeamMemberRepository(TeamMemberRepository):
    """
    Django ORM implementation of TeamMemberRepository.

    The unique ``admin`` column is the last line of defence against an
    admin joining two teams concurrently.
    """

    def _to_domain(self, model: TeamMemberModel) -> TeamMember:
        """Convert Django model to domain entity."""
        return TeamMember(
            id=model.id,
            team_id=model.team_id,
            admin_id=model.admin_id,
            role=TeamRole(model.role),
            joined_at=model.joined_at,
        )

    @sync_to_async
    def save(self, member: TeamMember) -> TeamMember:
        """Insert or update a membership."""
        try:
            with transaction.atomic():
                model, _ = TeamMemberModel.objects.update_or_create(
                    id=member.id,
                    defaults={
                        "team_id": member.team_id,
                        "admin_id": member.admin_id,
                        "role": member.role.value,
                        "joined_at": member.joined_at,
                    },
                )
        except IntegrityError as e:
            raise AlreadyTeamMemberError() from e
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, member_id: uuid.UUID) -> Optional[TeamMember]:
        """Find a membership by ID."""
        try:
            return self._to_domain(TeamMemberModel.objects.get(id=member_id))
        except TeamMemberModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_admin(self, admin_id: uuid.UUID) -> Optional[TeamMember]:
        """Find the membership of an admin."""
        model = TeamMemberModel.objects.filter(admin_id=admin_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def list_by_team(self, team_id: uuid.UUID) -> List[TeamMember]:
        """List memberships of a team, oldest first."""
        models = TeamMemberModel.objects.filter(team_id=team_id).order_by("joined_at")
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def delete(self, member_id: uuid.UUID) -> None:
        """Delete a membership."""
        TeamMemberModel.objects.filter(id=member_id).delete()

"""
Django implementation of TeamRepository port.
"""
import logging
import uuid
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction
from django.db.models import F

from accounts.infrastructure.models import Admin as AdminModel
from core.domain.exceptions import AlreadyTeamMemberError
from licenses.infrastructure.models import License as LicenseModel
from teams.domain.team import Team
from teams.domain.team_member import TeamMember
from teams.infrastructure.models import Team as TeamModel
from teams.infrastructure.models import TeamMember as TeamMemberModel
from teams.ports.team_repository import TeamRepository

logger = logging.getLogger(__name__)


class DjangoTeamRepository(TeamRepository):
    """Django ORM implementation of TeamRepository."""

    def _to_domain(self, model: TeamModel) -> Team:
        """Convert Django model to domain entity."""
        return Team(
            id=model.id,
            name=model.name,
            domain=model.domain,
            owner_id=model.owner_id,
            purchased_license_count=model.purchased_license_count,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @sync_to_async
    def save(self, team: Team) -> Team:
        """Insert or update a team."""
        model, _ = TeamModel.objects.update_or_create(
            id=team.id,
            defaults={
                "name": team.name,
                "domain": team.domain,
                "owner_id": team.owner_id,
                "purchased_license_count": team.purchased_license_count,
                "created_at": team.created_at,
                "updated_at": team.updated_at,
            },
        )
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, team_id: uuid.UUID) -> Optional[Team]:
        """Find a team by ID."""
        try:
            return self._to_domain(TeamModel.objects.get(id=team_id))
        except TeamModel.DoesNotExist:
            return None

    @sync_to_async
    def found(self, team: Team, owner: TeamMember) -> int:
        """Insert team and owner, adopt the owner's solo ledger."""
        try:
            with transaction.atomic():
                TeamModel.objects.create(
                    id=team.id,
                    name=team.name,
                    domain=team.domain,
                    owner_id=team.owner_id,
                    purchased_license_count=team.purchased_license_count,
                    created_at=team.created_at,
                    updated_at=team.updated_at,
                )
                TeamMemberModel.objects.create(
                    id=owner.id,
                    team_id=team.id,
                    admin_id=owner.admin_id,
                    role=owner.role.value,
                    joined_at=owner.joined_at,
                )
                moved = LicenseModel.objects.filter(
                    admin_id=owner.admin_id, team__isnull=True
                ).update(team_id=team.id, performed_by_id=owner.admin_id)
                AdminModel.objects.filter(id=owner.admin_id).update(purchased_license_count=0)
        except IntegrityError as e:
            logger.warning(
                "Team founding rejected", extra={"admin_id": str(owner.admin_id), "error": str(e)}
            )
            raise AlreadyTeamMemberError() from e
        return moved

    @sync_to_async
    def add_purchased_seats(self, team_id: uuid.UUID, count: int) -> int:
        """Atomically add seats to the team counter."""
        TeamModel.objects.filter(id=team_id).update(
            purchased_license_count=F("purchased_license_count") + count
        )
        return TeamModel.objects.values_list("purchased_license_count", flat=True).get(id=team_id)

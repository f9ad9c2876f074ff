"""
Seat ledger service.

Resolves the purchased counter of a scope (team counter or solo admin
counter) and combines it with ledger counts.
"""
import logging

from accounts.ports.admin_repository import AdminRepository
from core.domain.exceptions import AdminNotFoundError, TeamNotFoundError
from core.domain.value_objects import Scope, TeamScope
from licenses.domain.services import SeatAccount
from licenses.ports.license_repository import LicenseRepository
from teams.ports.team_repository import TeamRepository

logger = logging.getLogger(__name__)


class SeatLedger:
    """Seat counters of owner scopes."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        admin_repository: AdminRepository,
        team_repository: TeamRepository,
    ):
        self.license_repository = license_repository
        self.admin_repository = admin_repository
        self.team_repository = team_repository

    async def purchased(self, scope: Scope) -> int:
        """
        Purchased seat counter of a scope.

        Raises:
            TeamNotFoundError: Team scope without a team row
            AdminNotFoundError: Solo scope without an admin row
        """
        if isinstance(scope, TeamScope):
            team = await self.team_repository.find_by_id(scope.team_id)
            if team is None:
                raise TeamNotFoundError()
            return team.purchased_license_count

        admin = await self.admin_repository.find_by_id(scope.admin_id)
        if admin is None:
            raise AdminNotFoundError()
        return admin.purchased_license_count

    async def account(self, scope: Scope) -> SeatAccount:
        """Current seat counters of a scope."""
        purchased = await self.purchased(scope)
        assigned, activated = await self.license_repository.count_by_scope(scope)
        return SeatAccount(purchased=purchased, assigned=assigned, activated=activated)

    async def credit(self, scope: Scope, count: int) -> int:
        """
        Add purchased seats to a scope.

        Returns:
            The new purchased total
        """
        if isinstance(scope, TeamScope):
            total = await self.team_repository.add_purchased_seats(scope.team_id, count)
        else:
            total = await self.admin_repository.add_purchased_seats(scope.admin_id, count)
        logger.info(
            "Seats credited",
            extra={"scope": scope.kind, "owner_id": str(scope.owner_id), "count": count, "total": total},
        )
        return total

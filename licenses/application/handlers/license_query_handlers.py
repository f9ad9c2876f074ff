"""
License read handlers.
"""
from datetime import datetime, timezone

from accounts.application.services.identity_gate import IdentityGate
from accounts.ports.admin_repository import AdminRepository
from licenses.application.dto.license_dto import (
    LicenseDTO,
    LicenseExportDTO,
    LicenseListDTO,
    SeatStatisticsDTO,
)
from licenses.application.queries.license_queries import (
    ExportLicensesQuery,
    GetLicenseStatsQuery,
    ListLicensesQuery,
)
from licenses.application.services.seat_ledger import SeatLedger
from licenses.domain.csv_format import render_export
from licenses.domain.services import SeatAccount
from licenses.ports.license_repository import LicenseRepository
from notifications.domain.partner_program import PartnerProgramRegistry


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        license_repository: LicenseRepository,
        admin_repository: AdminRepository,
        seat_ledger: SeatLedger,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.license_repository = license_repository
        self.admin_repository = admin_repository
        self.seat_ledger = seat_ledger

    async def handle(self, query: ListLicensesQuery) -> LicenseListDTO:
        """
        Handle list licenses query.

        Returns:
            LicenseListDTO with licenses newest first and seat statistics
        """
        actor = await self.identity_gate.require_actor(query.user_id)
        scope = actor.scope

        licenses = await self.license_repository.list_by_scope(scope)
        purchased = await self.seat_ledger.purchased(scope)
        admins = await self.admin_repository.find_many(
            license.performed_by or license.admin_id for license in licenses
        )

        return LicenseListDTO(
            licenses=[LicenseDTO.from_entity(license, admins) for license in licenses],
            statistics=SeatStatisticsDTO.from_account(
                SeatAccount.from_licenses(purchased, licenses)
            ),
            has_team=actor.has_team,
        )


class GetLicenseStatsHandler:
    """Handler for GetLicenseStatsQuery."""

    def __init__(self, identity_gate: IdentityGate, seat_ledger: SeatLedger):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.seat_ledger = seat_ledger

    async def handle(self, query: GetLicenseStatsQuery) -> SeatStatisticsDTO:
        """Handle stats query."""
        actor = await self.identity_gate.require_actor(query.user_id)
        account = await self.seat_ledger.account(actor.scope)
        return SeatStatisticsDTO.from_account(account)


class ExportLicensesHandler:
    """Handler for ExportLicensesQuery."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        license_repository: LicenseRepository,
        programs: PartnerProgramRegistry,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.license_repository = license_repository
        self.programs = programs

    async def handle(self, query: ExportLicensesQuery) -> LicenseExportDTO:
        """
        Handle export query.

        Returns:
            LicenseExportDTO with a dated, partner-branded filename
        """
        actor = await self.identity_gate.require_actor(query.user_id)
        licenses = await self.license_repository.list_by_scope(actor.scope)

        program = self.programs.for_email(str(actor.admin.email))
        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        return LicenseExportDTO(
            filename=f"{program.slug}-licenses-{today}.csv",
            content=render_export(licenses),
        )

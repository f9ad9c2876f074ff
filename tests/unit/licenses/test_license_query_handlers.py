"""
Unit tests for license read handlers and the email status sync.
"""
from datetime import datetime, timezone

import pytest

from core.domain.value_objects import EmailStatus, SoloScope, TeamRole, TeamScope
from licenses.application.commands.sync_email_statuses import SyncEmailStatusesCommand
from licenses.application.handlers.email_status_handler import SyncEmailStatusesHandler
from licenses.application.handlers.license_query_handlers import (
    ExportLicensesHandler,
    GetLicenseStatsHandler,
    ListLicensesHandler,
)
from licenses.application.queries.license_queries import (
    ExportLicensesQuery,
    GetLicenseStatsQuery,
    ListLicensesQuery,
)


@pytest.mark.asyncio
class TestListLicensesHandler:
    """Tests for ListLicensesHandler."""

    async def test_list_solo(self, identity_gate, licenses, admins, seat_ledger, make_admin, make_license):
        admin = make_admin(seats=5)
        scope = SoloScope(admin_id=admin.id)
        make_license("a@x.com", scope, admin.id)
        make_license("b@x.com", scope, admin.id, activated=True)
        handler = ListLicensesHandler(identity_gate, licenses, admins, seat_ledger)

        result = await handler.handle(ListLicensesQuery(user_id=admin.user_id))

        assert result.has_team is False
        assert {license.email for license in result.licenses} == {"a@x.com", "b@x.com"}
        assert result.statistics.purchased == 5
        assert result.statistics.assigned == 2
        assert result.statistics.activated == 1
        assert result.statistics.available == 3
        assert result.licenses[0].added_by.name == "Ana Lopez"

    async def test_list_team_shows_every_member_license(
        self, identity_gate, licenses, admins, seat_ledger, make_admin, make_team, add_member, make_license
    ):
        """Test members see licenses added by anyone in the team."""
        owner = make_admin()
        member = make_admin(email="m@queencreekchamber.com", first_name="Ben", last_name="")
        team = make_team(owner, seats=4)
        add_member(team, member, TeamRole.MEMBER)
        scope = TeamScope(team_id=team.id)
        make_license("a@x.com", scope, owner.id)
        make_license("b@x.com", scope, member.id)
        make_license("solo@x.com", SoloScope(admin_id=member.id), member.id)
        handler = ListLicensesHandler(identity_gate, licenses, admins, seat_ledger)

        result = await handler.handle(ListLicensesQuery(user_id=member.user_id))

        assert result.has_team is True
        assert {license.email for license in result.licenses} == {"a@x.com", "b@x.com"}
        assert {license.added_by.name for license in result.licenses} == {"Ana Lopez", "Ben"}
        assert result.statistics.purchased == 4


@pytest.mark.asyncio
class TestGetLicenseStatsHandler:
    """Tests for GetLicenseStatsHandler."""

    async def test_stats(self, identity_gate, seat_ledger, make_admin, make_license):
        admin = make_admin(seats=3)
        scope = SoloScope(admin_id=admin.id)
        make_license("a@x.com", scope, admin.id, activated=True)
        make_license("b@x.com", scope, admin.id)
        handler = GetLicenseStatsHandler(identity_gate, seat_ledger)

        stats = await handler.handle(GetLicenseStatsQuery(user_id=admin.user_id))

        assert (stats.purchased, stats.assigned, stats.activated) == (3, 2, 1)
        assert (stats.pending, stats.available, stats.total) == (1, 1, 2)


@pytest.mark.asyncio
class TestExportLicensesHandler:
    """Tests for ExportLicensesHandler."""

    async def test_export_branded_filename(self, identity_gate, licenses, programs, make_admin, make_license):
        admin = make_admin(email="ana@mesaedc.org")
        make_license("a@x.com", SoloScope(admin_id=admin.id), admin.id)
        handler = ExportLicensesHandler(identity_gate, licenses, programs)

        export = await handler.handle(ExportLicensesQuery(user_id=admin.user_id))

        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        assert export.filename == f"mesa-edc-licenses-{today}.csv"
        assert export.content.splitlines()[0] == "Email,Status,Date Added,Activated At"
        assert export.content.splitlines()[1].startswith("a@x.com,Pending,")

    async def test_export_defaults_to_first_program(self, identity_gate, licenses, programs, make_admin):
        admin = make_admin(email="someone@gmail.com")
        handler = ExportLicensesHandler(identity_gate, licenses, programs)

        export = await handler.handle(ExportLicensesQuery(user_id=admin.user_id))

        assert export.filename.startswith("queen-creek-chamber-licenses-")
        assert export.content == "Email,Status,Date Added,Activated At\n"


@pytest.mark.asyncio
class TestSyncEmailStatusesHandler:
    """Tests for SyncEmailStatusesHandler."""

    async def test_sync_updates_statuses(
        self, identity_gate, licenses, dispatcher, provider, make_admin, make_license
    ):
        admin = make_admin()
        scope = SoloScope(admin_id=admin.id)
        delivered = make_license("a@x.com", scope, admin.id, message_id="m-1")
        lost = make_license("b@x.com", scope, admin.id, message_id="m-2")
        make_license("c@x.com", scope, admin.id)
        provider.statuses["m-1"] = "delivered"
        handler = SyncEmailStatusesHandler(identity_gate, licenses, dispatcher)

        result = await handler.handle(SyncEmailStatusesCommand(user_id=admin.user_id))

        assert result.synced == 2
        assert result.message == "Email statuses synced successfully"
        assert licenses.licenses[delivered.id].email_status == "delivered"
        assert licenses.licenses[lost.id].email_status == EmailStatus.UNKNOWN
        assert sorted(provider.status_lookups) == ["m-1", "m-2"]

    async def test_sync_nothing_to_do(self, identity_gate, licenses, dispatcher, make_admin):
        admin = make_admin()
        handler = SyncEmailStatusesHandler(identity_gate, licenses, dispatcher)

        result = await handler.handle(SyncEmailStatusesCommand(user_id=admin.user_id))

        assert result.synced == 0
        assert result.message == "No licenses with message IDs found"
        assert result.statuses == []

    async def test_sync_scope_without_session(self, identity_gate, licenses, dispatcher, provider, make_admin, make_team, make_license):
        """Test the background entry point takes a scope directly."""
        owner = make_admin()
        team = make_team(owner)
        license = make_license("a@x.com", TeamScope(team_id=team.id), owner.id, message_id="m-7")
        provider.statuses["m-7"] = "bounced"
        handler = SyncEmailStatusesHandler(identity_gate, licenses, dispatcher)

        result = await handler.sync_scope(TeamScope(team_id=team.id))

        assert result.statuses[0].status == "bounced"
        assert licenses.licenses[license.id].email_status == "bounced"

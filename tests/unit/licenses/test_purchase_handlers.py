"""
Unit tests for seat purchase handlers and the seat ledger.
"""
import uuid

import pytest

from core.domain.exceptions import (
    AdminNotFoundError,
    AuthenticationRequiredError,
    InvalidLicenseCountError,
    PaymentFailedError,
    PaymentVerificationError,
    TeamNotFoundError,
    ValidationFailedError,
)
from core.domain.value_objects import ActivityType, SoloScope, TeamRole, TeamScope
from licenses.application.commands.purchase_licenses import (
    CompletePurchaseCommand,
    TopUpLicensesCommand,
)
from licenses.application.handlers.purchase_handlers import (
    CompletePurchaseHandler,
    TopUpLicensesHandler,
    parse_license_count,
    sign_purchase,
)

SECRET = "callback-secret"


def callback(user_id, count="5", reference=None, signature=None, payment="successful"):
    return CompletePurchaseCommand(
        user_id=user_id,
        license_count=count,
        payment=payment,
        payment_type="license_purchase",
        reference=reference,
        signature=signature,
    )


class TestParseLicenseCount:
    """Tests for parse_license_count."""

    @pytest.mark.parametrize("raw, expected", [("5", 5), (" 12 ", 12), (3, 3)])
    def test_valid(self, raw, expected):
        assert parse_license_count(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "0", "-2", "2.5", "abc", 0, -1, True, 1.5])
    def test_invalid(self, raw):
        with pytest.raises(InvalidLicenseCountError):
            parse_license_count(raw)


@pytest.mark.asyncio
class TestSeatLedger:
    """Tests for SeatLedger."""

    async def test_account_and_credit_solo(self, seat_ledger, make_admin, make_license):
        admin = make_admin(seats=2)
        scope = SoloScope(admin_id=admin.id)
        make_license("a@x.com", scope, admin.id)

        account = await seat_ledger.account(scope)
        total = await seat_ledger.credit(scope, 3)

        assert (account.purchased, account.assigned, account.available) == (2, 1, 1)
        assert total == 5

    async def test_unknown_owners(self, seat_ledger):
        with pytest.raises(TeamNotFoundError):
            await seat_ledger.purchased(TeamScope(team_id=uuid.uuid4()))
        with pytest.raises(AdminNotFoundError):
            await seat_ledger.purchased(SoloScope(admin_id=uuid.uuid4()))


@pytest.mark.asyncio
class TestCompletePurchaseHandler:
    """Tests for CompletePurchaseHandler."""

    async def test_credit_solo_admin(self, identity_gate, seat_ledger, receipts, journal, make_admin, admins):
        admin = make_admin(seats=1)
        handler = CompletePurchaseHandler(identity_gate, seat_ledger, receipts, journal)

        result = await handler.handle(callback(admin.user_id, count="4"))

        assert result.licenses_added == 4
        assert result.total_licenses == 5
        assert result.scope_kind == "solo"
        assert admins.admins[admin.id].purchased_license_count == 5

    async def test_member_credits_team(
        self, identity_gate, seat_ledger, receipts, journal, activity, make_admin, make_team, add_member, teams
    ):
        """Test a purchase by any team member lands on the team counter."""
        owner = make_admin()
        member = make_admin(email="m@queencreekchamber.com")
        team = make_team(owner, seats=10)
        add_member(team, member, TeamRole.MEMBER)
        handler = CompletePurchaseHandler(identity_gate, seat_ledger, receipts, journal)

        result = await handler.handle(callback(member.user_id, count="5"))

        assert result.total_licenses == 15
        assert teams.teams[team.id].purchased_license_count == 15
        assert activity.types() == [ActivityType.LICENSES_PURCHASED]
        assert activity.entries[0].metadata == {"license_count": 5, "total_licenses": 15}

    async def test_failed_payment(self, identity_gate, seat_ledger, receipts, journal, make_admin):
        admin = make_admin()
        handler = CompletePurchaseHandler(identity_gate, seat_ledger, receipts, journal)

        with pytest.raises(PaymentFailedError):
            await handler.handle(callback(admin.user_id, payment="failed"))

    async def test_payment_checked_before_session(self, identity_gate, seat_ledger, receipts, journal):
        handler = CompletePurchaseHandler(identity_gate, seat_ledger, receipts, journal)

        with pytest.raises(PaymentFailedError):
            await handler.handle(callback(None, payment="cancelled"))
        with pytest.raises(InvalidLicenseCountError):
            await handler.handle(callback(None, count="zero"))
        with pytest.raises(AuthenticationRequiredError):
            await handler.handle(callback(None))

    async def test_duplicate_reference_credits_once(
        self, identity_gate, seat_ledger, receipts, journal, make_admin
    ):
        """Test a replayed callback reports zero seats added."""
        admin = make_admin(seats=0)
        handler = CompletePurchaseHandler(identity_gate, seat_ledger, receipts, journal)

        first = await handler.handle(callback(admin.user_id, count="3", reference="pay_1"))
        replay = await handler.handle(callback(admin.user_id, count="3", reference="pay_1"))

        assert first.licenses_added == 3
        assert replay.licenses_added == 0
        assert replay.total_licenses == 3

    async def test_signature_required_when_secret_set(
        self, identity_gate, seat_ledger, receipts, journal, make_admin
    ):
        admin = make_admin()
        handler = CompletePurchaseHandler(
            identity_gate, seat_ledger, receipts, journal, callback_secret=SECRET
        )

        with pytest.raises(PaymentVerificationError):
            await handler.handle(callback(admin.user_id, reference="pay_2"))
        with pytest.raises(PaymentVerificationError):
            await handler.handle(callback(admin.user_id, reference="pay_2", signature="0" * 64))

    async def test_valid_signature(self, identity_gate, seat_ledger, receipts, journal, make_admin):
        admin = make_admin()
        handler = CompletePurchaseHandler(
            identity_gate, seat_ledger, receipts, journal, callback_secret=SECRET
        )
        signature = sign_purchase(SECRET, "2", "successful", "license_purchase", "pay_3")

        result = await handler.handle(callback(admin.user_id, count="2", reference="pay_3", signature=signature))

        assert result.licenses_added == 2


@pytest.mark.asyncio
class TestTopUpLicensesHandler:
    """Tests for TopUpLicensesHandler."""

    async def test_top_up_team(self, seat_ledger, members, journal, make_admin, make_team, teams):
        owner = make_admin()
        team = make_team(owner, seats=1)
        handler = TopUpLicensesHandler(seat_ledger, members, journal)

        result = await handler.handle(TopUpLicensesCommand(license_count=9, team_id=team.id))

        assert result.scope_kind == "team"
        assert result.total_licenses == 10
        assert teams.teams[team.id].purchased_license_count == 10

    async def test_top_up_admin_with_team_credits_team(self, seat_ledger, members, journal, make_admin, make_team):
        """Test an admin id resolves to the admin's team when they have one."""
        owner = make_admin()
        team = make_team(owner, seats=0)
        handler = TopUpLicensesHandler(seat_ledger, members, journal)

        result = await handler.handle(TopUpLicensesCommand(license_count="2", admin_id=owner.id))

        assert result.scope_kind == "team"
        assert result.owner_id == team.id

    async def test_top_up_solo_admin(self, seat_ledger, members, journal, make_admin):
        admin = make_admin(email="solo@example.com", seats=1)
        handler = TopUpLicensesHandler(seat_ledger, members, journal)

        result = await handler.handle(TopUpLicensesCommand(license_count=1, admin_id=admin.id))

        assert (result.scope_kind, result.total_licenses) == ("solo", 2)

    async def test_top_up_requires_beneficiary(self, seat_ledger, members, journal):
        handler = TopUpLicensesHandler(seat_ledger, members, journal)

        with pytest.raises(ValidationFailedError, match="teamId or adminId is required"):
            await handler.handle(TopUpLicensesCommand(license_count=1))

    async def test_top_up_unknown_team(self, seat_ledger, members, journal):
        handler = TopUpLicensesHandler(seat_ledger, members, journal)

        with pytest.raises(TeamNotFoundError):
            await handler.handle(TopUpLicensesCommand(license_count=1, team_id=uuid.uuid4()))

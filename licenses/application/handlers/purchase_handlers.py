"""
Seat purchase handlers.

The payment provider redirects the admin's browser to a GET callback;
internal services top up seats with an explicit beneficiary.
"""
import hashlib
import hmac
import logging
from typing import Any, Optional

from accounts.application.services.identity_gate import IdentityGate
from accounts.ports.team_membership_lookup import TeamMembershipLookup
from activity.application.services.activity_journal import ActivityJournal
from core.domain.exceptions import (
    InvalidLicenseCountError,
    PaymentFailedError,
    PaymentVerificationError,
    ValidationFailedError,
)
from core.domain.value_objects import ActivityType, Scope, SoloScope, TeamScope
from core.infrastructure.events import event_bus
from licenses.application.commands.purchase_licenses import (
    CompletePurchaseCommand,
    TopUpLicensesCommand,
)
from licenses.application.dto.license_dto import PurchaseResultDTO
from licenses.application.services.seat_ledger import SeatLedger
from licenses.domain.events import SeatsPurchased
from licenses.ports.purchase_receipt_repository import PurchaseReceiptRepository

logger = logging.getLogger(__name__)

PAYMENT_SUCCESSFUL = "successful"
PAYMENT_TYPE_LICENSE_PURCHASE = "license_purchase"


def parse_license_count(raw: Any) -> int:
    """
    Parse a seat count from a query parameter or JSON value.

    Raises:
        InvalidLicenseCountError: Unless the value is a positive integer
    """
    if isinstance(raw, bool):
        raise InvalidLicenseCountError()
    if isinstance(raw, int):
        count = raw
    elif isinstance(raw, str) and raw.strip().isdigit():
        count = int(raw.strip())
    else:
        raise InvalidLicenseCountError()
    if count <= 0:
        raise InvalidLicenseCountError()
    return count


def sign_purchase(secret: str, license_count: str, payment: str, payment_type: str, reference: str) -> str:
    """HMAC-SHA256 hex digest the payment provider attaches to the callback."""
    message = f"{license_count}:{payment}:{payment_type}:{reference}"
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


class _SeatCreditMixin:
    """Credits seats, journals the purchase and publishes SeatsPurchased."""

    seat_ledger: SeatLedger
    journal: ActivityJournal

    async def _credit(self, scope: Scope, count: int, admin_id=None) -> PurchaseResultDTO:
        # Raises TeamNotFoundError / AdminNotFoundError for unknown owners
        await self.seat_ledger.purchased(scope)
        total = await self.seat_ledger.credit(scope, count)

        await self.journal.record(
            scope,
            admin_id,
            ActivityType.LICENSES_PURCHASED,
            f"Purchased {count} license(s)",
            {"license_count": count, "total_licenses": total},
        )
        await event_bus.publish(
            SeatsPurchased(scope_kind=scope.kind, owner_id=scope.owner_id, count=count, total=total)
        )
        return PurchaseResultDTO(
            scope_kind=scope.kind,
            owner_id=scope.owner_id,
            licenses_added=count,
            total_licenses=total,
        )


class CompletePurchaseHandler(_SeatCreditMixin):
    """Handler for CompletePurchaseCommand."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        seat_ledger: SeatLedger,
        receipt_repository: PurchaseReceiptRepository,
        journal: ActivityJournal,
        callback_secret: Optional[str] = None,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.seat_ledger = seat_ledger
        self.receipt_repository = receipt_repository
        self.journal = journal
        self.callback_secret = callback_secret

    def _verify_signature(self, command: CompletePurchaseCommand) -> None:
        if not self.callback_secret:
            return
        expected = sign_purchase(
            self.callback_secret,
            command.license_count or "",
            command.payment or "",
            command.payment_type or "",
            command.reference or "",
        )
        if not command.signature or not hmac.compare_digest(expected, command.signature):
            logger.warning("Purchase callback signature mismatch", extra={"reference": command.reference})
            raise PaymentVerificationError()

    async def handle(self, command: CompletePurchaseCommand) -> PurchaseResultDTO:
        """
        Handle the payment callback.

        Checks run in order: payment status, seat count, signature, caller.
        A reference seen before credits nothing and reports zero seats added.

        Raises:
            PaymentFailedError: Payment not successful or not a license purchase
            InvalidLicenseCountError: Count is not a positive integer
            PaymentVerificationError: Signature missing or wrong
            AuthenticationRequiredError: Anonymous caller
            AdminRequiredError: Session user without admin record
        """
        if command.payment != PAYMENT_SUCCESSFUL or command.payment_type != PAYMENT_TYPE_LICENSE_PURCHASE:
            raise PaymentFailedError()
        count = parse_license_count(command.license_count)
        self._verify_signature(command)

        actor = await self.identity_gate.require_actor(command.user_id)
        scope = actor.scope

        if command.reference:
            is_new = await self.receipt_repository.record_if_new(command.reference, scope, count)
            if not is_new:
                logger.info("Duplicate purchase callback ignored", extra={"reference": command.reference})
                return PurchaseResultDTO(
                    scope_kind=scope.kind,
                    owner_id=scope.owner_id,
                    licenses_added=0,
                    total_licenses=await self.seat_ledger.purchased(scope),
                )

        return await self._credit(scope, count, admin_id=actor.admin_id)


class TopUpLicensesHandler(_SeatCreditMixin):
    """Handler for TopUpLicensesCommand."""

    def __init__(
        self,
        seat_ledger: SeatLedger,
        membership_lookup: TeamMembershipLookup,
        journal: ActivityJournal,
    ):
        """Initialize handler with collaborators."""
        self.seat_ledger = seat_ledger
        self.membership_lookup = membership_lookup
        self.journal = journal

    async def handle(self, command: TopUpLicensesCommand) -> PurchaseResultDTO:
        """
        Handle a service top-up.

        A team id credits that team. An admin id credits the admin's team,
        or the admin's own counter when they have none.

        Raises:
            ValidationFailedError: Neither teamId nor adminId given
            InvalidLicenseCountError: Count is not a positive integer
            TeamNotFoundError: Unknown team
            AdminNotFoundError: Unknown admin
        """
        if command.team_id is None and command.admin_id is None:
            raise ValidationFailedError("teamId or adminId is required")
        count = parse_license_count(command.license_count)

        if command.team_id is not None:
            scope: Scope = TeamScope(team_id=command.team_id)
        else:
            membership = await self.membership_lookup.find_by_admin(command.admin_id)
            if membership is not None:
                scope = TeamScope(team_id=membership.team_id)
            else:
                scope = SoloScope(admin_id=command.admin_id)

        return await self._credit(scope, count, admin_id=command.admin_id)

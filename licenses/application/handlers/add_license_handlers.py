"""
Add license handlers.

Single add, batch add and CSV import share the same screening and
seat check; they differ in input parsing and response wording.
"""
import asyncio
import logging
from typing import List, Sequence

from accounts.application.services.identity_gate import IdentityGate
from accounts.domain.actor import Actor
from activity.application.services.activity_journal import ActivityJournal
from core.domain.exceptions import DuplicateLicenseError, InvalidEmailError, ValidationFailedError
from core.domain.value_objects import ActivityType, Email
from core.infrastructure.events import event_bus
from licenses.application.commands.add_license import AddLicenseCommand
from licenses.application.commands.add_licenses import AddLicensesCommand, ImportLicensesCommand
from licenses.application.dto.license_dto import (
    AddLicenseResultDTO,
    AddLicensesResultDTO,
    BatchResultDTO,
    LicenseSummaryDTO,
)
from licenses.application.services.seat_ledger import SeatLedger
from licenses.domain.csv_format import parse_import
from licenses.domain.events import LicenseAdded
from licenses.domain.license import License
from licenses.domain.services import EmailBatchScreener
from licenses.ports.license_repository import LicenseRepository
from notifications.application.services.dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


class AddLicenseHandler:
    """Handler for AddLicenseCommand."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        license_repository: LicenseRepository,
        seat_ledger: SeatLedger,
        dispatcher: NotificationDispatcher,
        journal: ActivityJournal,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.license_repository = license_repository
        self.seat_ledger = seat_ledger
        self.dispatcher = dispatcher
        self.journal = journal

    async def handle(self, command: AddLicenseCommand) -> AddLicenseResultDTO:
        """
        Handle add license command.

        Args:
            command: AddLicenseCommand

        Returns:
            AddLicenseResultDTO with delivery outcome

        Raises:
            InvalidEmailError: If the email is missing or malformed
            DuplicateLicenseError: If the email is already licensed in scope
            SeatLimitExceededError: If no seat is available
        """
        if not isinstance(command.email, str) or not Email.is_valid(command.email):
            raise InvalidEmailError()

        actor = await self.identity_gate.require_actor(command.user_id)
        scope = actor.scope
        email = Email.parse(command.email)

        if await self.license_repository.exists_in_scope(scope, email.value):
            raise DuplicateLicenseError()

        account = await self.seat_ledger.account(scope)
        account.ensure_single_seat()

        license = License.create(
            email=email, scope=scope, admin_id=actor.admin_id, performed_by=actor.admin_id
        )
        license = await self.license_repository.save(license)

        delivery = await self.dispatcher.send_activation(license, actor.admin)
        license = await self.license_repository.save(
            license.record_delivery(delivery.success, delivery.message_id)
        )

        await self.journal.record(
            scope,
            actor.admin_id,
            ActivityType.LICENSE_ADDED,
            f"Added license for {email}",
            {"license_id": str(license.id), "email": email.value},
        )
        await event_bus.publish(
            LicenseAdded(
                license_id=license.id,
                email=email.value,
                scope_kind=scope.kind,
                performed_by=actor.admin_id,
            )
        )

        message = (
            "License added and activation email sent successfully"
            if delivery.success
            else "License added but failed to send activation email"
        )
        return AddLicenseResultDTO(
            message=message,
            email_sent=delivery.success,
            license=LicenseSummaryDTO.from_entity(license),
        )


class AddLicensesHandler(AddLicenseHandler):
    """Handler for AddLicensesCommand."""

    source = "batch"
    verb = "add"

    async def handle(self, command: AddLicensesCommand) -> AddLicensesResultDTO:
        """
        Handle batch add command.

        The seat check runs against the screened count before any insert;
        a rejected batch leaves the ledger untouched.
        """
        if not isinstance(command.emails, list) or not command.emails:
            raise ValidationFailedError("Please provide an array of email addresses")

        actor = await self.identity_gate.require_actor(command.user_id)
        results = await self._add_many(actor, command.emails)

        if results.success > 0:
            plural = "s" if results.success > 1 else ""
            await self.journal.record(
                actor.scope,
                actor.admin_id,
                ActivityType.LICENSE_ADDED,
                f"Added {results.success} license{plural}",
                {"count": results.success, "emails_sent": results.emails_sent},
            )

        return AddLicensesResultDTO(
            message=(
                f"Processed {len(command.emails)} emails: {results.success} licenses added, "
                f"{results.emails_sent} emails sent, {results.failed} failed"
            ),
            results=results,
        )

    async def _add_many(self, actor: Actor, raw_emails: Sequence[str]) -> BatchResultDTO:
        """Screen, seat-check, insert and notify."""
        scope = actor.scope
        existing = await self.license_repository.existing_emails(
            scope, EmailBatchScreener.candidates(raw_emails)
        )
        screening = EmailBatchScreener.screen(raw_emails, existing)

        account = await self.seat_ledger.account(scope)
        account.ensure_capacity(len(screening.accepted), verb=self.verb)

        results = BatchResultDTO(failed=screening.failed, errors=list(screening.errors))
        if not screening.accepted:
            return results

        licenses = await self.license_repository.save_many(
            [
                License.create(
                    email=email, scope=scope, admin_id=actor.admin_id, performed_by=actor.admin_id
                )
                for email in screening.accepted
            ]
        )
        deliveries = await self.dispatcher.send_activations(licenses, actor.admin)
        recorded: List[License] = await asyncio.gather(
            *[
                self.license_repository.save(
                    license.record_delivery(delivery.success, delivery.message_id)
                )
                for license, delivery in zip(licenses, deliveries)
            ]
        )

        for license in recorded:
            await event_bus.publish(
                LicenseAdded(
                    license_id=license.id,
                    email=str(license.email),
                    scope_kind=scope.kind,
                    performed_by=actor.admin_id,
                    source=self.source,
                )
            )

        results.success = len(recorded)
        results.emails_sent = sum(1 for delivery in deliveries if delivery.success)
        results.emails_failed = len(deliveries) - results.emails_sent
        results.licenses = [LicenseSummaryDTO.from_entity(license) for license in recorded]
        logger.info(
            "Licenses added",
            extra={
                "scope": scope.kind,
                "source": self.source,
                "added": results.success,
                "failed": results.failed,
            },
        )
        return results


class ImportLicensesHandler(AddLicensesHandler):
    """Handler for ImportLicensesCommand."""

    source = "import"
    verb = "import"

    async def handle(self, command: ImportLicensesCommand) -> AddLicensesResultDTO:
        """
        Handle CSV import command.

        Raises:
            ValidationFailedError: If no file or no rows were provided
        """
        actor = await self.identity_gate.require_actor(command.user_id)

        if command.content is None:
            raise ValidationFailedError("No file provided")
        emails = parse_import(command.content)
        if not emails:
            raise ValidationFailedError("No valid emails found in CSV")

        results = await self._add_many(actor, emails)

        if results.success > 0:
            await self.journal.record(
                actor.scope,
                actor.admin_id,
                ActivityType.LICENSES_IMPORTED,
                f"Imported {results.success} licenses from CSV",
                {
                    "success_count": results.success,
                    "failed_count": results.failed,
                    "emails_sent": results.emails_sent,
                },
            )

        return AddLicensesResultDTO(
            message=(
                f"Import complete: {results.success} licenses added, "
                f"{results.emails_sent} emails sent, {results.failed} failed"
            ),
            results=results,
        )

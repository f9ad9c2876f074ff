"""
Handlers acting on one existing license.

Consolidated handlers for remove, resend and update-email.
"""
import logging

from accounts.application.services.identity_gate import IdentityGate
from activity.application.services.activity_journal import ActivityJournal
from core.domain.exceptions import (
    ActivatedLicenseImmutableError,
    DuplicateLicenseError,
    EmailDeliveryError,
    InvalidEmailError,
    LicenseAlreadyActivatedError,
    LicenseNotFoundError,
    PermissionDeniedError,
)
from core.domain.value_objects import ActivityType, Email
from core.infrastructure.events import event_bus
from licenses.application.commands.manage_license import (
    RemoveLicenseCommand,
    ResendLicenseEmailCommand,
    UpdateLicenseEmailCommand,
)
from licenses.domain.events import LicenseEmailUpdated, LicenseRemoved
from licenses.ports.license_repository import LicenseRepository
from notifications.application.services.dispatcher import NotificationDispatcher
from teams.domain.policy import Action, can

logger = logging.getLogger(__name__)


class RemoveLicenseHandler:
    """Handler for RemoveLicenseCommand."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        license_repository: LicenseRepository,
        journal: ActivityJournal,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.license_repository = license_repository
        self.journal = journal

    async def handle(self, command: RemoveLicenseCommand) -> None:
        """
        Handle remove license command.

        Raises:
            LicenseNotFoundError: If license not found
            PermissionDeniedError: If the license is outside the caller's scope
        """
        actor = await self.identity_gate.require_actor(command.user_id)

        license = await self.license_repository.find_by_id(command.license_id)
        if license is None:
            raise LicenseNotFoundError()
        if not can(actor, Action.MANAGE_LICENSE, license):
            raise PermissionDeniedError("You do not have permission to delete this license")

        await self.license_repository.delete(license.id)

        await self.journal.record(
            actor.scope,
            actor.admin_id,
            ActivityType.LICENSE_REMOVED,
            f"Removed license for {license.email}",
            {"license_id": str(license.id), "email": str(license.email)},
        )
        await event_bus.publish(
            LicenseRemoved(license_id=license.id, email=str(license.email), removed_by=actor.admin_id)
        )


class ResendLicenseEmailHandler:
    """Handler for ResendLicenseEmailCommand."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        license_repository: LicenseRepository,
        dispatcher: NotificationDispatcher,
        journal: ActivityJournal,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.license_repository = license_repository
        self.dispatcher = dispatcher
        self.journal = journal

    async def handle(self, command: ResendLicenseEmailCommand) -> None:
        """
        Handle resend command.

        The failed status is persisted before the error is raised.

        Raises:
            LicenseNotFoundError: If license not found in scope
            LicenseAlreadyActivatedError: If license is activated
            EmailDeliveryError: If the provider rejected the email
        """
        actor = await self.identity_gate.require_actor(command.user_id)
        scope = actor.scope

        license = await self.license_repository.find_in_scope(command.license_id, scope)
        if license is None:
            raise LicenseNotFoundError(
                "License not found or you do not have permission to resend"
            )
        if license.is_activated:
            raise LicenseAlreadyActivatedError()

        delivery = await self.dispatcher.send_activation(license, actor.admin)
        await self.license_repository.save(
            license.record_delivery(delivery.success, delivery.message_id)
        )
        if not delivery.success:
            raise EmailDeliveryError()

        await self.journal.record(
            scope,
            actor.admin_id,
            ActivityType.LICENSE_RESEND,
            f"Resent activation email to {license.email}",
            {"license_id": str(license.id), "email": str(license.email)},
        )


class UpdateLicenseEmailHandler:
    """Handler for UpdateLicenseEmailCommand."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        license_repository: LicenseRepository,
        dispatcher: NotificationDispatcher,
        journal: ActivityJournal,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.license_repository = license_repository
        self.dispatcher = dispatcher
        self.journal = journal

    async def handle(self, command: UpdateLicenseEmailCommand) -> bool:
        """
        Handle update email command.

        Returns:
            True if the activation email reached the provider

        Raises:
            InvalidEmailError: If the new email is malformed
            LicenseNotFoundError: If license not found in scope
            ActivatedLicenseImmutableError: If license is activated
            DuplicateLicenseError: If the new email is already licensed in scope
        """
        actor = await self.identity_gate.require_actor(command.user_id)
        if not isinstance(command.new_email, str) or not Email.is_valid(command.new_email):
            raise InvalidEmailError("Invalid email format")
        new_email = Email.parse(command.new_email)
        scope = actor.scope

        license = await self.license_repository.find_in_scope(command.license_id, scope)
        if license is None:
            raise LicenseNotFoundError(
                "License not found or you do not have permission to edit it"
            )
        if license.is_activated:
            raise ActivatedLicenseImmutableError()
        if await self.license_repository.exists_in_scope(
            scope, new_email.value, exclude_id=license.id
        ):
            raise DuplicateLicenseError("A license with this email already exists")

        old_email = str(license.email)
        updated = await self.license_repository.save(license.change_email(new_email))

        delivery = await self.dispatcher.send_activation(updated, actor.admin)
        await self.license_repository.save(
            updated.record_delivery(delivery.success, delivery.message_id)
        )

        await self.journal.record(
            scope,
            actor.admin_id,
            ActivityType.LICENSE_EMAIL_UPDATED,
            f"Updated license email from {old_email} to {new_email}",
            {"license_id": str(license.id), "old_email": old_email, "new_email": new_email.value},
        )
        await event_bus.publish(
            LicenseEmailUpdated(license_id=license.id, old_email=old_email, new_email=new_email.value)
        )
        logger.info("License email updated", extra={"license_id": str(license.id)})
        return delivery.success

"""
Email status sync handler.
"""
import asyncio
import logging

from accounts.application.services.identity_gate import IdentityGate
from core.domain.value_objects import Scope
from licenses.application.commands.sync_email_statuses import SyncEmailStatusesCommand
from licenses.application.dto.license_dto import EmailStatusDTO, EmailStatusSyncDTO
from licenses.ports.license_repository import LicenseRepository
from notifications.application.services.dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


class SyncEmailStatusesHandler:
    """Handler for SyncEmailStatusesCommand."""

    def __init__(
        self,
        identity_gate: IdentityGate,
        license_repository: LicenseRepository,
        dispatcher: NotificationDispatcher,
    ):
        """Initialize handler with collaborators."""
        self.identity_gate = identity_gate
        self.license_repository = license_repository
        self.dispatcher = dispatcher

    async def handle(self, command: SyncEmailStatusesCommand) -> EmailStatusSyncDTO:
        """Sync statuses for the caller's scope."""
        actor = await self.identity_gate.require_actor(command.user_id)
        return await self.sync_scope(actor.scope)

    async def sync_scope(self, scope: Scope) -> EmailStatusSyncDTO:
        """
        Refresh provider statuses of every licensed email in a scope.

        Lookups go through the dispatcher's rate-limited queue; a failed
        lookup is stored as ``unknown``.
        """
        licenses = await self.license_repository.list_with_message_id(scope)
        if not licenses:
            return EmailStatusSyncDTO(message="No licenses with message IDs found", synced=0)

        statuses = await self.dispatcher.fetch_statuses(license.message_id for license in licenses)
        await asyncio.gather(
            *[
                self.license_repository.update_email_status(license.id, statuses[license.message_id])
                for license in licenses
            ]
        )
        logger.info(
            "Email statuses synced",
            extra={"scope": scope.kind, "owner_id": str(scope.owner_id), "synced": len(licenses)},
        )
        return EmailStatusSyncDTO(
            message="Email statuses synced successfully",
            synced=len(licenses),
            statuses=[
                EmailStatusDTO(
                    license_id=license.id,
                    email=str(license.email),
                    message_id=license.message_id,
                    status=statuses[license.message_id],
                )
                for license in licenses
            ],
        )

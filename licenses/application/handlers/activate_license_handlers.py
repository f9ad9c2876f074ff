"""
Activation handlers.

Called by the consumer application, not by portal admins; there is
no session identity.
"""
import logging

from activity.application.services.activity_journal import ActivityJournal
from core.domain.exceptions import LicenseAlreadyActivatedError, LicenseNotFoundError
from core.domain.value_objects import ActivityType
from core.infrastructure.events import event_bus
from licenses.application.commands.activate_license import ActivateLicenseCommand
from licenses.application.dto.license_dto import ActivatedLicenseDTO, VerifyLicenseDTO
from licenses.application.queries.license_queries import VerifyLicenseQuery
from licenses.domain.events import LicenseActivated
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ActivateLicenseHandler:
    """Handler for ActivateLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository, journal: ActivityJournal):
        """Initialize handler with collaborators."""
        self.license_repository = license_repository
        self.journal = journal

    async def handle(self, command: ActivateLicenseCommand) -> ActivatedLicenseDTO:
        """
        Handle activate license command.

        Args:
            command: ActivateLicenseCommand

        Returns:
            ActivatedLicenseDTO

        Raises:
            LicenseNotFoundError: If license not found
            LicenseAlreadyActivatedError: If license was already activated
        """
        license = await self.license_repository.find_by_id(command.license_id)
        if license is None:
            raise LicenseNotFoundError()
        if license.is_activated:
            raise LicenseAlreadyActivatedError()

        activated = await self.license_repository.save(
            license.activate(command.business_name, command.business_type)
        )

        await self.journal.record(
            activated.scope,
            None,
            ActivityType.LICENSE_ACTIVATED,
            f"License activated for {activated.email}",
            {
                "license_id": str(activated.id),
                "email": str(activated.email),
                "business_name": activated.business_name,
                "business_type": activated.business_type,
            },
        )
        await event_bus.publish(
            LicenseActivated(license_id=activated.id, business_type=activated.business_type)
        )
        logger.info("License activated", extra={"license_id": str(activated.id)})

        return ActivatedLicenseDTO(
            id=activated.id,
            email=str(activated.email),
            business_name=activated.business_name,
            business_type=activated.business_type,
            is_activated=activated.is_activated,
            activated_at=activated.activated_at,
        )


class VerifyLicenseHandler:
    """Handler for VerifyLicenseQuery."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, query: VerifyLicenseQuery) -> VerifyLicenseDTO:
        """Report whether the license exists and is activated."""
        license = await self.license_repository.find_by_id(query.license_id)
        if license is None:
            return VerifyLicenseDTO(verified=False, is_activated=False)
        return VerifyLicenseDTO(verified=True, is_activated=license.is_activated)

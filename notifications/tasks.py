"""
Celery tasks for background processing.

Email delivery statuses are refreshed out of band, one scope per task.
"""
import logging
import uuid

from asgiref.sync import async_to_sync

from LicensePortal.celery import app

from accounts.application.services.identity_gate import IdentityGate
from accounts.infrastructure.repositories.django_admin_repository import DjangoAdminRepository
from core.domain.value_objects import scope_from
from licenses.application.handlers.email_status_handler import SyncEmailStatusesHandler
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from notifications.application.services.dispatcher import NotificationDispatcher
from notifications.infrastructure.providers.factory import build_email_provider
from teams.infrastructure.repositories.django_team_member_repository import (
    DjangoTeamMemberRepository,
)

logger = logging.getLogger(__name__)


def _build_handler() -> SyncEmailStatusesHandler:
    return SyncEmailStatusesHandler(
        identity_gate=IdentityGate(
            admin_repository=DjangoAdminRepository(),
            membership_lookup=DjangoTeamMemberRepository(),
        ),
        license_repository=DjangoLicenseRepository(),
        dispatcher=NotificationDispatcher.from_settings(build_email_provider()),
    )


@app.task(bind=True, max_retries=3)
def sync_email_statuses_task(self, scope_kind: str, scope_id: str) -> int:
    """
    Celery task refreshing provider statuses for one scope.

    Args:
        scope_kind: "solo" or "team"
        scope_id: Admin or team UUID

    Returns:
        Number of licenses synced
    """
    scope = scope_from(scope_kind, uuid.UUID(scope_id))
    try:
        result = async_to_sync(_build_handler().sync_scope)(scope)
    except Exception as exc:
        logger.error(
            "Email status sync failed",
            extra={"scope": scope_kind, "owner_id": scope_id},
            exc_info=True,
        )
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)

    return result.synced


@app.task
def sync_all_email_statuses_task() -> int:
    """
    Fan out one sync task per scope holding sent emails.

    Returns:
        Number of tasks queued
    """
    scopes = async_to_sync(DjangoLicenseRepository().scopes_with_message_id)()
    for scope in scopes:
        sync_email_statuses_task.delay(scope.kind, str(scope.owner_id))
    logger.info("Queued email status sync", extra={"scopes": len(scopes)})
    return len(scopes)

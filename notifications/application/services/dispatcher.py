"""
Notification dispatcher.

Renders activation and invitation emails with partner branding and
hands them to the configured provider.
"""
import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Sequence
from urllib.parse import quote, urlencode

from asgiref.sync import sync_to_async
from django.conf import settings
from django.core.cache import cache
from django.template.loader import render_to_string

from accounts.domain.admin import Admin
from core.domain.value_objects import EmailStatus
from core.metrics import emails_sent_total
from licenses.domain.license import License
from notifications.application.services.batching import (
    DEFAULT_CHUNK_SIZE,
    RateLimitedQueue,
    chunked,
    shared_queue,
)
from notifications.domain.delivery import DeliveryResult, OutgoingEmail
from notifications.domain.partner_program import PartnerProgram, PartnerProgramRegistry
from notifications.ports.email_provider import EmailProvider, EmailProviderError
from teams.domain.team import Team
from teams.domain.team_invitation import TeamInvitation

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Build and send portal emails."""

    def __init__(
        self,
        provider: EmailProvider,
        programs: PartnerProgramRegistry,
        app_url: str,
        invite_url: str,
        status_queue: Optional[RateLimitedQueue] = None,
        batch_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.provider = provider
        self.programs = programs
        self.app_url = app_url.rstrip("/")
        self.invite_url = invite_url.rstrip("/")
        self.status_queue = status_queue or RateLimitedQueue()
        self.batch_size = batch_size

    @classmethod
    def from_settings(cls, provider: EmailProvider) -> "NotificationDispatcher":
        """Build a dispatcher from Django settings."""
        return cls(
            provider=provider,
            programs=PartnerProgramRegistry.from_settings(settings.PARTNER_PROGRAMS),
            app_url=settings.APP_URL,
            invite_url=settings.INVITE_URL,
            status_queue=shared_queue(
                "email-status", settings.EMAIL_STATUS_REQUESTS_PER_SECOND, cache=cache
            ),
        )

    # Links

    def activation_url(self, license_id, program: PartnerProgram) -> str:
        query = urlencode(
            {"licenseId": str(license_id), "ref": program.ref, "org": program.slug}
        )
        return f"{self.app_url}/register?{query}"

    def accept_url(self, token: str) -> str:
        return f"{self.invite_url}/invite/accept?{urlencode({'token': token})}"

    def signup_url(self, token: str, team: Team) -> str:
        query = urlencode(
            {"invite": token, "team": str(team.id), "teamName": team.name}, quote_via=quote
        )
        return f"{self.invite_url}/signup?{query}"

    # Rendering

    def _activation_email(self, license: License, admin: Admin, program: PartnerProgram) -> OutgoingEmail:
        context = {
            "email": str(license.email),
            "activation_url": self.activation_url(license.id, program),
            "admin_name": admin.full_name,
            "program": program.as_context(),
        }
        return OutgoingEmail(
            to=str(license.email),
            subject=f"Welcome to {program.program_name}! 🎉",
            html=render_to_string("notifications/license_activation.html", context),
            text=render_to_string("notifications/license_activation.txt", context),
            reference=str(license.id),
        )

    def _invitation_email(
        self, invitation: TeamInvitation, team: Team, inviter: Admin
    ) -> OutgoingEmail:
        program = self.programs.for_email(str(invitation.email))
        context = {
            "email": str(invitation.email),
            "inviter_name": inviter.full_name,
            "team_name": team.name,
            "role": invitation.role.value,
            "expires_at": invitation.expires_at,
            "invite_url": self.accept_url(invitation.token),
            "signup_url": self.signup_url(invitation.token, team),
            "program": program.as_context(),
        }
        return OutgoingEmail(
            to=str(invitation.email),
            subject=f"You've been invited to join {team.name} on {program.program_name}! 🤝",
            html=render_to_string("notifications/team_invitation.html", context),
            text=render_to_string("notifications/team_invitation.txt", context),
            reference=str(invitation.id),
        )

    # Sending

    def _record(self, kind: str, results: Iterable[DeliveryResult]) -> None:
        for result in results:
            emails_sent_total.labels(kind=kind, result="sent" if result.success else "failed").inc()

    async def send_activation(self, license: License, admin: Admin) -> DeliveryResult:
        """
        Send the activation email of one license.

        Args:
            license: License to activate
            admin: Admin whose partner program brands the email
        """
        program = self.programs.for_email(str(admin.email))
        email = self._activation_email(license, admin, program)
        result = await sync_to_async(self.provider.send, thread_sensitive=False)(email)
        self._record("activation", [result])
        if not result.success:
            logger.warning(
                "Activation email failed",
                extra={"license_id": str(license.id), "error": result.error},
            )
        return result

    async def send_activations(
        self, licenses: Sequence[License], admin: Admin
    ) -> List[DeliveryResult]:
        """
        Send activation emails in provider batches.

        Batches run concurrently; results come back in input order.
        """
        if not licenses:
            return []
        program = self.programs.for_email(str(admin.email))
        emails = [self._activation_email(license, admin, program) for license in licenses]
        send_batch = sync_to_async(self.provider.send_batch, thread_sensitive=False)
        batches = await asyncio.gather(
            *[send_batch(chunk) for chunk in chunked(emails, self.batch_size)]
        )
        results = [result for batch in batches for result in batch]
        self._record("activation", results)
        sent = sum(1 for result in results if result.success)
        logger.info(
            "Batch activation emails dispatched",
            extra={"sent": sent, "failed": len(results) - sent},
        )
        return results

    async def send_invitation(
        self, invitation: TeamInvitation, team: Team, inviter: Admin
    ) -> DeliveryResult:
        """Send a team invitation email."""
        email = self._invitation_email(invitation, team, inviter)
        result = await sync_to_async(self.provider.send, thread_sensitive=False)(email)
        self._record("invitation", [result])
        if not result.success:
            logger.warning(
                "Invitation email failed",
                extra={"invitation_id": str(invitation.id), "error": result.error},
            )
        return result

    # Status

    async def _lookup_status(self, message_id: str) -> str:
        try:
            return await self.status_queue.add(self.provider.get_status, message_id)
        except EmailProviderError as e:
            logger.warning(f"Status lookup failed for {message_id}: {e}")
            return EmailStatus.UNKNOWN

    async def fetch_statuses(self, message_ids: Iterable[str]) -> Dict[str, str]:
        """
        Look up delivery statuses one at a time through the status queue.

        Returns:
            Mapping of message id to provider status
        """
        statuses = {}
        for message_id in message_ids:
            statuses[message_id] = await self._lookup_status(message_id)
        return statuses

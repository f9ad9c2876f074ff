"""
Email provider backed by Django's mail framework.

Used in development and tests, where ``EMAIL_BACKEND`` is the console
or locmem backend.
"""
import logging
import uuid
from typing import List

from django.core.mail import EmailMultiAlternatives

from notifications.domain.delivery import DeliveryResult, OutgoingEmail
from notifications.ports.email_provider import EmailProvider

logger = logging.getLogger(__name__)


class DjangoMailEmailProvider(EmailProvider):
    """Sends through the configured Django email backend."""

    def __init__(self, from_email: str):
        self.from_email = from_email

    def send(self, email: OutgoingEmail) -> DeliveryResult:
        message = EmailMultiAlternatives(
            subject=email.subject,
            body=email.text,
            from_email=self.from_email,
            to=[email.to],
        )
        message.attach_alternative(email.html, "text/html")
        message_id = f"local-{uuid.uuid4()}"
        message.extra_headers["X-Message-ID"] = message_id
        try:
            message.send()
        except OSError as e:
            logger.warning(f"Mail backend failed for {email.to}: {e}")
            return DeliveryResult.failed(email, str(e))
        return DeliveryResult.sent(email, message_id)

    def send_batch(self, emails: List[OutgoingEmail]) -> List[DeliveryResult]:
        return [self.send(email) for email in emails]

    def get_status(self, message_id: str) -> str:
        # The mail backend has no delivery tracking
        return "sent"

"""
Resend HTTP email provider.
"""
import logging
from typing import List, Optional

import requests

from notifications.domain.delivery import DeliveryResult, OutgoingEmail
from notifications.ports.email_provider import EmailProvider, EmailProviderError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.resend.com"


class ResendEmailProvider(EmailProvider):
    """Email provider backed by the Resend REST API."""

    def __init__(
        self,
        api_key: Optional[str],
        from_email: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "User-Agent": "License-Portal/1.0",
        }

    def _payload(self, email: OutgoingEmail) -> dict:
        return {
            "from": self.from_email,
            "to": [email.to],
            "subject": email.subject,
            "html": email.html,
            "text": email.text,
        }

    def send(self, email: OutgoingEmail) -> DeliveryResult:
        """Send one email through ``POST /emails``."""
        if not self.api_key:
            logger.error("RESEND_API_KEY is not configured")
            return DeliveryResult.failed(email, "RESEND_API_KEY is not configured")

        try:
            response = self.session.post(
                f"{self.api_url}/emails",
                json=self._payload(email),
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Resend send failed for {email.to}: {e}")
            return DeliveryResult.failed(email, str(e))

        message_id = response.json().get("id")
        logger.info("Email sent", extra={"message_id": message_id, "subject": email.subject})
        return DeliveryResult.sent(email, message_id)

    def send_batch(self, emails: List[OutgoingEmail]) -> List[DeliveryResult]:
        """
        Send a batch through ``POST /emails/batch``.

        A failed batch marks every email in it as failed.
        """
        if not emails:
            return []
        if not self.api_key:
            logger.error("RESEND_API_KEY is not configured")
            return [DeliveryResult.failed(email, "RESEND_API_KEY is not configured") for email in emails]

        try:
            response = self.session.post(
                f"{self.api_url}/emails/batch",
                json=[self._payload(email) for email in emails],
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Resend batch of {len(emails)} failed: {e}")
            return [DeliveryResult.failed(email, str(e)) for email in emails]

        data = response.json().get("data") or []
        results = []
        for index, email in enumerate(emails):
            entry = data[index] if index < len(data) else None
            message_id = entry.get("id") if isinstance(entry, dict) else None
            results.append(DeliveryResult.sent(email, message_id))
        return results

    def get_status(self, message_id: str) -> str:
        """Read ``last_event`` from ``GET /emails/{id}``."""
        if not self.api_key:
            raise EmailProviderError("RESEND_API_KEY is not configured")
        try:
            response = self.session.get(
                f"{self.api_url}/emails/{message_id}",
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise EmailProviderError(str(e)) from e
        return response.json().get("last_event") or "sent"

"""
Email provider port (interface).

Providers are synchronous; the dispatcher runs them off the event loop.
"""
from abc import ABC, abstractmethod
from typing import List

from notifications.domain.delivery import DeliveryResult, OutgoingEmail


class EmailProviderError(Exception):
    """Raised when a provider lookup fails."""


class EmailProvider(ABC):
    """Abstract transactional email provider."""

    @abstractmethod
    def send(self, email: OutgoingEmail) -> DeliveryResult:
        """
        Send one email.

        Delivery failures are reported in the result, not raised.
        """

    @abstractmethod
    def send_batch(self, emails: List[OutgoingEmail]) -> List[DeliveryResult]:
        """
        Send up to one provider batch of emails.

        Returns:
            One result per email, in input order
        """

    @abstractmethod
    def get_status(self, message_id: str) -> str:
        """
        Look up the last delivery event of a message.

        Raises:
            EmailProviderError: If the provider cannot answer
        """

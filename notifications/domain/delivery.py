"""
Outgoing messages and delivery outcomes.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OutgoingEmail:
    """A rendered email ready for a provider."""

    to: str
    subject: str
    html: str
    text: str
    # Caller correlation key, e.g. a license id
    reference: Optional[str] = None


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of handing one email to the provider."""

    recipient: str
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    reference: Optional[str] = None

    @classmethod
    def sent(cls, email: OutgoingEmail, message_id: Optional[str]) -> "DeliveryResult":
        return cls(
            recipient=email.to, success=True, message_id=message_id, reference=email.reference
        )

    @classmethod
    def failed(cls, email: OutgoingEmail, error: str) -> "DeliveryResult":
        return cls(recipient=email.to, success=False, error=error, reference=email.reference)

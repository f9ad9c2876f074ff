"""
Purchase commands.

The payment redirect lands on a GET callback carrying the session;
service top-ups name the beneficiary explicitly.
"""
import uuid
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class CompletePurchaseCommand:
    """Command issued by the payment provider's redirect."""

    user_id: Optional[int]
    license_count: Optional[str]  # Raw query parameter
    payment: Optional[str]
    payment_type: Optional[str]
    reference: Optional[str] = None
    signature: Optional[str] = None


@dataclass
class TopUpLicensesCommand:
    """Command to credit seats to a team or admin by id."""

    license_count: Any  # Raw JSON value, validated by the handler
    admin_id: Optional[uuid.UUID] = None
    team_id: Optional[uuid.UUID] = None

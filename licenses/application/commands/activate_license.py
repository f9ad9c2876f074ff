"""
ActivateLicenseCommand.

Issued by the consumer application when an end user registers.
"""
import uuid
from dataclasses import dataclass


@dataclass
class ActivateLicenseCommand:
    """Command to activate a license with the business details of its user."""

    license_id: uuid.UUID
    business_name: str
    business_type: str

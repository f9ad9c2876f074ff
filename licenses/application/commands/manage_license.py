"""
Commands acting on one existing license.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class RemoveLicenseCommand:
    """Command to delete a license."""

    user_id: Optional[int]
    license_id: uuid.UUID


@dataclass
class ResendLicenseEmailCommand:
    """Command to re-send the activation email of an unactivated license."""

    user_id: Optional[int]
    license_id: uuid.UUID


@dataclass
class UpdateLicenseEmailCommand:
    """Command to re-address an unactivated license."""

    user_id: Optional[int]
    license_id: uuid.UUID
    new_email: str

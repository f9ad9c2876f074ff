"""
AddLicenseCommand.

Command to assign one seat to an email.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class AddLicenseCommand:
    """Command to add a single license in the caller's scope."""

    user_id: Optional[int]  # Session user
    email: Optional[str]

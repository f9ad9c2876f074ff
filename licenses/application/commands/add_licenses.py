"""
AddLicensesCommand and ImportLicensesCommand.

Commands to assign seats to many emails at once.
"""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class AddLicensesCommand:
    """Command to add a batch of licenses."""

    user_id: Optional[int]
    emails: List[str] = field(default_factory=list)


@dataclass
class ImportLicensesCommand:
    """Command to add licenses from an uploaded CSV."""

    user_id: Optional[int]
    content: Optional[str]  # Decoded file body, None when no file was sent

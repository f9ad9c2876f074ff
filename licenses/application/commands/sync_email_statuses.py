"""
SyncEmailStatusesCommand.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class SyncEmailStatusesCommand:
    """Command to refresh provider delivery statuses for the caller's scope."""

    user_id: Optional[int]

"""
Invitation commands.
"""
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class InviteMemberCommand:
    """Command to invite an email address into the caller's team."""

    user_id: Optional[int]
    email: Any
    role: Any = "member"


@dataclass
class CancelInvitationCommand:
    """Command to revoke a pending invitation."""

    user_id: Optional[int]
    invitation_id: Any


@dataclass
class AcceptInvitationCommand:
    """Command to join a team through an invitation token."""

    user_id: Optional[int]
    token: Optional[str]

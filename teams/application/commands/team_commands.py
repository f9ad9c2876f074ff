"""
Team commands.

Raw request values are carried as received; handlers validate them.
"""
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class CreateTeamCommand:
    """Command to found a team around the caller."""

    user_id: Optional[int]
    name: Optional[str] = None


@dataclass
class UpdateTeamCommand:
    """Command to rename the caller's team."""

    user_id: Optional[int]
    name: Any


@dataclass
class ChangeMemberRoleCommand:
    """Command to change a member's role."""

    user_id: Optional[int]
    member_id: Any
    role: Any


@dataclass
class RemoveMemberCommand:
    """Command to remove a member from the caller's team."""

    user_id: Optional[int]
    member_id: Any

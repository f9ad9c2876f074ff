"""
Team queries.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class GetTeamQuery:
    """Query for the caller's team overview."""

    user_id: Optional[int]


@dataclass
class ListMembersQuery:
    """Query for the members of the caller's team."""

    user_id: Optional[int]


@dataclass
class ListInvitationsQuery:
    """Query for pending invitations of the caller's team."""

    user_id: Optional[int]


@dataclass
class PreviewInvitationQuery:
    """Public query for invitation details by token."""

    token: Optional[str]

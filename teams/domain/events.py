"""
Team domain events.
"""
import uuid

from core.domain.events import DomainEvent


class TeamCreated(DomainEvent):
    """Event raised when a team is created."""

    def __init__(self, team_id: uuid.UUID, owner_id: uuid.UUID, transferred_licenses: int):
        super().__init__(aggregate_id=str(team_id))
        self.team_id = team_id
        self.owner_id = owner_id
        self.transferred_licenses = transferred_licenses

    def payload(self):
        return {
            "owner_id": str(self.owner_id),
            "transferred_licenses": self.transferred_licenses,
        }


class MemberInvited(DomainEvent):
    """Event raised when an invitation is created."""

    def __init__(self, team_id: uuid.UUID, invitation_id: uuid.UUID, email: str, role: str):
        super().__init__(aggregate_id=str(team_id))
        self.team_id = team_id
        self.invitation_id = invitation_id
        self.email = email
        self.role = role

    def payload(self):
        return {"invitation_id": str(self.invitation_id), "email": self.email, "role": self.role}


class MemberJoined(DomainEvent):
    """Event raised when an invitation is accepted."""

    def __init__(self, team_id: uuid.UUID, admin_id: uuid.UUID, role: str):
        super().__init__(aggregate_id=str(team_id))
        self.team_id = team_id
        self.admin_id = admin_id
        self.role = role

    def payload(self):
        return {"admin_id": str(self.admin_id), "role": self.role}


class MemberRoleChanged(DomainEvent):
    """Event raised when a member's role changes."""

    def __init__(self, team_id: uuid.UUID, member_id: uuid.UUID, old_role: str, new_role: str):
        super().__init__(aggregate_id=str(team_id))
        self.team_id = team_id
        self.member_id = member_id
        self.old_role = old_role
        self.new_role = new_role

    def payload(self):
        return {
            "member_id": str(self.member_id),
            "old_role": self.old_role,
            "new_role": self.new_role,
        }


class MemberRemoved(DomainEvent):
    """Event raised when a member is removed."""

    def __init__(self, team_id: uuid.UUID, member_id: uuid.UUID, admin_id: uuid.UUID):
        super().__init__(aggregate_id=str(team_id))
        self.team_id = team_id
        self.member_id = member_id
        self.admin_id = admin_id

    def payload(self):
        return {"member_id": str(self.member_id), "admin_id": str(self.admin_id)}

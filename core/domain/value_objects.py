"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import uuid
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object, always stored trimmed and lower-cased."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")

    @classmethod
    def parse(cls, raw: str) -> "Email":
        """
        Normalize and validate a raw email string.

        Args:
            raw: Email as typed by a user

        Returns:
            Email value object

        Raises:
            ValueError: If the email is malformed
        """
        return cls((raw or "").strip().lower())

    @classmethod
    def is_valid(cls, raw: str) -> bool:
        """Check whether a raw string parses as an email."""
        try:
            cls.parse(raw)
        except ValueError:
            return False
        return True

    @property
    def domain(self) -> str:
        """Part after the last @."""
        return self.value.rsplit("@", 1)[1]

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


@dataclass(frozen=True)
class SoloScope(ValueObject):
    """Licenses and seats owned by a single admin without a team."""

    admin_id: uuid.UUID

    @property
    def kind(self) -> str:
        return "solo"

    @property
    def owner_id(self) -> uuid.UUID:
        return self.admin_id


@dataclass(frozen=True)
class TeamScope(ValueObject):
    """Licenses and seats shared by every member of a team."""

    team_id: uuid.UUID

    @property
    def kind(self) -> str:
        return "team"

    @property
    def owner_id(self) -> uuid.UUID:
        return self.team_id


Scope = Union[SoloScope, TeamScope]


def scope_from(kind: str, owner_id: uuid.UUID) -> Scope:
    """Rebuild a scope from its serialized kind and owner id."""
    if kind == "team":
        return TeamScope(team_id=owner_id)
    if kind == "solo":
        return SoloScope(admin_id=owner_id)
    raise ValueError(f"Unknown scope kind: {kind}")


class TeamRole(Enum):
    """Role of an admin inside a team."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"

    def __str__(self) -> str:
        """Return role as string."""
        return self.value

    @classmethod
    def assignable(cls) -> tuple:
        """Roles that can be granted through invitations or role changes."""
        return (cls.ADMIN, cls.MEMBER)


class InvitationStatus(Enum):
    """Invitation status value object."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REVOKED = "revoked"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class EmailStatus:
    """Well-known delivery states recorded on a license."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    UNKNOWN = "unknown"


class ActivityType(Enum):
    """Kinds of entries written to the activity journal."""

    LICENSE_ADDED = "license_added"
    LICENSE_REMOVED = "license_removed"
    LICENSE_ACTIVATED = "license_activated"
    LICENSE_RESEND = "license_resend"
    LICENSE_EMAIL_UPDATED = "license_email_updated"
    LICENSES_IMPORTED = "licenses_imported"
    LICENSES_PURCHASED = "licenses_purchased"
    MEMBER_INVITED = "member_invited"
    MEMBER_JOINED = "member_joined"
    MEMBER_REMOVED = "member_removed"
    MEMBER_ROLE_CHANGED = "member_role_changed"
    TEAM_SETTINGS_UPDATED = "team_settings_updated"
    INVITATION_REVOKED = "invitation_revoked"

    def __str__(self) -> str:
        """Return activity type as string."""
        return self.value

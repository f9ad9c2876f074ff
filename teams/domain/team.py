"""
Team domain entity.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class Team:
    """
    A team of administrators sharing one seat pool.

    Once a team exists its ``purchased_license_count`` is the
    authoritative seat counter for every member.
    """

    id: uuid.UUID
    name: str
    domain: str
    owner_id: uuid.UUID
    purchased_license_count: int
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate team entity."""
        if not self.name or not self.name.strip():
            raise ValueError("Team name is required")
        if not self.domain:
            raise ValueError("Team domain is required")
        if self.purchased_license_count < 0:
            raise ValueError("Purchased license count cannot be negative")

    @classmethod
    def create(
        cls,
        name: str,
        domain: str,
        owner_id: uuid.UUID,
        purchased_license_count: int = 0,
        team_id: Optional[uuid.UUID] = None,
    ) -> "Team":
        """
        Create a new Team entity.

        Args:
            name: Display name
            domain: Email domain every member must share
            owner_id: Admin UUID of the creator
            purchased_license_count: Seats carried over from the owner
            team_id: Optional UUID (generated if not provided)

        Returns:
            Team entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=team_id or uuid.uuid4(),
            name=name.strip(),
            domain=domain.lower(),
            owner_id=owner_id,
            purchased_license_count=purchased_license_count,
            created_at=now,
            updated_at=now,
        )

    def rename(self, name: str) -> "Team":
        """Return a copy with a new name."""
        return replace(self, name=name.strip(), updated_at=datetime.now(timezone.utc))

    def accepts_email_domain(self, domain: str) -> bool:
        """Check whether an email domain may join this team."""
        return domain.lower() == self.domain

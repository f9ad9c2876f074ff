"""
Admin domain entity.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from core.domain.value_objects import Email


@dataclass(frozen=True)
class Admin:
    """
    Portal administrator.

    ``purchased_license_count`` is the solo seat counter; it is only
    authoritative while the admin has no team.
    """

    id: uuid.UUID
    user_id: Optional[int]
    email: Email
    first_name: str
    last_name: str
    purchased_license_count: int
    created_at: datetime

    def __post_init__(self):
        """Validate admin entity."""
        if self.purchased_license_count < 0:
            raise ValueError("Purchased license count cannot be negative")

    @classmethod
    def create(
        cls,
        email: str,
        first_name: str = "",
        last_name: str = "",
        user_id: Optional[int] = None,
        purchased_license_count: int = 0,
        admin_id: Optional[uuid.UUID] = None,
    ) -> "Admin":
        """Create a new Admin entity."""
        return cls(
            id=admin_id or uuid.uuid4(),
            user_id=user_id,
            email=Email.parse(email),
            first_name=first_name,
            last_name=last_name,
            purchased_license_count=purchased_license_count,
            created_at=datetime.now(timezone.utc),
        )

    @property
    def full_name(self) -> str:
        """First and last name joined, falling back to the email."""
        name = f"{self.first_name} {self.last_name}".strip()
        return name or str(self.email)

    def with_purchased(self, count: int) -> "Admin":
        """Return a copy with a new solo seat counter."""
        return replace(self, purchased_license_count=count)

"""
License domain entity.

This is the core domain entity representing one assigned seat.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from core.domain.value_objects import Email, EmailStatus, Scope, SoloScope, TeamScope


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    A license is scoped to a team when ``team_id`` is set, otherwise to
    the solo admin in ``admin_id``. Activation is a one-way transition.
    """

    id: uuid.UUID
    email: Email
    admin_id: uuid.UUID
    team_id: Optional[uuid.UUID]
    performed_by: Optional[uuid.UUID]
    is_activated: bool
    business_name: str
    business_type: str
    message_id: Optional[str]
    email_status: str
    created_at: datetime
    activated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate license entity."""
        if not self.admin_id:
            raise ValueError("Admin ID is required")
        if self.is_activated and self.activated_at is None:
            raise ValueError("Activated licenses need an activation time")

    @classmethod
    def create(
        cls,
        email: Email,
        scope: Scope,
        admin_id: uuid.UUID,
        performed_by: Optional[uuid.UUID] = None,
        license_id: Optional[uuid.UUID] = None,
    ) -> "License":
        """
        Create a new, unactivated License entity.

        Args:
            email: Normalized end-user email
            scope: Owner scope the seat is drawn from
            admin_id: Admin the license is recorded against
            performed_by: Admin who performed the add (defaults to admin_id)
            license_id: Optional UUID (generated if not provided)

        Returns:
            License entity instance
        """
        team_id = scope.team_id if isinstance(scope, TeamScope) else None
        return cls(
            id=license_id or uuid.uuid4(),
            email=email,
            admin_id=admin_id,
            team_id=team_id,
            performed_by=performed_by or admin_id,
            is_activated=False,
            business_name="",
            business_type="",
            message_id=None,
            email_status=EmailStatus.PENDING,
            created_at=datetime.now(timezone.utc),
        )

    def belongs_to(self, scope: Scope) -> bool:
        """Check whether the license is counted against a scope."""
        if isinstance(scope, TeamScope):
            return self.team_id == scope.team_id
        if isinstance(scope, SoloScope):
            return self.team_id is None and self.admin_id == scope.admin_id
        return False

    @property
    def scope(self) -> Scope:
        """Owner scope the license is counted against."""
        if self.team_id is not None:
            return TeamScope(team_id=self.team_id)
        return SoloScope(admin_id=self.admin_id)

    @property
    def status_label(self) -> str:
        """Human label used in exports and listings."""
        return "Active" if self.is_activated else "Pending"

    def activate(
        self, business_name: str, business_type: str, current_time: Optional[datetime] = None
    ) -> "License":
        """
        Create a new License instance in the activated state.

        Args:
            business_name: Name of the activating business
            business_type: Type of the activating business
            current_time: Activation timestamp (defaults to now)

        Returns:
            New activated License instance
        """
        if self.is_activated:
            raise ValueError("License is already activated")
        return replace(
            self,
            is_activated=True,
            business_name=business_name,
            business_type=business_type,
            activated_at=current_time or datetime.now(timezone.utc),
        )

    def change_email(self, email: Email) -> "License":
        """
        Create a new License instance addressed to another email.

        Delivery state is reset because nothing was sent to the new address yet.
        """
        if self.is_activated:
            raise ValueError("Cannot edit email for activated licenses")
        return replace(self, email=email, message_id=None, email_status=EmailStatus.PENDING)

    def record_delivery(self, sent: bool, message_id: Optional[str] = None) -> "License":
        """Create a new License instance carrying the outcome of a dispatch."""
        if sent:
            return replace(self, message_id=message_id, email_status=EmailStatus.SENT)
        return replace(self, email_status=EmailStatus.FAILED)

    def with_email_status(self, email_status: str) -> "License":
        """Create a new License instance with a provider-reported status."""
        return replace(self, email_status=email_status)

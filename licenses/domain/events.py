"""
License domain events.

Domain events represent something that happened in the license ledger.
"""

import uuid
from typing import Optional

from core.domain.events import DomainEvent


class LicenseAdded(DomainEvent):
    """Event raised when a license is inserted into the ledger."""

    def __init__(
        self,
        license_id: uuid.UUID,
        email: str,
        scope_kind: str,
        performed_by: Optional[uuid.UUID],
        source: str = "single",
    ):
        """
        Initialize LicenseAdded event.

        Args:
            license_id: License UUID
            email: Licensed email
            scope_kind: "solo" or "team"
            performed_by: Admin who added the license
            source: "single", "batch" or "import"
        """
        super().__init__(aggregate_id=str(license_id))
        self.license_id = license_id
        self.email = email
        self.scope_kind = scope_kind
        self.performed_by = performed_by
        self.source = source

    def payload(self):
        return {"email": self.email, "scope": self.scope_kind, "source": self.source}


class LicenseRemoved(DomainEvent):
    """Event raised when a license is deleted."""

    def __init__(self, license_id: uuid.UUID, email: str, removed_by: uuid.UUID):
        super().__init__(aggregate_id=str(license_id))
        self.license_id = license_id
        self.email = email
        self.removed_by = removed_by

    def payload(self):
        return {"email": self.email, "removed_by": str(self.removed_by)}


class LicenseActivated(DomainEvent):
    """Event raised when the consumer application activates a license."""

    def __init__(self, license_id: uuid.UUID, business_type: str):
        super().__init__(aggregate_id=str(license_id))
        self.license_id = license_id
        self.business_type = business_type

    def payload(self):
        return {"business_type": self.business_type}


class LicenseEmailUpdated(DomainEvent):
    """Event raised when an unactivated license is re-addressed."""

    def __init__(self, license_id: uuid.UUID, old_email: str, new_email: str):
        super().__init__(aggregate_id=str(license_id))
        self.license_id = license_id
        self.old_email = old_email
        self.new_email = new_email

    def payload(self):
        return {"old_email": self.old_email, "new_email": self.new_email}


class SeatsPurchased(DomainEvent):
    """Event raised when seats are credited to an owner scope."""

    def __init__(self, scope_kind: str, owner_id: uuid.UUID, count: int, total: int):
        super().__init__(aggregate_id=str(owner_id))
        self.scope_kind = scope_kind
        self.owner_id = owner_id
        self.count = count
        self.total = total

    def payload(self):
        return {"scope": self.scope_kind, "count": self.count, "total": self.total}

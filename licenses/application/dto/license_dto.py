"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from accounts.domain.admin import Admin
from licenses.domain.license import License
from licenses.domain.services import SeatAccount


@dataclass
class AddedByDTO:
    """DTO for the admin who added a license."""

    id: uuid.UUID
    name: str
    email: str

    @classmethod
    def from_admin(cls, admin: Admin) -> "AddedByDTO":
        name = f"{admin.first_name} {admin.last_name}".strip()
        return cls(id=admin.id, name=name, email=str(admin.email))


@dataclass
class LicenseSummaryDTO:
    """DTO for a freshly inserted license."""

    id: uuid.UUID
    email: str
    is_activated: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, license: License) -> "LicenseSummaryDTO":
        return cls(
            id=license.id,
            email=str(license.email),
            is_activated=license.is_activated,
            created_at=license.created_at,
        )


@dataclass
class LicenseDTO:
    """DTO for license listings."""

    id: uuid.UUID
    email: str
    is_activated: bool
    activated_at: Optional[datetime]
    created_at: datetime
    business_name: str
    business_type: str
    message_id: Optional[str]
    email_status: str
    added_by: Optional[AddedByDTO] = None

    @classmethod
    def from_entity(cls, license: License, admins: Dict[uuid.UUID, Admin]) -> "LicenseDTO":
        added_by_id = license.performed_by or license.admin_id
        admin = admins.get(added_by_id)
        return cls(
            id=license.id,
            email=str(license.email),
            is_activated=license.is_activated,
            activated_at=license.activated_at,
            created_at=license.created_at,
            business_name=license.business_name,
            business_type=license.business_type,
            message_id=license.message_id,
            email_status=license.email_status,
            added_by=AddedByDTO.from_admin(admin) if admin else None,
        )


@dataclass
class SeatStatisticsDTO:
    """DTO for seat counters."""

    purchased: int
    assigned: int
    activated: int
    pending: int
    available: int
    total: int

    @classmethod
    def from_account(cls, account: SeatAccount) -> "SeatStatisticsDTO":
        return cls(**account.to_dict())


@dataclass
class LicenseListDTO:
    """DTO for the license list response."""

    licenses: List[LicenseDTO]
    statistics: SeatStatisticsDTO
    has_team: bool


@dataclass
class AddLicenseResultDTO:
    """DTO for the single add response."""

    message: str
    email_sent: bool
    license: LicenseSummaryDTO


@dataclass
class BatchResultDTO:
    """DTO for per-batch counts and per-item errors."""

    success: int = 0
    failed: int = 0
    emails_sent: int = 0
    emails_failed: int = 0
    errors: List[str] = field(default_factory=list)
    licenses: List[LicenseSummaryDTO] = field(default_factory=list)


@dataclass
class AddLicensesResultDTO:
    """DTO for batch add and CSV import responses."""

    message: str
    results: BatchResultDTO


@dataclass
class ActivatedLicenseDTO:
    """DTO for the activation response."""

    id: uuid.UUID
    email: str
    business_name: str
    business_type: str
    is_activated: bool
    activated_at: Optional[datetime]


@dataclass
class VerifyLicenseDTO:
    """DTO for the public verification response."""

    verified: bool
    is_activated: bool


@dataclass
class EmailStatusDTO:
    """DTO for one synced delivery status."""

    license_id: uuid.UUID
    email: str
    message_id: str
    status: str


@dataclass
class EmailStatusSyncDTO:
    """DTO for the email status sync response."""

    message: str
    synced: int
    statuses: List[EmailStatusDTO] = field(default_factory=list)


@dataclass
class PurchaseResultDTO:
    """DTO for a seat credit."""

    scope_kind: str
    owner_id: uuid.UUID
    licenses_added: int
    total_licenses: int


@dataclass
class LicenseExportDTO:
    """DTO for a CSV export."""

    filename: str
    content: str

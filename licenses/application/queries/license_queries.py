"""
License read queries.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class ListLicensesQuery:
    """Query to list the caller's licenses with statistics."""

    user_id: Optional[int]


@dataclass
class GetLicenseStatsQuery:
    """Query to read the caller's seat counters."""

    user_id: Optional[int]


@dataclass
class ExportLicensesQuery:
    """Query to export the caller's licenses as CSV."""

    user_id: Optional[int]


@dataclass
class VerifyLicenseQuery:
    """Public query to check whether a license id exists."""

    license_id: uuid.UUID

"""
Admin repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from accounts.domain.admin import Admin


class AdminRepository(ABC):
    """Abstract repository for Admin entities."""

    @abstractmethod
    async def save(self, admin: Admin) -> Admin:
        """Save an admin entity."""

    @abstractmethod
    async def find_by_id(self, admin_id: uuid.UUID) -> Optional[Admin]:
        """Find an admin by ID."""

    @abstractmethod
    async def find_by_user_id(self, user_id: int) -> Optional[Admin]:
        """Find the admin bound to a session user."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Admin]:
        """Find an admin by normalized email."""

    @abstractmethod
    async def find_many(self, admin_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, Admin]:
        """
        Load several admins at once.

        Args:
            admin_ids: Admin UUIDs (duplicates allowed)

        Returns:
            Mapping of admin id to entity; unknown ids are omitted
        """

    @abstractmethod
    async def add_purchased_seats(self, admin_id: uuid.UUID, count: int) -> int:
        """
        Atomically add seats to the solo counter.

        Returns:
            The new counter value
        """

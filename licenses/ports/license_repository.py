"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set

from core.domain.value_objects import Scope
from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    Every query that lists or counts licenses takes an explicit scope.
    """

    @abstractmethod
    async def save(self, license: License) -> License:
        """
        Insert or update a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """

    @abstractmethod
    async def save_many(self, licenses: List[License]) -> List[License]:
        """Insert several new licenses."""

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID, regardless of scope.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """

    @abstractmethod
    async def find_in_scope(self, license_id: uuid.UUID, scope: Scope) -> Optional[License]:
        """Find a license by ID only if it belongs to the scope."""

    @abstractmethod
    async def list_by_scope(self, scope: Scope) -> List[License]:
        """List every license in a scope, newest first."""

    @abstractmethod
    async def list_with_message_id(self, scope: Scope) -> List[License]:
        """List licenses in a scope that have a provider message id."""

    @abstractmethod
    async def scopes_with_message_id(self) -> List[Scope]:
        """Every scope holding at least one license with a provider message id."""

    @abstractmethod
    async def existing_emails(self, scope: Scope, emails: Iterable[str]) -> Set[str]:
        """
        Return which of the given normalized emails are already licensed in scope.

        Args:
            scope: Owner scope
            emails: Normalized emails to check

        Returns:
            Subset of ``emails`` already present
        """

    @abstractmethod
    async def exists_in_scope(
        self, scope: Scope, email: str, exclude_id: Optional[uuid.UUID] = None
    ) -> bool:
        """Check whether an email is licensed in scope, optionally ignoring one license."""

    @abstractmethod
    async def count_by_scope(self, scope: Scope) -> tuple:
        """
        Count licenses in a scope.

        Returns:
            Tuple of (assigned, activated)
        """

    @abstractmethod
    async def delete(self, license_id: uuid.UUID) -> None:
        """Delete a license."""

    @abstractmethod
    async def update_email_status(self, license_id: uuid.UUID, email_status: str) -> None:
        """Persist a provider-reported delivery status."""

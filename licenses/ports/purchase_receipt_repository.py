"""
Purchase receipt repository port.
"""
from abc import ABC, abstractmethod

from core.domain.value_objects import Scope


class PurchaseReceiptRepository(ABC):
    """Remembers processed payment references so a replay credits nothing."""

    @abstractmethod
    async def record_if_new(self, reference: str, scope: Scope, license_count: int) -> bool:
        """
        Record a payment reference.

        Args:
            reference: Payment provider reference
            scope: Scope that received the seats
            license_count: Seats credited

        Returns:
            True if the reference was new, False if it was already recorded
        """

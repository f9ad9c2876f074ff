"""
Django implementation of PurchaseReceiptRepository port.
"""
from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from core.domain.value_objects import Scope
from licenses.infrastructure.models import PurchaseReceipt
from licenses.ports.purchase_receipt_repository import PurchaseReceiptRepository


class DjangoPurchaseReceiptRepository(PurchaseReceiptRepository):
    """Django ORM implementation of PurchaseReceiptRepository."""

    @sync_to_async
    def record_if_new(self, reference: str, scope: Scope, license_count: int) -> bool:
        """Insert a receipt unless the reference was already processed."""
        try:
            with transaction.atomic():
                PurchaseReceipt.objects.create(
                    reference=reference,
                    scope_kind=scope.kind,
                    owner_id=scope.owner_id,
                    license_count=license_count,
                )
        except IntegrityError:
            return False
        return True

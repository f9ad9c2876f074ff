"""
Models of the licenses app; defined in the infrastructure layer.
"""
from licenses.infrastructure.models import License, PurchaseReceipt  # noqa: F401

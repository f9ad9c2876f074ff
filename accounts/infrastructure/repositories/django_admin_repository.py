"""
Django implementation of AdminRepository port.
"""
import uuid
from typing import Dict, Iterable, Optional

from asgiref.sync import sync_to_async
from django.db.models import F

from accounts.domain.admin import Admin
from accounts.infrastructure.models import Admin as AdminModel
from accounts.ports.admin_repository import AdminRepository
from core.domain.value_objects import Email


class DjangoAdminRepository(AdminRepository):
    """Django ORM implementation of AdminRepository."""

    def _to_domain(self, model: AdminModel) -> Admin:
        """Convert Django model to domain entity."""
        return Admin(
            id=model.id,
            user_id=model.user_id,
            email=Email(model.email),
            first_name=model.first_name,
            last_name=model.last_name,
            purchased_license_count=model.purchased_license_count,
            created_at=model.created_at,
        )

    @sync_to_async
    def save(self, admin: Admin) -> Admin:
        """Insert or update an admin."""
        model, _ = AdminModel.objects.update_or_create(
            id=admin.id,
            defaults={
                "user_id": admin.user_id,
                "email": str(admin.email),
                "first_name": admin.first_name,
                "last_name": admin.last_name,
                "purchased_license_count": admin.purchased_license_count,
            },
        )
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, admin_id: uuid.UUID) -> Optional[Admin]:
        """Find an admin by ID."""
        try:
            return self._to_domain(AdminModel.objects.get(id=admin_id))
        except AdminModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_user_id(self, user_id: int) -> Optional[Admin]:
        """Find the admin bound to a session user."""
        model = AdminModel.objects.filter(user_id=user_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_email(self, email: str) -> Optional[Admin]:
        """Find an admin by email, case-insensitively."""
        model = AdminModel.objects.filter(email__iexact=email.strip()).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_many(self, admin_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, Admin]:
        """Load several admins at once."""
        ids = {admin_id for admin_id in admin_ids if admin_id}
        if not ids:
            return {}
        return {model.id: self._to_domain(model) for model in AdminModel.objects.filter(id__in=ids)}

    @sync_to_async
    def add_purchased_seats(self, admin_id: uuid.UUID, count: int) -> int:
        """Atomically add seats to the solo counter."""
        AdminModel.objects.filter(id=admin_id).update(
            purchased_license_count=F("purchased_license_count") + count
        )
        return AdminModel.objects.values_list("purchased_license_count", flat=True).get(id=admin_id)

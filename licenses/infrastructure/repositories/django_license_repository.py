"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import Iterable, List, Optional, Set

from asgiref.sync import sync_to_async
from django.db.models import Count, Q, QuerySet

from core.domain.value_objects import Email, Scope, SoloScope, TeamScope
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Translates a Scope into a queryset filter
    3. Implements repository interface
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            id=model.id,
            email=Email(model.email),
            admin_id=model.admin_id,
            team_id=model.team_id,
            performed_by=model.performed_by_id,
            is_activated=model.is_activated,
            business_name=model.business_name,
            business_type=model.business_type,
            message_id=model.message_id,
            email_status=model.email_status,
            created_at=model.created_at,
            activated_at=model.activated_at,
        )

    def _fields(self, license: License) -> dict:
        return {
            "email": str(license.email),
            "admin_id": license.admin_id,
            "team_id": license.team_id,
            "performed_by_id": license.performed_by,
            "is_activated": license.is_activated,
            "business_name": license.business_name,
            "business_type": license.business_type,
            "message_id": license.message_id,
            "email_status": license.email_status,
            "created_at": license.created_at,
            "activated_at": license.activated_at,
        }

    def _scoped(self, scope: Scope) -> QuerySet:
        """Queryset of every license counted against a scope."""
        if isinstance(scope, TeamScope):
            return LicenseModel.objects.filter(team_id=scope.team_id)
        if isinstance(scope, SoloScope):
            return LicenseModel.objects.filter(admin_id=scope.admin_id, team__isnull=True)
        raise ValueError(f"Unsupported scope: {scope!r}")

    @sync_to_async
    def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        model, _ = LicenseModel.objects.update_or_create(
            id=license.id, defaults=self._fields(license)
        )
        return self._to_domain(model)

    @sync_to_async
    def save_many(self, licenses: List[License]) -> List[License]:
        """Bulk insert new licenses."""
        models = LicenseModel.objects.bulk_create(
            [LicenseModel(id=license.id, **self._fields(license)) for license in licenses]
        )
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        try:
            return self._to_domain(LicenseModel.objects.get(id=license_id))
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def find_in_scope(self, license_id: uuid.UUID, scope: Scope) -> Optional[License]:
        """Find a license by ID inside a scope."""
        model = self._scoped(scope).filter(id=license_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def list_by_scope(self, scope: Scope) -> List[License]:
        """List licenses in a scope, newest first."""
        return [self._to_domain(model) for model in self._scoped(scope).order_by("-created_at")]

    @sync_to_async
    def list_with_message_id(self, scope: Scope) -> List[License]:
        """List licenses in a scope that carry a provider message id."""
        models = (
            self._scoped(scope)
            .exclude(message_id__isnull=True)
            .exclude(message_id="")
            .order_by("created_at")
        )
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def scopes_with_message_id(self) -> List[Scope]:
        """Every scope holding at least one license with a provider message id."""
        rows = (
            LicenseModel.objects.exclude(message_id__isnull=True)
            .exclude(message_id="")
            .values_list("team_id", "admin_id")
            .distinct()
        )
        scopes = {
            TeamScope(team_id=team_id) if team_id else SoloScope(admin_id=admin_id)
            for team_id, admin_id in rows
        }
        return sorted(scopes, key=lambda scope: (scope.kind, str(scope.owner_id)))

    @sync_to_async
    def existing_emails(self, scope: Scope, emails: Iterable[str]) -> Set[str]:
        """Return which normalized emails are already licensed in scope."""
        emails = list(emails)
        if not emails:
            return set()
        return set(
            self._scoped(scope).filter(email__in=emails).values_list("email", flat=True)
        )

    @sync_to_async
    def exists_in_scope(
        self, scope: Scope, email: str, exclude_id: Optional[uuid.UUID] = None
    ) -> bool:
        """Check whether an email is licensed in scope."""
        queryset = self._scoped(scope).filter(email=email)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    @sync_to_async
    def count_by_scope(self, scope: Scope) -> tuple:
        """Count (assigned, activated) licenses in a scope."""
        counts = self._scoped(scope).aggregate(
            assigned=Count("id"), activated=Count("id", filter=Q(is_activated=True))
        )
        return counts["assigned"], counts["activated"]

    @sync_to_async
    def delete(self, license_id: uuid.UUID) -> None:
        """Delete a license."""
        LicenseModel.objects.filter(id=license_id).delete()

    @sync_to_async
    def update_email_status(self, license_id: uuid.UUID, email_status: str) -> None:
        """Persist a provider-reported delivery status."""
        LicenseModel.objects.filter(id=license_id).update(email_status=email_status)

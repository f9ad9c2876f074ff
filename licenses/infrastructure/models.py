"""
License and PurchaseReceipt models.
"""
import uuid

from django.db import models
from django.db.models import Q


class License(models.Model):
    """
    One seat assigned to an end-user email.

    Scoped to ``team`` when set, otherwise to ``admin`` alone.
    """

    EMAIL_STATUS_CHOICES = [
        ("pending", "Pending"),
        ("sent", "Sent"),
        ("failed", "Failed"),
        ("delivered", "Delivered"),
        ("unknown", "Unknown"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(db_index=True, help_text="Stored trimmed and lower-cased")
    admin = models.ForeignKey("accounts.Admin", on_delete=models.CASCADE, related_name="licenses")
    team = models.ForeignKey(
        "teams.Team", on_delete=models.CASCADE, related_name="licenses", null=True, blank=True
    )
    performed_by = models.ForeignKey(
        "accounts.Admin",
        on_delete=models.SET_NULL,
        related_name="performed_licenses",
        null=True,
        blank=True,
    )
    is_activated = models.BooleanField(default=False, db_index=True)
    business_name = models.CharField(max_length=255, blank=True, default="")
    business_type = models.CharField(max_length=255, blank=True, default="")
    message_id = models.CharField(max_length=255, null=True, blank=True)
    # Provider events (delivered, bounced, ...) are stored verbatim
    email_status = models.CharField(max_length=50, default="pending")
    created_at = models.DateTimeField()
    activated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["team", "email"],
                condition=Q(team__isnull=False),
                name="unique_license_email_per_team",
            ),
            models.UniqueConstraint(
                fields=["admin", "email"],
                condition=Q(team__isnull=True),
                name="unique_license_email_per_solo_admin",
            ),
        ]
        indexes = [
            models.Index(fields=["team", "created_at"], name="licenses_team_created_idx"),
            models.Index(fields=["admin", "team"], name="licenses_admin_team_idx"),
        ]

    def __str__(self):
        return self.email


class PurchaseReceipt(models.Model):
    """
    A processed payment callback.

    The unique ``reference`` makes seat credits idempotent.
    """

    SCOPE_CHOICES = [("solo", "Solo"), ("team", "Team")]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    reference = models.CharField(max_length=255, unique=True, db_index=True)
    scope_kind = models.CharField(max_length=10, choices=SCOPE_CHOICES)
    owner_id = models.UUIDField(help_text="Admin id for solo scope, team id for team scope")
    license_count = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "purchase_receipts"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.reference} (+{self.license_count})"

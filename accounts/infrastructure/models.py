"""
Admin model.
"""
import uuid

from django.conf import settings
from django.db import models


class Admin(models.Model):
    """
    A portal administrator.

    Bound one-to-one to a Django auth user; the session identity
    is resolved through that user.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="portal_admin",
        null=True,
        blank=True,
    )
    email = models.EmailField(unique=True, db_index=True)
    first_name = models.CharField(max_length=150, blank=True, default="")
    last_name = models.CharField(max_length=150, blank=True, default="")
    purchased_license_count = models.PositiveIntegerField(
        default=0, help_text="Solo seat counter, used only while the admin has no team"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "admins"
        ordering = ["-created_at"]

    def __str__(self):
        return self.email

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or self.email

"""
Django admin configuration for accounts app.
"""
from django.contrib import admin

from accounts.infrastructure.models import Admin


@admin.register(Admin)
class AdminAdmin(admin.ModelAdmin):
    """Admin interface for portal Admin model."""

    list_display = ["email", "full_name", "purchased_license_count", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["email", "first_name", "last_name"]
    readonly_fields = ["id", "created_at", "updated_at"]
    raw_id_fields = ["user"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "user", "email", "first_name", "last_name"),
            },
        ),
        (
            "Seats",
            {
                "fields": ("purchased_license_count",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

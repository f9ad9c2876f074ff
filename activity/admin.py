"""
Django admin configuration for activity app.

The journal is append-only, so entries are read-only here.
"""
from django.contrib import admin

from activity.infrastructure.models import ActivityLog


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    """Read-only admin interface for ActivityLog model."""

    list_display = ["activity_type", "description", "team", "admin", "created_at"]
    list_filter = ["activity_type", "created_at"]
    search_fields = ["description", "team__name", "admin__email"]
    readonly_fields = [
        "id",
        "team",
        "admin",
        "activity_type",
        "description",
        "metadata",
        "created_at",
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

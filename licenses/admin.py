"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import License, PurchaseReceipt


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "email",
        "admin",
        "team",
        "activation_badge",
        "email_status",
        "created_at",
    ]
    list_filter = ["is_activated", "email_status", "created_at"]
    search_fields = ["email", "business_name", "admin__email", "team__name"]
    readonly_fields = ["id", "message_id", "created_at", "activated_at"]
    raw_id_fields = ["admin", "team", "performed_by"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "email", "admin", "team", "performed_by"),
            },
        ),
        (
            "Activation",
            {
                "fields": ("is_activated", "activated_at", "business_name", "business_type"),
            },
        ),
        (
            "Delivery",
            {
                "fields": ("message_id", "email_status"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at",),
                "classes": ("collapse",),
            },
        ),
    )

    def activation_badge(self, obj):
        """Display activation state with color coding."""
        color, label = ("green", "Active") if obj.is_activated else ("orange", "Pending")
        return format_html('<span style="color: {};">{}</span>', color, label)

    activation_badge.short_description = "Status"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("admin", "team")


@admin.register(PurchaseReceipt)
class PurchaseReceiptAdmin(admin.ModelAdmin):
    """Admin interface for PurchaseReceipt model."""

    list_display = ["reference", "scope_kind", "owner_id", "license_count", "created_at"]
    list_filter = ["scope_kind", "created_at"]
    search_fields = ["reference"]
    readonly_fields = ["id", "reference", "scope_kind", "owner_id", "license_count", "created_at"]

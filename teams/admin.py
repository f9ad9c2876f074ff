"""
Django admin configuration for teams app.
"""
from django.contrib import admin

from teams.infrastructure.models import Team, TeamInvitation, TeamMember


class TeamMemberInline(admin.TabularInline):
    """Inline memberships on the team page."""

    model = TeamMember
    extra = 0
    raw_id_fields = ["admin"]
    readonly_fields = ["joined_at"]


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    """Admin interface for Team model."""

    list_display = ["name", "domain", "owner", "purchased_license_count", "member_count", "created_at"]
    list_filter = ["domain", "created_at"]
    search_fields = ["name", "domain", "owner__email"]
    readonly_fields = ["id", "created_at", "updated_at"]
    raw_id_fields = ["owner"]
    inlines = [TeamMemberInline]

    def member_count(self, obj):
        """Display number of members."""
        return obj.members.count()

    member_count.short_description = "Members"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("owner").prefetch_related("members")


@admin.register(TeamMember)
class TeamMemberAdmin(admin.ModelAdmin):
    """Admin interface for TeamMember model."""

    list_display = ["admin", "team", "role", "joined_at"]
    list_filter = ["role", "joined_at"]
    search_fields = ["admin__email", "team__name"]
    raw_id_fields = ["admin", "team"]


@admin.register(TeamInvitation)
class TeamInvitationAdmin(admin.ModelAdmin):
    """Admin interface for TeamInvitation model."""

    list_display = ["email", "team", "role", "status", "expires_at", "created_at"]
    list_filter = ["status", "role", "created_at"]
    search_fields = ["email", "team__name"]
    readonly_fields = ["id", "token", "created_at", "accepted_at"]
    raw_id_fields = ["team", "invited_by"]

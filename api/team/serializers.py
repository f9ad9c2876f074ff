"""
Serializers for the team and activity API.

Request serializers check the body's shape; the handlers own the
field rules and their messages.
"""

from rest_framework import serializers


def _optional_text(**kwargs) -> serializers.CharField:
    return serializers.CharField(required=False, allow_blank=True, allow_null=True, **kwargs)


class UpdateTeamRequestSerializer(serializers.Serializer):
    """Serializer for the rename request."""

    name = _optional_text(max_length=255)


class CreateTeamRequestSerializer(serializers.Serializer):
    """Serializer for the create team request."""

    name = _optional_text(max_length=255)


class InviteMemberRequestSerializer(serializers.Serializer):
    """Serializer for the invite request; role is `admin` or `member`."""

    email = _optional_text()
    role = serializers.CharField(default="member", allow_null=True)


class CancelInvitationRequestSerializer(serializers.Serializer):
    """Serializer for the cancel invitation request."""

    invitationId = _optional_text(source="invitation_id")


class InvitationTokenSerializer(serializers.Serializer):
    """Serializer for requests carrying an invitation token."""

    token = _optional_text()


class ChangeMemberRoleRequestSerializer(serializers.Serializer):
    """Serializer for the change role request; role is `admin` or `member`."""

    memberId = _optional_text(source="member_id")
    role = _optional_text()


class RemoveMemberRequestSerializer(serializers.Serializer):
    """Serializer for the remove member request."""

    memberId = _optional_text(source="member_id")


class ActivityFilterSerializer(serializers.Serializer):
    """Serializer documenting the activity query string."""

    limit = serializers.IntegerField(required=False, min_value=1, max_value=100)
    offset = serializers.IntegerField(required=False, min_value=0)
    type = serializers.CharField(required=False)


class AdminSummarySerializer(serializers.Serializer):
    """Serializer for AdminSummaryDTO."""

    id = serializers.UUIDField()
    email = serializers.EmailField()
    firstName = serializers.CharField(source="first_name")
    lastName = serializers.CharField(source="last_name")


class TeamSerializer(serializers.Serializer):
    """Serializer for TeamDTO."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    domain = serializers.CharField()
    ownerId = serializers.UUIDField(source="owner_id")
    purchasedLicenseCount = serializers.IntegerField(source="purchased_license_count")
    createdAt = serializers.DateTimeField(source="created_at")


class TeamRefSerializer(serializers.Serializer):
    """Serializer for TeamRefDTO."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    domain = serializers.CharField()


class TeamMemberSerializer(serializers.Serializer):
    """Serializer for TeamMemberDTO."""

    id = serializers.UUIDField()
    teamId = serializers.UUIDField(source="team_id")
    role = serializers.CharField()
    joinedAt = serializers.DateTimeField(source="joined_at")
    admin = AdminSummarySerializer(allow_null=True)


class InvitationSerializer(serializers.Serializer):
    """Serializer for InvitationDTO."""

    id = serializers.UUIDField()
    email = serializers.EmailField()
    role = serializers.CharField()
    status = serializers.CharField()
    expiresAt = serializers.DateTimeField(source="expires_at")
    createdAt = serializers.DateTimeField(source="created_at")


class TeamOverviewSerializer(serializers.Serializer):
    """Serializer for TeamOverviewDTO."""

    hasTeam = serializers.BooleanField(source="has_team")
    team = TeamSerializer(allow_null=True)
    userRole = serializers.CharField(source="user_role", allow_null=True)
    isOwner = serializers.BooleanField(source="is_owner")
    members = TeamMemberSerializer(many=True)
    pendingInvitations = InvitationSerializer(source="pending_invitations", many=True)


class TeamMembersSerializer(serializers.Serializer):
    """Serializer for TeamMembersDTO."""

    members = TeamMemberSerializer(many=True)
    currentUserRole = serializers.CharField(source="current_user_role")


class InvitationCreatedSerializer(serializers.Serializer):
    """Serializer for InvitationCreatedDTO."""

    invitation = InvitationSerializer()
    emailSent = serializers.BooleanField(source="email_sent")


class InvitationPreviewSerializer(serializers.Serializer):
    """Serializer for InvitationPreviewDTO."""

    id = serializers.UUIDField()
    email = serializers.EmailField()
    role = serializers.CharField()
    expiresAt = serializers.DateTimeField(source="expires_at")
    team = TeamRefSerializer()
    inviter = AdminSummarySerializer(allow_null=True)


class AcceptedInvitationSerializer(serializers.Serializer):
    """Serializer for AcceptedInvitationDTO."""

    team = TeamRefSerializer()
    role = serializers.CharField()


class ActivityAdminSerializer(serializers.Serializer):
    """Serializer for ActivityAdminDTO."""

    id = serializers.UUIDField()
    email = serializers.EmailField()
    name = serializers.CharField()


class ActivitySerializer(serializers.Serializer):
    """Serializer for ActivityDTO."""

    id = serializers.UUIDField()
    activityType = serializers.CharField(source="activity_type")
    description = serializers.CharField()
    metadata = serializers.JSONField()
    createdAt = serializers.DateTimeField(source="created_at")
    admin = ActivityAdminSerializer(allow_null=True)


class ActivityPageSerializer(serializers.Serializer):
    """Serializer for ActivityPageDTO."""

    activities = ActivitySerializer(many=True)
    total = serializers.IntegerField()
    limit = serializers.IntegerField()
    offset = serializers.IntegerField()
    hasTeam = serializers.BooleanField(source="has_team")

"""
Team, TeamMember and TeamInvitation models.
"""
import uuid

from django.db import models


class Team(models.Model):
    """
    A team of admins sharing one seat pool.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    domain = models.CharField(max_length=255, help_text="Email domain members must share")
    owner = models.ForeignKey("accounts.Admin", on_delete=models.PROTECT, related_name="owned_teams")
    purchased_license_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "teams"
        ordering = ["-created_at"]

    def __str__(self):
        return self.name


class TeamMember(models.Model):
    """
    Membership of an admin in a team.

    ``admin`` is unique: one admin belongs to at most one team.
    """

    ROLE_CHOICES = [
        ("owner", "Owner"),
        ("admin", "Admin"),
        ("member", "Member"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="members")
    admin = models.OneToOneField(
        "accounts.Admin", on_delete=models.CASCADE, related_name="team_membership"
    )
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="member")
    joined_at = models.DateTimeField()

    class Meta:
        db_table = "team_members"
        ordering = ["joined_at"]
        indexes = [
            models.Index(fields=["team", "role"], name="team_members_team_role_idx"),
        ]

    def __str__(self):
        return f"{self.admin_id} @ {self.team_id} ({self.role})"


class TeamInvitation(models.Model):
    """
    A pending, accepted or revoked invitation to join a team.
    """

    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("accepted", "Accepted"),
        ("revoked", "Revoked"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="invitations")
    email = models.EmailField(db_index=True)
    role = models.CharField(max_length=20, choices=TeamMember.ROLE_CHOICES, default="member")
    token = models.CharField(max_length=128, unique=True, db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    invited_by = models.ForeignKey(
        "accounts.Admin",
        on_delete=models.SET_NULL,
        related_name="sent_invitations",
        null=True,
        blank=True,
    )
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField()
    accepted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "team_invitations"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["team", "status"], name="team_inv_team_status_idx"),
            models.Index(fields=["team", "email", "status"], name="team_inv_team_email_idx"),
        ]

    def __str__(self):
        return f"{self.email} -> {self.team_id} ({self.status})"

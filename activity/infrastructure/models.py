"""
ActivityLog model.
"""
import uuid

from django.db import models

from core.domain.value_objects import ActivityType


class ActivityLog(models.Model):
    """
    Immutable journal entry of a team action.
    """

    TYPE_CHOICES = [(t.value, t.value.replace("_", " ").title()) for t in ActivityType]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    team = models.ForeignKey("teams.Team", on_delete=models.CASCADE, related_name="activity_logs")
    admin = models.ForeignKey(
        "accounts.Admin",
        on_delete=models.SET_NULL,
        related_name="activity_logs",
        null=True,
        blank=True,
    )
    activity_type = models.CharField(max_length=50, choices=TYPE_CHOICES)
    description = models.TextField()
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField()

    class Meta:
        db_table = "activity_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["team", "created_at"], name="activity_team_created_idx"),
            models.Index(fields=["team", "activity_type"], name="activity_team_type_idx"),
        ]

    def __str__(self):
        return f"{self.activity_type} - {self.description}"

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("teams", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ActivityLog",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "activity_type",
                    models.CharField(
                        choices=[
                            ("license_added", "License Added"),
                            ("license_removed", "License Removed"),
                            ("license_activated", "License Activated"),
                            ("license_resend", "License Resend"),
                            ("license_email_updated", "License Email Updated"),
                            ("licenses_imported", "Licenses Imported"),
                            ("licenses_purchased", "Licenses Purchased"),
                            ("member_invited", "Member Invited"),
                            ("member_joined", "Member Joined"),
                            ("member_removed", "Member Removed"),
                            ("member_role_changed", "Member Role Changed"),
                            ("team_settings_updated", "Team Settings Updated"),
                            ("invitation_revoked", "Invitation Revoked"),
                        ],
                        max_length=50,
                    ),
                ),
                ("description", models.TextField()),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField()),
                (
                    "admin",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="activity_logs",
                        to="accounts.admin",
                    ),
                ),
                (
                    "team",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="activity_logs",
                        to="teams.team",
                    ),
                ),
            ],
            options={
                "db_table": "activity_logs",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["team", "created_at"], name="activity_team_created_idx"),
                    models.Index(fields=["team", "activity_type"], name="activity_team_type_idx"),
                ],
            },
        ),
    ]

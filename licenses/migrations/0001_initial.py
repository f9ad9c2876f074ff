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
            name="PurchaseReceipt",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("reference", models.CharField(db_index=True, max_length=255, unique=True)),
                (
                    "scope_kind",
                    models.CharField(choices=[("solo", "Solo"), ("team", "Team")], max_length=10),
                ),
                (
                    "owner_id",
                    models.UUIDField(help_text="Admin id for solo scope, team id for team scope"),
                ),
                ("license_count", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "purchase_receipts",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="License",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "email",
                    models.EmailField(
                        db_index=True, help_text="Stored trimmed and lower-cased", max_length=254
                    ),
                ),
                ("is_activated", models.BooleanField(db_index=True, default=False)),
                ("business_name", models.CharField(blank=True, default="", max_length=255)),
                ("business_type", models.CharField(blank=True, default="", max_length=255)),
                ("message_id", models.CharField(blank=True, max_length=255, null=True)),
                ("email_status", models.CharField(default="pending", max_length=50)),
                ("created_at", models.DateTimeField()),
                ("activated_at", models.DateTimeField(blank=True, null=True)),
                (
                    "admin",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="licenses",
                        to="accounts.admin",
                    ),
                ),
                (
                    "performed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="performed_licenses",
                        to="accounts.admin",
                    ),
                ),
                (
                    "team",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="licenses",
                        to="teams.team",
                    ),
                ),
            ],
            options={
                "db_table": "licenses",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["team", "created_at"], name="licenses_team_created_idx"),
                    models.Index(fields=["admin", "team"], name="licenses_admin_team_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("team__isnull", False)),
                        fields=("team", "email"),
                        name="unique_license_email_per_team",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("team__isnull", True)),
                        fields=("admin", "email"),
                        name="unique_license_email_per_solo_admin",
                    ),
                ],
            },
        ),
    ]

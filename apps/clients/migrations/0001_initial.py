import uuid

import django.db.models.deletion
from django.db import migrations, models

import apps.common.fields


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("coaches", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Client",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("full_name", models.CharField(max_length=255)),
                ("phone_number", models.CharField(blank=True, max_length=64)),
                ("normalized_phone", models.CharField(blank=True, max_length=32, null=True)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive"), ("paused", "Paused")],
                        default="active",
                        max_length=10,
                    ),
                ),
                (
                    "engagement_level",
                    models.CharField(
                        choices=[("low", "Low"), ("medium", "Medium"), ("high", "High")],
                        default="medium",
                        max_length=10,
                    ),
                ),
                ("custom_fields", models.JSONField(blank=True, default=dict)),
                (
                    "tags",
                    apps.common.fields.CompatArrayField(
                        base_field=models.CharField(max_length=50),
                        blank=True,
                        default=list,
                        size=None,
                    ),
                ),
                ("onboarded_at", models.DateTimeField(blank=True, null=True)),
                ("last_checkin_at", models.DateTimeField(blank=True, null=True)),
                ("total_checkins", models.PositiveIntegerField(default=0)),
                (
                    "coach",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="clients",
                        to="coaches.coach",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.AddConstraint(
            model_name="client",
            constraint=models.UniqueConstraint(
                condition=models.Q(("normalized_phone__isnull", False)),
                fields=("coach", "normalized_phone"),
                name="clients_unique_phone_per_coach",
            ),
        ),
        migrations.AddConstraint(
            model_name="client",
            constraint=models.UniqueConstraint(
                condition=models.Q(("email__isnull", False)),
                fields=("coach", "email"),
                name="clients_unique_email_per_coach",
            ),
        ),
    ]

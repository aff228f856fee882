import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models
from pgvector.django import VectorExtension

import apps.common.fields


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("coaches", "0001_initial"),
        ("clients", "0001_initial"),
    ]

    operations = [
        VectorExtension(),
        migrations.CreateModel(
            name="Checkin",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("client_name", models.CharField(max_length=255)),
                ("date", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("transcript", models.TextField()),
                (
                    "embedding",
                    apps.common.fields.CompatVectorField(blank=True, dimensions=1536, null=True),
                ),
                (
                    "tags",
                    apps.common.fields.CompatArrayField(
                        base_field=models.CharField(max_length=32),
                        blank=True,
                        default=list,
                        size=None,
                    ),
                ),
                ("raw_data", models.JSONField(default=dict)),
                ("external_event_id", models.CharField(blank=True, max_length=255, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending_response", "Pending response"),
                            ("responded", "Responded"),
                            ("archived", "Archived"),
                        ],
                        default="pending_response",
                        max_length=20,
                    ),
                ),
                (
                    "client",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="checkins",
                        to="clients.client",
                    ),
                ),
                (
                    "coach",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="checkins",
                        to="coaches.coach",
                    ),
                ),
            ],
            options={
                "ordering": ["-date"],
            },
        ),
        migrations.AddIndex(
            model_name="checkin",
            index=models.Index(fields=["coach", "date"], name="checkins_coach_date_idx"),
        ),
        migrations.AddIndex(
            model_name="checkin",
            index=models.Index(fields=["client", "date"], name="checkins_client_date_idx"),
        ),
        migrations.AddConstraint(
            model_name="checkin",
            constraint=models.UniqueConstraint(
                condition=models.Q(("external_event_id__isnull", False)),
                fields=("coach", "external_event_id"),
                name="checkins_unique_event_per_coach",
            ),
        ),
    ]

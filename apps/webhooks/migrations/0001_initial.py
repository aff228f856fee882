import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("coaches", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="WebhookSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("webhook_secret", models.CharField(blank=True, max_length=512)),
                ("integration_name", models.CharField(blank=True, max_length=255)),
                ("is_active", models.BooleanField(default=True)),
                (
                    "primary_identifier",
                    models.CharField(
                        choices=[("phone", "Phone"), ("email", "Email")],
                        default="phone",
                        max_length=10,
                    ),
                ),
                (
                    "fallback_identifier",
                    models.CharField(
                        choices=[("phone", "Phone"), ("email", "Email"), ("none", "None")],
                        default="email",
                        max_length=10,
                    ),
                ),
                ("auto_create_clients", models.BooleanField(default=True)),
                (
                    "new_client_status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive"), ("paused", "Paused")],
                        default="active",
                        max_length=10,
                    ),
                ),
                (
                    "new_client_engagement",
                    models.CharField(
                        choices=[("low", "Low"), ("medium", "Medium"), ("high", "High")],
                        default="medium",
                        max_length=10,
                    ),
                ),
                (
                    "coach",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="webhook_settings",
                        to="coaches.coach",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "webhook settings",
            },
        ),
        migrations.AddConstraint(
            model_name="webhooksettings",
            constraint=models.UniqueConstraint(
                condition=models.Q(("is_active", True)),
                fields=("coach",),
                name="webhooks_one_active_settings_per_coach",
            ),
        ),
        migrations.AddConstraint(
            model_name="webhooksettings",
            constraint=models.CheckConstraint(
                condition=models.Q(
                    ("fallback_identifier", "none"),
                    models.Q(("fallback_identifier", models.F("primary_identifier")), _negated=True),
                    _connector="OR",
                ),
                name="webhooks_fallback_differs_from_primary",
            ),
        ),
    ]

"""Domain models for the clients module."""

from django.db import models

from apps.coaches.models import Coach
from apps.common.fields import CompatArrayField
from apps.common.models import UUIDTimeStampedModel


class ClientStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"
    PAUSED = "paused", "Paused"


class EngagementLevel(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"


class Client(UUIDTimeStampedModel):
    """A coaching client. Phone and email are stored normalized for matching."""

    coach = models.ForeignKey(Coach, on_delete=models.CASCADE, related_name="clients")
    full_name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=64, blank=True)
    normalized_phone = models.CharField(max_length=32, null=True, blank=True)
    email = models.EmailField(null=True, blank=True)
    status = models.CharField(
        max_length=10, choices=ClientStatus.choices, default=ClientStatus.ACTIVE
    )
    engagement_level = models.CharField(
        max_length=10, choices=EngagementLevel.choices, default=EngagementLevel.MEDIUM
    )
    custom_fields = models.JSONField(default=dict, blank=True)
    tags = CompatArrayField(models.CharField(max_length=50), blank=True, default=list)
    onboarded_at = models.DateTimeField(null=True, blank=True)
    last_checkin_at = models.DateTimeField(null=True, blank=True)
    total_checkins = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["coach", "normalized_phone"],
                condition=models.Q(normalized_phone__isnull=False),
                name="clients_unique_phone_per_coach",
            ),
            models.UniqueConstraint(
                fields=["coach", "email"],
                condition=models.Q(email__isnull=False),
                name="clients_unique_email_per_coach",
            ),
        ]

    def __str__(self) -> str:
        return self.full_name

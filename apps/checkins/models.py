"""Domain models for the checkins module."""

from django.db import models
from django.utils import timezone

from apps.clients.models import Client
from apps.coaches.models import Coach
from apps.common.fields import CompatArrayField, CompatVectorField
from apps.common.models import UUIDTimeStampedModel


class CheckinStatus(models.TextChoices):
    PENDING_RESPONSE = "pending_response", "Pending response"
    RESPONDED = "responded", "Responded"
    ARCHIVED = "archived", "Archived"


class Checkin(UUIDTimeStampedModel):
    """One ingested submission. Written once by ingestion and never edited by it."""

    coach = models.ForeignKey(Coach, on_delete=models.CASCADE, related_name="checkins")
    client = models.ForeignKey(
        Client,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="checkins",
    )
    client_name = models.CharField(max_length=255)
    date = models.DateTimeField(default=timezone.now, db_index=True)
    transcript = models.TextField()
    embedding = CompatVectorField(dimensions=1536, null=True, blank=True)
    tags = CompatArrayField(models.CharField(max_length=32), default=list, blank=True)
    raw_data = models.JSONField(default=dict)
    external_event_id = models.CharField(max_length=255, null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=CheckinStatus.choices,
        default=CheckinStatus.PENDING_RESPONSE,
    )

    class Meta:
        ordering = ["-date"]
        indexes = [
            models.Index(fields=["coach", "date"], name="checkins_coach_date_idx"),
            models.Index(fields=["client", "date"], name="checkins_client_date_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["coach", "external_event_id"],
                condition=models.Q(external_event_id__isnull=False),
                name="checkins_unique_event_per_coach",
            ),
        ]

    def __str__(self) -> str:
        return f"Check-in from {self.client_name} on {self.date:%Y-%m-%d}"

"""Domain models for the coaches module."""

from django.db import models

from apps.common.models import UUIDTimeStampedModel


class Coach(UUIDTimeStampedModel):
    """Coach account; the tenant boundary for clients, check-ins and webhook settings."""

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    timezone = models.CharField(max_length=64, default="UTC")

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

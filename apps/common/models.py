import uuid

from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model with created/updated tracking."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class UUIDTimeStampedModel(TimeStampedModel):
    """Timestamped model keyed by a UUID, for ids that are handed to outside systems."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True

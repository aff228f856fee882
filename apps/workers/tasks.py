"""Celery tasks for check-in maintenance."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.utils import timezone

from apps.checkins.models import Checkin
from apps.llm.embeddings import EmbeddingClient

logger = logging.getLogger(__name__)

EMBEDDING_BACKFILL_BATCH_SIZE = int(getattr(settings, "EMBEDDING_BACKFILL_BATCH_SIZE", 25))
EMBEDDING_BACKFILL_LOOKBACK_HOURS = int(getattr(settings, "EMBEDDING_BACKFILL_LOOKBACK_HOURS", 72))


@shared_task
def backfill_checkin_embeddings() -> int:
    """Fill in embeddings for recent check-ins stored while the vendor was unavailable."""
    client = EmbeddingClient()
    if not client.is_configured:
        logger.info("embeddings.backfill_skipped", extra={"reason": "not_configured"})
        return 0

    cutoff = timezone.now() - timedelta(hours=EMBEDDING_BACKFILL_LOOKBACK_HOURS)
    pending = list(
        Checkin.objects.filter(embedding__isnull=True, created_at__gte=cutoff)
        .exclude(transcript="")
        .order_by("created_at")
        .values_list("id", "transcript")[:EMBEDDING_BACKFILL_BATCH_SIZE]
    )

    filled = 0
    for checkin_id, transcript in pending:
        vector = client.embed(transcript)
        if vector is None:
            continue
        # Only the embedding column; the rest of the row stays as ingested.
        filled += Checkin.objects.filter(pk=checkin_id, embedding__isnull=True).update(
            embedding=vector
        )

    logger.info(
        "embeddings.backfill_complete",
        extra={"pending": len(pending), "filled": filled},
    )
    return filled

"""Check-in ingestion: one pipeline for every provider shape."""

from __future__ import annotations

import logging
from typing import Any

from apps.checkins.extraction import extract_event_id, extract_identity
from apps.checkins.services import CheckinReceipt, find_checkin_by_event, record_checkin
from apps.checkins.tagging import suggest_tags
from apps.checkins.transcript import derive_transcript
from apps.clients.resolver import ClientResolver
from apps.llm.embeddings import EmbeddingClient
from apps.webhooks.models import WebhookSettings

logger = logging.getLogger(__name__)


class CheckinIngestionPipeline:
    """Identity, transcript, tags, embedding, client, then the check-in row.

    Nothing is written until the client is resolved, so a failure before that
    point leaves no trace in the database.
    """

    def __init__(self, embedder: EmbeddingClient | None = None) -> None:
        self.embedder = embedder or EmbeddingClient()

    def ingest(self, *, webhook_settings: WebhookSettings, payload: dict[str, Any]) -> CheckinReceipt:
        coach_id = webhook_settings.coach_id
        identity = extract_identity(payload)

        event_id = extract_event_id(payload)
        existing = find_checkin_by_event(coach_id, event_id)
        if existing is not None:
            logger.info(
                "checkin_webhook.redelivery",
                extra={"coach_id": str(coach_id), "checkin_id": str(existing.id)},
            )
            return CheckinReceipt.from_checkin(existing, duplicate=True)

        transcript = derive_transcript(payload)
        tags = suggest_tags(transcript)
        embedding = self.embedder.embed(transcript)

        client = ClientResolver(webhook_settings).resolve(
            name=identity.name,
            phone=identity.phone,
            email=identity.email,
            external_contact_id=identity.external_contact_id,
        )

        return record_checkin(
            coach_id=coach_id,
            client=client,
            client_name=identity.name,
            transcript=transcript,
            tags=tags,
            embedding=embedding,
            raw_data=payload,
            external_event_id=event_id,
        )

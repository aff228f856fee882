"""Persist check-ins and build webhook acknowledgements."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F

from apps.checkins.models import Checkin
from apps.clients.models import Client
from apps.common.utils import now_utc
from apps.webhooks.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CheckinReceipt:
    """Outcome of a stored check-in, shaped for the webhook acknowledgement."""

    checkin_id: str
    client_id: Optional[str]
    client_name: str
    transcript_length: int
    embedding_generated: bool
    suggested_tags: list[str]
    duplicate: bool = False

    @classmethod
    def from_checkin(cls, checkin: Checkin, *, duplicate: bool = False) -> "CheckinReceipt":
        return cls(
            checkin_id=str(checkin.id),
            client_id=str(checkin.client_id) if checkin.client_id else None,
            client_name=checkin.client_name,
            transcript_length=len(checkin.transcript),
            embedding_generated=checkin.embedding is not None,
            suggested_tags=list(checkin.tags or []),
            duplicate=duplicate,
        )

    def as_response(self) -> dict:
        return {
            "success": True,
            "message": (
                "Check-in already processed" if self.duplicate else "Check-in processed successfully"
            ),
            "checkin_id": self.checkin_id,
            "client_name": self.client_name,
            "transcript_length": self.transcript_length,
            "embedding_generated": self.embedding_generated,
            "suggested_tags": self.suggested_tags,
            "raw_data_stored": True,
        }


def find_checkin_by_event(coach_id, external_event_id: Optional[str]) -> Optional[Checkin]:
    if not external_event_id:
        return None
    try:
        return Checkin.objects.filter(
            coach_id=coach_id, external_event_id=external_event_id
        ).first()
    except DatabaseError as exc:
        raise StorageError("Check-in lookup failed", details=str(exc)) from exc


def record_checkin(
    *,
    coach_id,
    client: Client,
    client_name: str,
    transcript: str,
    tags: Sequence[str],
    embedding: Optional[Sequence[float]],
    raw_data: dict[str, Any],
    external_event_id: Optional[str] = None,
) -> CheckinReceipt:
    """Insert one check-in and bump the client's check-in counters."""
    submitted_at = now_utc()
    try:
        with transaction.atomic():
            checkin = Checkin.objects.create(
                coach_id=coach_id,
                client=client,
                client_name=client_name,
                date=submitted_at,
                transcript=transcript,
                embedding=list(embedding) if embedding is not None else None,
                tags=list(tags),
                raw_data=raw_data,
                external_event_id=external_event_id,
            )
            Client.objects.filter(pk=client.pk).update(
                total_checkins=F("total_checkins") + 1,
                last_checkin_at=submitted_at,
                updated_at=submitted_at,
            )
    except IntegrityError as exc:
        existing = find_checkin_by_event(coach_id, external_event_id)
        if existing is None:
            raise StorageError("Failed to store check-in", details=str(exc)) from exc
        logger.info(
            "checkin_writer.duplicate_event",
            extra={"coach_id": str(coach_id), "checkin_id": str(existing.id)},
        )
        return CheckinReceipt.from_checkin(existing, duplicate=True)
    except DatabaseError as exc:
        raise StorageError("Failed to store check-in", details=str(exc)) from exc

    logger.info(
        "checkin_writer.stored",
        extra={
            "coach_id": str(coach_id),
            "checkin_id": str(checkin.id),
            "client_id": str(client.pk),
            "embedding": embedding is not None,
        },
    )
    return CheckinReceipt(
        checkin_id=str(checkin.id),
        client_id=str(client.pk),
        client_name=client_name,
        transcript_length=len(transcript),
        embedding_generated=embedding is not None,
        suggested_tags=list(tags),
    )

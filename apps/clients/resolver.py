"""Match an inbound submission to a client, creating one when the coach allows it."""

from __future__ import annotations

import logging
from typing import Optional

from django.db import DatabaseError, IntegrityError, transaction

from apps.clients.models import Client
from apps.clients.utils import normalize_email, normalize_phone_number
from apps.common.utils import now_utc
from apps.webhooks.errors import ClientResolutionFailed, StorageError
from apps.webhooks.models import IdentifierChoices, WebhookSettings

logger = logging.getLogger(__name__)

WEBHOOK_CREATED_TAG = "webhook-created"

LOOKUP_FIELDS = {
    IdentifierChoices.PHONE: "normalized_phone",
    IdentifierChoices.EMAIL: "email",
}


class ClientResolver:
    """Resolve clients with a coach's identifier strategy.

    Lookups go primary identifier first, then the fallback. Creation relies on
    the per-coach unique constraints on phone and email: a concurrent insert of
    the same contact loses the race and re-reads the winner's row.
    """

    def __init__(self, webhook_settings: WebhookSettings) -> None:
        self.webhook_settings = webhook_settings
        self.coach_id = webhook_settings.coach_id

    def resolve(
        self,
        *,
        name: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        external_contact_id: Optional[str] = None,
    ) -> Client:
        identifiers = {
            IdentifierChoices.PHONE: normalize_phone_number(phone),
            IdentifierChoices.EMAIL: normalize_email(email),
        }

        for position, identifier in enumerate(self.webhook_settings.identifier_order()):
            client = self._find(identifier, identifiers.get(identifier))
            if client is not None:
                logger.info(
                    "client_resolver.matched",
                    extra={
                        "coach_id": str(self.coach_id),
                        "client_id": str(client.id),
                        "identifier": identifier,
                        "fallback": position > 0,
                    },
                )
                return client

        normalized_phone = identifiers[IdentifierChoices.PHONE]
        normalized_email = identifiers[IdentifierChoices.EMAIL]

        if not self.webhook_settings.auto_create_clients:
            raise ClientResolutionFailed(
                details=(
                    "No existing client found and auto-creation is disabled. "
                    f"Phone: {normalized_phone}, Email: {normalized_email}"
                )
            )
        if not normalized_phone and not normalized_email:
            raise ClientResolutionFailed(
                details="Cannot create client without phone number or email address"
            )

        return self._create(
            name=name,
            phone=phone or "",
            identifiers=identifiers,
            external_contact_id=external_contact_id,
        )

    def _find(self, identifier: str, value: Optional[str]) -> Optional[Client]:
        if not value:
            return None
        lookup = {LOOKUP_FIELDS[identifier]: value}
        try:
            return (
                Client.objects.filter(coach_id=self.coach_id, **lookup)
                .order_by("created_at")
                .first()
            )
        except DatabaseError as exc:
            raise StorageError("Client lookup failed", details=str(exc)) from exc

    def _create(
        self,
        *,
        name: str,
        phone: str,
        identifiers: dict[str, Optional[str]],
        external_contact_id: Optional[str],
    ) -> Client:
        phone_number = phone.strip()[: Client._meta.get_field("phone_number").max_length]
        try:
            with transaction.atomic():
                client = Client.objects.create(
                    coach_id=self.coach_id,
                    full_name=name,
                    phone_number=phone_number,
                    normalized_phone=identifiers[IdentifierChoices.PHONE],
                    email=identifiers[IdentifierChoices.EMAIL],
                    status=self.webhook_settings.new_client_status,
                    engagement_level=self.webhook_settings.new_client_engagement,
                    custom_fields={"external_id": external_contact_id} if external_contact_id else {},
                    tags=[WEBHOOK_CREATED_TAG],
                    onboarded_at=now_utc(),
                )
        except IntegrityError as exc:
            return self._recover_conflict(
                exc,
                name=name,
                phone=phone_number,
                identifiers=identifiers,
                external_contact_id=external_contact_id,
            )
        except DatabaseError as exc:
            raise StorageError("Failed to create client", details=str(exc)) from exc

        logger.info(
            "client_resolver.created",
            extra={"coach_id": str(self.coach_id), "client_id": str(client.id)},
        )
        return client

    def _recover_conflict(
        self,
        exc: IntegrityError,
        *,
        name: str,
        phone: str,
        identifiers: dict[str, Optional[str]],
        external_contact_id: Optional[str],
    ) -> Client:
        """Handle a unique-constraint conflict on client insert.

        A row reachable through the coach's own identifiers means another
        request created the same client first; that row is returned. A row
        that only shares an identifier the coach does not match on belongs to
        someone else, so the new client is created without that identifier.
        """
        order = self.webhook_settings.identifier_order()
        for identifier in order:
            existing = self._find(identifier, identifiers.get(identifier))
            if existing is not None:
                logger.warning(
                    "client_resolver.create_conflict",
                    extra={"coach_id": str(self.coach_id), "client_id": str(existing.id)},
                )
                return existing

        taken = [
            identifier
            for identifier, value in identifiers.items()
            if identifier not in order and self._find(identifier, value) is not None
        ]
        if not taken:
            raise StorageError("Failed to create client", details=str(exc)) from exc

        logger.warning(
            "client_resolver.identifier_taken",
            extra={"coach_id": str(self.coach_id), "identifiers": taken},
        )
        remaining = {
            identifier: None if identifier in taken else value
            for identifier, value in identifiers.items()
        }
        if not any(remaining.values()):
            raise ClientResolutionFailed(
                details=(
                    "Cannot create client: "
                    + ", ".join(taken)
                    + " already belongs to another client and is not used for matching"
                )
            ) from exc
        return self._create(
            name=name,
            phone=phone if remaining[IdentifierChoices.PHONE] else "",
            identifiers=remaining,
            external_contact_id=external_contact_id,
        )

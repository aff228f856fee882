"""Token check for the check-in webhook."""

from __future__ import annotations

import logging

from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError

from apps.common.security import secrets_match
from apps.webhooks.errors import StorageError, Unauthorized
from apps.webhooks.models import WebhookSettings

logger = logging.getLogger(__name__)


def authenticate_webhook(coach_id: str, token: str) -> WebhookSettings:
    """Return the coach's active settings when ``token`` equals the stored secret.

    Every failure raises the same ``Unauthorized``; the reason is only logged.
    """
    try:
        webhook_settings = (
            WebhookSettings.objects.select_related("coach")
            .filter(coach_id=coach_id, is_active=True)
            .first()
        )
    except DatabaseError as exc:
        raise StorageError("Webhook settings lookup failed", details=str(exc)) from exc

    if webhook_settings is None:
        logger.warning("checkin_webhook.settings_missing", extra={"coach_id": coach_id})
        raise Unauthorized()

    try:
        secret = webhook_settings.secret
    except ImproperlyConfigured:
        logger.error("checkin_webhook.secret_unreadable", extra={"coach_id": coach_id})
        raise Unauthorized()

    if not secret:
        logger.warning("checkin_webhook.secret_missing", extra={"coach_id": coach_id})
        raise Unauthorized()

    if not secrets_match(secret, token):
        logger.warning("checkin_webhook.token_mismatch", extra={"coach_id": coach_id})
        raise Unauthorized()

    return webhook_settings

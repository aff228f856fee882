"""Domain models for the webhooks module."""

from __future__ import annotations

import secrets

from django.db import models

from apps.clients.models import ClientStatus, EngagementLevel
from apps.coaches.models import Coach
from apps.common.models import TimeStampedModel
from apps.common.security import decrypt_secret, encrypt_secret


class IdentifierChoices(models.TextChoices):
    PHONE = "phone", "Phone"
    EMAIL = "email", "Email"


class FallbackIdentifierChoices(models.TextChoices):
    PHONE = "phone", "Phone"
    EMAIL = "email", "Email"
    NONE = "none", "None"


class WebhookSettings(TimeStampedModel):
    """Per-coach check-in webhook secret and client matching strategy."""

    coach = models.ForeignKey(
        Coach, on_delete=models.CASCADE, related_name="webhook_settings"
    )
    webhook_secret = models.CharField(max_length=512, blank=True)
    integration_name = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)
    primary_identifier = models.CharField(
        max_length=10, choices=IdentifierChoices.choices, default=IdentifierChoices.PHONE
    )
    fallback_identifier = models.CharField(
        max_length=10,
        choices=FallbackIdentifierChoices.choices,
        default=FallbackIdentifierChoices.EMAIL,
    )
    auto_create_clients = models.BooleanField(default=True)
    new_client_status = models.CharField(
        max_length=10, choices=ClientStatus.choices, default=ClientStatus.ACTIVE
    )
    new_client_engagement = models.CharField(
        max_length=10, choices=EngagementLevel.choices, default=EngagementLevel.MEDIUM
    )

    class Meta:
        verbose_name_plural = "webhook settings"
        constraints = [
            models.UniqueConstraint(
                fields=["coach"],
                condition=models.Q(is_active=True),
                name="webhooks_one_active_settings_per_coach",
            ),
            models.CheckConstraint(
                condition=models.Q(fallback_identifier=FallbackIdentifierChoices.NONE)
                | ~models.Q(fallback_identifier=models.F("primary_identifier")),
                name="webhooks_fallback_differs_from_primary",
            ),
        ]

    def __str__(self) -> str:
        return f"Webhook settings for {self.coach_id}"

    @property
    def secret(self) -> str:
        return decrypt_secret(self.webhook_secret)

    def set_secret(self, raw: str) -> None:
        self.webhook_secret = encrypt_secret(raw)

    def rotate_secret(self) -> str:
        """Assign a fresh secret and return its plaintext; the caller saves."""
        raw = secrets.token_urlsafe(32)
        self.set_secret(raw)
        return raw

    def identifier_order(self) -> list[str]:
        """Identifiers to try when matching a submission, in priority order."""
        order = [self.primary_identifier]
        fallback = self.fallback_identifier
        if fallback and fallback != FallbackIdentifierChoices.NONE and fallback != self.primary_identifier:
            order.append(fallback)
        return order

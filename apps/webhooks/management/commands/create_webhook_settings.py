"""Management command to create or rotate a coach's check-in webhook settings."""

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.coaches.models import Coach
from apps.webhooks.models import (
    FallbackIdentifierChoices,
    IdentifierChoices,
    WebhookSettings,
)


class Command(BaseCommand):
    help = "Create or rotate the active check-in webhook settings for a coach and print the webhook path."

    def add_arguments(self, parser):
        parser.add_argument("coach_id", help="UUID of the coach.")
        parser.add_argument(
            "--primary",
            choices=IdentifierChoices.values,
            help="Identifier used first to match clients.",
        )
        parser.add_argument(
            "--fallback",
            choices=FallbackIdentifierChoices.values,
            help="Identifier tried when the primary finds no client.",
        )
        parser.add_argument(
            "--no-auto-create",
            action="store_true",
            help="Reject submissions from unknown clients instead of creating them.",
        )
        parser.add_argument(
            "--integration-name",
            default="",
            help="Label for the form provider feeding this webhook.",
        )

    def handle(self, *args, **options):
        try:
            coach = Coach.objects.filter(pk=options["coach_id"]).first()
        except (ValueError, ValidationError) as exc:
            raise CommandError(f"Invalid coach id: {options['coach_id']}") from exc
        if coach is None:
            raise CommandError(f"Coach not found: {options['coach_id']}")

        with transaction.atomic():
            webhook_settings = (
                WebhookSettings.objects.select_for_update()
                .filter(coach=coach, is_active=True)
                .first()
            ) or WebhookSettings(coach=coach)
            created = webhook_settings.pk is None

            if options["primary"]:
                webhook_settings.primary_identifier = options["primary"]
            if options["fallback"]:
                webhook_settings.fallback_identifier = options["fallback"]
            if options["no_auto_create"]:
                webhook_settings.auto_create_clients = False
            if options["integration_name"]:
                webhook_settings.integration_name = options["integration_name"]

            if (
                webhook_settings.fallback_identifier != FallbackIdentifierChoices.NONE
                and webhook_settings.fallback_identifier == webhook_settings.primary_identifier
            ):
                raise CommandError("Fallback identifier must differ from the primary identifier.")

            secret = webhook_settings.rotate_secret()
            webhook_settings.save()

        verb = "Created" if created else "Rotated"
        self.stdout.write(self.style.SUCCESS(f"{verb} webhook settings for {coach.name}"))
        self.stdout.write(f"/webhook-checkin/{coach.id}/{secret}")

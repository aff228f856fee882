import pytest
from django.db import DatabaseError

from apps.clients.models import Client
from apps.coaches.models import Coach
from apps.clients.resolver import ClientResolver
from apps.clients.utils import normalize_email, normalize_phone_number
from apps.webhooks.errors import ClientResolutionFailed, StorageError

pytestmark = pytest.mark.django_db

CONTACT_UUID = "3f2b8c1e-9a4d-4e6b-8f0a-1c2d3e4f5a6b"


def _existing_client(coach, **overrides):
    fields = {
        "coach": coach,
        "full_name": "Existing Client",
        "phone_number": "555-123-4567",
        "normalized_phone": "5551234567",
        "email": "existing@example.com",
    }
    fields.update(overrides)
    return Client.objects.create(**fields)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("+15551234567", "5551234567"),
        ("5551234567", "5551234567"),
        ("(555) 111-2222", "5551112222"),
        ("1-555-111-2222", "5551112222"),
        ("+1 (555) 111 2222", "5551112222"),
        ("", None),
        (None, None),
        ("ext.", None),
    ],
)
def test_normalize_phone_number(raw, expected):
    assert normalize_phone_number(raw) == expected


def test_normalize_email():
    assert normalize_email("  Jo@Example.COM ") == "jo@example.com"
    assert normalize_email("   ") is None
    assert normalize_email(None) is None


def test_phone_variants_resolve_to_same_client(webhook_settings):
    resolver = ClientResolver(webhook_settings)
    first = resolver.resolve(name="Jo Ann", phone="+15551234567")
    second = resolver.resolve(name="Jo Ann", phone="5551234567")

    assert first.id == second.id
    assert Client.objects.count() == 1


def test_primary_identifier_match(webhook_settings, coach):
    existing = _existing_client(coach)
    client = ClientResolver(webhook_settings).resolve(name="Someone Else", phone="(555) 123-4567")

    assert client.id == existing.id
    assert Client.objects.count() == 1


def test_fallback_identifier_match(webhook_settings, coach):
    existing = _existing_client(coach, normalized_phone=None, phone_number="")
    client = ClientResolver(webhook_settings).resolve(
        name="Jo", phone="555-000-0000", email="EXISTING@example.com "
    )

    assert client.id == existing.id


def test_identifier_order(webhook_settings):
    assert webhook_settings.identifier_order() == ["phone", "email"]

    webhook_settings.fallback_identifier = "none"
    assert webhook_settings.identifier_order() == ["phone"]

    webhook_settings.fallback_identifier = "phone"
    assert webhook_settings.identifier_order() == ["phone"]


def test_unmatched_phone_creates_new_client(webhook_settings, coach):
    webhook_settings.fallback_identifier = "none"
    webhook_settings.save()
    existing = _existing_client(coach, normalized_phone=None, phone_number="")

    client = ClientResolver(webhook_settings).resolve(name="Jo", phone="5550000000")

    assert client.id != existing.id
    assert client.normalized_phone == "5550000000"


def test_email_primary(webhook_settings, coach):
    webhook_settings.primary_identifier = "email"
    webhook_settings.fallback_identifier = "none"
    webhook_settings.save()
    existing = _existing_client(coach)

    client = ClientResolver(webhook_settings).resolve(name="Jo", email="existing@example.com")
    assert client.id == existing.id


def test_lookups_are_scoped_to_coach(webhook_settings, coach):
    other_coach = Coach.objects.create(name="Other", email="other@coach.example")
    _existing_client(other_coach)

    client = ClientResolver(webhook_settings).resolve(name="Jo", phone="5551234567")

    assert client.coach_id == coach.id
    assert Client.objects.filter(coach=coach).count() == 1


def test_auto_create_disabled_fails_without_writing(webhook_settings):
    webhook_settings.auto_create_clients = False
    webhook_settings.save()

    with pytest.raises(ClientResolutionFailed) as exc_info:
        ClientResolver(webhook_settings).resolve(name="X", phone="5559999999", email="x@example.com")

    assert "5559999999" in exc_info.value.details
    assert "x@example.com" in exc_info.value.details
    assert Client.objects.count() == 0


def test_auto_create_requires_phone_or_email(webhook_settings):
    with pytest.raises(ClientResolutionFailed):
        ClientResolver(webhook_settings).resolve(name="No Contact")
    assert Client.objects.count() == 0


def test_created_client_uses_coach_defaults(webhook_settings):
    webhook_settings.new_client_status = "paused"
    webhook_settings.new_client_engagement = "high"
    webhook_settings.save()

    client = ClientResolver(webhook_settings).resolve(
        name="Jo Ann",
        phone="(555) 111-2222",
        email=" Jo@Example.com",
        external_contact_id=CONTACT_UUID,
    )
    client.refresh_from_db()

    assert client.full_name == "Jo Ann"
    assert client.phone_number == "(555) 111-2222"
    assert client.normalized_phone == "5551112222"
    assert client.email == "jo@example.com"
    assert client.status == "paused"
    assert client.engagement_level == "high"
    assert client.tags == ["webhook-created"]
    assert client.custom_fields == {"external_id": CONTACT_UUID}
    assert client.onboarded_at is not None


def test_created_client_without_email_keeps_email_empty(webhook_settings):
    client = ClientResolver(webhook_settings).resolve(name="Jo", phone="5551112222")
    client.refresh_from_db()
    assert client.email is None
    assert client.custom_fields == {}


def test_insert_conflict_refetches_existing_row(webhook_settings, coach, monkeypatch):
    existing = _existing_client(coach)
    resolver = ClientResolver(webhook_settings)
    lookups = []
    original_find = resolver._find

    def racing_find(identifier, value):
        lookups.append(identifier)
        # The first two lookups miss, as if the other request had not committed yet.
        if len(lookups) <= 2:
            return None
        return original_find(identifier, value)

    monkeypatch.setattr(resolver, "_find", racing_find)

    client = resolver.resolve(name="Racer", phone="5551234567", email="other@example.com")

    assert client.id == existing.id
    assert Client.objects.count() == 1


def test_lookup_database_error_is_storage_error(webhook_settings, monkeypatch):
    def broken_filter(*args, **kwargs):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(Client.objects, "filter", broken_filter)

    with pytest.raises(StorageError):
        ClientResolver(webhook_settings).resolve(name="Jo", phone="5551112222")


def test_shared_email_is_not_matched_when_coach_matches_phone_only(webhook_settings, coach):
    webhook_settings.fallback_identifier = "none"
    alice = _existing_client(
        coach, full_name="Alice", normalized_phone="5551110000", email="family@example.com"
    )

    bob = ClientResolver(webhook_settings).resolve(
        name="Bob", phone="5552220000", email="family@example.com"
    )

    assert bob.id != alice.id
    bob.refresh_from_db()
    assert bob.full_name == "Bob"
    assert bob.normalized_phone == "5552220000"
    assert bob.email is None
    alice.refresh_from_db()
    assert alice.full_name == "Alice"
    assert alice.email == "family@example.com"


def test_identifier_owned_by_other_client_only_is_rejected(webhook_settings, coach):
    webhook_settings.fallback_identifier = "none"
    _existing_client(coach, normalized_phone="5551110000", email="family@example.com")

    with pytest.raises(ClientResolutionFailed) as excinfo:
        ClientResolver(webhook_settings).resolve(name="Bob", email="family@example.com")

    assert "email" in excinfo.value.details
    assert Client.objects.count() == 1


def test_overlong_values_fit_client_columns(webhook_settings):
    long_phone = "5" * 40
    client = ClientResolver(webhook_settings).resolve(
        name="Jo", phone=long_phone + " ext " + "9" * 40, email="jo@example.com"
    )

    client.refresh_from_db()
    assert client.normalized_phone is None
    assert len(client.phone_number) == Client._meta.get_field("phone_number").max_length
    assert client.email == "jo@example.com"


def test_overlong_phone_alone_cannot_create_client(webhook_settings):
    with pytest.raises(ClientResolutionFailed):
        ClientResolver(webhook_settings).resolve(name="Jo", phone="5" * 40)
    assert Client.objects.count() == 0


def test_overlong_identifiers_normalize_to_none():
    assert normalize_phone_number("5" * 40) is None
    assert normalize_phone_number("5" * 32) == "5" * 32
    assert normalize_email("a" * 250 + "@example.com") is None

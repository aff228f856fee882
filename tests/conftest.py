import json
from types import SimpleNamespace

import pytest

from apps.coaches.models import Coach
from apps.webhooks.models import WebhookSettings

EMBEDDING_DIMENSIONS = 1536


@pytest.fixture(autouse=True)
def _service_settings(settings):
    settings.ENCRYPTION_KEY = "test-encryption-key"
    settings.OPENAI_API_KEY = ""
    settings.EMBEDDING_DIMENSIONS = EMBEDDING_DIMENSIONS


@pytest.fixture
def coach(db):
    return Coach.objects.create(name="Sam Coach", email="sam@coach.example")


@pytest.fixture
def webhook_secret():
    return "s3cret-token"


@pytest.fixture
def webhook_settings(coach, webhook_secret):
    webhook_settings = WebhookSettings(
        coach=coach,
        primary_identifier="phone",
        fallback_identifier="email",
        auto_create_clients=True,
    )
    webhook_settings.set_secret(webhook_secret)
    webhook_settings.save()
    return webhook_settings


@pytest.fixture
def post_checkin(client, coach, webhook_secret):
    def _post(payload, *, coach_id=None, token=None, raw_body=None):
        body = raw_body if raw_body is not None else json.dumps(payload)
        return client.post(
            f"/webhook-checkin/{coach_id or coach.id}/{token or webhook_secret}",
            data=body,
            content_type="application/json",
        )

    return _post


@pytest.fixture
def embedding_api(monkeypatch, settings):
    """Stub the embedding vendor; returns the list of request payloads it saw."""
    settings.OPENAI_API_KEY = "test-key"
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        return SimpleNamespace(
            status_code=200,
            text="",
            json=lambda: {"data": [{"embedding": [0.01] * EMBEDDING_DIMENSIONS}]},
        )

    monkeypatch.setattr("apps.llm.embeddings.requests.post", fake_post)
    return calls

"""Webhook endpoint for check-in ingestion."""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict

from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps.common.utils import json_response
from apps.webhooks.auth import authenticate_webhook
from apps.webhooks.errors import CheckinIngestionError, MalformedRequest
from apps.webhooks.pipeline import CheckinIngestionPipeline

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type, x-webhook-signature",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def _parse_coach_id(raw: str) -> str:
    try:
        return str(uuid.UUID(raw))
    except ValueError as exc:
        raise MalformedRequest(
            "Invalid webhook URL format. Expected: /webhook-checkin/{coach_id}/{webhook_token}"
        ) from exc


def _parse_payload(body: bytes) -> Dict[str, Any]:
    try:
        payload = json.loads(body.decode("utf-8") or "null")
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedRequest("Invalid JSON payload") from exc
    if not isinstance(payload, dict):
        raise MalformedRequest("Payload must be a JSON object")
    return payload


@csrf_exempt
@require_http_methods(["POST", "OPTIONS"])
def checkin_webhook(request: HttpRequest, coach_id: str, token: str) -> HttpResponse:
    if request.method == "OPTIONS":
        response = HttpResponse("ok")
        for name, value in CORS_HEADERS.items():
            response[name] = value
        return response

    try:
        coach_uuid = _parse_coach_id(coach_id)
        webhook_settings = authenticate_webhook(coach_uuid, token)
        payload = _parse_payload(request.body)
        receipt = CheckinIngestionPipeline().ingest(
            webhook_settings=webhook_settings, payload=payload
        )
    except CheckinIngestionError as exc:
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "checkin_webhook.rejected",
            extra={"coach_id": coach_id, "status": exc.status_code, "error": exc.message},
        )
        return json_response(exc.as_payload(), status=exc.status_code, headers=CORS_HEADERS)
    except Exception as exc:
        logger.exception("checkin_webhook.internal_error", extra={"coach_id": coach_id})
        return json_response(
            {"error": "Internal server error", "details": str(exc)},
            status=500,
            headers=CORS_HEADERS,
        )

    logger.info(
        "checkin_webhook.accepted",
        extra={
            "coach_id": coach_uuid,
            "checkin_id": receipt.checkin_id,
            "duplicate": receipt.duplicate,
        },
    )
    return json_response(receipt.as_response(), headers=CORS_HEADERS)

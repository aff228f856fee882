"""Utility helpers shared across apps."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from django.http import JsonResponse
from django.utils import timezone


def now_utc():
    """Return timezone-aware UTC now."""
    return timezone.now()


def json_response(
    payload: Dict[str, Any],
    *,
    status: int = 200,
    headers: Mapping[str, str] | None = None,
) -> JsonResponse:
    """Return a JSON response with optional extra headers."""
    response = JsonResponse(payload, status=status)
    for name, value in (headers or {}).items():
        response[name] = value
    return response

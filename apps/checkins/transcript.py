"""Turn a submission payload into readable text for downstream AI work."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping, Optional

logger = logging.getLogger(__name__)

TRANSCRIPT_FIELDS = ("transcript", "message", "notes", "checkin_notes")

# Identity fields and bookkeeping that carry nothing worth reading.
EXCLUDED_FIELDS = frozenset(
    {
        "contact",
        "name",
        "firstName",
        "lastName",
        "client_name",
        "client_id",
        "contact_id",
        "email",
        "phone",
        "id",
        "event_id",
        "eventId",
        "submission_id",
        "submissionId",
        "timestamp",
        "created_at",
        "updated_at",
    }
)


def _render_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, ensure_ascii=False)
    return json.dumps(value)


def _form_submission(payload: Mapping[str, Any]) -> Optional[str]:
    """GoHighLevel-style ``{"formName": ..., "formSubmission": {"data": {...}}}``."""
    submission = payload.get("formSubmission")
    data = submission.get("data") if isinstance(submission, Mapping) else None
    if not isinstance(data, Mapping):
        return None

    lines = []
    form_name = payload.get("formName")
    if isinstance(form_name, str) and form_name.strip():
        lines += [f"Form: {form_name.strip()}", "---"]
    for key, value in data.items():
        if not value:
            continue
        if isinstance(value, (dict, list)):
            lines.append(f"{key}: {json.dumps(value, ensure_ascii=False)}")
        else:
            lines.append(f"{key}: {_render_value(value)}")
    return "\n".join(lines) or None


# Provider layouts with a known answer container, tried in order.
SHAPE_FORMATTERS: tuple[Callable[[Mapping[str, Any]], Optional[str]], ...] = (
    _form_submission,
)


def derive_transcript(payload: Mapping[str, Any]) -> str:
    """Return the transcript for a payload; never empty for a JSON object.

    A dedicated transcript field is used as-is when present. Next, a known
    provider layout renders its answers. Otherwise each remaining field
    becomes a ``key: value`` line, and when nothing remains the whole payload
    is dumped as JSON.
    """
    for field in TRANSCRIPT_FIELDS:
        value = payload.get(field)
        if isinstance(value, str) and value.strip():
            logger.debug("checkin_transcript.field_used", extra={"field": field})
            return value.strip()

    for formatter in SHAPE_FORMATTERS:
        rendered = formatter(payload)
        if rendered:
            logger.debug("checkin_transcript.shape_used", extra={"shape": formatter.__name__})
            return rendered

    lines = [
        f"{key}: {_render_value(value)}"
        for key, value in payload.items()
        if key not in EXCLUDED_FIELDS and value is not None and value != ""
    ]
    if lines:
        return "\n".join(lines)

    return json.dumps(payload, indent=2, ensure_ascii=False)

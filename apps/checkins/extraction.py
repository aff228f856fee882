"""Pull a client identity out of provider payloads of unknown shape.

Each field has an ordered list of strategies. A strategy is a small function
from the payload to an optional string; the first one that yields a value
wins and later strategies are never merged in. Supporting a new provider
layout means appending a strategy to the right list.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional

from apps.webhooks.errors import MissingIdentity

logger = logging.getLogger(__name__)

Payload = Mapping[str, Any]
Strategy = Callable[[Payload], Optional[str]]

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)

# Column widths of Client.full_name / Checkin.client_name and Checkin.external_event_id.
NAME_MAX_LENGTH = 255
EVENT_ID_MAX_LENGTH = 255


@dataclass(slots=True, frozen=True)
class ExtractedIdentity:
    name: str
    external_contact_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


def _text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _token(value: Any) -> Optional[str]:
    # Providers send phones and ids as JSON numbers often enough.
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    return _text(value)


def _contact(payload: Payload) -> Payload:
    contact = payload.get("contact")
    return contact if isinstance(contact, Mapping) else {}


def _top_level(key: str, clean: Callable[[Any], Optional[str]] = _text) -> Strategy:
    return lambda payload: clean(payload.get(key))


def _in_contact(key: str, clean: Callable[[Any], Optional[str]] = _text) -> Strategy:
    return lambda payload: clean(_contact(payload).get(key))


def _first_last(source: Callable[[Payload], Payload]) -> Strategy:
    def strategy(payload: Payload) -> Optional[str]:
        fields = source(payload)
        parts = [_text(fields.get("firstName")), _text(fields.get("lastName"))]
        joined = " ".join(part for part in parts if part)
        return joined or None

    return strategy


NAME_STRATEGIES: tuple[Strategy, ...] = (
    _top_level("client_name"),
    _in_contact("name"),
    _first_last(lambda payload: payload),
    _first_last(_contact),
    _top_level("name"),
)

CONTACT_ID_STRATEGIES: tuple[Strategy, ...] = (
    _in_contact("id", _token),
    _top_level("contact_id", _token),
    _top_level("client_id", _token),
)

EMAIL_STRATEGIES: tuple[Strategy, ...] = (
    _in_contact("email"),
    _top_level("email"),
)

PHONE_STRATEGIES: tuple[Strategy, ...] = (
    _in_contact("phone", _token),
    _top_level("phone", _token),
)

EVENT_ID_STRATEGIES: tuple[Strategy, ...] = (
    _top_level("event_id", _token),
    _top_level("eventId", _token),
    _top_level("submission_id", _token),
    _top_level("submissionId", _token),
)


def first_match(payload: Payload, strategies: Iterable[Strategy]) -> Optional[str]:
    for strategy in strategies:
        value = strategy(payload)
        if value:
            return value
    return None


def is_uuid(value: Optional[str]) -> bool:
    return bool(value and UUID_PATTERN.match(value))


def extract_identity(payload: Payload) -> ExtractedIdentity:
    """Return the submitter's identity or raise MissingIdentity when no name is found."""
    name = first_match(payload, NAME_STRATEGIES)
    if not name:
        raise MissingIdentity()

    contact_id = first_match(payload, CONTACT_ID_STRATEGIES)
    if contact_id and not is_uuid(contact_id):
        logger.info("checkin_extraction.contact_id_rejected", extra={"contact_id": contact_id})
        contact_id = None

    return ExtractedIdentity(
        name=name[:NAME_MAX_LENGTH].rstrip(),
        external_contact_id=contact_id,
        email=first_match(payload, EMAIL_STRATEGIES),
        phone=first_match(payload, PHONE_STRATEGIES),
    )


def extract_event_id(payload: Payload) -> Optional[str]:
    """Provider delivery id, when the payload carries one."""
    value = first_match(payload, EVENT_ID_STRATEGIES)
    return value[:EVENT_ID_MAX_LENGTH] if value else None

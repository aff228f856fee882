"""Utility helpers for client contact normalization."""

import re
from typing import Optional


PHONE_CLEANER = re.compile(r"[^\d+]")
US_COUNTRY_PREFIX = re.compile(r"^\+?1?")

# Widths of Client.normalized_phone and Client.email.
NORMALIZED_PHONE_MAX_LENGTH = 32
EMAIL_MAX_LENGTH = 254


def normalize_phone_number(raw: str | None) -> Optional[str]:
    """Reduce a phone number to bare national digits.

    Formatting characters go, then a leading "+"/"1" country prefix, so
    "+1 (555) 123-4567" and "555.123.4567" both become "5551234567".
    A result too long to be a phone number is treated as absent.
    """
    if not raw:
        return None
    cleaned = PHONE_CLEANER.sub("", str(raw))
    cleaned = US_COUNTRY_PREFIX.sub("", cleaned).replace("+", "")
    if len(cleaned) > NORMALIZED_PHONE_MAX_LENGTH:
        return None
    return cleaned or None


def normalize_email(raw: str | None) -> Optional[str]:
    if not raw:
        return None
    cleaned = str(raw).strip().lower()
    if len(cleaned) > EMAIL_MAX_LENGTH:
        return None
    return cleaned or None

"""Encryption at rest for webhook secrets.

Values written through ``encrypt_secret`` carry the ``enc::`` prefix. Values
without it are treated as plaintext so rows created by other tooling keep
working until they are rotated.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

ENCRYPTION_PREFIX = "enc::"


def _fernet() -> Fernet:
    source = getattr(settings, "ENCRYPTION_KEY", "")
    if not source:
        raise ImproperlyConfigured("ENCRYPTION_KEY is required to store webhook secrets")
    key = base64.urlsafe_b64encode(hashlib.sha256(source.encode("utf-8")).digest())
    return Fernet(key)


def is_encrypted_secret(value: Optional[str]) -> bool:
    return bool(value and value.startswith(ENCRYPTION_PREFIX))


def encrypt_secret(value: str) -> str:
    if not value or is_encrypted_secret(value):
        return value
    token = _fernet().encrypt(value.encode("utf-8")).decode("utf-8")
    return f"{ENCRYPTION_PREFIX}{token}"


def decrypt_secret(value: Optional[str]) -> str:
    if not value:
        return ""
    if not is_encrypted_secret(value):
        return value
    try:
        return _fernet().decrypt(value[len(ENCRYPTION_PREFIX):].encode("utf-8")).decode("utf-8")
    except InvalidToken as exc:
        raise ImproperlyConfigured("Stored webhook secret cannot be decrypted") from exc


def secrets_match(expected: str, provided: Optional[str]) -> bool:
    """Exact, constant-time comparison of a stored secret and a presented token."""
    if not expected or not provided:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))

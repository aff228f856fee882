"""Embedding requests for check-in transcripts.

The vendor call is best effort: ingestion never fails because embeddings are
unavailable. ``embed`` logs the reason and returns ``None`` instead.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class EmbeddingUnavailable(RuntimeError):
    """Raised when no embedding could be obtained for a text."""


class EmbeddingClient:
    """Thin client for an OpenAI-compatible ``/v1/embeddings`` endpoint."""

    def __init__(self) -> None:
        self.api_key = getattr(settings, "OPENAI_API_KEY", "")
        self.api_base = getattr(settings, "OPENAI_API_BASE", "https://api.openai.com").rstrip("/")
        self.model = getattr(settings, "EMBEDDING_MODEL", "text-embedding-ada-002")
        self.dimensions = int(getattr(settings, "EMBEDDING_DIMENSIONS", 1536))
        self.timeout = getattr(settings, "EMBEDDING_TIMEOUT_SECONDS", 10)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def embed(self, text: str) -> Optional[List[float]]:
        try:
            return self.request_embedding(text)
        except EmbeddingUnavailable as exc:
            logger.warning(
                "embeddings.unavailable",
                extra={"reason": str(exc), "model": self.model},
            )
            return None

    def request_embedding(self, text: str) -> List[float]:
        if not self.api_key:
            raise EmbeddingUnavailable("embedding_api_key_missing")
        if not text:
            raise EmbeddingUnavailable("embedding_input_empty")

        try:
            response = requests.post(
                f"{self.api_base}/v1/embeddings",
                json={"model": self.model, "input": text},
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise EmbeddingUnavailable("embedding_request_failed") from exc

        if not 200 <= response.status_code < 300:
            logger.error(
                "embeddings.provider_error",
                extra={"status_code": response.status_code, "body": (response.text or "")[:500]},
            )
            raise EmbeddingUnavailable("embedding_provider_error")

        try:
            vector = response.json()["data"][0]["embedding"]
            vector = [float(value) for value in vector]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise EmbeddingUnavailable("embedding_response_malformed") from exc

        if len(vector) != self.dimensions:
            raise EmbeddingUnavailable("embedding_dimensions_mismatch")
        return vector

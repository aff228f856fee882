"""Error taxonomy for check-in ingestion.

Every error carries the HTTP status the webhook view answers with. Errors in the
4xx range are caller problems and are not worth redelivering; 5xx errors are
safe for the provider to retry.
"""

from __future__ import annotations


class CheckinIngestionError(Exception):
    """Base class for failures that abort a webhook call."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, *, details: str | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_payload(self) -> dict:
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class MalformedRequest(CheckinIngestionError):
    status_code = 400
    default_message = "Malformed webhook request"


class Unauthorized(CheckinIngestionError):
    """Unknown coach or bad token. The message never says which."""

    status_code = 401
    default_message = "Unauthorized"


class MissingIdentity(CheckinIngestionError):
    status_code = 400
    default_message = (
        "Client name is required. Please ensure your form includes name, "
        "firstName/lastName, or contact.name fields."
    )


class ClientResolutionFailed(CheckinIngestionError):
    status_code = 500
    default_message = "Failed to process client information"


class StorageError(CheckinIngestionError):
    status_code = 500
    default_message = "Storage unavailable"

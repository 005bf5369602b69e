"""Error taxonomy for the broadcast engine.

Validation and storage failures are surfaced to the caller; per-recipient
delivery failures never raise and are reported as outcomes instead.
"""

from enum import StrEnum


class RejectionReason(StrEnum):
    INVALID_REQUEST = "invalid_request"
    INVALID_AUDIENCE = "invalid_audience"
    EMPTY_TITLE = "empty_title"
    EMPTY_BODY = "empty_body"
    TITLE_TOO_LONG = "title_too_long"
    BODY_TOO_LONG = "body_too_long"
    INVALID_URL = "invalid_url"


class BroadcastError(Exception):
    """Base class for errors surfaced by the broadcast engine."""


class BroadcastValidationError(BroadcastError):
    """The request was rejected before any side effect took place."""

    def __init__(self, reason: RejectionReason, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message or str(reason))


class InvalidAudienceError(BroadcastValidationError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(
            RejectionReason.INVALID_AUDIENCE, f"Unknown audience: {value!r}"
        )


class BroadcastStorageError(BroadcastError):
    """Recipient directory or broadcast history could not be reached."""

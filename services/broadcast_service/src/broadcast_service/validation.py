"""Request validation with machine-readable rejection reasons."""

from collections.abc import Mapping
from typing import Any

from broadcast_service.audience import parse_audience
from broadcast_service.errors import BroadcastValidationError, RejectionReason
from broadcast_service.models import BroadcastRequest

TITLE_MAX_LENGTH = 200
BODY_MAX_LENGTH = 1000


def parse_broadcast_request(data: Any) -> BroadcastRequest:
    """Validate raw input and build an immutable BroadcastRequest.

    Accepts either ``targetAudience`` (HTTP field name) or ``audience``.
    An already-built BroadcastRequest is re-checked and returned as is.
    The first failing rule determines the rejection reason.
    """
    if isinstance(data, BroadcastRequest):
        _check_text(data.title, data.body, data.url)
        return data

    if not isinstance(data, Mapping):
        raise BroadcastValidationError(
            RejectionReason.INVALID_REQUEST, "Request body must be a JSON object"
        )

    title = data.get("title")
    body = data.get("body")
    url = data.get("url")
    _check_text(title, body, url)

    audience = parse_audience(data.get("targetAudience", data.get("audience")))

    return BroadcastRequest(title=title, body=body, url=url or None, audience=audience)


def _check_text(title: object, body: object, url: object) -> None:
    if not isinstance(title, str) or not title.strip():
        raise BroadcastValidationError(
            RejectionReason.EMPTY_TITLE, "Title is required"
        )
    if len(title) > TITLE_MAX_LENGTH:
        raise BroadcastValidationError(
            RejectionReason.TITLE_TOO_LONG,
            f"Title must be at most {TITLE_MAX_LENGTH} characters",
        )
    if not isinstance(body, str) or not body.strip():
        raise BroadcastValidationError(
            RejectionReason.EMPTY_BODY, "Body is required"
        )
    if len(body) > BODY_MAX_LENGTH:
        raise BroadcastValidationError(
            RejectionReason.BODY_TOO_LONG,
            f"Body must be at most {BODY_MAX_LENGTH} characters",
        )
    if url is not None and not isinstance(url, str):
        raise BroadcastValidationError(
            RejectionReason.INVALID_URL, "'url' must be a string"
        )

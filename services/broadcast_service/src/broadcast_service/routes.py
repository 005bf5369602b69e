import logging
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request

from broadcast_shared.enums import ALL_AUDIENCES

from broadcast_service.errors import (
    BroadcastStorageError,
    BroadcastValidationError,
    InvalidAudienceError,
    RejectionReason,
)
from broadcast_service.service import BroadcastService

logger = logging.getLogger(__name__)

bp = Blueprint("broadcasts", __name__)


def _error(message: str, status: int, **extra: Any) -> tuple[Response, int]:
    body: dict[str, Any] = {"error": message}
    body.update(extra)
    return jsonify(body), status


def _service() -> BroadcastService:
    return current_app.extensions["broadcast_service"]


@bp.post("/broadcasts")
def post_broadcast() -> tuple[Response, int]:
    body = request.get_json(silent=True)
    if body is None:
        return _error(
            "Request body must be valid JSON",
            400,
            reason=RejectionReason.INVALID_REQUEST,
        )

    try:
        report = _service().broadcast(body)
    except InvalidAudienceError as exc:
        return _error(
            "Unknown audience",
            422,
            reason=exc.reason,
            audience=exc.value if isinstance(exc.value, str) else None,
            supported=ALL_AUDIENCES,
        )
    except BroadcastValidationError as exc:
        return _error(str(exc), 400, reason=exc.reason)
    except BroadcastStorageError:
        logger.exception("Broadcast failed on storage")
        return _error("Broadcast could not be recorded", 503)

    return jsonify(report.to_dict()), 200


@bp.get("/broadcasts")
def list_broadcasts() -> tuple[Response, int]:
    default_limit = current_app.config.get("HISTORY_PAGE_SIZE", 50)
    try:
        limit = int(request.args.get("limit", default_limit))
        offset = int(request.args.get("offset", 0))
    except ValueError:
        return _error("'limit' and 'offset' must be integers", 400)

    if limit < 1 or offset < 0:
        return _error("'limit' must be positive and 'offset' non-negative", 400)

    try:
        entries = _service().history(limit=limit, offset=offset)
    except BroadcastStorageError:
        logger.exception("Failed to read broadcast history")
        return _error("Broadcast history unavailable", 503)

    return jsonify({
        "items": [entry.to_dict() for entry in entries],
        "limit": limit,
        "offset": offset,
    }), 200


@bp.get("/audience-stats")
def get_audience_stats() -> tuple[Response, int]:
    try:
        stats = _service().audience_stats()
    except BroadcastStorageError:
        logger.exception("Failed to compute audience stats")
        return _error("Recipient directory unavailable", 503)

    return jsonify({str(kind): s.to_dict() for kind, s in stats.items()}), 200


@bp.get("/health")
def health() -> tuple[Response, int]:
    db_ok = _service().health_check()

    status = "healthy" if db_ok else "unhealthy"
    code = 200 if db_ok else 503

    return jsonify({
        "status": status,
        "checks": {"database": "ok" if db_ok else "unreachable"},
    }), code

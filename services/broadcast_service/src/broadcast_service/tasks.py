"""Celery task for scheduled broadcasts (e.g. daily re-engagement pushes)."""

import logging

from broadcast_service.celery import app
from broadcast_service.errors import BroadcastValidationError
from broadcast_service.service import BroadcastService

logger = logging.getLogger(__name__)


@app.task(name="broadcast_service.tasks.send_broadcast")
def send_broadcast(
    title: str,
    body: str,
    audience: str,
    url: str | None = None,
) -> dict[str, int] | None:
    """Run one broadcast from a worker.

    Returns the report as a dict. An invalid request is logged and
    dropped; re-running it would fail the same way. Storage errors
    propagate so the task is marked failed.
    """
    service: BroadcastService = app.conf._broadcast_service

    try:
        report = service.broadcast({
            "title": title,
            "body": body,
            "url": url,
            "targetAudience": audience,
        })
    except BroadcastValidationError as exc:
        logger.error(
            "Scheduled broadcast rejected",
            extra={"reason": str(exc.reason), "audience": audience},
        )
        return None

    logger.info(
        "Scheduled broadcast finished",
        extra={"audience": audience, **report.to_dict()},
    )
    return report.to_dict()

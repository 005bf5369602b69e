"""Logging setup for broadcast_service (delegates to broadcast_shared)."""

from broadcast_shared.log import JsonFormatter, setup_logging as _setup

__all__ = ["JsonFormatter", "setup_logging"]


def setup_logging(level: str = "INFO") -> None:
    _setup(level, suppress=["werkzeug", "urllib3", "celery", "kombu"])

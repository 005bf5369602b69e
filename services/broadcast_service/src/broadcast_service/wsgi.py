"""WSGI entry point for gunicorn.

Usage:
    gunicorn broadcast_service.wsgi:app --bind 0.0.0.0:8000
"""
from broadcast_service.app import create_app
from broadcast_service.bootstrap import build_service
from broadcast_service.config import BroadcastConfig

_config = BroadcastConfig()
app = create_app(
    build_service(_config),
    log_level=_config.log_level,
    history_page_size=_config.history_page_size,
)

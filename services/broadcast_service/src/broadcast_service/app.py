import atexit
import logging

from flask import Flask

from broadcast_service.log import setup_logging
from broadcast_service.routes import bp
from broadcast_service.service import BroadcastService

logger = logging.getLogger(__name__)


def create_app(
    service: BroadcastService,
    log_level: str = "INFO",
    history_page_size: int = 50,
) -> Flask:
    """Flask application factory.

    Args:
        service: Broadcast service instance (real or mock for tests).
    """
    setup_logging(log_level)

    app = Flask(__name__)
    app.config["HISTORY_PAGE_SIZE"] = history_page_size
    app.extensions["broadcast_service"] = service

    app.register_blueprint(bp)

    atexit.register(service.close)

    logger.info("Broadcast API initialized")
    return app

"""Celery application setup and worker initialization."""

import logging

from celery import Celery, signals

from broadcast_service.bootstrap import build_service
from broadcast_service.config import BroadcastConfig, CeleryConfig
from broadcast_service.log import setup_logging
from broadcast_service.service import BroadcastService

logger = logging.getLogger(__name__)

celery_config = CeleryConfig()

app = Celery("broadcast_service", broker=celery_config.broker_url)

app.conf.update(
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_default_queue="broadcasts",
)

app.autodiscover_tasks(["broadcast_service"])


@signals.worker_init.connect
def _init_worker(**_kwargs: object) -> None:
    """Initialize shared resources once per worker process."""
    config = BroadcastConfig()
    setup_logging(config.log_level)

    app.conf.update(_broadcast_service=build_service(config))
    logger.info("Worker initialized")


@signals.worker_shutdown.connect
def _shutdown_worker(**_kwargs: object) -> None:
    """Clean up resources on worker shutdown."""
    service: BroadcastService | None = getattr(
        app.conf, "_broadcast_service", None
    )
    if service is not None:
        service.close()
    logger.info("Worker shut down")

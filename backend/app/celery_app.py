"""Celery application configuration."""

from __future__ import annotations

import logging

from celery import Celery

from app.core.config import settings

logger = logging.getLogger(__name__)

celery_app = Celery(
    "volunteer_events",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["app.tasks.notifications"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    broker_connection_retry_on_startup=True,
    # Publishing from the API must not hang when the broker is down
    broker_transport_options={"max_retries": 1, "interval_start": 0, "interval_step": 0.5},
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_default_retry_delay=60,
    result_expires=3600,
    worker_prefetch_multiplier=1,
)

logger.info(f"Celery app configured with broker: {settings.CELERY_BROKER_URL}")

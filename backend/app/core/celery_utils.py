"""Helpers for dispatching Celery tasks without failing the caller."""

from __future__ import annotations

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


def safe_celery_delay(task, *args, **kwargs) -> Optional[Any]:
    """
    Queue a Celery task, tolerating an unavailable broker.

    If the broker cannot be reached (e.g. Redis is not running in local
    development) the failure is logged and ``None`` is returned instead of
    raising.

    Args:
        task: Celery task to queue
        *args: Positional task arguments
        **kwargs: Keyword task arguments

    Returns:
        The ``AsyncResult`` of ``task.delay()``, or ``None`` on failure
    """
    try:
        result = task.delay(*args, **kwargs)
        logger.debug(f"Celery task {task.name} queued with ID: {result.id}")
        return result

    except Exception as e:
        logger.warning(
            f"Failed to queue Celery task {task.name}: {e}. "
            f"Continuing without background task execution."
        )
        return None

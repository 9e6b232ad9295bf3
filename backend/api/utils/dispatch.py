"""Background task dispatch for API endpoints."""

import logging
from typing import Optional

from celery import Task

logger = logging.getLogger(__name__)


def queue_recompute(task: Task, *args: str) -> Optional[str]:
    """
    Enqueue a recomputation task without failing the request.

    The caller's write has already committed when this runs, so a broker
    outage is logged and the stale matches wait for the next trigger.

    Returns:
        The Celery task id, or None if the task could not be queued.
    """
    try:
        result = task.delay(*args)
    except Exception as e:
        logger.warning(f"Could not queue {task.name} for {', '.join(args)}: {e}")
        return None
    return result.id

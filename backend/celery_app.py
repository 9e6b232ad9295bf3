"""
GrantFit Celery Application Configuration

Match recomputation jobs are handed off here by profile saves and rule
edits. Every task runs on the single matching queue.
"""

import logging
import time
from typing import Any

from celery import Celery, Task
from celery.signals import task_postrun, task_prerun, worker_process_init
from kombu import Exchange, Queue

from backend.core.config import settings

logger = logging.getLogger(__name__)

MATCHING_QUEUE = settings.match_task_queue

matching_exchange = Exchange("matching", type="direct")


def create_celery_app() -> Celery:
    """
    Create and configure the Celery application.

    Returns:
        Configured Celery application instance.
    """
    app = Celery(
        "grantfit",
        broker=settings.celery_broker_url,
        backend=settings.celery_result_backend,
        include=["backend.tasks.matching"],
    )

    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        # Unrouted tasks land on the matching queue too
        task_queues=(Queue(MATCHING_QUEUE, exchange=matching_exchange, routing_key=MATCHING_QUEUE),),
        task_default_queue=MATCHING_QUEUE,
        task_default_exchange=matching_exchange.name,
        task_default_routing_key=MATCHING_QUEUE,
        task_max_retries=settings.match_task_max_retries,
        worker_concurrency=settings.celery_worker_concurrency,
        # Fan-outs are long; one at a time per worker process
        worker_prefetch_multiplier=1,
        result_expires=settings.celery_result_expires,
        # A pair left half-done by a lost worker is recomputed on redelivery
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        timezone="UTC",
        enable_utc=True,
        broker_connection_retry_on_startup=True,
    )

    return app


celery_app = create_celery_app()


class MatchingTask(Task):
    """Task base that logs final failures and retries of match recomputation."""

    def on_failure(self, exc: Exception, task_id: str, args: tuple, kwargs: dict, einfo: Any) -> None:
        logger.error(
            f"Match task {self.name}[{task_id}] args={args} failed after {self.request.retries} retries: {exc}",
            exc_info=True,
        )
        super().on_failure(exc, task_id, args, kwargs, einfo)

    def on_retry(self, exc: Exception, task_id: str, args: tuple, kwargs: dict, einfo: Any) -> None:
        logger.warning(
            f"Match task {self.name}[{task_id}] args={args} retrying "
            f"(attempt {self.request.retries + 1}/{self.max_retries}): {exc}"
        )
        super().on_retry(exc, task_id, args, kwargs, einfo)


celery_app.Task = MatchingTask


_task_start_times: dict[str, float] = {}


@worker_process_init.connect
def init_worker_process(**kwargs: Any) -> None:
    """Set up error tracking in each worker process."""
    from backend.core.sentry import init_sentry

    init_sentry(service="worker")


@task_prerun.connect
def record_task_start(task_id: str | None = None, **kwargs: Any) -> None:
    if task_id:
        _task_start_times[task_id] = time.time()


@task_postrun.connect
def log_task_duration(
    sender: Task | None = None,
    task_id: str | None = None,
    state: str | None = None,
    **kwargs: Any,
) -> None:
    """Log how long a recomputation took, whatever its final state."""
    started = _task_start_times.pop(task_id, None) if task_id else None
    if started is not None:
        task_name = sender.name if sender else "unknown"
        logger.info(f"Match task {task_name}[{task_id}] finished in {time.time() - started:.3f}s state={state}")


__all__ = [
    "celery_app",
    "MatchingTask",
    "MATCHING_QUEUE",
]

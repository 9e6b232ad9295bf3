"""
GrantFit Matching Tasks
Celery tasks that recompute company-to-grant matches off the request path.
"""
import asyncio
import time
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError

from agents.matching.matcher import EligibilityMatcher
from backend.celery_app import MATCHING_QUEUE, celery_app
from backend.core.config import settings
from backend.database import AsyncSessionLocal, close_db

logger = structlog.get_logger().bind(module="matching_tasks")


def _parse_uuid(value: str, name: str) -> UUID:
    try:
        return UUID(value)
    except (ValueError, AttributeError, TypeError) as e:
        logger.error(f"invalid_{name}", value=value, error=str(e))
        raise ValueError(f"Invalid {name} format: {value}") from e


def _build_matcher() -> EligibilityMatcher:
    return EligibilityMatcher(session_factory=AsyncSessionLocal)


async def _run_with_matcher(operation: str, *args: UUID) -> Any:
    """Run one matcher coroutine, then release connections bound to this loop."""
    matcher = _build_matcher()
    try:
        return await getattr(matcher, operation)(*args)
    finally:
        await close_db()


# =============================================================================
# Task 1: Recompute Grant Matches (rule edits)
# =============================================================================

@celery_app.task(
    bind=True,
    queue=MATCHING_QUEUE,
    soft_time_limit=300,
    time_limit=360,
    max_retries=settings.match_task_max_retries,
    autoretry_for=(SQLAlchemyError,),
    retry_backoff=True,
)
def recompute_grant_matches(self, grant_id: str) -> dict[str, Any]:
    """
    Recompute every company's match for one grant.

    Enqueued after a grant's eligibility rules change, once the existing
    matches have been marked stale. Per-company failures are swallowed by
    the matcher; only a failure to list companies fails (and retries) the task.

    Args:
        grant_id: UUID string of the public grant.

    Returns:
        Dictionary with the grant id, task id and processing time.

    Raises:
        ValueError: If grant_id is not a valid UUID.
    """
    start_time = time.time()
    grant_uuid = _parse_uuid(grant_id, "grant_id")

    logger.info("recompute_grant_matches_started", task_id=self.request.id, grant_id=grant_id)

    asyncio.run(_run_with_matcher("compute_matches_for_all_companies", grant_uuid))

    stats = {
        "grant_id": grant_id,
        "task_id": self.request.id,
        "processing_time_seconds": time.time() - start_time,
    }
    logger.info("recompute_grant_matches_completed", **stats)
    return stats


# =============================================================================
# Task 2: Recompute Company Matches (profile saves)
# =============================================================================

@celery_app.task(
    bind=True,
    queue=MATCHING_QUEUE,
    soft_time_limit=300,
    time_limit=360,
    max_retries=settings.match_task_max_retries,
    autoretry_for=(SQLAlchemyError,),
    retry_backoff=True,
)
def recompute_company_matches(self, company_id: str) -> dict[str, Any]:
    """
    Recompute one company's matches against every active grant.

    Enqueued by profile saves; the save request does not wait for it.

    Args:
        company_id: UUID string of the company.

    Returns:
        Dictionary with the company id, task id and processing time.

    Raises:
        ValueError: If company_id is not a valid UUID.
    """
    start_time = time.time()
    company_uuid = _parse_uuid(company_id, "company_id")

    logger.info("recompute_company_matches_started", task_id=self.request.id, company_id=company_id)

    asyncio.run(_run_with_matcher("compute_matches_for_company", company_uuid))

    stats = {
        "company_id": company_id,
        "task_id": self.request.id,
        "processing_time_seconds": time.time() - start_time,
    }
    logger.info("recompute_company_matches_completed", **stats)
    return stats


# =============================================================================
# Task 3: Compute Single Match
# =============================================================================

@celery_app.task(
    bind=True,
    queue=MATCHING_QUEUE,
    soft_time_limit=60,
    time_limit=90,
    max_retries=settings.match_task_max_retries,
    autoretry_for=(SQLAlchemyError,),
    retry_backoff=True,
)
def compute_single_match(self, company_id: str, grant_id: str) -> dict[str, Any]:
    """
    Compute the match for a single (company, grant) pair.

    Unlike the fan-out tasks, errors propagate so Celery retries the pair.

    Returns:
        Dictionary with the pair, its scores and processing time.
    """
    start_time = time.time()
    company_uuid = _parse_uuid(company_id, "company_id")
    grant_uuid = _parse_uuid(grant_id, "grant_id")

    computation = asyncio.run(_run_with_matcher("compute_match_for_grant", company_uuid, grant_uuid))

    stats = {
        "company_id": company_id,
        "grant_id": grant_id,
        "task_id": self.request.id,
        "overall_score": computation.scores.overall,
        "eligibility_score": computation.scores.eligibility,
        "readiness_score": computation.scores.readiness,
        "fit_score": computation.scores.fit,
        "processing_time_seconds": time.time() - start_time,
    }
    logger.info("compute_single_match_completed", **stats)
    return stats

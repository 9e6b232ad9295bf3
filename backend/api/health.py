"""
GrantFit Health Check Endpoints
Liveness and dependency checks for load balancers and monitoring.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from backend.core.config import settings
from backend.database import check_db_connection

logger = logging.getLogger(__name__)


# =============================================================================
# Health Status Models
# =============================================================================


class HealthStatus(str, Enum):
    """Health status values for components and overall system."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status for an individual component."""

    status: HealthStatus
    latency_ms: Optional[float] = None
    message: Optional[str] = None
    workers: Optional[int] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: HealthStatus
    timestamp: str
    components: dict[str, Any]
    version: str


# =============================================================================
# Health Check Functions
# =============================================================================


async def check_database() -> ComponentHealth:
    """Probe the database and measure latency."""
    start_time = time.perf_counter()
    result = await check_db_connection()
    latency = round((time.perf_counter() - start_time) * 1000, 2)

    if result["status"] == "healthy":
        return ComponentHealth(
            status=HealthStatus.HEALTHY,
            latency_ms=latency,
            message="Database connection successful",
        )

    logger.error(f"Database health check failed: {result['error']}")
    return ComponentHealth(
        status=HealthStatus.UNHEALTHY,
        latency_ms=latency,
        message=f"Database connection failed: {result['error']}",
    )


def _inspect_celery_workers() -> Optional[dict[str, Any]]:
    from backend.celery_app import celery_app

    return celery_app.control.inspect(timeout=2.0).active()


async def check_celery() -> ComponentHealth:
    """
    Check for live Celery workers.

    Missing workers degrade the service without making it unhealthy:
    reads still work, recomputations just queue up.
    """
    start_time = time.perf_counter()
    try:
        active_workers = await asyncio.to_thread(_inspect_celery_workers)
        latency = (time.perf_counter() - start_time) * 1000
        worker_count = len(active_workers or {})
        return ComponentHealth(
            status=HealthStatus.HEALTHY if worker_count > 0 else HealthStatus.DEGRADED,
            latency_ms=round(latency, 2),
            message=f"{worker_count} Celery worker(s) active",
            workers=worker_count,
        )
    except Exception as e:
        latency = (time.perf_counter() - start_time) * 1000
        logger.warning(f"Celery health check failed: {e}")
        return ComponentHealth(
            status=HealthStatus.DEGRADED,
            latency_ms=round(latency, 2),
            message=f"Celery check failed: {str(e)}",
            workers=0,
        )


def determine_overall_status(components: dict[str, ComponentHealth]) -> HealthStatus:
    """
    Database down is unhealthy; any other failing component is degraded.
    """
    database = components.get("database")
    if database and database.status == HealthStatus.UNHEALTHY:
        return HealthStatus.UNHEALTHY

    if any(component.status != HealthStatus.HEALTHY for component in components.values()):
        return HealthStatus.DEGRADED

    return HealthStatus.HEALTHY


def _build_response(components: dict[str, ComponentHealth], response: Response) -> HealthResponse:
    overall_status = determine_overall_status(components)
    if overall_status == HealthStatus.UNHEALTHY:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        components={name: component.model_dump(exclude_none=True) for name, component in components.items()},
        version=settings.app_version,
    )


# =============================================================================
# Router Definition
# =============================================================================

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Liveness plus a database probe. Returns 503 if the database is unreachable.",
)
async def health_check(response: Response) -> HealthResponse:
    database = await check_database()
    return _build_response({"database": database}, response)


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check",
    description="Database and Celery worker checks.",
    responses={
        200: {"description": "Operational, possibly degraded"},
        503: {"description": "Database unreachable"},
    },
)
async def readiness_check(response: Response) -> HealthResponse:
    database, celery = await asyncio.gather(check_database(), check_celery())
    return _build_response({"database": database, "celery": celery}, response)

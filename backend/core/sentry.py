"""
Sentry Error Tracking Configuration
Centralized Sentry SDK initialization for the GrantFit API and Celery workers.
"""

import logging
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from backend.core.config import settings

logger = logging.getLogger(__name__)

HEALTH_CHECK_PATHS = ("/health", "/health/ready")


def before_send(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """Drop health check errors and redact credential headers."""
    request = event.get("request")
    if request:
        if request.get("url", "").endswith(HEALTH_CHECK_PATHS):
            return None

        headers = request.get("headers")
        if headers:
            for header in ("authorization", "cookie", "x-api-key"):
                if header in headers:
                    headers[header] = "[REDACTED]"

    return event


def before_send_transaction(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """Skip health check endpoints from performance monitoring."""
    if event.get("transaction", "") in HEALTH_CHECK_PATHS:
        return None
    return event


def init_sentry(service: str = "backend") -> bool:
    """
    Initialize the Sentry SDK.

    Args:
        service: ``backend`` for the API process, ``worker`` for Celery
            workers (adds the Celery integration).

    Returns:
        bool: True if Sentry was initialized, False if no DSN is configured
        or initialization failed.
    """
    if not settings.sentry_dsn:
        logger.info("Sentry DSN not configured, error tracking disabled")
        return False

    integrations = [
        LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        SqlalchemyIntegration(),
    ]
    if service == "worker":
        integrations.append(CeleryIntegration())
    else:
        integrations.extend(
            [
                FastApiIntegration(transaction_style="endpoint"),
                StarletteIntegration(transaction_style="endpoint"),
            ]
        )

    environment = settings.sentry_environment or settings.environment

    try:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=environment,
            release=f"grantfit-{service}@{settings.app_version}",
            traces_sample_rate=settings.sentry_traces_sample_rate,
            integrations=integrations,
            before_send=before_send,
            before_send_transaction=before_send_transaction,
            send_default_pii=False,
            attach_stacktrace=True,
            max_breadcrumbs=50,
            debug=settings.debug and settings.environment == "development",
        )

        sentry_sdk.set_tag("service", service)
        sentry_sdk.set_tag("app_name", settings.app_name)

        logger.info(
            f"Sentry initialized (service={service}, env={environment}, "
            f"traces={settings.sentry_traces_sample_rate})"
        )
        return True

    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False


def capture_exception(error: Exception, extra: dict[str, Any] | None = None) -> str | None:
    """
    Capture an exception and send to Sentry.

    Args:
        error: The exception to capture
        extra: Optional extra data to attach

    Returns:
        Event ID if captured, None otherwise
    """
    with sentry_sdk.new_scope() as scope:
        if extra:
            for key, value in extra.items():
                scope.set_extra(key, value)

        return sentry_sdk.capture_exception(error)

"""
GrantFit FastAPI Application
Serves computed grant matches and the admin surface that keeps them fresh.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.api import documents, eligibility, health, matches, profile
from backend.core.config import settings
from backend.core.sentry import capture_exception, init_sentry
from backend.database import close_db, init_db

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start error tracking, create tables in debug mode, and release the pool on shutdown."""
    logger.info(f"Starting {settings.app_name} API ({settings.environment}, debug={settings.debug})")
    logger.info("Sentry enabled" if init_sentry() else "Sentry disabled (no DSN configured)")

    if settings.debug:
        try:
            await init_db()
        except Exception as e:
            logger.error(f"Could not create tables: {e}")

    yield

    await close_db()
    logger.info(f"{settings.app_name} API stopped")


app = FastAPI(
    title=f"{settings.app_name} API",
    description=(
        "Scores each company against each public grant from admin-authored eligibility rules, "
        "the company profile and its document inventory. Scores are recomputed in the background "
        "whenever a profile or a grant's rules change."
    ),
    version=settings.app_version,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# The dashboard is the only browser client
allowed_origins = [settings.frontend_url]
if settings.debug:
    allowed_origins.append("http://127.0.0.1:3000")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "PUT", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render NotFoundError, ValidationError and other HTTP errors in one shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "message": exc.detail,
            "status_code": exc.status_code,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report unexpected errors to Sentry and return a reference id."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")

    event_id = capture_exception(
        exc,
        extra={
            "request_method": request.method,
            "request_path": request.url.path,
        },
    )

    if settings.debug:
        detail = str(exc)
    else:
        detail = f"Internal server error (ref: {event_id})" if event_id else "Internal server error"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "message": detail,
            "status_code": 500,
            "error_id": event_id,
        },
    )


app.include_router(health.router)
app.include_router(matches.router)
app.include_router(matches.admin_router)
app.include_router(eligibility.router)
app.include_router(profile.router)
app.include_router(documents.router)


@app.get(
    "/",
    tags=["Root"],
    summary="API root",
    description="Service name, version and where to find health checks.",
)
async def root() -> dict[str, Any]:
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs_url": "/docs" if settings.debug else None,
        "health_url": "/health",
        "readiness_url": "/health/ready",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("backend.main:app", host="0.0.0.0", port=8000, reload=settings.debug)

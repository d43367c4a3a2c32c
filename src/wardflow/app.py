"""
FastAPI application factory and main app configuration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wardflow.api.deps import get_record_store
from wardflow.api.middleware import request_span_middleware
from wardflow.api.routers import admissions, ai, health, patients, visits, wards
from wardflow.core.config import get_settings
from wardflow.core.errors import (
    AITimeoutError,
    ExternalServiceError,
    QuotaExceededError,
    RetryExhaustedError,
    ServiceConfigurationError,
    TransientServiceError,
)
from wardflow.core.logging_setup import configure_logging
from wardflow.domain.errors import ConflictError, DomainError, NotFoundError

logger = logging.getLogger("wardflow")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    configure_logging(settings.logging)
    logger.info(f"🚀 Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"📊 Environment: {settings.app_env}")

    client = None
    if settings.is_testing:
        logger.info("🧪 Testing environment, MongoDB init skipped")
    else:
        from beanie import init_beanie
        from motor.motor_asyncio import AsyncIOMotorClient

        from wardflow.adapters.db.mongo.models.workflow_m import WORKFLOW_DOCUMENT_MODELS

        client = AsyncIOMotorClient(
            settings.database.uri,
            serverSelectionTimeoutMS=settings.database.server_selection_timeout_ms,
        )
        await init_beanie(
            database=client[settings.database.db_name],
            document_models=WORKFLOW_DOCUMENT_MODELS,
        )
        logger.info("✅ MongoDB/Beanie initialized")

    yield

    await get_record_store().aclose()
    if client is not None:
        client.close()
    logger.info(f"🛑 Shutting down {settings.app_name}")


def domain_error_status(exc: DomainError) -> int:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def external_error_status(exc: ExternalServiceError) -> int:
    cause = exc.last_error if isinstance(exc, RetryExhaustedError) else exc
    if isinstance(cause, QuotaExceededError):
        return status.HTTP_429_TOO_MANY_REQUESTS
    if isinstance(cause, AITimeoutError):
        return status.HTTP_504_GATEWAY_TIMEOUT
    if isinstance(cause, (TransientServiceError, ServiceConfigurationError)):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, RetryExhaustedError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_502_BAD_GATEWAY


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="WardFlow",
        description="Clinical workflow coordination: queues, admissions, beds and AI assistance",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.middleware("http")(request_span_middleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(patients.router)
    app.include_router(visits.router)
    app.include_router(admissions.router)
    app.include_router(wards.router)
    app.include_router(ai.router)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return JSONResponse(
            status_code=domain_error_status(exc),
            content={
                "error": exc.error_code or "DOMAIN_ERROR",
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.exception_handler(ExternalServiceError)
    async def external_error_handler(request: Request, exc: ExternalServiceError):
        status_code = external_error_status(exc)
        logger.error(
            f"❌ {exc.service} call failed: {exc.message}",
            extra={"request_id": getattr(request.state, "request_id", None)},
        )
        return JSONResponse(
            status_code=status_code,
            content={
                "error": exc.error_code,
                "message": exc.message,
                "details": {"service": exc.service, **exc.details},
            },
        )

    # Global exception handler for validation errors
    @app.exception_handler(ValueError)
    async def validation_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "VALIDATION_ERROR", "message": str(exc), "details": {}},
        )

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.app_env,
            "status": "running",
            "docs": "/docs" if settings.debug else "disabled",
            "endpoints": {
                "health": "/health",
                "patients": "/patients",
                "visits": "/visits",
                "admissions": "/admissions",
                "wards": "/wards",
                "ai": "/ai",
            },
        }

    return app


app = create_app()

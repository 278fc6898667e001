"""
Member Search API - Main FastAPI Application
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import create_api_router
from app.core.config import get_settings
from app.infrastructure.providers import (
    get_kv_store,
    get_profile_index,
    get_skills_index,
    get_stats_index,
    get_verification_service,
    reset_all_providers,
)


def configure_logging(level: str = "INFO", log_format: str = "console") -> None:
    """Configure structured logging"""
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json" or not sys.stdout.isatty()
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(get_settings().LOG_LEVEL, get_settings().LOG_FORMAT)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    settings = get_settings()
    logger.info("Starting Member Search API", version=app.version, environment=settings.ENVIRONMENT)

    # Pre-warm provider singletons
    try:
        backends = {
            "profile_index": await get_profile_index(),
            "skills_index": await get_skills_index(),
            "stats_index": await get_stats_index(),
            "kv_store": await get_kv_store(),
            "verification": await get_verification_service(),
        }
        statuses = {}
        for name, backend in backends.items():
            health = await backend.check_health()
            statuses[name] = health["status"]
        logger.info("All backends initialized", **statuses)

    except Exception as e:
        logger.error("Failed to initialize backends", error=str(e))
        if settings.is_production():
            sys.exit(1)

    yield

    # Cleanup
    logger.info("Shutting down Member Search API")
    try:
        await reset_all_providers()
        logger.info("Backend clients closed")
    except Exception as e:
        logger.error("Cleanup error", error=str(e))


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Member search, skills and statistics aggregated across indexes and stores",
        version=settings.APP_VERSION,
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url="/redoc" if not settings.is_production() else None,
        openapi_url="/openapi.json" if not settings.is_production() else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(create_api_router())

    # Basic health check endpoint
    @app.get("/health")
    async def health_check():
        """Basic health check endpoint"""
        return {
            "status": "healthy",
            "version": app.version,
            "environment": settings.ENVIRONMENT,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # Detailed health check with backends
    @app.get("/health/detailed")
    async def detailed_health_check():
        """Detailed health check including every backend"""
        health_status = {
            "status": "healthy",
            "version": app.version,
            "environment": settings.ENVIRONMENT,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": {},
        }

        checks = {
            "profile_index": get_profile_index,
            "skills_index": get_skills_index,
            "stats_index": get_stats_index,
            "kv_store": get_kv_store,
            "verification": get_verification_service,
        }
        for name, provider in checks.items():
            try:
                backend = await provider()
                health_status["services"][name] = await backend.check_health()
            except Exception as e:
                health_status["services"][name] = {"status": "unhealthy", "error": str(e)}
                health_status["status"] = "unhealthy"

        return health_status

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_config=None,  # Use our structured logging
    )

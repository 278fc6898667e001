"""
API-specific dependencies for application services with dependency injection.

This module provides FastAPI dependency injection helpers for application services,
bridging the API layer with the hexagonal architecture's application services.
"""

from typing import Annotated

import structlog
from fastapi import Depends, HTTPException

from app.application.member_search_service import MemberSearchApplicationService
from app.application.statistics_service import StatisticsApplicationService
from app.domain.exceptions import (
    BackendUnavailableError,
    DataFormatError,
    DomainException,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.infrastructure.factories.member_search_dependency_factory import (
    get_member_search_dependencies,
)
from app.infrastructure.factories.statistics_dependency_factory import (
    get_statistics_dependencies,
)

logger = structlog.get_logger(__name__)


# Application Service Dependencies
async def get_member_search_service() -> MemberSearchApplicationService:
    """Create MemberSearchApplicationService with injected dependencies."""
    try:
        dependencies = await get_member_search_dependencies()
        return MemberSearchApplicationService(dependencies)
    except Exception as e:
        logger.error("Failed to create member search service", error=str(e))
        raise HTTPException(
            status_code=500,
            detail="Member search service unavailable"
        ) from e


async def get_statistics_service() -> StatisticsApplicationService:
    """Create StatisticsApplicationService with injected dependencies."""
    try:
        dependencies = await get_statistics_dependencies()
        return StatisticsApplicationService(dependencies)
    except Exception as e:
        logger.error("Failed to create statistics service", error=str(e))
        raise HTTPException(
            status_code=500,
            detail="Statistics service unavailable"
        ) from e


# Type aliases for dependency injection
MemberSearchServiceDep = Annotated[MemberSearchApplicationService, Depends(get_member_search_service)]
StatisticsServiceDep = Annotated[StatisticsApplicationService, Depends(get_statistics_service)]


# Domain Exception Handlers
def map_domain_exception_to_http(exception: Exception) -> HTTPException:
    """Map domain exceptions to appropriate HTTP responses."""

    # UnauthorizedError - 401 Unauthorized
    if isinstance(exception, UnauthorizedError):
        return HTTPException(
            status_code=401,
            detail=str(exception),
            headers={"WWW-Authenticate": "Bearer"},
        )

    # NotFoundError hierarchy - 404 Not Found
    elif isinstance(exception, NotFoundError):
        return HTTPException(status_code=404, detail=str(exception))

    # ValidationError hierarchy (BadRequest, InsufficientPermissions) - 400 Bad Request
    elif isinstance(exception, ValidationError):
        return HTTPException(status_code=400, detail=str(exception))

    # BackendUnavailableError - 503 Service Unavailable
    elif isinstance(exception, BackendUnavailableError):
        logger.error(
            "Backend unavailable",
            backend=exception.backend,
            operation=exception.operation,
            error=str(exception),
        )
        return HTTPException(status_code=503, detail=f"{exception.backend} is unavailable")

    # DataFormatError - 500 Internal Server Error (malformed stored data)
    elif isinstance(exception, DataFormatError):
        logger.error("Malformed stored document", field=exception.field, error=str(exception))
        return HTTPException(status_code=500, detail=str(exception))

    # Generic DomainException - 500 Internal Server Error
    elif isinstance(exception, DomainException):
        logger.error("Unhandled domain exception", exception_type=type(exception).__name__, error=str(exception))
        return HTTPException(status_code=500, detail="Domain operation failed")

    else:
        # Non-domain exception - log and return generic error
        logger.error("Non-domain exception in mapping", exception_type=type(exception).__name__, error=str(exception))
        return HTTPException(status_code=500, detail="Internal server error")


__all__ = [
    "get_member_search_service",
    "get_statistics_service",
    "MemberSearchServiceDep",
    "StatisticsServiceDep",
    "map_domain_exception_to_http",
]

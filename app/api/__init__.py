"""
API Package

Central package for all API endpoints.
Provides versioned API routes with proper namespace management.

Note: Routers are imported lazily to avoid circular import issues with application services.
"""

from fastapi import APIRouter


def create_api_router() -> APIRouter:
    """
    Create and configure the main API router with all v1 routes.

    Uses lazy imports to avoid circular dependencies between:
    - Application layer services
    - API schemas
    - API dependencies
    - API routers
    """
    # Import v1 routes only when creating the router (lazy import)
    from app.api.v1.members import router as members_router

    # Create main API router
    api_router = APIRouter()

    # Include v1 routers with version prefix
    api_router.include_router(
        members_router,
        prefix="/api/v1",
        tags=["members"]
    )

    return api_router


__all__ = ["create_api_router"]

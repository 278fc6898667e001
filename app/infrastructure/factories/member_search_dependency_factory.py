"""Concrete factory for creating MemberSearchApplicationService dependencies."""

from __future__ import annotations

from app.application.dependencies import IMemberSearchDependencyFactory, MemberSearchDependencies
from app.core.config import get_settings
from app.infrastructure.providers.index_provider import (
    get_profile_index,
    get_skills_index,
    get_stats_index,
)
from app.infrastructure.providers.policy_provider import get_rating_palette, get_visibility_policy
from app.infrastructure.providers.verification_provider import get_verification_service


class MemberSearchDependencyFactory(IMemberSearchDependencyFactory):
    """Concrete factory for creating member search dependencies using current providers."""

    async def create_dependencies(self) -> MemberSearchDependencies:
        """Create and return member search dependencies."""
        settings = get_settings()

        return MemberSearchDependencies(
            # Backends
            profile_index=await get_profile_index(),
            skills_index=await get_skills_index(),
            stats_index=await get_stats_index(),
            verification_service=await get_verification_service(),

            # Policies
            visibility_policy=await get_visibility_policy(),
            rating_palette=await get_rating_palette(),

            # Tunables
            search_max_size=settings.SEARCH_MAX_SIZE,
            autocomplete_max_size=settings.AUTOCOMPLETE_MAX_SIZE,
            verification_concurrency=settings.VERIFICATION_MAX_CONCURRENCY,
        )


# Singleton instance for global usage
_member_search_dependency_factory: MemberSearchDependencyFactory | None = None


async def get_member_search_dependency_factory() -> MemberSearchDependencyFactory:
    """Get singleton instance of member search dependency factory."""
    global _member_search_dependency_factory
    if _member_search_dependency_factory is None:
        _member_search_dependency_factory = MemberSearchDependencyFactory()
    return _member_search_dependency_factory


async def get_member_search_dependencies() -> MemberSearchDependencies:
    """Helper function to get member search dependencies directly."""
    factory = await get_member_search_dependency_factory()
    return await factory.create_dependencies()


__all__ = [
    "MemberSearchDependencyFactory",
    "get_member_search_dependency_factory",
    "get_member_search_dependencies",
]

"""Concrete factory for creating StatisticsApplicationService dependencies."""

from __future__ import annotations

from app.application.dependencies import (
    IStatisticsDependencyFactory,
    StatisticsDependencies,
    StatisticsTables,
)
from app.core.config import get_settings
from app.infrastructure.providers.index_provider import get_profile_index, get_stats_index
from app.infrastructure.providers.policy_provider import get_rating_palette, get_visibility_policy
from app.infrastructure.providers.store_provider import get_kv_store


class StatisticsDependencyFactory(IStatisticsDependencyFactory):
    """Concrete factory for creating statistics dependencies using current providers."""

    async def create_dependencies(self) -> StatisticsDependencies:
        """Create and return statistics dependencies."""
        settings = get_settings()

        return StatisticsDependencies(
            profile_index=await get_profile_index(),
            stats_index=await get_stats_index(),
            kv_store=await get_kv_store(),
            visibility_policy=await get_visibility_policy(),
            rating_palette=await get_rating_palette(),
            tables=StatisticsTables(
                stats_public=settings.MEMBER_STATS_TABLE,
                stats_private=settings.MEMBER_STATS_PRIVATE_TABLE,
                history_public=settings.MEMBER_HISTORY_STATS_TABLE,
                history_private=settings.MEMBER_HISTORY_STATS_PRIVATE_TABLE,
                distribution=settings.MEMBER_DISTRIBUTION_STATS_TABLE,
                entered_skills=settings.MEMBER_ENTERED_SKILLS_TABLE,
                aggregated_skills=settings.MEMBER_AGGREGATED_SKILLS_TABLE,
            ),
        )


# Singleton instance for global usage
_statistics_dependency_factory: StatisticsDependencyFactory | None = None


async def get_statistics_dependency_factory() -> StatisticsDependencyFactory:
    """Get singleton instance of statistics dependency factory."""
    global _statistics_dependency_factory
    if _statistics_dependency_factory is None:
        _statistics_dependency_factory = StatisticsDependencyFactory()
    return _statistics_dependency_factory


async def get_statistics_dependencies() -> StatisticsDependencies:
    """Helper function to get statistics dependencies directly."""
    factory = await get_statistics_dependency_factory()
    return await factory.create_dependencies()


__all__ = [
    "StatisticsDependencyFactory",
    "get_statistics_dependency_factory",
    "get_statistics_dependencies",
]

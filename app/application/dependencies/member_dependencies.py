"""Dependencies interface for the member search and statistics services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.domain.interfaces import (
    IKeyValueStore,
    IProfileIndex,
    ISkillsIndex,
    IStatsIndex,
    IVerificationService,
)
from app.domain.services.rating_palette import RatingPalette
from app.domain.services.visibility_policy import FieldVisibilityPolicy


@dataclass(frozen=True)
class StatisticsTables:
    """Key-value store tables read by the statistics workflows."""

    stats_public: str = "MemberStats"
    stats_private: str = "MemberStatsPrivate"
    history_public: str = "MemberHistoryStats"
    history_private: str = "MemberHistoryStatsPrivate"
    distribution: str = "MemberDistributionStats"
    entered_skills: str = "MemberEnteredSkills"
    aggregated_skills: str = "MemberAggregatedSkills"


@dataclass
class MemberSearchDependencies:
    """Dependencies required by MemberSearchApplicationService."""

    # Backends
    profile_index: IProfileIndex
    skills_index: ISkillsIndex
    stats_index: IStatsIndex
    verification_service: IVerificationService

    # Policies
    visibility_policy: FieldVisibilityPolicy
    rating_palette: RatingPalette

    # Tunables
    search_max_size: int = 10000
    autocomplete_max_size: int = 500
    verification_concurrency: int = 10


@dataclass
class StatisticsDependencies:
    """Dependencies required by StatisticsApplicationService."""

    profile_index: IProfileIndex
    stats_index: IStatsIndex
    kv_store: IKeyValueStore

    visibility_policy: FieldVisibilityPolicy
    rating_palette: RatingPalette

    tables: StatisticsTables = StatisticsTables()


class IMemberSearchDependencyFactory(ABC):
    """Abstract factory for creating member search dependencies."""

    @abstractmethod
    async def create_dependencies(self) -> MemberSearchDependencies:
        """Create and return member search dependencies."""
        pass


class IStatisticsDependencyFactory(ABC):
    """Abstract factory for creating statistics dependencies."""

    @abstractmethod
    async def create_dependencies(self) -> StatisticsDependencies:
        """Create and return statistics dependencies."""
        pass

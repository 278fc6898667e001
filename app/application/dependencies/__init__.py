"""Application service dependencies and factories."""

from .member_dependencies import (
    IMemberSearchDependencyFactory,
    IStatisticsDependencyFactory,
    MemberSearchDependencies,
    StatisticsDependencies,
    StatisticsTables,
)

__all__ = [
    "MemberSearchDependencies",
    "StatisticsDependencies",
    "StatisticsTables",
    "IMemberSearchDependencyFactory",
    "IStatisticsDependencyFactory",
]

"""Statistics resolution components."""

from app.application.statistics.distribution_aggregator import DistributionAggregator
from app.application.statistics.skills_merger import SkillsMerger
from app.application.statistics.stat_source_resolver import StatSourceResolver, StatTableSet

__all__ = [
    "DistributionAggregator",
    "SkillsMerger",
    "StatSourceResolver",
    "StatTableSet",
]

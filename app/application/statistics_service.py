"""Application layer orchestrator for member statistics and skills workflows."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

import structlog

from app.api.schemas.member_schemas import DistributionQuery, SkillsQuery, StatisticsQuery
from app.application.statistics.distribution_aggregator import DistributionAggregator
from app.application.statistics.skills_merger import SkillsMerger, decode_skills
from app.application.statistics.stat_source_resolver import StatSourceResolver, StatTableSet
from app.domain.exceptions import (
    InsufficientPermissionsError,
    MemberNotFoundError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.domain.fields import (
    DISTRIBUTION_FIELDS,
    HISTORY_STATS_FIELDS,
    MEMBER_SKILL_FIELDS,
    MEMBER_STATS_FIELDS,
    parse_fields,
    project,
)
from app.domain.services.statistics_cleaner import StatisticsCleaner
from app.domain.value_objects import CallerIdentity

if TYPE_CHECKING:
    from app.application.dependencies.member_dependencies import StatisticsDependencies


logger = structlog.get_logger(__name__)

SKILL_ENTRY_KEYS = frozenset({"tagName", "hidden", "score", "sources"})


class StatisticsApplicationService:
    """Coordinates statistics, history, distribution and skills lookups.

    Every per-member operation resolves the member by handle first, so an
    unknown handle surfaces as ``MemberNotFoundError`` before any statistics
    source is read.
    """

    def __init__(self, dependencies: StatisticsDependencies) -> None:
        self._deps = dependencies
        tables = dependencies.tables

        self._cleaner = StatisticsCleaner(dependencies.rating_palette)
        self._skills_merger = SkillsMerger()
        self._distribution = DistributionAggregator(dependencies.kv_store, tables.distribution)
        self._stats_resolver = StatSourceResolver(
            dependencies.kv_store,
            StatTableSet(
                public_overall=tables.stats_public,
                per_group=tables.stats_private,
                private_overall=tables.stats_private,
            ),
            stats_index=dependencies.stats_index,
        )
        self._history_resolver = StatSourceResolver(
            dependencies.kv_store,
            StatTableSet(
                public_overall=tables.history_public,
                per_group=tables.history_private,
            ),
        )

    async def get_distribution(self, query: DistributionQuery) -> Dict[str, Any]:
        """Aggregate rating distribution records for a track and sub-track."""
        fields = parse_fields(query.fields, DISTRIBUTION_FIELDS)
        summary = await self._distribution.aggregate(query.track, query.sub_track)
        return project(summary, fields)

    async def get_history_stats(
        self,
        caller: Optional[CallerIdentity],
        handle: str,
        query: StatisticsQuery,
    ) -> List[Dict[str, Any]]:
        """Rating history of a member, one record per resolved group."""
        fields = parse_fields(query.fields, HISTORY_STATS_FIELDS)
        member = await self.get_member_by_handle(handle)
        tier = self._deps.visibility_policy.statistics_tier(caller, member.get("userId"))

        records = await self._history_resolver.resolve_groups(member["userId"], query.group_id_list(), tier)
        return self._cleaner.clean_all(records, fields)

    async def get_member_stats(
        self,
        caller: Optional[CallerIdentity],
        handle: str,
        query: StatisticsQuery,
    ) -> List[Dict[str, Any]]:
        """Statistics of a member, one record per resolved group."""
        fields = parse_fields(query.fields, MEMBER_STATS_FIELDS)
        member = await self.get_member_by_handle(handle)
        tier = self._deps.visibility_policy.statistics_tier(caller, member.get("userId"))

        records = await self._stats_resolver.resolve_groups(member["userId"], query.group_id_list(), tier)

        logger.info(
            "Member statistics resolved",
            handle=handle,
            tier=tier.value,
            records=len(records),
        )
        return self._cleaner.clean_all(records, fields)

    async def get_member_skills(self, handle: str, query: SkillsQuery) -> Dict[str, Any]:
        """Entered skills of a member completed with aggregated skills."""
        fields = parse_fields(query.fields, MEMBER_SKILL_FIELDS)
        member = await self.get_member_by_handle(handle)
        tables = self._deps.tables

        entered = await self._deps.kv_store.get_by_key(tables.entered_skills, member["userId"])
        if entered is None:
            raise NotFoundError(f"No skills found for member '{handle}'")
        aggregated = await self._deps.kv_store.get_by_key(tables.aggregated_skills, member["userId"])

        merged = self._skills_merger.merge(entered, aggregated, member)
        return project(merged, fields)

    async def update_member_skills_partial(
        self,
        caller: Optional[CallerIdentity],
        handle: str,
        data: Mapping[str, Mapping[str, Any]],
    ) -> Dict[str, Any]:
        """Shallow-assign ``data`` into the member's entered skills.

        Raises:
            UnauthorizedError: No caller
            InsufficientPermissionsError: Caller is neither the member, an admin nor M2M
            ValidationError: Empty or malformed ``data``
            NotFoundError: The member has no entered skills record
        """
        if caller is None:
            raise UnauthorizedError("Authentication token is required to update member skills")
        self._validate_skill_entries(data)

        member = await self.get_member_by_handle(handle)
        policy = self._deps.visibility_policy
        if not (policy.is_trusted(caller) or caller.is_member(member.get("userId"))):
            logger.warning("Skills update rejected", caller=caller.display_name, handle=handle)
            raise InsufficientPermissionsError("You are not allowed to update the skills of this member")

        table = self._deps.tables.entered_skills
        record = decode_skills(await self._deps.kv_store.get_by_key(table, member["userId"]))
        if record is None:
            raise NotFoundError(f"No skills found for member '{handle}'")

        record["skills"].update({tag_id: dict(entry) for tag_id, entry in data.items()})
        record["updatedAt"] = datetime.now(timezone.utc).isoformat()
        record["updatedBy"] = caller.display_name

        result = await self._deps.kv_store.update(table, record, {})
        logger.info(
            "Member skills updated",
            handle=handle,
            updated_by=record["updatedBy"],
            entries=len(data),
        )
        return result

    async def get_member_by_handle(self, handle: str) -> Dict[str, Any]:
        """Look up a member profile by case-insensitive handle."""
        hits = await self._deps.profile_index.query({"handleLower": handle.lower()}, None, 1, 1)
        if not hits.documents:
            raise MemberNotFoundError(handle)
        return hits.documents[0]

    @staticmethod
    def _validate_skill_entries(data: Mapping[str, Mapping[str, Any]]) -> None:
        if not data:
            raise ValidationError("At least one skill must be provided")
        for tag_id, entry in data.items():
            if not isinstance(entry, Mapping):
                raise ValidationError(f"Skill '{tag_id}' must be an object")
            unknown = set(entry) - SKILL_ENTRY_KEYS
            if unknown:
                raise ValidationError(f"Skill '{tag_id}' has unknown attributes: {', '.join(sorted(unknown))}")
            score = entry.get("score")
            if score is not None and (isinstance(score, bool) or not isinstance(score, (int, float)) or score < 0):
                raise ValidationError(f"Skill '{tag_id}' score must be a non-negative number")


__all__ = ["StatisticsApplicationService"]

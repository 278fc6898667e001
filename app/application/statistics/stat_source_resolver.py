"""Per-group statistics lookup with index-then-store fallback."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import structlog

from app.domain.exceptions import BackendUnavailableError, NotFoundError
from app.domain.interfaces import IKeyValueStore, IStatsIndex
from app.domain.lookup import Failure, Found
from app.domain.value_objects import DEFAULT_GROUP_ID, StatsKey, VisibilityTier

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StatTableSet:
    """Store tables holding the differently-shaped statistics records.

    ``public_overall`` is keyed by ``userId``; ``private_overall`` and
    ``per_group`` by ``(userId, groupId)``. Without a ``private_overall``
    table the private tier reads the public overall record.
    """

    public_overall: str
    per_group: str
    private_overall: Optional[str] = None


class StatSourceResolver:
    """Resolves statistics records for a member.

    Each key is looked up in the statistics index first when one is
    configured. An index miss falls back to the store table matching the
    group and the visibility tier; any other index failure propagates as
    ``BackendUnavailableError``.
    """

    def __init__(
        self,
        kv_store: IKeyValueStore,
        tables: StatTableSet,
        stats_index: Optional[IStatsIndex] = None,
    ):
        self.kv_store = kv_store
        self.tables = tables
        self.stats_index = stats_index

    async def resolve(self, key: StatsKey, tier: VisibilityTier) -> Optional[Dict[str, Any]]:
        """Resolve one record, ``None`` when no source holds it."""
        if self.stats_index is not None:
            outcome = await self.stats_index.get_by_composite_key(key.user_id, key.group_id)
            if isinstance(outcome, Found):
                return dict(outcome.record)
            if isinstance(outcome, Failure):
                logger.error("Statistics index lookup failed", key=str(key), error=str(outcome.cause))
                raise BackendUnavailableError("stats index", "get_by_composite_key", outcome.cause)

        return await self._resolve_from_store(key, tier)

    async def resolve_groups(
        self,
        user_id: Any,
        group_ids: Optional[Sequence[int]],
        tier: VisibilityTier,
    ) -> List[Dict[str, Any]]:
        """Resolve the requested groups in request order.

        Without a group list a single default-group record is returned and
        its absence raises ``NotFoundError``. With a list, absent groups are
        skipped.
        """
        if not group_ids:
            record = await self.resolve(StatsKey(user_id), tier)
            if record is None:
                raise NotFoundError(f"No statistics found for member {user_id}")
            return [record]

        records = await asyncio.gather(
            *(self.resolve(StatsKey(user_id, group_id), tier) for group_id in group_ids)
        )
        resolved = [record for record in records if record is not None]
        logger.debug(
            "Statistics groups resolved",
            user_id=user_id,
            requested=len(group_ids),
            found=len(resolved),
        )
        return resolved

    async def _resolve_from_store(self, key: StatsKey, tier: VisibilityTier) -> Optional[Dict[str, Any]]:
        if not key.is_default_group:
            return await self.kv_store.get_by_composite_key(self.tables.per_group, key.user_id, key.group_id)

        if tier == VisibilityTier.PRIVATE and self.tables.private_overall:
            record = await self.kv_store.get_by_composite_key(
                self.tables.private_overall, key.user_id, DEFAULT_GROUP_ID
            )
        else:
            record = await self.kv_store.get_by_key(self.tables.public_overall, key.user_id)

        if record is None:
            return None
        record = dict(record)
        record["groupId"] = DEFAULT_GROUP_ID
        return record


__all__ = ["StatTableSet", "StatSourceResolver"]

"""Summation of rating distribution records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog

from app.domain.exceptions import NotFoundError
from app.domain.interfaces import IKeyValueStore
from app.domain.services.statistics_cleaner import coerce_number

logger = structlog.get_logger(__name__)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse ISO strings, epoch milliseconds and datetimes into aware UTC datetimes."""
    parsed = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed is not None and parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _normalize(total: float) -> Any:
    return int(total) if float(total).is_integer() else total


class DistributionAggregator:
    """Sums the buckets of every distribution record matching a track filter."""

    def __init__(self, kv_store: IKeyValueStore, table: str = "MemberDistributionStats"):
        self.kv_store = kv_store
        self.table = table

    async def aggregate(self, track: Optional[str] = None, sub_track: Optional[str] = None) -> Dict[str, Any]:
        criteria: Dict[str, Dict[str, Any]] = {}
        if track:
            track = track.upper()
            criteria["track"] = {"CONTAINS": track}
        if sub_track:
            sub_track = sub_track.upper()
            criteria["subTrack"] = {"CONTAINS": sub_track}

        records: List[Dict[str, Any]] = await self.kv_store.scan(self.table, criteria or None)
        if not records:
            raise NotFoundError("No member distribution statistics is found.")

        totals: Dict[str, float] = {}
        summary: Dict[str, Any] = {"track": track, "subTrack": sub_track}
        created_at: Optional[datetime] = None
        updated_at: Optional[datetime] = None

        for record in records:
            distribution = record.get("distribution")
            if not distribution:
                continue
            for bucket, value in distribution.items():
                number = coerce_number(value)
                if number is None:
                    logger.warning("Skipping non-numeric distribution bucket", bucket=bucket, value=value)
                    continue
                totals[bucket] = totals.get(bucket, 0) + number

            created = _parse_timestamp(record.get("createdAt"))
            if created is not None and (created_at is None or created < created_at):
                created_at = created
                summary["createdAt"] = record.get("createdAt")
                summary["createdBy"] = record.get("createdBy")

            updated = _parse_timestamp(record.get("updatedAt"))
            if updated is not None and (updated_at is None or updated > updated_at):
                updated_at = updated
                summary["updatedAt"] = record.get("updatedAt")
                summary["updatedBy"] = record.get("updatedBy")

        summary["distribution"] = {bucket: _normalize(total) for bucket, total in totals.items()}
        logger.info(
            "Distribution aggregated",
            track=track,
            sub_track=sub_track,
            records=len(records),
            buckets=len(totals),
        )
        return summary


__all__ = ["DistributionAggregator"]

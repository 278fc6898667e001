"""Join of profile, skills and statistics documents into member records.

The merge engine is the heart of both search flows: it receives the profile
hits of a query, looks up skills and statistics for the same members, derives
the computed fields and returns the requested page.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog

from app.api.schemas.base import PaginatedResult
from app.application.search.verification_enricher import VerificationEnricher
from app.domain.fields import MEMBER_SEARCH_STATS_FIELDS, project
from app.domain.interfaces import IndexHits, IProfileIndex, ISkillsIndex, IStatsIndex
from app.domain.services.rating_palette import RatingPalette
from app.domain.services.statistics_cleaner import coerce_number, decode_max_rating
from app.domain.value_objects import SortOrder

logger = structlog.get_logger(__name__)


@dataclass
class MergeOptions:
    """Ordering and page window applied to merged members."""

    page: int = 1
    per_page: int = 50
    sort_by: Optional[str] = None
    sort_order: SortOrder = SortOrder.ASC


def paginate(items: Sequence[Any], page: int, per_page: int) -> List[Any]:
    """Return the 1-based ``page`` of ``items``; pages past the end are empty."""
    start = (page - 1) * per_page
    if start >= len(items):
        return []
    return list(items[start:start + per_page])


def _sort_key(value: Any) -> Tuple[int, Any]:
    """Numbers sort before text; text compares as strings."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    return (1, str(value))


def sort_members(
    members: Sequence[Dict[str, Any]],
    sort_by: Optional[str],
    sort_order: SortOrder,
) -> List[Dict[str, Any]]:
    """Stable sort by ``(sort_by, handleLower)``.

    ``handleLower`` is always ascending. Members without a value for
    ``sort_by`` come after every member that has one, whatever the direction.
    """
    ordered = sorted(members, key=lambda member: member.get("handleLower") or "")
    if not sort_by or sort_by == "handleLower":
        if sort_order == SortOrder.DESC and sort_by == "handleLower":
            ordered.reverse()
        return ordered

    present = [member for member in ordered if member.get(sort_by) is not None]
    missing = [member for member in ordered if member.get(sort_by) is None]
    present.sort(key=lambda member: _sort_key(member[sort_by]), reverse=sort_order == SortOrder.DESC)
    return present + missing


class MemberMergeEngine:
    """Builds member records from the three member indexes."""

    def __init__(
        self,
        profile_index: IProfileIndex,
        skills_index: ISkillsIndex,
        stats_index: IStatsIndex,
        rating_palette: RatingPalette,
        verification_enricher: VerificationEnricher,
    ):
        self.profile_index = profile_index
        self.skills_index = skills_index
        self.stats_index = stats_index
        self.rating_palette = rating_palette
        self.verification_enricher = verification_enricher

    async def fill_members(
        self,
        profile_hits: IndexHits,
        options: MergeOptions,
        allowed_fields: Sequence[str],
    ) -> PaginatedResult:
        """Merge, sort, verify, project and paginate the members of ``profile_hits``."""
        total = self.profile_index.total(profile_hits)
        if total <= 0 or not profile_hits.documents:
            return PaginatedResult(total=max(total, 0), page=options.page, per_page=options.per_page, result=[])

        members = self._unique_members(profile_hits.documents)
        handles = [member["handleLower"] for member in members if member.get("handleLower")]

        skills_hits, stats_hits = await asyncio.gather(
            self.skills_index.query_by_handles(handles),
            self.stats_index.query_by_handles(handles),
        )

        skills_by_user = self._key_by_user(skills_hits.documents)
        stats_by_user = self._key_by_user(stats_hits.documents)

        merged = [
            self._join_stats(self._join_skills(member, skills_by_user), stats_by_user)
            for member in members
        ]

        ordered = sort_members(merged, options.sort_by, options.sort_order)
        await self.verification_enricher.annotate(ordered)

        projected = [project(member, allowed_fields) for member in ordered]
        page = paginate(projected, options.page, options.per_page)

        logger.debug(
            "Members merged",
            total=total,
            candidates=len(ordered),
            with_stats=len(stats_by_user),
            returned=len(page),
        )
        return PaginatedResult(total=total, page=options.page, per_page=options.per_page, result=page)

    @staticmethod
    def _unique_members(documents: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        seen = set()
        members = []
        for document in documents:
            user_id = document.get("userId")
            if user_id in seen:
                continue
            seen.add(user_id)
            members.append(dict(document))
        return members

    @staticmethod
    def _key_by_user(documents: Sequence[Dict[str, Any]]) -> Dict[Any, Dict[str, Any]]:
        keyed: Dict[Any, Dict[str, Any]] = {}
        for document in documents:
            keyed.setdefault(document.get("userId"), document)
        return keyed

    @staticmethod
    def _join_skills(member: Dict[str, Any], skills_by_user: Dict[Any, Dict[str, Any]]) -> Dict[str, Any]:
        skills_doc = skills_by_user.get(member.get("userId"))
        if skills_doc is not None:
            for key, value in skills_doc.items():
                if key not in ("userId", "handle", "handleLower"):
                    member[key] = value
        if not member.get("skills"):
            member["skills"] = {}
        return member

    def _join_stats(self, member: Dict[str, Any], stats_by_user: Dict[Any, Dict[str, Any]]) -> Dict[str, Any]:
        member["numberOfChallengesWon"] = 0
        member["numberOfChallengesPlaced"] = 0

        stats = stats_by_user.get(member.get("userId"))
        if stats is None:
            member["stats"] = []
            return member

        if stats.get("maxRating"):
            member["maxRating"] = decode_max_rating(stats["maxRating"], self.rating_palette)

        wins = coerce_number(stats.get("wins"))
        if wins is not None and wins > member["numberOfChallengesWon"]:
            member["numberOfChallengesWon"] = wins

        member["numberOfChallengesPlaced"] = stats.get("challenges") or 0
        member["stats"] = [project(stats, MEMBER_SEARCH_STATS_FIELDS)]
        return member


__all__ = ["MergeOptions", "MemberMergeEngine", "paginate", "sort_members"]

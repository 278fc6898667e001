"""Application layer orchestrator for member search workflows."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog

from app.api.schemas.base import PaginatedResult, SkillSearchResult
from app.api.schemas.member_schemas import (
    AutocompleteQuery,
    MemberSearchQuery,
    SkillSearchQuery,
)
from app.application.search.member_merge import MemberMergeEngine, MergeOptions, paginate
from app.application.search.verification_enricher import VerificationEnricher
from app.domain.exceptions import InsufficientPermissionsError, UnauthorizedError
from app.domain.fields import MEMBER_AUTOCOMPLETE_FIELDS, MEMBER_FIELDS, project
from app.domain.value_objects import BooleanOperator, CallerIdentity

if TYPE_CHECKING:
    from app.application.dependencies.member_dependencies import MemberSearchDependencies


logger = structlog.get_logger(__name__)


class MemberSearchApplicationService:
    """Coordinates member search across the profile, skills and statistics indexes.

    The service owns request-level concerns only: authorization of email
    queries, field visibility and the choice of the candidate query. Joining,
    sorting, verification and pagination are delegated to
    ``MemberMergeEngine``.
    """

    def __init__(self, dependencies: MemberSearchDependencies) -> None:
        """Initialize with injected dependencies.

        Args:
            dependencies: Index clients, policies and tunables
        """
        self._deps = dependencies
        self._merge_engine = MemberMergeEngine(
            profile_index=dependencies.profile_index,
            skills_index=dependencies.skills_index,
            stats_index=dependencies.stats_index,
            rating_palette=dependencies.rating_palette,
            verification_enricher=VerificationEnricher(
                dependencies.verification_service,
                max_concurrency=dependencies.verification_concurrency,
            ),
        )

    async def search_members(
        self,
        caller: Optional[CallerIdentity],
        query: MemberSearchQuery,
    ) -> PaginatedResult:
        """Search members by structured filters and free text.

        Args:
            caller: Authenticated caller, ``None`` for anonymous requests
            query: Filters, field selection, ordering and page window

        Returns:
            PaginatedResult whose ``total`` is the profile match count

        Raises:
            UnauthorizedError: Email filter without a caller
            InsufficientPermissionsError: Email filter without the email-search role
        """
        if query.has_email_filter():
            self._authorize_email_search(caller)

        allowed_fields = self._deps.visibility_policy.resolve(caller, query.fields, MEMBER_FIELDS)

        profile_hits = await self._deps.profile_index.query(
            query.filters(),
            query.term,
            1,
            self._deps.search_max_size,
        )

        response = await self._merge_engine.fill_members(
            profile_hits,
            MergeOptions(
                page=query.page,
                per_page=query.per_page,
                sort_by=query.sort_by,
                sort_order=query.sort_order,
            ),
            allowed_fields,
        )

        logger.info(
            "Member search completed",
            caller=caller.display_name if caller else None,
            total=response.total,
            returned=len(response.result),
            page=response.page,
        )
        return response

    async def search_members_by_skills(
        self,
        caller: Optional[CallerIdentity],
        query: SkillSearchQuery,
        operator: BooleanOperator = BooleanOperator.AND,
    ) -> SkillSearchResult:
        """Search members holding the requested skills.

        Every skill must be present with ``BooleanOperator.AND``, any of them
        with ``BooleanOperator.OR``. An empty skill list short-circuits to an
        empty envelope without touching any backend.
        """
        skill_ids = query.skill_ids()
        if not skill_ids:
            return SkillSearchResult.empty(page=query.page, per_page=query.per_page)

        allowed_fields = self._deps.visibility_policy.resolve(caller, query.fields, MEMBER_FIELDS)

        skill_hits = await self._deps.skills_index.query_by_skill_ids(
            skill_ids,
            operator,
            1,
            self._deps.search_max_size,
        )

        response = await self._merge_engine.fill_members(
            skill_hits,
            MergeOptions(
                page=query.page,
                per_page=query.per_page,
                sort_by=query.sort_by,
                sort_order=query.sort_order,
            ),
            allowed_fields,
        )

        result = SkillSearchResult.from_page(response)
        logger.info(
            "Skills search completed",
            skills=len(skill_ids),
            operator=operator.value,
            total=result.total,
            pages=result.number_of_pages,
        )
        return result

    async def autocomplete(
        self,
        caller: Optional[CallerIdentity],
        query: AutocompleteQuery,
    ) -> PaginatedResult:
        """Suggest members whose handle starts with ``query.term``."""
        term = (query.term or "").strip()
        if not term:
            return PaginatedResult.empty(page=query.page, per_page=query.per_page)

        allowed_fields = self._deps.visibility_policy.resolve(
            caller, query.fields, MEMBER_AUTOCOMPLETE_FIELDS
        )

        size = min(query.size or self._deps.autocomplete_max_size, self._deps.autocomplete_max_size)
        suggestions = await self._deps.profile_index.suggest(term, size)

        prefix = term.lower()
        matches: List[Dict[str, Any]] = [
            suggestion
            for suggestion in suggestions
            if str(suggestion.get("handle") or "").lower().startswith(prefix)
        ]
        matches.sort(key=lambda item: (str(item["handle"]).lower(), str(item["handle"])))

        projected = [project(item, allowed_fields) for item in matches]
        return PaginatedResult(
            total=len(projected),
            page=query.page,
            per_page=query.per_page,
            result=paginate(projected, query.page, query.per_page),
        )

    def _authorize_email_search(self, caller: Optional[CallerIdentity]) -> None:
        if caller is None:
            raise UnauthorizedError("Authentication token is required to query users by email")
        if not self._deps.visibility_policy.has_search_by_email_role(caller):
            logger.warning("Email search rejected", caller=caller.display_name)
            raise InsufficientPermissionsError("Admin role is required to query users by email")


__all__ = ["MemberSearchApplicationService"]

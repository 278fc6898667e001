"""
Member API Endpoints

Member search and statistics endpoints:
- Plain search with structured filters and free text
- Skills-filtered search
- Handle autocomplete
- Statistics, history statistics and rating distribution
- Member skills read and partial update
"""

from typing import Any, Dict, List, Optional, Type, TypeVar

import structlog
from fastapi import APIRouter, Body, HTTPException, Query
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.api.dependencies import (
    MemberSearchServiceDep,
    StatisticsServiceDep,
    map_domain_exception_to_http,
)
from app.api.schemas.base import PaginatedResult, SkillSearchResult
from app.api.schemas.member_schemas import (
    AutocompleteQuery,
    DistributionQuery,
    MemberSearchQuery,
    SkillSearchQuery,
    SkillsPartialUpdate,
    SkillsQuery,
    StatisticsQuery,
)
from app.core.dependencies import CallerDep, OptionalCallerDep
from app.domain.exceptions import DomainException

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/members", tags=["members"])

ModelT = TypeVar("ModelT", bound=BaseModel)


def _params(**params: Any) -> Dict[str, Any]:
    """Query parameters actually sent by the client."""
    return {key: value for key, value in params.items() if value is not None}


def _build(model: Type[ModelT], data: Any) -> ModelT:
    """Validate request parameters, answering 400 on invalid input."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        raise HTTPException(status_code=400, detail={"error": "invalid_request", "errors": errors})


@router.get("", response_model=PaginatedResult)
async def search_members(
    caller: OptionalCallerDep,
    search_service: MemberSearchServiceDep,
    handleLower: Optional[str] = Query(default=None),
    handlesLower: Optional[List[str]] = Query(default=None),
    handle: Optional[str] = Query(default=None),
    handles: Optional[List[str]] = Query(default=None),
    email: Optional[str] = Query(default=None),
    userId: Optional[str] = Query(default=None),
    userIds: Optional[List[str]] = Query(default=None),
    term: Optional[str] = Query(default=None),
    fields: Optional[str] = Query(default=None),
    sortBy: Optional[str] = Query(default=None),
    sortOrder: Optional[str] = Query(default=None),
    page: Optional[str] = Query(default=None),
    perPage: Optional[str] = Query(default=None),
) -> PaginatedResult:
    """Search members by handle, email, user id or free-text term."""
    query = _build(MemberSearchQuery, _params(
        handleLower=handleLower,
        handlesLower=handlesLower,
        handle=handle,
        handles=handles,
        email=email,
        userId=userId,
        userIds=userIds,
        term=term,
        fields=fields,
        sortBy=sortBy,
        sortOrder=sortOrder,
        page=page,
        perPage=perPage,
    ))
    try:
        return await search_service.search_members(caller, query)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)


@router.get("/search/skills", response_model=SkillSearchResult)
async def search_members_by_skills(
    caller: OptionalCallerDep,
    search_service: MemberSearchServiceDep,
    skillId: Optional[List[str]] = Query(default=None),
    fields: Optional[str] = Query(default=None),
    sortBy: Optional[str] = Query(default=None),
    sortOrder: Optional[str] = Query(default=None),
    page: Optional[str] = Query(default=None),
    perPage: Optional[str] = Query(default=None),
) -> SkillSearchResult:
    """Search members holding every requested skill."""
    query = _build(SkillSearchQuery, _params(
        skillId=skillId,
        fields=fields,
        sortBy=sortBy,
        sortOrder=sortOrder,
        page=page,
        perPage=perPage,
    ))
    try:
        return await search_service.search_members_by_skills(caller, query)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)


@router.get("/autocomplete", response_model=PaginatedResult)
async def autocomplete(
    caller: OptionalCallerDep,
    search_service: MemberSearchServiceDep,
    term: Optional[str] = Query(default=None),
    fields: Optional[str] = Query(default=None),
    size: Optional[str] = Query(default=None),
    page: Optional[str] = Query(default=None),
    perPage: Optional[str] = Query(default=None),
) -> PaginatedResult:
    """Suggest members whose handle starts with the given term."""
    query = _build(AutocompleteQuery, _params(
        term=term,
        fields=fields,
        size=size,
        page=page,
        perPage=perPage,
    ))
    try:
        return await search_service.autocomplete(caller, query)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)


@router.get("/stats/distribution")
async def get_distribution(
    statistics_service: StatisticsServiceDep,
    track: Optional[str] = Query(default=None),
    subTrack: Optional[str] = Query(default=None),
    fields: Optional[str] = Query(default=None),
) -> Dict[str, Any]:
    """Rating distribution summed across matching tracks."""
    query = _build(DistributionQuery, _params(track=track, subTrack=subTrack, fields=fields))
    try:
        return await statistics_service.get_distribution(query)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)


@router.get("/{handle}/stats/history")
async def get_history_stats(
    handle: str,
    caller: OptionalCallerDep,
    statistics_service: StatisticsServiceDep,
    groupIds: Optional[str] = Query(default=None),
    fields: Optional[str] = Query(default=None),
) -> List[Dict[str, Any]]:
    """Rating history of a member per group."""
    query = _build(StatisticsQuery, _params(groupIds=groupIds, fields=fields))
    try:
        return await statistics_service.get_history_stats(caller, handle, query)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)


@router.get("/{handle}/stats")
async def get_member_stats(
    handle: str,
    caller: OptionalCallerDep,
    statistics_service: StatisticsServiceDep,
    groupIds: Optional[str] = Query(default=None),
    fields: Optional[str] = Query(default=None),
) -> List[Dict[str, Any]]:
    """Statistics of a member per group."""
    query = _build(StatisticsQuery, _params(groupIds=groupIds, fields=fields))
    try:
        return await statistics_service.get_member_stats(caller, handle, query)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)


@router.get("/{handle}/skills")
async def get_member_skills(
    handle: str,
    statistics_service: StatisticsServiceDep,
    fields: Optional[str] = Query(default=None),
) -> Dict[str, Any]:
    """Entered skills of a member completed with aggregated skills."""
    query = _build(SkillsQuery, _params(fields=fields))
    try:
        return await statistics_service.get_member_skills(handle, query)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)


@router.patch("/{handle}/skills")
async def update_member_skills(
    handle: str,
    caller: CallerDep,
    statistics_service: StatisticsServiceDep,
    payload: Any = Body(default=None),
) -> Dict[str, Any]:
    """Partially update the entered skills of a member."""
    update = _build(SkillsPartialUpdate, payload if payload is not None else {})
    try:
        return await statistics_service.update_member_skills_partial(caller, handle, update.entries())
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)


__all__ = ["router"]

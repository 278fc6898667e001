"""
API Schemas - DTOs for REST API following hexagonal architecture.

This module contains all request/response models for the API layer.

All schemas use Pydantic BaseModel and are organized by feature area:
- base: Paginated response envelopes
- member_schemas: Member search, statistics and skills request DTOs
"""

from app.api.schemas.base import PaginatedResult, SkillSearchResult
from app.api.schemas.member_schemas import (
    AutocompleteQuery,
    DistributionQuery,
    MemberSearchQuery,
    PagedQuery,
    SkillEntry,
    SkillSearchQuery,
    SkillsPartialUpdate,
    SkillsQuery,
    StatisticsQuery,
)

__all__ = [
    # Envelopes
    "PaginatedResult",
    "SkillSearchResult",

    # Requests
    "PagedQuery",
    "MemberSearchQuery",
    "SkillSearchQuery",
    "AutocompleteQuery",
    "StatisticsQuery",
    "DistributionQuery",
    "SkillsQuery",
    "SkillEntry",
    "SkillsPartialUpdate",
]
